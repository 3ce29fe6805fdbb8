# app/domains/reactions/schemas.py
from enum import Enum

from app.shared.schemas.base import CamelModel


class ReactionType(str, Enum):
    LIKE = "like"
    LOVE = "love"
    HAHA = "haha"
    WOW = "wow"
    SAD = "sad"
    ANGRY = "angry"


class ReactionTarget(str, Enum):
    POST = "post"
    COMMENT = "comment"


class ReactRequest(CamelModel):
    type: ReactionType = ReactionType.LIKE
