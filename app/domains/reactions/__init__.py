from . import models
from .schemas import ReactionTarget, ReactionType
from .service import reaction_service

__all__ = ["ReactionTarget", "ReactionType", "reaction_service"]
