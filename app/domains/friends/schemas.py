# app/domains/friends/schemas.py
from datetime import datetime
from typing import Dict, Optional

from pydantic import Field

from app.domains.auth.schemas import UserSummary
from app.shared.schemas.base import CamelModel


class FriendRequestCreate(CamelModel):
    message: Optional[str] = Field(default=None, max_length=500)


class FriendRequestOut(CamelModel):
    id: str
    sender: Optional[UserSummary] = None
    receiver: Optional[UserSummary] = None
    message: Optional[str] = None
    status: str
    responded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class FriendSuggestion(UserSummary):
    mutual_friends: int = 0


def serialize_request(request, users: Dict) -> dict:
    sender = users.get(request.sender_id)
    receiver = users.get(request.receiver_id)
    return FriendRequestOut(
        id=request.id,
        sender=UserSummary.model_validate(sender) if sender else None,
        receiver=UserSummary.model_validate(receiver) if receiver else None,
        message=request.message,
        status=request.status,
        responded_at=request.responded_at,
        created_at=request.created_at,
    ).dump()
