"""Realtime channel frames. Every frame is ``{"event": name, "data": payload}``."""
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field


class OnlineUsersEvent(BaseModel):
    event: Literal["onlineUsers"] = "onlineUsers"
    data: List[str]


class NewMessageEvent(BaseModel):
    event: Literal["newMessage"] = "newMessage"
    data: Dict[str, Any]


class NewNotificationEvent(BaseModel):
    event: Literal["newNotification"] = "newNotification"
    data: Dict[str, Any]


class TypingPayload(BaseModel):
    user_id: str = Field(alias="userId")
    is_typing: bool = Field(alias="isTyping")

    model_config = {"populate_by_name": True}


class TypingEvent(BaseModel):
    event: Literal["typing"] = "typing"
    data: TypingPayload

    def frame(self) -> dict:
        return self.model_dump(by_alias=True)
