# app/client/chat.py
from typing import Any, Dict, List, Optional

from app.shared.utils.logger import get_logger
from .api import ApiClient
from .realtime import RealtimeClient

logger = get_logger(__name__)


class ConversationView:
    """State of one open direct-message conversation.

    Messages are kept in arrival order and keyed by id, so a message seen both
    through a fetch and a live ``newMessage`` event is stored once.
    """

    def __init__(self, api: ApiClient, realtime: RealtimeClient, peer_id: str):
        self.api = api
        self.realtime = realtime
        self.peer_id = peer_id
        self.messages: List[Dict[str, Any]] = []
        self.peer_typing = False
        self.focused = False
        self._ids = set()
        realtime.on("newMessage", self._on_new_message)
        realtime.on("typing", self._on_typing)

    def _add(self, message: Dict[str, Any]) -> bool:
        message_id = message.get("id")
        if message_id in self._ids:
            return False
        self._ids.add(message_id)
        self.messages.append(message)
        return True

    @staticmethod
    def _party(message: Dict[str, Any], role: str) -> Optional[str]:
        card = message.get(role)
        return card.get("id") if isinstance(card, dict) else None

    def _involves_peer(self, message: Dict[str, Any]) -> bool:
        return self.peer_id in (self._party(message, "sender"), self._party(message, "receiver"))

    async def load(self, limit: int = 50) -> List[Dict[str, Any]]:
        body = await self.api.messages.history(self.peer_id, limit=limit)
        for message in body.get("data") or []:
            self._add(message)
        return self.messages

    async def send(self, content: Optional[str] = None, **extra) -> Dict[str, Any]:
        payload = {"content": content, **extra}
        body = await self.api.messages.send(self.peer_id, payload)
        message = body["data"]
        self._add(message)
        return message

    async def focus(self):
        self.focused = True
        await self.mark_read()

    def blur(self):
        self.focused = False

    async def mark_read(self):
        await self.api.messages.mark_as_read(self.peer_id)

    async def _on_new_message(self, message: Any):
        if not isinstance(message, dict) or not self._involves_peer(message):
            return
        if self._add(message) and self._party(message, "sender") == self.peer_id:
            self.peer_typing = False
            if self.focused:
                await self.mark_read()

    def _on_typing(self, data: Any):
        if isinstance(data, dict) and data.get("userId") == self.peer_id:
            self.peer_typing = bool(data.get("isTyping"))

    def close(self):
        self.realtime.off("newMessage", self._on_new_message)
        self.realtime.off("typing", self._on_typing)
