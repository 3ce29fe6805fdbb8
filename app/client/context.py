# app/client/context.py
"""
Client-wide shared state: auth session, HTTP wrapper, realtime connection and
query cache. Created once per client, opened after authentication resolves
and torn down on logout or when the server rejects the credentials.
"""
from typing import Any, Callable, Optional

import httpx

from app.shared.utils.logger import get_logger
from .api import ApiClient, ApiError
from .cache import QueryCache
from .chat import ConversationView
from .config import ClientSettings
from .realtime import RealtimeClient
from .session import AuthSession
from .typing_indicator import TypingNotifier

logger = get_logger(__name__)


class ClientContext:
    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        connect: Optional[Callable] = None,
    ):
        self.settings = settings or ClientSettings()
        self.session = AuthSession(token)
        self.api = ApiClient(self.settings, self.session, transport=transport)
        if connect is None:
            self.realtime = RealtimeClient(self.session, self.settings)
        else:
            self.realtime = RealtimeClient(self.session, self.settings, connect=connect)
        self.cache = QueryCache()
        self.session.on_unauthorized(self._teardown)

    async def start(self) -> Optional[Any]:
        """Resolve the stored token and open the realtime connection.

        Returns the current user, or None when there is no usable token.
        """
        if not self.session.token:
            return None
        try:
            body = await self.api.auth.me()
        except ApiError as e:
            if e.status == 401:
                return None
            raise
        self.realtime.start()
        return body["data"]

    async def login(self, email: str, password: str) -> Any:
        body = await self.api.auth.login(email, password)
        self.realtime.start()
        return body["data"]["user"]

    async def register(self, name: str, email: str, password: str) -> Any:
        body = await self.api.auth.register(name, email, password)
        self.realtime.start()
        return body["data"]["user"]

    async def logout(self):
        if self.session.token:
            try:
                await self.api.auth.logout()
            except ApiError as e:
                logger.warning(f"Logout request failed: {e.message}")
        self.session.clear()
        await self._teardown()

    def conversation(self, peer_id: str) -> ConversationView:
        return ConversationView(self.api, self.realtime, peer_id)

    def typing_notifier(self, peer_id: str) -> TypingNotifier:
        return TypingNotifier(self.realtime, peer_id)

    async def close(self):
        await self._teardown()
        await self.api.aclose()

    async def _teardown(self):
        await self.realtime.stop()
        self.cache.clear()
