# app/client/session.py
import inspect
from typing import Any, Callable, Dict, List, Optional

from app.shared.utils.logger import get_logger

logger = get_logger(__name__)


class AuthSession:
    """Bearer token and current user of one client."""

    def __init__(self, token: Optional[str] = None):
        self.token = token
        self.user: Optional[Dict[str, Any]] = None
        self._unauthorized: List[Callable[[], Any]] = []

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def user_id(self) -> Optional[str]:
        return self.user.get("id") if self.user else None

    def set(self, token: str, user: Optional[Dict[str, Any]] = None):
        self.token = token
        if user is not None:
            self.user = user

    def clear(self):
        self.token = None
        self.user = None

    def on_unauthorized(self, callback: Callable[[], Any]):
        if callback not in self._unauthorized:
            self._unauthorized.append(callback)

    async def expire(self):
        """Drop credentials after the server rejected them and notify listeners."""
        logger.info("Session expired, clearing credentials")
        self.clear()
        for callback in list(self._unauthorized):
            result = callback()
            if inspect.isawaitable(result):
                await result
