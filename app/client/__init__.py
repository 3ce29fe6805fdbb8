from app.shared.route_guard import RouteDecision, resolve_route

from .api import ApiClient, ApiError
from .cache import QueryCache
from .chat import ConversationView
from .config import ClientSettings
from .context import ClientContext
from .realtime import RealtimeClient
from .session import AuthSession
from .typing_indicator import TypingNotifier

__all__ = [
    "ApiClient",
    "ApiError",
    "AuthSession",
    "ClientContext",
    "ClientSettings",
    "ConversationView",
    "QueryCache",
    "RealtimeClient",
    "RouteDecision",
    "TypingNotifier",
    "resolve_route",
]
