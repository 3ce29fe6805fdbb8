"""Route protection rules shared by the HTTP middleware and the client."""
from enum import Enum
from typing import Optional

PROTECTED_PATHS = (
    "/",
    "/profile",
    "/messages",
    "/friends",
    "/groups",
    "/notifications",
    "/settings",
    "/search",
)
AUTH_PATHS = ("/login", "/register")
SKIPPED_PREFIXES = ("/_next", "/api", "/ws", "/uploads", "/.well-known", "/health", "/docs", "/openapi")

LOGIN_PATH = "/login"
HOME_PATH = "/"


class RouteDecision(str, Enum):
    ALLOW = "allow"
    REDIRECT_LOGIN = "redirect_login"
    REDIRECT_HOME = "redirect_home"


def is_protected(pathname: str) -> bool:
    for path in PROTECTED_PATHS:
        if path == "/":
            if pathname == "/":
                return True
        elif pathname.startswith(path):
            return True
    return False


def is_auth_route(pathname: str) -> bool:
    return any(pathname.startswith(path) for path in AUTH_PATHS)


def resolve_route(pathname: str, token: Optional[str]) -> RouteDecision:
    if pathname.startswith(SKIPPED_PREFIXES) or "." in pathname:
        return RouteDecision.ALLOW
    if token and is_auth_route(pathname):
        return RouteDecision.REDIRECT_HOME
    if not token and is_protected(pathname):
        return RouteDecision.REDIRECT_LOGIN
    return RouteDecision.ALLOW
