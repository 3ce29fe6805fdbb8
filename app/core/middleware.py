import time

from starlette.requests import Request
from starlette.responses import RedirectResponse

from app.core.config import settings
from app.shared.route_guard import HOME_PATH, LOGIN_PATH, RouteDecision, resolve_route
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)


async def auth_middleware(request: Request, call_next):
    """Gate page routes on the auth cookie; API routes authenticate per endpoint."""
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    decision = resolve_route(request.url.path, token)

    if decision is RouteDecision.REDIRECT_LOGIN:
        logger.debug(f"Redirecting unauthenticated request {request.url.path} to login")
        return RedirectResponse(url=LOGIN_PATH, status_code=307)
    if decision is RouteDecision.REDIRECT_HOME:
        logger.debug(f"Redirecting authenticated request {request.url.path} to home")
        return RedirectResponse(url=HOME_PATH, status_code=307)

    return await call_next(request)


async def logging_middleware(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
    )
    return response
