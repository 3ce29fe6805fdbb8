from typing import Optional

from fastapi import Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from .models import User
from .service import validate_token

bearer_scheme = HTTPBearer(auto_error=False)


def _extract_token(request: Request, creds: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if creds and creds.scheme.lower() == "bearer":
        return creds.credentials
    # Browser sessions carry the token in the cookie set at login
    return request.cookies.get(settings.AUTH_COOKIE_NAME)


async def get_current_user(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> User:
    return await validate_token(_extract_token(request, creds))
