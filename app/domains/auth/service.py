from typing import Optional

from sqlalchemy.exc import IntegrityError

from app.shared.exceptions import BadRequestError, ConflictError, UnauthorizedError
from app.shared.utils.logger import get_logger
from app.shared.utils.security import (
    create_access_token,
    decode_token,
    get_password_hash,
    verify_password,
)
from . import repository
from .models import User

logger = get_logger(__name__)


def issue_token(user: User) -> str:
    return create_access_token({"sub": user.id})


async def register(name: str, email: str, password: str) -> tuple[User, str]:
    if await repository.get_user_by_email(email):
        raise ConflictError("An account with this email already exists")

    try:
        user = await repository.create_user(
            {
                "name": name,
                "email": email,
                "password_hash": get_password_hash(password),
            }
        )
    except IntegrityError:
        raise ConflictError("An account with this email already exists")

    logger.info(f"Registered user {user.id}")
    return user, issue_token(user)


async def login(email: str, password: str) -> tuple[User, str]:
    user = await repository.get_user_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        raise UnauthorizedError("Invalid email or password")
    if not user.is_active:
        raise UnauthorizedError("Account is deactivated")
    return user, issue_token(user)


async def change_password(user: User, old_password: str, new_password: str):
    if not verify_password(old_password, user.password_hash):
        raise BadRequestError("Current password is incorrect")
    if old_password == new_password:
        raise BadRequestError("New password must differ from the current one")
    await repository.update_user(user.id, {"password_hash": get_password_hash(new_password)})
    logger.info(f"Password changed for user {user.id}")


async def validate_token(token: Optional[str]) -> User:
    """Resolve a bearer token to an active user or raise 401."""
    if not token:
        raise UnauthorizedError("Not authenticated")
    payload = decode_token(token)
    if not payload or not payload.get("sub"):
        raise UnauthorizedError("Invalid token")

    user = await repository.get_user_by_id(str(payload["sub"]))
    if not user or not user.is_active:
        raise UnauthorizedError("User not found")
    return user
