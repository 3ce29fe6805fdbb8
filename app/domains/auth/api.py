from fastapi import APIRouter, Depends, Response

from app.core.config import settings
from app.shared.schemas.responses import ok
from . import service
from .dependencies import get_current_user
from .models import User
from .schemas import ChangePasswordRequest, LoginRequest, RegisterRequest, user_profile

router = APIRouter()


def _set_auth_cookie(response: Response, token: str):
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_DAYS * 86400,
        httponly=False,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


@router.post("/register", status_code=201)
async def register(request: RegisterRequest, response: Response):
    """Create an account and start a session"""
    user, token = await service.register(request.name, request.email, request.password)
    _set_auth_cookie(response, token)
    return ok({"token": token, "user": user_profile(user)}, message="Registration successful")


@router.post("/login")
async def login(request: LoginRequest, response: Response):
    """Exchange credentials for a bearer token"""
    user, token = await service.login(request.email, request.password)
    _set_auth_cookie(response, token)
    return ok({"token": token, "user": user_profile(user)}, message="Login successful")


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    from app.domains.users.service import user_service

    return ok(await user_service.get_own_profile(user))


@router.post("/change-password")
async def change_password(request: ChangePasswordRequest, user: User = Depends(get_current_user)):
    await service.change_password(user, request.old_password, request.new_password)
    return ok(message="Password changed successfully")


@router.post("/logout")
async def logout(response: Response, user: User = Depends(get_current_user)):
    response.delete_cookie(settings.AUTH_COOKIE_NAME, path="/")
    return ok(message="Logged out")
