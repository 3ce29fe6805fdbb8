# app/domains/uploads/api.py
from fastapi import APIRouter, Depends, File, UploadFile

from app.domains.auth.dependencies import get_current_user
from app.domains.auth.models import User
from app.shared.schemas.responses import ok
from .service import save_image

router = APIRouter()


@router.post("", status_code=201)
async def upload_image(image: UploadFile = File(...), user: User = Depends(get_current_user)):
    """Upload a single image (multipart field ``image``)"""
    return ok(await save_image(image, user.id), message="Image uploaded")
