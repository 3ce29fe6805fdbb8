# app/domains/uploads/service.py
import asyncio
import uuid
from pathlib import Path

from fastapi import UploadFile

from app.core.config import settings
from app.shared.exceptions import BadRequestError
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)

EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def upload_dir() -> Path:
    path = Path(settings.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


async def save_image(file: UploadFile, owner_id: str) -> dict:
    """Store an uploaded image on local disk and return its public URL."""
    if file.content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise BadRequestError("Only image files are allowed")

    content = await file.read(settings.MAX_UPLOAD_SIZE + 1)
    if not content:
        raise BadRequestError("Uploaded file is empty")
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise BadRequestError("File is too large")

    suffix = EXTENSIONS.get(file.content_type) or Path(file.filename or "").suffix.lower()
    filename = f"{uuid.uuid4().hex}{suffix}"
    target = upload_dir() / filename
    await asyncio.to_thread(target.write_bytes, content)

    logger.info(f"Stored upload {filename} ({len(content)} bytes) for {owner_id}")
    return {
        "url": f"{settings.UPLOAD_BASE_URL.rstrip('/')}/{filename}",
        "filename": filename,
        "size": len(content),
        "contentType": file.content_type,
    }
