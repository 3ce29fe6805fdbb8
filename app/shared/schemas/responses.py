import math
from typing import Any, Optional

from fastapi import Query

from app.core.config import settings


class PageParams:
    """``?limit=&page=`` query parameters shared by every list endpoint."""

    def __init__(
        self,
        limit: Optional[int] = Query(default=None, ge=1),
        page: int = Query(default=1, ge=1),
    ):
        limit = limit or settings.DEFAULT_PAGE_LIMIT
        self.limit = min(limit, settings.MAX_PAGE_LIMIT)
        self.page = page

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def pagination(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }


def ok(
    data: Any = None,
    message: Optional[str] = None,
    page: Optional[PageParams] = None,
    total: Optional[int] = None,
) -> dict:
    body: dict = {"success": True, "data": data}
    if message:
        body["message"] = message
    if page is not None and total is not None:
        body["pagination"] = pagination(page.page, page.limit, total)
    return body


def error(message: str, **extra: Any) -> dict:
    return {"success": False, "message": message, **extra}
