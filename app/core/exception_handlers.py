from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.shared.exceptions import DomainError
from app.shared.schemas.responses import error
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)


def setup_exception_handlers(app: FastAPI):
    @app.exception_handler(DomainError)
    async def domain_exception_handler(request, exc: DomainError):
        return JSONResponse(status_code=exc.status_code, content=error(exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content=error(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        errors = jsonable_encoder(exc.errors())
        first = errors[0]["msg"] if errors else "Validation failed"
        return JSONResponse(
            status_code=422,
            content=error(first, errors=errors),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request, exc):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content=error("Internal server error"),
        )
