"""Exception handlers mapping errors to JSON responses.

Every failure body has the shape ``{"message": ..., "code": ...}``.
Persistence errors never expose their detail to the client.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from umuturage.api.schemas.common import ErrorResponse
from umuturage.core.errors import StoreError, UmuturageError

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, code: str, headers=None) -> JSONResponse:
    body = ErrorResponse(message=message, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def handle_umuturage_error(request: Request, exc: UmuturageError) -> JSONResponse:
    if isinstance(exc, StoreError):
        return _error(exc.status_code, "Server error", exc.code)
    return _error(exc.status_code, exc.message, exc.code)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return _error(status.HTTP_400_BAD_REQUEST, message, "validation_error")


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail), "http_error", headers=getattr(exc, "headers", None))


async def handle_store_failure(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Unhandled store failure on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error", StoreError.code)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to an application."""
    app.add_exception_handler(UmuturageError, handle_umuturage_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(SQLAlchemyError, handle_store_failure)
