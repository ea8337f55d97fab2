"""
Error responses.

Services raise ApplicationError subclasses; this module is the one place
they are logged and turned into the ErrorResponse envelope. Request
validation failures, plain HTTP errors (unknown route, 405, 503) and
anything unexpected get the same envelope.

    from notekeep.backend.core.exception_handlers import register_exception_handlers

    register_exception_handlers(app)
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notekeep.backend.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from notekeep.backend.core.logging import get_logger
from notekeep.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

# Subclasses not listed here resolve through their base classes.
EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    AuthenticationError: 401,
    ConflictError: 409,
}

_HTTP_ERROR_CODES = {
    404: "RES_NOT_FOUND",
    405: "REQ_METHOD_NOT_ALLOWED",
    503: "SYS_UNAVAILABLE",
}


def status_for(exc: ApplicationError) -> int:
    """HTTP status for ``exc``; the nearest mapped class in its MRO wins."""
    return next(
        (EXCEPTION_STATUS_MAP[cls] for cls in type(exc).__mro__ if cls in EXCEPTION_STATUS_MAP),
        500,
    )


def _get_request_id(request: Request) -> str | None:
    request_id = getattr(request.state, "request_id", None)
    return request_id if request_id is not None else request.headers.get("x-request-id")


def _envelope(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details),
        metadata=ResponseMetadata(request_id=_get_request_id(request)),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _where(request: Request) -> dict[str, str]:
    return {"method": request.method, "path": request.url.path}


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    """
    Envelope for service errors.

    Only ValidationError exposes ``details``. Authentication failures
    carry their fixed message and nothing else.
    """
    status_code = status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log("Request rejected", extra={"code": exc.code, "status": status_code, **_where(request)})

    details = exc.details if isinstance(exc, ValidationError) and exc.details else None
    return _envelope(request, status_code, exc.code, exc.message, details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """422 listing every failing field as ``location.path``."""
    problems = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", "Validation error"),
            "type": error.get("type", "unknown"),
        }
        for error in exc.errors()
    ]
    logger.warning("Request body or query invalid", extra={"errors": len(problems), **_where(request)})
    return _envelope(
        request,
        422,
        "VAL_REQUEST_INVALID",
        "Request validation failed",
        {"validation_errors": problems},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_ERROR_CODES.get(exc.status_code, f"HTTP_{exc.status_code}")
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _envelope(request, exc.status_code, code, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Generic 500. The traceback goes to the log, never to the client."""
    logger.exception(
        "Unhandled exception",
        extra={"exception_type": type(exc).__name__, **_where(request)},
    )
    return _envelope(request, 500, "SYS_INTERNAL_ERROR", "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
