"""
Per-request context.

Every request gets a correlation id (the client's X-Request-ID, or a
fresh uuid4). The id is stored on ``request.state``, bound into the
structlog context for the lifetime of the request and echoed back with
the elapsed time.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notekeep.backend.core.logging import get_logger

REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time"

logger = get_logger(__name__)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request id, bind log context, time the request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request raised",
                extra={"error_type": type(exc).__name__, "duration_ms": _elapsed_ms(started)},
            )
            raise
        else:
            elapsed = _elapsed_ms(started)
            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers[RESPONSE_TIME_HEADER] = f"{elapsed}ms"
            logger.debug(
                "Request handled",
                extra={"status_code": response.status_code, "duration_ms": elapsed},
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()
