"""core/middleware.py — Custom ASGI middleware for the GoRest proxy.

Provides:
  - RequestIDMiddleware  : stamps every request with a correlation id (X-Request-ID header)
  - TimingMiddleware     : logs method, path, status, and duration per request

Both middleware classes use Starlette's BaseHTTPMiddleware and integrate with
the JSON logger configured in core/logging.py.
"""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from core.logging import request_id_var

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
_MAX_INCOMING_ID_LENGTH = 128


def get_request_id(request: Request) -> str:
    """Return the correlation id for *request*, creating one if none was set."""
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
    return request_id


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a correlation id to every request and response.

    An incoming X-Request-ID header is reused (so ids from an upstream proxy
    survive), otherwise a UUID4 is generated.

    Sets:
      - request.state.request_id    read by route handlers and the error envelope
      - core.logging.request_id_var  stamped onto every log record
      - X-Request-ID response header  visible to API clients for log correlation
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
        if incoming and len(incoming) <= _MAX_INCOMING_ID_LENGTH:
            request_id = incoming
        else:
            request_id = str(uuid.uuid4())

        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status code, and wall-clock duration for every request.

    Reads request.state.request_id set by RequestIDMiddleware (must be added
    after TimingMiddleware so RequestID runs first).
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 2)

        request_id = getattr(request.state, "request_id", "-")
        logger.info(
            "request completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
