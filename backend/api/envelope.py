"""api/envelope.py — Build the JSON envelopes every proxy endpoint returns.

    success:    {"success": true, "data": ..., "pagination": {...}}
    failure:    {"success": false, "message": ..., "error": ..., "requestId": ...}
    validation: {"success": false, "message": ..., "errors": [...], "requestId": ...}
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from core.errors import GoRestError, RetryExhaustedError
from core.middleware import get_request_id
from schemas.shared import FailureEnvelope, PaginationMeta, ValidationFailureEnvelope

logger = logging.getLogger(__name__)


def success(
    data: Any = None,
    *,
    status_code: int = 200,
    pagination: Optional[PaginationMeta] = None,
) -> JSONResponse:
    content: dict[str, Any] = {"success": True}
    if data is not None:
        content["data"] = jsonable_encoder(data)
    if pagination is not None:
        content["pagination"] = pagination.model_dump(by_alias=True)
    return JSONResponse(status_code=status_code, content=content)


def failure(
    request: Request,
    message: str,
    error: Optional[str] = None,
    *,
    status_code: int = 500,
) -> JSONResponse:
    envelope = FailureEnvelope(
        message=message,
        error=error,
        request_id=get_request_id(request),
    )
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(by_alias=True, exclude_none=True),
    )


def validation_failure(request: Request, messages: Iterable[str]) -> JSONResponse:
    envelope = ValidationFailureEnvelope(
        errors=list(messages),
        request_id=get_request_id(request),
    )
    return JSONResponse(status_code=400, content=envelope.model_dump(by_alias=True))


def upstream_failure(request: Request, message: str, exc: GoRestError) -> JSONResponse:
    """Log a client-layer failure and wrap it in a 500 failure envelope."""
    cause = exc.last_error if isinstance(exc, RetryExhaustedError) else exc
    logger.error(
        message,
        extra={
            "request_id": get_request_id(request),
            "method": request.method,
            "path": request.url.path,
            "error_type": type(exc).__name__,
            "upstream_status": getattr(cause, "status_code", None),
            "error": str(exc),
        },
    )
    return failure(request, message, str(exc), status_code=500)
