"""api/routers/health.py — Health check endpoints.

Routes (mounted at root, no /api/v1 prefix):
    GET /health            Liveness check, returns env, version, timestamp
    GET /health/upstream   Readiness check, verifies GoRest is reachable
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_gorest_client
from clients.gorest import GoRestClient
from core.config import APP_VERSION, settings
from core.errors import GoRestError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness check")
def health():
    """Returns environment, version, and current UTC timestamp."""
    return {
        "status": "ok",
        "environment": settings.environment,
        "version": APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/upstream", summary="Readiness check")
async def health_upstream(client: GoRestClient = Depends(get_gorest_client)):
    """Fetches a one-item page of users from GoRest.

    Returns HTTP 200 when the upstream answers, HTTP 503 when it does not.
    """
    try:
        _, total = await client.list_users(page=1, per_page=1)
        logger.debug("health/upstream: upstream reachable")
        return {"status": "ok", "upstream": "reachable", "total_users": total}
    except GoRestError as exc:
        logger.warning("health/upstream: upstream unreachable: %s", exc)
        return JSONResponse(
            status_code=503,
            content={"status": "error", "upstream": str(exc)},
        )
