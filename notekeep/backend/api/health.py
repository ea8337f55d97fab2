"""
Health Check Endpoints.

- /health: Liveness check (process running)
- /health/ready: Readiness check (storage answering)
"""

from typing import Any

from fastapi import APIRouter, HTTPException, Request

from notekeep.backend.core.config import get_app_config
from notekeep.backend.core.logging import get_logger
from notekeep.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health", summary="Liveness check")
async def health_check() -> dict[str, Any]:
    """Return healthy while the process is serving requests."""
    return {"status": "healthy", "timestamp": utc_now().isoformat()}


@router.get("/health/ready", summary="Readiness check")
async def readiness_check(request: Request) -> dict[str, Any]:
    """
    Check that the storage and session store are attached and answering.

    Raises:
        HTTPException: 503 if the app was started without them
    """
    storage = getattr(request.app.state, "storage", None)
    sessions = getattr(request.app.state, "sessions", None)
    if storage is None or sessions is None:
        logger.warning("Readiness check failed: storage not attached")
        raise HTTPException(status_code=503, detail="Storage not ready")

    return {
        "status": "healthy",
        "application": get_app_config().application.name,
        "checks": {
            "storage": {"status": "healthy"},
            "sessions": {"status": "healthy", "active": len(sessions)},
        },
        "timestamp": utc_now().isoformat(),
    }
