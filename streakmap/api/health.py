"""
Health API for the streakmap service.

Lightweight liveness probe without exposing configuration.
"""

import logging

from fastapi import APIRouter

from streakmap import __version__
from streakmap.core.config import settings
from streakmap.core.logging import get_request_id

logger = logging.getLogger("streakmap")

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz():
    """Lightweight liveness check (no deps)."""
    logger.info("health.ok", extra={"request_id": get_request_id()})
    return {"status": "ok", "version": __version__, "env": settings.ENV}
