"""Health and readiness check routes."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from config import settings
from errors import RandomSourceUnavailableError
from services.keygen import assert_random_source_available

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ready")
def ready() -> dict:
    """Lightweight readiness check."""
    return {"status": "ok", "service": "air-paste", "commit": settings.git_sha}


@router.get("/health")
def health():
    """Deep health check that verifies the secure random source still works."""
    result = {"status": "ok", "service": "air-paste", "commit": settings.git_sha, "random_source": "ok"}

    try:
        assert_random_source_available()
    except RandomSourceUnavailableError as e:
        logger.exception("Random source health check failed")
        result["status"] = "error"
        result["random_source"] = "error"
        result["random_source_error"] = str(e)
        return JSONResponse(result, status_code=503)

    return result
