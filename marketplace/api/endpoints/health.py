"""
Liveness endpoint:
  GET /health – Returns 200 while the process is up
"""
from fastapi import APIRouter, status
import logging

from marketplace.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health", status_code=status.HTTP_200_OK, summary="Liveness probe")
def health_check() -> dict:
    return {
        "status": "OK",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }
