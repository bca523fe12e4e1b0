"""
Health Check Router

Endpoints:
    GET /health - Liveness check, always 200
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter

from apps.services.change_ai.utils import utc_timestamp

logger = logging.getLogger(__name__)

SERVICE_NAME = "changedetector-ai-wrapper"

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> Dict[str, Any]:
    return {
        "status": "healthy",
        "timestamp": utc_timestamp(),
        "service": SERVICE_NAME,
    }
