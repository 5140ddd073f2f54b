"""
Health Check Router - Review Dashboard
review_dashboard/routers/health.py

Reports service status and the state of optional dependencies.
"""
from fastapi import APIRouter
from pydantic import BaseModel
from typing import Dict
from datetime import datetime, timezone

from review_dashboard.config import settings
from review_dashboard.services.cache import get_cache

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    dependencies: Dict[str, str]


@router.get("/health", response_model=HealthResponse, summary="Service health")
async def health() -> HealthResponse:
    """Redis and the grant platform are optional; the service is healthy without them."""
    dependencies = {
        "redis": "connected" if get_cache() is not None else "unavailable",
        "goodgrants": "configured" if settings.goodgrants_api_key else "not_configured",
    }
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        dependencies=dependencies,
    )
