"""
Shared router helpers - Review Dashboard
review_dashboard/routers/common.py
"""

import logging
from datetime import datetime, timezone
from typing import NoReturn

from fastapi import Request, status
from fastapi.exceptions import HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from review_dashboard.core.exceptions import (
    GrantPlatformConfigurationException,
    GrantPlatformException,
    GrantPlatformRateLimitException,
)

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    error_code: str
    message: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def raise_error(status_code: int, error_code: str, message: str) -> NoReturn:
    raise HTTPException(
        status_code=status_code,
        detail=ErrorResponse(error_code=error_code, message=message).model_dump(mode="json"),
    )


def raise_score_set_not_found(score_set: str) -> NoReturn:
    raise_error(
        status.HTTP_404_NOT_FOUND,
        "SCORE_SET_NOT_FOUND",
        f"No scoring data for score set '{score_set}'",
    )


async def grant_platform_exception_handler(request: Request, exc: GrantPlatformException):
    """Map grant-platform failures to 503 (not configured) or 502 (upstream error)."""
    if isinstance(exc, GrantPlatformConfigurationException):
        status_code, error_code = status.HTTP_503_SERVICE_UNAVAILABLE, "PLATFORM_NOT_CONFIGURED"
    elif isinstance(exc, GrantPlatformRateLimitException):
        status_code, error_code = status.HTTP_502_BAD_GATEWAY, "PLATFORM_RATE_LIMITED"
    else:
        status_code, error_code = status.HTTP_502_BAD_GATEWAY, "PLATFORM_ERROR"
    logger.error(f"Grant platform error on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": ErrorResponse(error_code=error_code, message=exc.message).model_dump(mode="json")},
    )
