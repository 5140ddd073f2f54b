"""
Leaderboard Router - Review Dashboard
review_dashboard/routers/leaderboard.py

Endpoints:
  POST /api/v1/leaderboard/{score_set_slug}/sync            - Rebuild the snapshot from GoodGrants
  GET  /api/v1/leaderboard/{score_set_slug}                 - Filtered, sorted, paged entries
  GET  /api/v1/leaderboard/{score_set_slug}/analytics       - Score distributions
  GET  /api/v1/leaderboard/{score_set_slug}/entries/{slug}  - One entry
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from review_dashboard.config import settings
from review_dashboard.core.dependencies import (
    get_leaderboard_repository,
    get_leaderboard_sync_service,
)
from review_dashboard.core.exceptions import EntityNotFoundException
from review_dashboard.models.leaderboard import LeaderboardEntry
from review_dashboard.repositories.leaderboard_repository import LeaderboardRepository
from review_dashboard.routers.common import raise_error
from review_dashboard.scoring.leaderboard_query import (
    LeaderboardFilter,
    SortDirection,
    SortKey,
    filter_entries,
    municipal_score_distribution,
    municipalities,
    query_leaderboard,
    score_distribution,
    unique_criteria,
)
from review_dashboard.services.leaderboard_sync import LeaderboardSyncService

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/leaderboard", tags=["Leaderboard"])


# =====================================================================
# Response Models
# =====================================================================

class SyncResponse(BaseModel):
    score_set_slug: str
    synced_count: int
    synced_at: datetime
    duration_seconds: float


class LeaderboardPageResponse(BaseModel):
    data: List[LeaderboardEntry]
    current_page: int
    last_page: int
    total: int
    criteria: List[str]


class ScoreBucketSchema(BaseModel):
    id: str
    label: str
    value: int
    percentage: float


class MunicipalDistributionSchema(BaseModel):
    municipality: str
    total: int
    percentages: Dict[str, float]


class LeaderboardAnalyticsResponse(BaseModel):
    score_set_slug: str
    total: int
    distribution: List[ScoreBucketSchema]
    municipal_distribution: List[MunicipalDistributionSchema]
    criteria: List[str]
    municipalities: List[str]


def _filters(
    title: Optional[str] = Query(default=None, description="Case-insensitive title search"),
    tag: Optional[str] = Query(default=None),
    min_score: Optional[float] = Query(default=None),
    max_score: Optional[float] = Query(default=None),
    municipality: Optional[str] = Query(default=None, description='"all" disables the filter'),
) -> LeaderboardFilter:
    return LeaderboardFilter(
        title_search=title,
        tag=tag,
        min_score=min_score,
        max_score=max_score,
        municipality=municipality,
    )


# =====================================================================
# Endpoints
# =====================================================================

@router.post(
    "/{score_set_slug}/sync",
    response_model=SyncResponse,
    status_code=status.HTTP_200_OK,
    summary="Sync a score set's leaderboard from GoodGrants",
)
def sync_leaderboard(
    score_set_slug: str,
    service: LeaderboardSyncService = Depends(get_leaderboard_sync_service),
) -> SyncResponse:
    result = service.sync(score_set_slug)
    return SyncResponse(
        score_set_slug=result.score_set_slug,
        synced_count=result.synced_count,
        synced_at=result.synced_at,
        duration_seconds=result.duration_seconds,
    )


@router.get(
    "/{score_set_slug}",
    response_model=LeaderboardPageResponse,
    summary="Leaderboard page",
)
async def get_leaderboard(
    score_set_slug: str,
    filters: LeaderboardFilter = Depends(_filters),
    sort: SortKey = Query(default=SortKey.TOTAL_SCORE),
    direction: SortDirection = Query(default=SortDirection.DESC),
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=20, ge=1, le=200),
    repo: LeaderboardRepository = Depends(get_leaderboard_repository),
) -> LeaderboardPageResponse:
    entries = repo.list_by_score_set(score_set_slug)
    result = query_leaderboard(entries, filters, sort, direction, page, per_page)
    return LeaderboardPageResponse(
        data=result.data,
        current_page=result.current_page,
        last_page=result.last_page,
        total=result.total,
        criteria=unique_criteria(result.data),
    )


@router.get(
    "/{score_set_slug}/analytics",
    response_model=LeaderboardAnalyticsResponse,
    summary="Score distribution of the filtered leaderboard",
)
async def get_leaderboard_analytics(
    score_set_slug: str,
    filters: LeaderboardFilter = Depends(_filters),
    repo: LeaderboardRepository = Depends(get_leaderboard_repository),
) -> LeaderboardAnalyticsResponse:
    all_entries = repo.list_by_score_set(score_set_slug)
    entries = filter_entries(all_entries, filters)
    return LeaderboardAnalyticsResponse(
        score_set_slug=score_set_slug,
        total=len(entries),
        distribution=[
            ScoreBucketSchema(id=b.id, label=b.label, value=b.value, percentage=b.percentage)
            for b in score_distribution(entries)
        ],
        municipal_distribution=[
            MunicipalDistributionSchema(
                municipality=m.municipality, total=m.total, percentages=m.percentages
            )
            for m in municipal_score_distribution(entries)
        ],
        criteria=unique_criteria(entries),
        municipalities=municipalities(all_entries),
    )


@router.get(
    "/{score_set_slug}/entries/{slug}",
    response_model=LeaderboardEntry,
    summary="One leaderboard entry",
)
async def get_leaderboard_entry(
    score_set_slug: str,
    slug: str,
    repo: LeaderboardRepository = Depends(get_leaderboard_repository),
) -> LeaderboardEntry:
    try:
        return repo.get(slug, score_set_slug)
    except EntityNotFoundException as e:
        raise_error(status.HTTP_404_NOT_FOUND, "ENTRY_NOT_FOUND", str(e))
