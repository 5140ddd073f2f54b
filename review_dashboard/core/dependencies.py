"""
Dependencies - Review Dashboard
review_dashboard/core/dependencies.py

FastAPI dependency injection for stores, services and the platform client.
"""

from functools import lru_cache
from typing import Iterator

from fastapi import Depends

from review_dashboard.repositories.leaderboard_repository import LeaderboardRepository
from review_dashboard.repositories.scoring_data_repository import ScoringDataRepository
from review_dashboard.services.goodgrants_client import GoodGrantsClient
from review_dashboard.services.leaderboard_sync import LeaderboardSyncService
from review_dashboard.services.scoring_analysis import ScoringAnalysisService


@lru_cache()
def get_scoring_data_repository() -> ScoringDataRepository:
    """Get cached ScoringDataRepository instance."""
    return ScoringDataRepository()


@lru_cache()
def get_leaderboard_repository() -> LeaderboardRepository:
    """Get cached LeaderboardRepository instance."""
    return LeaderboardRepository()


def get_scoring_analysis_service(
    repository: ScoringDataRepository = Depends(get_scoring_data_repository),
) -> ScoringAnalysisService:
    return ScoringAnalysisService(repository)


def get_goodgrants_client() -> Iterator[GoodGrantsClient]:
    """New client per request, closed afterwards; raises GrantPlatformConfigurationException without an API key."""
    client = GoodGrantsClient()
    try:
        yield client
    finally:
        client.close()


def get_leaderboard_sync_service(
    client: GoodGrantsClient = Depends(get_goodgrants_client),
    repository: LeaderboardRepository = Depends(get_leaderboard_repository),
) -> LeaderboardSyncService:
    return LeaderboardSyncService(client, repository)
