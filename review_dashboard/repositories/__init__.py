"""
Repositories Package - Review Dashboard
review_dashboard/repositories/__init__.py
"""

from review_dashboard.repositories.base import BaseRepository
from review_dashboard.repositories.leaderboard_repository import LeaderboardRepository
from review_dashboard.repositories.scoring_data_repository import (
    ScoringDataRepository,
    ScoringSnapshot,
)

__all__ = [
    "BaseRepository",
    "LeaderboardRepository",
    "ScoringDataRepository",
    "ScoringSnapshot",
]
