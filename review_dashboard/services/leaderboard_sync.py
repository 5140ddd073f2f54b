"""
Leaderboard Sync Service - Review Dashboard
review_dashboard/services/leaderboard_sync.py

Rebuilds one score set's leaderboard snapshot from the grant platform.
The old snapshot is deleted and the new one inserted in a single store
transaction, so re-running after a failed sync is safe.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from review_dashboard.config import settings
from review_dashboard.repositories.leaderboard_repository import LeaderboardRepository
from review_dashboard.scoring.leaderboard import transform_entries
from review_dashboard.services.goodgrants_client import GoodGrantsClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncResult:
    score_set_slug: str
    synced_count: int
    synced_at: datetime
    duration_seconds: float


class LeaderboardSyncService:
    """Fetch, score and store a score set's leaderboard."""

    def __init__(
        self,
        client: GoodGrantsClient,
        repository: LeaderboardRepository,
        municipality_field_slug: Optional[str] = None,
    ):
        self.client = client
        self.repository = repository
        self.municipality_field_slug = municipality_field_slug or settings.MUNICIPALITY_FIELD_SLUG

    def sync(self, score_set_slug: str) -> SyncResult:
        """
        Fetch every leaderboard page and replace the stored snapshot.

        Raises:
            GrantPlatformException: a page could not be fetched. The stored
                snapshot is left untouched in that case.
        """
        start = time.time()
        logger.info(f"Leaderboard sync started for score set {score_set_slug}")

        raw_entries = list(self.client.iter_leaderboard(score_set_slug))
        entries = transform_entries(raw_entries, score_set_slug, self.municipality_field_slug)
        synced = self.repository.replace_score_set(score_set_slug, entries)

        duration = round(time.time() - start, 2)
        logger.info(
            f"Leaderboard sync finished for {score_set_slug}: "
            f"{synced} entries in {duration}s"
        )
        return SyncResult(
            score_set_slug=score_set_slug,
            synced_count=synced,
            synced_at=datetime.now(timezone.utc),
            duration_seconds=duration,
        )
