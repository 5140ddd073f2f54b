"""
Scoring Analysis Service - Review Dashboard
review_dashboard/services/scoring_analysis.py

Stores uploaded review-score exports per score set and serves their
aggregates, computing them on demand and caching the result.
"""

import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional

from review_dashboard.models.scoring import (
    AggregatedDataResponse,
    RankedApplicationSchema,
    RankedReviewerSchema,
    ReviewerAppScoreSchema,
    ScoreSetUploadResponse,
    SummarySchema,
)
from review_dashboard.repositories.scoring_data_repository import ScoringDataRepository
from review_dashboard.scoring.aggregator import AggregatedData, compute_aggregates
from review_dashboard.scoring.normalizer import normalize_rows
from review_dashboard.scoring.rankings import reviewer_app_scores, reviewer_rankings, top_applications
from review_dashboard.services.cache import AggregatesCache, get_cache
from review_dashboard.services.redis_cache import RedisCache

logger = logging.getLogger(__name__)


class ScoringAnalysisService:
    """Upload and aggregate review-score exports."""

    def __init__(
        self,
        repository: ScoringDataRepository,
        cache_factory: Optional[Callable[[], Optional[RedisCache]]] = None,
    ):
        self.repository = repository
        self._cache_factory = cache_factory or get_cache

    def _aggregates_cache(self) -> Optional[AggregatesCache]:
        cache = self._cache_factory()
        return AggregatesCache(cache) if cache is not None else None

    def upload(
        self, records: Iterable[Mapping[str, Any]], score_set_name: str
    ) -> ScoreSetUploadResponse:
        """Normalize export records and replace the score set's stored rows."""
        rows = normalize_rows(records)
        snapshot = self.repository.replace(score_set_name, rows)

        cache = self._aggregates_cache()
        if cache:
            cache.invalidate(score_set_name)

        data = compute_aggregates(snapshot.rows)
        logger.info(
            f"Stored {len(rows)} rows for score set '{score_set_name}' "
            f"({data.summary.total_apps} apps, {data.summary.total_reviewers} reviewers)"
        )
        return ScoreSetUploadResponse(
            score_set_name=score_set_name,
            count=len(rows),
            uploaded_at=snapshot.uploaded_at,
            summary=SummarySchema.from_summary(data.summary),
        )

    def compute(self, score_set_name: str) -> AggregatedData:
        """Aggregate the stored rows of a score set (no cache)."""
        return compute_aggregates(self.repository.get(score_set_name).rows)

    def get_aggregates(self, score_set_name: str) -> AggregatedDataResponse:
        """
        Aggregates for a score set.

        Raises:
            EntityNotFoundException: nothing uploaded for the score set.
        """
        snapshot = self.repository.get(score_set_name)
        cache = self._aggregates_cache()
        if cache:
            cached = cache.load(score_set_name, snapshot.uploaded_at)
            if cached is not None:
                return cached

        response = AggregatedDataResponse.from_aggregates(
            score_set_name, compute_aggregates(snapshot.rows), snapshot.uploaded_at
        )
        if cache:
            cache.store(response)
        return response

    def top_applications(self, score_set_name: str, limit: int = 10) -> List[RankedApplicationSchema]:
        return [
            RankedApplicationSchema(
                id=app.id,
                title=app.title,
                category=app.category,
                final_average=float(app.final_average) if app.final_average is not None else None,
                reviewer_count=app.reviewer_count,
            )
            for app in top_applications(self.compute(score_set_name), limit)
        ]

    def reviewer_rankings(self, score_set_name: str) -> List[RankedReviewerSchema]:
        return [
            RankedReviewerSchema(
                email=r.email,
                name=r.name,
                avg_reviewer_score=float(r.avg_reviewer_score) if r.avg_reviewer_score is not None else None,
                count_apps=r.count_apps,
            )
            for r in reviewer_rankings(self.compute(score_set_name))
        ]

    def reviewer_app_scores(self, score_set_name: str, email: str) -> List[ReviewerAppScoreSchema]:
        """One reviewer's normalized score per application; [] for an unknown reviewer."""
        return [
            ReviewerAppScoreSchema(app_id=s.app_id, title=s.title, score=float(s.score))
            for s in reviewer_app_scores(self.compute(score_set_name), email)
        ]

    def available_score_sets(self) -> List[str]:
        return self.repository.list_score_sets()
