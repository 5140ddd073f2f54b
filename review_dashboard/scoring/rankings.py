"""
Overview rankings over finalized aggregates: top applications, reviewer
averages and one reviewer's per-application scores.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from review_dashboard.scoring.aggregator import AggregatedData
from review_dashboard.scoring.utils import ZERO


@dataclass(frozen=True)
class RankedApplication:
    id: str
    title: str
    category: str
    final_average: Optional[Decimal]
    reviewer_count: int


@dataclass(frozen=True)
class RankedReviewer:
    email: str
    name: str
    avg_reviewer_score: Optional[Decimal]
    count_apps: int


@dataclass(frozen=True)
class ReviewerAppScore:
    app_id: str
    title: str
    score: Decimal


def top_applications(data: AggregatedData, limit: int | None = 10) -> List[RankedApplication]:
    """Applications by final average, highest first. Unscored apps rank as 0."""
    ranked = sorted(
        data.apps.values(),
        key=lambda a: (-(a.final_average if a.final_average is not None else ZERO), a.id),
    )
    if limit is not None:
        ranked = ranked[: max(limit, 0)]
    return [
        RankedApplication(
            id=a.id,
            title=a.title,
            category=a.category,
            final_average=a.final_average,
            reviewer_count=len(a.final_reviewer_scores),
        )
        for a in ranked
    ]


def reviewer_rankings(data: AggregatedData) -> List[RankedReviewer]:
    """Reviewers with at least one scored app, by average score."""
    reviewers = [r for r in data.reviewers.values() if r.count_apps > 0]
    reviewers.sort(
        key=lambda r: (
            -(r.avg_reviewer_score if r.avg_reviewer_score is not None else ZERO),
            r.email,
        )
    )
    return [
        RankedReviewer(
            email=r.email,
            name=r.name or r.email,
            avg_reviewer_score=r.avg_reviewer_score,
            count_apps=r.count_apps,
        )
        for r in reviewers
    ]


def reviewer_app_scores(data: AggregatedData, email: str) -> List[ReviewerAppScore]:
    """One reviewer's scores per application, highest first. [] for an unknown reviewer."""
    reviewer = data.reviewers.get(email.lower())
    if reviewer is None:
        return []
    scores = [
        ReviewerAppScore(
            app_id=app_id,
            title=data.apps[app_id].title if app_id in data.apps else "",
            score=score,
        )
        for app_id, score in reviewer.app_scores.items()
    ]
    scores.sort(key=lambda s: (-s.score, s.app_id))
    return scores
