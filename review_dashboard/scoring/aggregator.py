"""
Aggregation Engine
review_dashboard/scoring/aggregator.py

Folds canonical score rows into per-application aggregates and finalizes
normalized scores per reviewer and per criterion.

Phases:
    1. fold      one pass over rows. Each row updates exactly one reviewer
                 accumulator and one criterion accumulator in its app.
    2. finalize  one pass over apps, after every row is folded:
                     ratio = Σweighted / Σweighted_max   (weighted scheme, Σweighted_max > 0)
                           | Σscore / Σmax_score        (Σmax_score > 0)
                           | undefined -> 0
                     score = round(clamp(ratio × display_max, 0, display_max), 2)
    3. merge     reviewer-level aggregates are built from finalized apps.
                 Apps never hold references to reviewer aggregates.

Sums are Decimal, so the result does not depend on row order.

Usage:
    data = compute_aggregates(normalize_rows(records))
    data.apps["A1"].final_average        # Decimal("3.00")
    data.reviewers["r1@x.com"].app_scores
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

import structlog

from review_dashboard.config import settings
from review_dashboard.scoring.normalizer import RawScoringRow
from review_dashboard.scoring.schemes import SchemeConfig, resolve_scheme
from review_dashboard.scoring.summary import SummaryStatistics, compute_summary
from review_dashboard.scoring.utils import ZERO, clamp, mean, round_score, safe_ratio

logger = structlog.get_logger(__name__)

# Keys used when a row leaves the grouping field empty
UNKNOWN_APPLICATION_ID = "—"
UNKNOWN_REVIEWER = "unknown"
DEFAULT_CRITERION = "Criterion"
DEFAULT_CATEGORY = "Uncategorized"
MISSING_APPLICANT_EMAIL = "N/A"


@dataclass
class ScoreAccumulator:
    """Running sums of plain and weighted scores."""
    sum_score: Decimal = ZERO
    sum_max: Decimal = ZERO
    sum_weighted: Decimal = ZERO
    sum_weighted_max: Decimal = ZERO
    count: int = 0

    def add(self, row: RawScoringRow) -> None:
        self.sum_score += row.score
        self.sum_max += row.max_score
        self.sum_weighted += row.weighted_score
        self.sum_weighted_max += row.weighted_max_score
        self.count += 1

    def merge(self, other: "ScoreAccumulator") -> None:
        self.sum_score += other.sum_score
        self.sum_max += other.sum_max
        self.sum_weighted += other.sum_weighted
        self.sum_weighted_max += other.sum_weighted_max
        self.count += other.count

    def ratio(self, scheme: SchemeConfig) -> Optional[Decimal]:
        """Score ratio under ``scheme``, or None when every maximum is zero."""
        if scheme.prefers_weighted:
            weighted = safe_ratio(self.sum_weighted, self.sum_weighted_max)
            if weighted is not None:
                return weighted
        return safe_ratio(self.sum_score, self.sum_max)

    def normalized(self, scheme: SchemeConfig, places: int = 2) -> Decimal:
        """Ratio scaled onto the display range, clamped and rounded."""
        ratio = self.ratio(scheme)
        if ratio is None:
            return round_score(ZERO, places)
        scaled = clamp(ratio * scheme.display_max, ZERO, scheme.display_max)
        return round_score(scaled, places)


@dataclass
class ReviewerAccumulator:
    """One reviewer's rows within one application."""
    email: str
    name: str
    scores: ScoreAccumulator = field(default_factory=ScoreAccumulator)


@dataclass
class AppAggregate:
    """One application's aggregated state."""
    id: str
    application_slug: str
    title: str
    category: str
    score_set_name: str
    score_set_slug: str
    applicant_name: str
    applicant_email: str
    reviewers: Dict[str, ReviewerAccumulator] = field(default_factory=dict)
    criteria: Dict[str, ScoreAccumulator] = field(default_factory=dict)

    # Populated by AggregationEngine.finalize()
    final_reviewer_scores: Dict[str, Decimal] = field(default_factory=dict)
    final_average: Optional[Decimal] = None
    criteria_averages: Dict[str, Decimal] = field(default_factory=dict)
    finalized: bool = False

    @classmethod
    def from_row(cls, app_id: str, row: RawScoringRow) -> "AppAggregate":
        applicant = f"{row.applicant_first} {row.applicant_last}".strip()
        return cls(
            id=app_id,
            application_slug=row.application_slug or app_id,
            title=row.application_title,
            category=row.category or DEFAULT_CATEGORY,
            score_set_name=row.score_set_name,
            score_set_slug=row.score_set_slug,
            applicant_name=applicant,
            applicant_email=row.applicant_email or MISSING_APPLICANT_EMAIL,
        )

    @property
    def scheme(self) -> SchemeConfig:
        """Scheme fixed by the app's first observed row."""
        return resolve_scheme(self.score_set_name)

    def add(self, row: RawScoringRow) -> None:
        email = row.reviewer_email or UNKNOWN_REVIEWER
        reviewer = self.reviewers.get(email)
        if reviewer is None:
            name = f"{row.reviewer_first} {row.reviewer_last}".strip()
            reviewer = self.reviewers[email] = ReviewerAccumulator(email=email, name=name)
        reviewer.scores.add(row)

        criterion = row.scoring_criterion or DEFAULT_CRITERION
        self.criteria.setdefault(criterion, ScoreAccumulator()).add(row)

    def merge(self, other: "AppAggregate") -> None:
        """Fold another partition's accumulators for the same app into this one."""
        for email, incoming in other.reviewers.items():
            reviewer = self.reviewers.get(email)
            if reviewer is None:
                reviewer = self.reviewers[email] = ReviewerAccumulator(
                    email=email, name=incoming.name
                )
            reviewer.scores.merge(incoming.scores)
        for name, incoming in other.criteria.items():
            self.criteria.setdefault(name, ScoreAccumulator()).merge(incoming)


@dataclass
class ReviewerAggregate:
    """One reviewer's scores across applications."""
    email: str
    name: str
    app_scores: Dict[str, Decimal] = field(default_factory=dict)
    avg_reviewer_score: Optional[Decimal] = None
    count_apps: int = 0
    sum_reviewer_scores: Decimal = ZERO


@dataclass
class AggregatedData:
    """Full engine output. Owned by the caller once returned."""
    apps: Dict[str, AppAggregate]
    reviewers: Dict[str, ReviewerAggregate]
    summary: SummaryStatistics


class AggregationEngine:
    """
    Fold, finalize and merge review-score rows.

    An engine instance holds no state between calls; every compute()
    returns a fresh result graph.
    """

    def __init__(self, places: int | None = None) -> None:
        self.places = settings.SCORE_DECIMAL_PLACES if places is None else places

    def fold(self, rows: Iterable[RawScoringRow]) -> Dict[str, AppAggregate]:
        """Accumulate rows into per-application aggregates."""
        apps: Dict[str, AppAggregate] = {}
        for row in rows:
            app_id = row.application_id or UNKNOWN_APPLICATION_ID
            app = apps.get(app_id)
            if app is None:
                app = apps[app_id] = AppAggregate.from_row(app_id, row)
            app.add(row)
        return apps

    @staticmethod
    def merge_partitions(
        partitions: Sequence[Dict[str, AppAggregate]],
    ) -> Dict[str, AppAggregate]:
        """
        Combine independently folded partitions before finalize().

        Partitions are expected to be split by application id; an app that
        appears in several partitions keeps the metadata of the first.
        """
        merged: Dict[str, AppAggregate] = {}
        for partition in partitions:
            for app_id, app in partition.items():
                if app_id in merged:
                    merged[app_id].merge(app)
                else:
                    merged[app_id] = app
        return merged

    def finalize_app(self, app: AppAggregate) -> None:
        """Compute normalized reviewer, average and criterion scores for one app."""
        if app.finalized:
            return
        scheme = app.scheme

        app.final_reviewer_scores = {
            email: reviewer.scores.normalized(scheme, self.places)
            for email, reviewer in app.reviewers.items()
        }
        average = mean(app.final_reviewer_scores.values())
        app.final_average = (
            round_score(clamp(average, ZERO, scheme.display_max), self.places)
            if average is not None
            else None
        )
        app.criteria_averages = {
            name: acc.normalized(scheme, self.places)
            for name, acc in app.criteria.items()
        }
        app.finalized = True

    def finalize(self, apps: Dict[str, AppAggregate]) -> None:
        for app in apps.values():
            self.finalize_app(app)

    def merge_reviewers(
        self, apps: Dict[str, AppAggregate]
    ) -> Dict[str, ReviewerAggregate]:
        """Build reviewer aggregates from finalized applications."""
        reviewers: Dict[str, ReviewerAggregate] = {}
        for app in apps.values():
            for email, score in app.final_reviewer_scores.items():
                reviewer = reviewers.get(email)
                if reviewer is None:
                    name = app.reviewers[email].name if email in app.reviewers else ""
                    reviewer = reviewers[email] = ReviewerAggregate(email=email, name=name)
                reviewer.app_scores[app.id] = score

        for reviewer in reviewers.values():
            scores = list(reviewer.app_scores.values())
            reviewer.count_apps = len(scores)
            reviewer.sum_reviewer_scores = sum(scores, ZERO)
            average = mean(scores)
            reviewer.avg_reviewer_score = (
                round_score(average, self.places) if average is not None else None
            )
        return reviewers

    def compute(self, rows: Sequence[RawScoringRow]) -> AggregatedData:
        """
        Run fold, finalize and merge over a complete row sequence.

        Args:
            rows: Every row of the corpus. Finalization needs all of them.

        Returns:
            AggregatedData with apps, reviewers and summary statistics.
        """
        rows = list(rows)
        apps = self.fold(rows)
        self.finalize(apps)
        reviewers = self.merge_reviewers(apps)
        summary = compute_summary(apps, reviewers, rows, places=self.places)

        logger.info(
            "aggregates_computed",
            total_records=summary.total_records,
            total_apps=summary.total_apps,
            total_reviewers=summary.total_reviewers,
            avg_final_score=(
                float(summary.avg_final_score)
                if summary.avg_final_score is not None
                else None
            ),
        )
        return AggregatedData(apps=apps, reviewers=reviewers, summary=summary)


def compute_aggregates(rows: Sequence[RawScoringRow]) -> AggregatedData:
    """Aggregate review-score rows into apps, reviewers and a summary."""
    return AggregationEngine().compute(rows)
