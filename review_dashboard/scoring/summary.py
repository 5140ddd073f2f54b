"""
Summary Statistics
review_dashboard/scoring/summary.py

Corpus-level counts and averages derived from finalized aggregates.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Mapping, Optional, Sequence

from review_dashboard.scoring.normalizer import RawScoringRow
from review_dashboard.scoring.schemes import is_eligibility
from review_dashboard.scoring.utils import ZERO, mean, round_score

if TYPE_CHECKING:
    from review_dashboard.scoring.aggregator import AppAggregate, ReviewerAggregate


@dataclass(frozen=True)
class SummaryStatistics:
    total_apps: int = 0
    total_reviewers: int = 0
    total_categories: int = 0
    total_records: int = 0
    avg_raw_score: Decimal = Decimal("0.00")
    avg_final_score: Optional[Decimal] = None


def compute_summary(
    apps: Mapping[str, "AppAggregate"],
    reviewers: Mapping[str, "ReviewerAggregate"],
    rows: Sequence[RawScoringRow],
    places: int = 2,
) -> SummaryStatistics:
    """
    Summarize a finalized corpus.

    avg_raw_score averages ``score`` when the first row belongs to the
    eligibility score set and ``weighted_score`` otherwise. Categories are
    counted from the rows as exported, blanks included.
    """
    if rows:
        eligibility = is_eligibility(rows[0].score_set_name)
        raw_values = [r.score if eligibility else r.weighted_score for r in rows]
        avg_raw = round_score(mean(raw_values) or ZERO, places)
    else:
        avg_raw = round_score(ZERO, places)

    finals = [a.final_average for a in apps.values() if a.final_average is not None]
    avg_final = mean(finals)

    return SummaryStatistics(
        total_apps=len(apps),
        total_reviewers=len(reviewers),
        total_categories=len({r.category for r in rows}),
        total_records=len(rows),
        avg_raw_score=avg_raw,
        avg_final_score=round_score(avg_final, places) if avg_final is not None else None,
    )
