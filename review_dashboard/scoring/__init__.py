"""
scoring/ - Score Aggregation & Ranking Engine

Modules:
    utils.py              - Decimal utilities (rounding, clamping, safe ratios)
    normalizer.py         - Row Normalizer (export headers -> RawScoringRow)
    csv_loader.py         - CSV export reader (pandas)
    schemes.py            - Scheme Selector (eligibility 6.0 / weighted 5.0)
    aggregator.py         - Aggregation Engine (fold, finalize, reviewer merge)
    summary.py            - Summary Statistics
    rankings.py           - Overview rankings of apps and reviewers
    leaderboard.py        - Leaderboard Score Calculator
    leaderboard_query.py  - Leaderboard filtering, paging and distributions
"""

from review_dashboard.scoring.aggregator import (
    AggregatedData,
    AggregationEngine,
    AppAggregate,
    ReviewerAggregate,
    compute_aggregates,
)
from review_dashboard.scoring.leaderboard import (
    calculate_total_score,
    extract_score_breakdown,
    parse_final_score,
)
from review_dashboard.scoring.normalizer import RawScoringRow, normalize_row, normalize_rows
from review_dashboard.scoring.schemes import ScoringScheme, resolve_scheme
from review_dashboard.scoring.summary import SummaryStatistics

__all__ = [
    "AggregatedData",
    "AggregationEngine",
    "AppAggregate",
    "RawScoringRow",
    "ReviewerAggregate",
    "ScoringScheme",
    "SummaryStatistics",
    "calculate_total_score",
    "compute_aggregates",
    "extract_score_breakdown",
    "normalize_row",
    "normalize_rows",
    "parse_final_score",
    "resolve_scheme",
]
