"""
Leaderboard Queries
review_dashboard/scoring/leaderboard_query.py

Filtering, sorting, paging and score-distribution analytics over stored
LeaderboardEntry records.
"""

import math
from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from review_dashboard.models.leaderboard import LeaderboardEntry
from review_dashboard.scoring.utils import round_score

ALL_MUNICIPALITIES = "all"
UNKNOWN_MUNICIPALITY = "N/A"


class SortKey(str, Enum):
    TITLE = "title"
    TOTAL_SCORE = "total_score"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class LeaderboardFilter:
    """Leaderboard filters. None or empty means "no filter"."""
    title_search: Optional[str] = None
    tag: Optional[str] = None
    min_score: Optional[float] = None
    max_score: Optional[float] = None
    municipality: Optional[str] = None

    def matches(self, entry: LeaderboardEntry) -> bool:
        if self.title_search and self.title_search.strip().lower() not in entry.title.lower():
            return False
        if self.tag and self.tag.strip() not in entry.tags:
            return False
        if self.min_score is not None and entry.total_score < self.min_score:
            return False
        if self.max_score is not None and entry.total_score > self.max_score:
            return False
        if self.municipality and self.municipality != ALL_MUNICIPALITIES:
            if entry.municipality != self.municipality:
                return False
        return True


@dataclass
class LeaderboardPage:
    data: List[LeaderboardEntry] = field(default_factory=list)
    current_page: int = 1
    last_page: int = 1
    total: int = 0


def filter_entries(
    entries: Iterable[LeaderboardEntry],
    filters: Optional[LeaderboardFilter] = None,
) -> List[LeaderboardEntry]:
    filters = filters or LeaderboardFilter()
    return [e for e in entries if filters.matches(e)]


def sort_entries(
    entries: Iterable[LeaderboardEntry],
    key: SortKey = SortKey.TOTAL_SCORE,
    direction: SortDirection = SortDirection.DESC,
) -> List[LeaderboardEntry]:
    """Stable sort; ties fall back to slug so pages are deterministic."""
    ordered = sorted(entries, key=lambda e: e.slug)
    if key is SortKey.TITLE:
        sort_key: Callable[[LeaderboardEntry], object] = lambda e: e.title.lower()
    else:
        sort_key = lambda e: e.total_score
    return sorted(ordered, key=sort_key, reverse=direction is SortDirection.DESC)


def query_leaderboard(
    entries: Iterable[LeaderboardEntry],
    filters: Optional[LeaderboardFilter] = None,
    sort_key: SortKey = SortKey.TOTAL_SCORE,
    direction: SortDirection = SortDirection.DESC,
    page: int = 1,
    per_page: int = 20,
) -> LeaderboardPage:
    """
    Filter, sort and page leaderboard entries.

    Args:
        entries: Entries of one score set.
        filters: Optional LeaderboardFilter.
        sort_key: SortKey.TOTAL_SCORE (default) or SortKey.TITLE.
        direction: SortDirection.DESC (default) or SortDirection.ASC.
        page: 1-based page, clamped into [1, last_page].
        per_page: Page size, at least 1.

    Returns:
        LeaderboardPage with the requested slice and paging metadata.
    """
    per_page = max(per_page, 1)
    matched = sort_entries(filter_entries(entries, filters), sort_key, direction)
    total = len(matched)
    last_page = max(1, math.ceil(total / per_page))
    current = min(max(page, 1), last_page)
    start = (current - 1) * per_page
    return LeaderboardPage(
        data=matched[start:start + per_page],
        current_page=current,
        last_page=last_page,
        total=total,
    )


def unique_criteria(entries: Iterable[LeaderboardEntry]) -> List[str]:
    """Criterion names across entries, in first-seen order."""
    names: "OrderedDict[str, None]" = OrderedDict()
    for entry in entries:
        for item in entry.score_breakdown:
            names.setdefault(item.name, None)
    return list(names)


def municipalities(entries: Iterable[LeaderboardEntry]) -> List[str]:
    return sorted({e.municipality for e in entries if e.municipality})


def score_band(raw_value: float, max_score: float) -> str:
    """Colour band of a criterion score relative to its maximum."""
    if max_score == 0:
        return "none"
    ratio = raw_value / max_score
    if ratio >= 0.75:
        return "high"
    if ratio >= 0.5:
        return "medium"
    if ratio >= 0.25:
        return "low"
    return "poor"


# Buckets overlap: an entry scoring 6 also counts towards "≥ 5" and "≥ 4".
SCORE_BUCKETS: "OrderedDict[str, tuple[str, Callable[[float], bool]]]" = OrderedDict(
    [
        ("SCORE_6", ("Score = 6", lambda s: s == 6)),
        ("GTE_5", ("Score ≥ 5", lambda s: s >= 5)),
        ("GTE_4", ("Score ≥ 4", lambda s: s >= 4)),
        ("LT_4", ("Score < 4", lambda s: s < 4)),
    ]
)


@dataclass(frozen=True)
class ScoreBucket:
    id: str
    label: str
    value: int
    percentage: float


@dataclass(frozen=True)
class MunicipalDistribution:
    municipality: str
    total: int
    percentages: Dict[str, float]


def _percentage(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return float(round_score(Decimal(count) * 100 / Decimal(total), 1))


def _bucket_counts(scores: Sequence[float]) -> Dict[str, int]:
    return {
        bucket_id: sum(1 for s in scores if predicate(s))
        for bucket_id, (_, predicate) in SCORE_BUCKETS.items()
    }


def score_distribution(entries: Sequence[LeaderboardEntry]) -> List[ScoreBucket]:
    """Overall distribution of total scores; [] for no entries."""
    scores = [e.total_score for e in entries]
    if not scores:
        return []
    counts = _bucket_counts(scores)
    return [
        ScoreBucket(
            id=bucket_id,
            label=label,
            value=counts[bucket_id],
            percentage=_percentage(counts[bucket_id], len(scores)),
        )
        for bucket_id, (label, _) in SCORE_BUCKETS.items()
    ]


def municipal_score_distribution(
    entries: Iterable[LeaderboardEntry],
) -> List[MunicipalDistribution]:
    """Bucket percentages per municipality, largest municipality first."""
    grouped: Dict[str, List[float]] = {}
    for entry in entries:
        grouped.setdefault(entry.municipality or UNKNOWN_MUNICIPALITY, []).append(entry.total_score)

    rows = []
    for name, scores in grouped.items():
        counts = _bucket_counts(scores)
        rows.append(
            MunicipalDistribution(
                municipality=name,
                total=len(scores),
                percentages={
                    label: _percentage(counts[bucket_id], len(scores))
                    for bucket_id, (label, _) in SCORE_BUCKETS.items()
                },
            )
        )
    rows.sort(key=lambda r: (-r.total, r.municipality))
    return rows
