"""
Leaderboard Score Calculator
review_dashboard/scoring/leaderboard.py

Derives one total score per leaderboard entry fetched from the grant
platform, plus the per-criterion breakdown shown beside it.

Total score, first rule that applies:
    1. entry.scores.criteria non-empty:
         Σ numerator of final_score ("1.67/2" -> 1.67), else the raw value
    2. entry.auto_score, else 0
    rounded to 2 decimals (half away from zero).

Numerators are summed as-is. Criteria scored against different
denominators therefore produce a total that is not a normalized score;
this matches what the platform's own leaderboard shows.

Breakdown rows are computed independently of the total and may not add
up to it.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

import structlog

from review_dashboard.config import settings
from review_dashboard.models.leaderboard import LeaderboardEntry, ScoreBreakdownItem
from review_dashboard.scoring.leaderboard_query import score_band
from review_dashboard.scoring.normalizer import parse_num
from review_dashboard.scoring.utils import ZERO, round_score

logger = structlog.get_logger(__name__)

DEFAULT_CRITERION_MAX = Decimal("2")
UNNAMED_CRITERION = "Unnamed Criterion"
UNTITLED_APPLICATION = "Untitled Application"


@dataclass(frozen=True)
class FractionScore:
    """A platform final_score such as "1.67/2", parsed once."""
    text: str
    numerator: Decimal
    denominator: Optional[Decimal]


@dataclass(frozen=True)
class CriterionScore:
    """One criterion of a leaderboard entry."""
    name: str
    value: Decimal
    max_score: Decimal
    final_score: Optional[FractionScore] = None

    @property
    def contribution(self) -> Decimal:
        """Amount this criterion adds to the entry total."""
        if self.final_score is not None:
            return self.final_score.numerator
        return self.value

    @property
    def display(self) -> str:
        if self.final_score is not None:
            return self.final_score.text
        return str(round_score(self.value))


def parse_final_score(text: Any) -> Optional[FractionScore]:
    """
    Parse "<numerator>/<denominator>".

    Returns None for a missing or empty value. An unparsable numerator
    counts as 0; a missing or unparsable denominator is kept as None.
    """
    if text is None:
        return None
    raw = str(text).strip()
    if not raw:
        return None
    head, sep, tail = raw.partition("/")
    denominator = parse_num(tail) if sep and tail.strip() else None
    return FractionScore(text=raw, numerator=parse_num(head), denominator=denominator)


def _criterion_name(raw: Any) -> str:
    if isinstance(raw, Mapping):
        raw = raw.get(settings.GOODGRANTS_LANGUAGE) or raw.get("en_GB") or raw.get("en")
    return str(raw) if raw else UNNAMED_CRITERION


def parse_criterion(raw: Mapping[str, Any]) -> CriterionScore:
    max_raw = raw.get("max_score")
    return CriterionScore(
        name=_criterion_name(raw.get("name")),
        value=parse_num(raw.get("value")),
        max_score=DEFAULT_CRITERION_MAX if max_raw in (None, "") else parse_num(max_raw),
        final_score=parse_final_score(raw.get("final_score")),
    )


def parse_criteria(entry: Mapping[str, Any]) -> List[CriterionScore]:
    """Criteria of an entry's ``scores.criteria``; [] when absent."""
    scores = entry.get("scores") if isinstance(entry, Mapping) else None
    if not isinstance(scores, Mapping):
        return []
    criteria = scores.get("criteria") or []
    return [parse_criterion(c) for c in criteria if isinstance(c, Mapping)]


def _total(entry: Mapping[str, Any], criteria: List[CriterionScore]) -> Decimal:
    if criteria:
        total = sum((c.contribution for c in criteria), ZERO)
    else:
        total = parse_num(entry.get("auto_score"))
    return round_score(total)


def calculate_total_score(entry: Mapping[str, Any]) -> Decimal:
    """
    Total score of one leaderboard entry.

    Args:
        entry: Entry as returned by the platform's leaderboard endpoint.

    Returns:
        Decimal rounded to 2 places.
    """
    if not isinstance(entry, Mapping):
        return round_score(ZERO)
    return _total(entry, parse_criteria(entry))


def _breakdown(criteria: List[CriterionScore]) -> List[ScoreBreakdownItem]:
    items = []
    for c in criteria:
        raw_value = float(round_score(c.value))
        max_score = float(c.max_score)
        items.append(
            ScoreBreakdownItem(
                name=c.name,
                score=c.display,
                raw_value=raw_value,
                max_score=max_score,
                band=score_band(raw_value, max_score),
            )
        )
    return items


def extract_score_breakdown(entry: Mapping[str, Any]) -> List[ScoreBreakdownItem]:
    """Per-criterion display rows, in the platform's order."""
    return _breakdown(parse_criteria(entry))


def parse_tags(raw: Any) -> List[str]:
    """Split comma-separated tags; trimmed, de-duplicated, order kept."""
    if not raw:
        return []
    parts = raw if isinstance(raw, (list, tuple)) else str(raw).split(",")
    tags: List[str] = []
    for part in parts:
        tag = str(part).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def _field_display(field: Mapping[str, Any]) -> Optional[str]:
    value = field.get("value")
    if value is None or value == "":
        return None
    if isinstance(value, Mapping):
        translated = field.get("translated")
        if isinstance(translated, Mapping) and translated.get("en_GB"):
            return str(translated["en_GB"])
        label = value.get("en_GB") or value.get("en")
        return str(label) if label else None
    # Option values are exported as "Label - [slug]"
    return str(value).split(" - [")[0].strip() or None


def extract_municipality(
    entry: Mapping[str, Any],
    field_slug: str | None = None,
) -> Optional[str]:
    """Municipality from a top-level key or the application's form fields."""
    direct = entry.get("municipality")
    if direct:
        return str(direct)

    slug = field_slug or settings.MUNICIPALITY_FIELD_SLUG
    for key in ("application_fields", "raw_fields"):
        for field in entry.get(key) or []:
            if isinstance(field, Mapping) and field.get("slug") == slug:
                return _field_display(field)
    return None


def build_leaderboard_entry(
    entry: Mapping[str, Any],
    score_set_slug: str,
    municipality_field_slug: str | None = None,
) -> LeaderboardEntry:
    """Build the stored leaderboard record for one platform entry."""
    criteria = parse_criteria(entry)
    return LeaderboardEntry(
        slug=str(entry["slug"]),
        score_set_slug=score_set_slug,
        title=str(entry.get("title") or UNTITLED_APPLICATION),
        tags=parse_tags(entry.get("tags")),
        total_score=float(_total(entry, criteria)),
        score_breakdown=_breakdown(criteria),
        municipality=extract_municipality(entry, municipality_field_slug),
    )


def transform_entries(
    entries: Iterable[Mapping[str, Any]] | None,
    score_set_slug: str,
    municipality_field_slug: str | None = None,
) -> List[LeaderboardEntry]:
    """Build leaderboard records, skipping entries the platform sent without a slug."""
    built: List[LeaderboardEntry] = []
    skipped = 0
    for entry in entries or []:
        if not isinstance(entry, Mapping) or not entry.get("slug"):
            skipped += 1
            continue
        built.append(build_leaderboard_entry(entry, score_set_slug, municipality_field_slug))
    if skipped:
        logger.warning("leaderboard_entries_skipped", score_set_slug=score_set_slug, skipped=skipped)
    return built
