"""
Row Normalizer
review_dashboard/scoring/normalizer.py

Maps one record of a review-score export onto the canonical RawScoringRow.
Export tools and locales spell headers differently ("Reviewer email",
"Reviewer Email", "Email"), so every canonical field declares its accepted
headers in FIELD_ALIASES, probed in order. The first present, non-null
value wins; a missing field takes its default ("" or 0).

normalize_row() is total: it accepts any mapping and never raises.

Usage:
    row = normalize_row({"Application ID": 17, "Score": "1,250.5"})
    # row.application_id == "17", row.score == Decimal("1250.5")
"""

import math
from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from review_dashboard.scoring.utils import ZERO


@dataclass(frozen=True)
class RawScoringRow:
    """One reviewer's score for one criterion on one application."""
    application_id: str = ""
    application_slug: str = ""
    application_title: str = ""
    category: str = ""
    reviewer_email: str = ""
    reviewer_first: str = ""
    reviewer_last: str = ""
    scoring_criterion: str = ""
    score: Decimal = ZERO
    max_score: Decimal = ZERO
    weighted_score: Decimal = ZERO
    weighted_max_score: Decimal = ZERO
    score_set_name: str = ""
    score_set_slug: str = ""
    applicant_first: str = ""
    applicant_last: str = ""
    applicant_email: str = ""


# Canonical field -> accepted export headers, in priority order.
# "Email" feeds both reviewer_email and applicant_email.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "application_id": ("Application ID", "App ID", "application_id", "application id"),
    "application_slug": ("Application slug", "Application Slug", "Application_slug", "application_slug"),
    "application_title": ("Application", "Project Title", "application", "Project"),
    "category": ("Category", "category"),
    "reviewer_email": ("Reviewer email", "Reviewer Email", "Email"),
    "reviewer_first": ("Reviewer first name", "Reviewer First Name", "ReviewerFirst", "Reviewer First"),
    "reviewer_last": ("Reviewer last name", "Reviewer Last Name"),
    "scoring_criterion": ("Scoring criterion", "Criterion", "Criteria", "Scoring Criterion"),
    "score": ("Score", "score"),
    "max_score": ("Max score", "Max Score", "max_score"),
    "weighted_score": ("Weighted score", "Weighted Score", "weighted_score"),
    "weighted_max_score": ("Weighted max score", "Weighted Max Score", "weighted_max_score"),
    "score_set_name": ("Score set", "Score Set", "score_set"),
    "score_set_slug": ("Score set slug", "Score Set Slug", "score_set_slug"),
    "applicant_first": ("First name", "First Name"),
    "applicant_last": ("Last name", "Last Name"),
    "applicant_email": ("Email", "email"),
}

_LOWERCASE_FIELDS = frozenset({"reviewer_email"})

# Cells outside 10**±MAX_EXPONENT read as 0, keeping sums, ratios and
# 2-place rounding within the default decimal context.
MAX_EXPONENT = 15

# Resolved once at import: (field name, aliases, is_numeric)
_RESOLVERS: Tuple[Tuple[str, Tuple[str, ...], bool], ...] = tuple(
    (f.name, FIELD_ALIASES[f.name], f.type in (Decimal, "Decimal"))
    for f in fields(RawScoringRow)
)


def _is_missing(value: Any) -> bool:
    # pandas hands blank cells over as float NaN
    return value is None or (isinstance(value, float) and math.isnan(value))


def _first_present(record: Mapping[str, Any], aliases: Tuple[str, ...]) -> Any:
    for name in aliases:
        value = record.get(name)
        if not _is_missing(value):
            return value
    return None


def _in_range(number: Decimal) -> Decimal:
    if not number.is_finite() or number.is_zero():
        return ZERO
    if not -MAX_EXPONENT <= number.adjusted() <= MAX_EXPONENT:
        return ZERO
    return number


def parse_num(value: Any) -> Decimal:
    """
    Coerce an export cell to Decimal.

    Thousands separators are stripped. Empty, unparsable and non-finite
    values become Decimal("0"), as do magnitudes of 1e16 and above or
    below 1e-15.
    """
    if _is_missing(value) or value == "" or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return _in_range(value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return ZERO
        return _in_range(Decimal(str(value)))

    text = str(value).replace(",", "").strip()
    if not text or "_" in text:
        return ZERO
    try:
        number = Decimal(text)
    except (InvalidOperation, ValueError):
        return ZERO
    return _in_range(number)


def _to_text(value: Any) -> str:
    if value is None or value is False:
        return ""
    if isinstance(value, float) and value.is_integer():
        # 17.0 from a numeric column is application "17"
        return str(int(value))
    return str(value)


def normalize_row(record: Mapping[str, Any]) -> RawScoringRow:
    """
    Normalize one export record into a RawScoringRow.

    Args:
        record: Mapping of export header -> cell value. May be empty.

    Returns:
        RawScoringRow with every field populated (defaults when absent).
    """
    if not isinstance(record, Mapping):
        return RawScoringRow()

    values: Dict[str, Any] = {}
    for name, aliases, numeric in _RESOLVERS:
        raw = _first_present(record, aliases)
        if numeric:
            values[name] = parse_num(raw)
            continue
        text = _to_text(raw)
        values[name] = text.lower() if name in _LOWERCASE_FIELDS else text
    return RawScoringRow(**values)


def normalize_rows(records: Iterable[Mapping[str, Any]]) -> List[RawScoringRow]:
    """Normalize every record of an export, preserving order."""
    return [normalize_row(record) for record in records]
