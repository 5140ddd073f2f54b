"""
Decimal Utilities
review_dashboard/scoring/utils.py

Precision-safe decimal math for score normalization. Sums are exact in
Decimal, so folding rows in any order yields the same totals.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

ZERO = Decimal("0")


def round_score(value: Decimal, places: int = 2) -> Decimal:
    """Round half away from zero to ``places`` decimals."""
    return value.quantize(Decimal(10) ** -places, rounding=ROUND_HALF_UP)


def clamp(
    value: Decimal,
    min_val: Decimal = Decimal("0"),
    max_val: Decimal = Decimal("100"),
) -> Decimal:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def safe_ratio(numerator: Decimal, denominator: Decimal) -> Optional[Decimal]:
    """numerator / denominator, or None when the denominator is not positive."""
    if denominator <= 0:
        return None
    return numerator / denominator


def mean(values: Iterable[Decimal]) -> Optional[Decimal]:
    """Arithmetic mean, or None for an empty input."""
    items = list(values)
    if not items:
        return None
    return sum(items, ZERO) / len(items)
