"""
Scoring Schemes
review_dashboard/scoring/schemes.py

A score set named exactly "Eligibility Shortlisting" is normalized from
plain (score, max_score) sums onto a 6.0 scale. Every other score set,
including an empty or unknown name, uses weighted sums onto 5.0 and
falls back to plain sums when the weighted maximum is zero.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from review_dashboard.config import settings


class ScoringScheme(str, Enum):
    """Normalization scheme for one score set."""
    ELIGIBILITY = "eligibility"
    WEIGHTED = "weighted"


@dataclass(frozen=True)
class SchemeConfig:
    """Resolved scheme and its display ceiling."""
    scheme: ScoringScheme
    display_max: Decimal

    @property
    def prefers_weighted(self) -> bool:
        return self.scheme is ScoringScheme.WEIGHTED


ELIGIBILITY_SET_NAME = settings.ELIGIBILITY_SET_NAME

ELIGIBILITY_SCHEME = SchemeConfig(
    scheme=ScoringScheme.ELIGIBILITY,
    display_max=Decimal(str(settings.ELIGIBILITY_DISPLAY_MAX)),
)
WEIGHTED_SCHEME = SchemeConfig(
    scheme=ScoringScheme.WEIGHTED,
    display_max=Decimal(str(settings.DEFAULT_DISPLAY_MAX)),
)


def is_eligibility(score_set_name: str | None) -> bool:
    """Exact, case-sensitive match on the eligibility score-set name."""
    return score_set_name == ELIGIBILITY_SET_NAME


def resolve_scheme(score_set_name: str | None) -> SchemeConfig:
    """
    Resolve the normalization scheme for a score-set name.

    Args:
        score_set_name: Name as exported (e.g. "Jury Evaluation").

    Returns:
        ELIGIBILITY_SCHEME for "Eligibility Shortlisting", else WEIGHTED_SCHEME.
    """
    return ELIGIBILITY_SCHEME if is_eligibility(score_set_name) else WEIGHTED_SCHEME
