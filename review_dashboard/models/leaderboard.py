from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional, List


class ScoreBreakdownItem(BaseModel):
    """
    One criterion's score as shown on the leaderboard.
    """

    name: str = Field(
        ...,
        description="Criterion name (English label)"
    )

    score: str = Field(
        ...,
        description="Display string: the platform's final_score (e.g. '1.67/2') or the raw value to 2 decimals"
    )

    raw_value: float = Field(
        default=0.0,
        description="Criterion raw value rounded to 2 decimals"
    )

    max_score: float = Field(
        default=2.0,
        description="Criterion maximum, 2 when the platform omits it"
    )

    band: Optional[str] = Field(
        default=None,
        description="Colour band of raw_value against max_score: high, medium, low, poor or none"
    )


class LeaderboardEntry(BaseModel):
    """
    One externally-synced application's ranking record.

    Keyed by (slug, score_set_slug) in the leaderboard store.
    """

    slug: str = Field(
        ...,
        min_length=1,
        description="Application slug on the grant platform"
    )

    score_set_slug: str = Field(
        ...,
        description="Score set the ranking belongs to"
    )

    title: str = Field(
        default="Untitled Application",
        description="Application title"
    )

    tags: List[str] = Field(
        default_factory=list,
        description="Trimmed, de-duplicated tags"
    )

    total_score: float = Field(
        default=0.0,
        description="Sum of criterion numerators, or auto_score when no criteria"
    )

    score_breakdown: List[ScoreBreakdownItem] = Field(
        default_factory=list,
        description="Per-criterion display breakdown, in platform order"
    )

    municipality: Optional[str] = Field(
        default=None,
        description="Municipality answered on the application form"
    )

    synced_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When this snapshot was taken"
    )

    @property
    def key(self) -> tuple[str, str]:
        return (self.slug, self.score_set_slug)
