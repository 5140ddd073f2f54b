from review_dashboard.models.leaderboard import LeaderboardEntry, ScoreBreakdownItem
from review_dashboard.models.scoring import (
    AggregatedDataResponse,
    AppAggregateSchema,
    RankedApplicationSchema,
    RankedReviewerSchema,
    ReviewerAggregateSchema,
    ReviewerAppScoreSchema,
    ScoreSetListResponse,
    ScoreSetUploadResponse,
    SummarySchema,
)

__all__ = [
    "AggregatedDataResponse",
    "AppAggregateSchema",
    "LeaderboardEntry",
    "RankedApplicationSchema",
    "RankedReviewerSchema",
    "ReviewerAggregateSchema",
    "ReviewerAppScoreSchema",
    "ScoreBreakdownItem",
    "ScoreSetListResponse",
    "ScoreSetUploadResponse",
    "SummarySchema",
]
