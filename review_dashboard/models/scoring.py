from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from review_dashboard.scoring.aggregator import AggregatedData, AppAggregate, ReviewerAggregate
from review_dashboard.scoring.summary import SummaryStatistics


def _f(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


class AppAggregateSchema(BaseModel):
    """
    Finalized aggregate of one application, as returned by the API.
    """

    id: str
    application_slug: str
    title: str
    category: str
    score_set_name: str
    score_set_slug: str
    applicant_name: str
    applicant_email: str
    display_max: float = Field(..., description="6.0 for eligibility score sets, 5.0 otherwise")
    final_reviewer_scores: Dict[str, float] = Field(default_factory=dict)
    final_average: Optional[float] = Field(
        default=None,
        description="Mean reviewer score; null when the app has no reviewers"
    )
    criteria_averages: Dict[str, float] = Field(default_factory=dict)

    @classmethod
    def from_aggregate(cls, app: AppAggregate) -> "AppAggregateSchema":
        return cls(
            id=app.id,
            application_slug=app.application_slug,
            title=app.title,
            category=app.category,
            score_set_name=app.score_set_name,
            score_set_slug=app.score_set_slug,
            applicant_name=app.applicant_name,
            applicant_email=app.applicant_email,
            display_max=float(app.scheme.display_max),
            final_reviewer_scores={k: float(v) for k, v in app.final_reviewer_scores.items()},
            final_average=_f(app.final_average),
            criteria_averages={k: float(v) for k, v in app.criteria_averages.items()},
        )


class ReviewerAggregateSchema(BaseModel):
    email: str
    name: str
    app_scores: Dict[str, float] = Field(default_factory=dict)
    avg_reviewer_score: Optional[float] = None
    count_apps: int = 0

    @classmethod
    def from_aggregate(cls, reviewer: ReviewerAggregate) -> "ReviewerAggregateSchema":
        return cls(
            email=reviewer.email,
            name=reviewer.name,
            app_scores={k: float(v) for k, v in reviewer.app_scores.items()},
            avg_reviewer_score=_f(reviewer.avg_reviewer_score),
            count_apps=reviewer.count_apps,
        )


class SummarySchema(BaseModel):
    total_apps: int = 0
    total_reviewers: int = 0
    total_categories: int = 0
    total_records: int = 0
    avg_raw_score: float = 0.0
    avg_final_score: Optional[float] = None

    @classmethod
    def from_summary(cls, summary: SummaryStatistics) -> "SummarySchema":
        return cls(
            total_apps=summary.total_apps,
            total_reviewers=summary.total_reviewers,
            total_categories=summary.total_categories,
            total_records=summary.total_records,
            avg_raw_score=float(summary.avg_raw_score),
            avg_final_score=_f(summary.avg_final_score),
        )


class AggregatedDataResponse(BaseModel):
    """
    Aggregates of one score set. Also the cached representation.
    """

    score_set_name: str
    uploaded_at: Optional[datetime] = None
    apps: Dict[str, AppAggregateSchema] = Field(default_factory=dict)
    reviewers: Dict[str, ReviewerAggregateSchema] = Field(default_factory=dict)
    summary: SummarySchema = Field(default_factory=SummarySchema)

    @classmethod
    def from_aggregates(
        cls,
        score_set_name: str,
        data: AggregatedData,
        uploaded_at: Optional[datetime] = None,
    ) -> "AggregatedDataResponse":
        return cls(
            score_set_name=score_set_name,
            uploaded_at=uploaded_at,
            apps={k: AppAggregateSchema.from_aggregate(v) for k, v in data.apps.items()},
            reviewers={
                k: ReviewerAggregateSchema.from_aggregate(v) for k, v in data.reviewers.items()
            },
            summary=SummarySchema.from_summary(data.summary),
        )


class ScoreSetUploadResponse(BaseModel):
    score_set_name: str
    count: int
    uploaded_at: datetime
    summary: SummarySchema


class RankedApplicationSchema(BaseModel):
    id: str
    title: str
    category: str
    final_average: Optional[float] = None
    reviewer_count: int = 0


class ScoreSetListResponse(BaseModel):
    score_sets: List[str]


class RankedReviewerSchema(BaseModel):
    email: str
    name: str
    avg_reviewer_score: Optional[float] = None
    count_apps: int = 0


class ReviewerAppScoreSchema(BaseModel):
    app_id: str
    title: str
    score: float
