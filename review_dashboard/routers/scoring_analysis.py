"""
Scoring Analysis Router - Review Dashboard
review_dashboard/routers/scoring_analysis.py

Endpoints:
  POST /api/v1/scoring-analysis/{score_set_name}/rows  - Upload export records (replaces the score set)
  GET  /api/v1/scoring-analysis/score-sets             - Score sets with uploaded data
  GET  /api/v1/scoring-analysis/{score_set_name}       - Apps, reviewers and summary
  GET  /api/v1/scoring-analysis/{score_set_name}/top   - Highest-scoring applications
  GET  /api/v1/scoring-analysis/{score_set_name}/reviewers          - Reviewers by average score
  GET  /api/v1/scoring-analysis/{score_set_name}/reviewers/{email}  - One reviewer's per-application scores
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Query, status

from review_dashboard.config import settings
from review_dashboard.core.dependencies import get_scoring_analysis_service
from review_dashboard.core.exceptions import EntityNotFoundException
from review_dashboard.models.scoring import (
    AggregatedDataResponse,
    RankedApplicationSchema,
    RankedReviewerSchema,
    ReviewerAppScoreSchema,
    ScoreSetListResponse,
    ScoreSetUploadResponse,
)
from review_dashboard.routers.common import raise_score_set_not_found
from review_dashboard.services.scoring_analysis import ScoringAnalysisService

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/scoring-analysis", tags=["Scoring Analysis"])


@router.post(
    "/{score_set_name}/rows",
    response_model=ScoreSetUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload review-score export records",
)
async def upload_rows(
    score_set_name: str,
    records: List[Dict[str, Any]] = Body(..., description="Export rows keyed by column header"),
    service: ScoringAnalysisService = Depends(get_scoring_analysis_service),
) -> ScoreSetUploadResponse:
    return service.upload(records, score_set_name)


@router.get("/score-sets", response_model=ScoreSetListResponse, summary="List uploaded score sets")
async def list_score_sets(
    service: ScoringAnalysisService = Depends(get_scoring_analysis_service),
) -> ScoreSetListResponse:
    return ScoreSetListResponse(score_sets=service.available_score_sets())


@router.get(
    "/{score_set_name}",
    response_model=AggregatedDataResponse,
    summary="Aggregated scores for a score set",
)
async def get_aggregates(
    score_set_name: str,
    service: ScoringAnalysisService = Depends(get_scoring_analysis_service),
) -> AggregatedDataResponse:
    try:
        return service.get_aggregates(score_set_name)
    except EntityNotFoundException:
        raise_score_set_not_found(score_set_name)


@router.get(
    "/{score_set_name}/top",
    response_model=List[RankedApplicationSchema],
    summary="Top applications by final average",
)
async def get_top_applications(
    score_set_name: str,
    limit: int = Query(default=10, ge=1, le=500),
    service: ScoringAnalysisService = Depends(get_scoring_analysis_service),
) -> List[RankedApplicationSchema]:
    try:
        return service.top_applications(score_set_name, limit)
    except EntityNotFoundException:
        raise_score_set_not_found(score_set_name)


@router.get(
    "/{score_set_name}/reviewers",
    response_model=List[RankedReviewerSchema],
    summary="Reviewers by average score",
)
async def get_reviewer_rankings(
    score_set_name: str,
    service: ScoringAnalysisService = Depends(get_scoring_analysis_service),
) -> List[RankedReviewerSchema]:
    try:
        return service.reviewer_rankings(score_set_name)
    except EntityNotFoundException:
        raise_score_set_not_found(score_set_name)


@router.get(
    "/{score_set_name}/reviewers/{email}",
    response_model=List[ReviewerAppScoreSchema],
    summary="One reviewer's score per application",
)
async def get_reviewer_app_scores(
    score_set_name: str,
    email: str,
    service: ScoringAnalysisService = Depends(get_scoring_analysis_service),
) -> List[ReviewerAppScoreSchema]:
    try:
        return service.reviewer_app_scores(score_set_name, email)
    except EntityNotFoundException:
        raise_score_set_not_found(score_set_name)
