# tests/conftest.py

"""
Pytest Fixtures - Shared test data for the scoring engine, leaderboard and API

EXPORT FIXTURE REFERENCE:
- Eligibility Shortlisting: app "A1", reviewers r1 (2 criteria) and r2 (1 criterion)
- Jury Evaluation:          apps "A1" (r1 weighted 8/10, r2 weighted 6/10) and "A2" (r1 weighted 7/10)
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from review_dashboard.core.dependencies import (
    get_leaderboard_repository,
    get_scoring_data_repository,
)
from review_dashboard.main import app


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture(scope="module")
def client():
    """Create a TestClient for FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def fresh_stores():
    """Every test starts with empty in-process stores."""
    get_scoring_data_repository.cache_clear()
    get_leaderboard_repository.cache_clear()
    yield
    get_scoring_data_repository.cache_clear()
    get_leaderboard_repository.cache_clear()


@pytest.fixture(autouse=True)
def no_redis():
    """Run without Redis unless a test patches the cache itself."""
    with patch("review_dashboard.services.scoring_analysis.get_cache", return_value=None), \
         patch("review_dashboard.routers.health.get_cache", return_value=None):
        yield


# =============================================================================
# EXPORT RECORD FIXTURES
# =============================================================================

def export_record(**overrides):
    """One export row using the platform's default header spelling."""
    record = {
        "Application ID": "A1",
        "Application slug": "app-one",
        "Application": "Community Garden",
        "Category": "Environment",
        "Reviewer email": "r1@x.com",
        "Reviewer first name": "Rita",
        "Reviewer last name": "One",
        "Scoring criterion": "Impact",
        "Score": "1",
        "Max score": "2",
        "Weighted score": "0",
        "Weighted max score": "0",
        "Score set": "Jury Evaluation",
        "Score set slug": "jury",
        "First name": "Ada",
        "Last name": "Applicant",
    }
    record.update(overrides)
    return record


@pytest.fixture
def eligibility_records():
    """r1 scores 2/2 and 1/2, r2 scores 0/2 -> r1 4.50, r2 0.00, average 2.25."""
    base = {"Score set": "Eligibility Shortlisting", "Score set slug": "elig"}
    return [
        export_record(**base, **{"Scoring criterion": "Fit", "Score": "2", "Max score": "2"}),
        export_record(**base, **{"Scoring criterion": "Budget", "Score": "1", "Max score": "2"}),
        export_record(
            **base,
            **{
                "Reviewer email": "R2@X.com",
                "Reviewer first name": "Rob",
                "Reviewer last name": "Two",
                "Scoring criterion": "Fit",
                "Score": "0",
                "Max score": "2",
            },
        ),
    ]


@pytest.fixture
def jury_records():
    """A1: r1 4.00, r2 3.00, average 3.50. A2: r1 3.50."""
    return [
        export_record(**{"Weighted score": "8", "Weighted max score": "10"}),
        export_record(
            **{
                "Reviewer email": "r2@x.com",
                "Reviewer first name": "Rob",
                "Reviewer last name": "Two",
                "Weighted score": "6",
                "Weighted max score": "10",
            }
        ),
        export_record(
            **{
                "Application ID": "A2",
                "Application slug": "app-two",
                "Application": "Bike Library",
                "Category": "Mobility",
                "Weighted score": "7",
                "Weighted max score": "10",
            }
        ),
    ]


# =============================================================================
# LEADERBOARD ENTRY FIXTURES
# =============================================================================

@pytest.fixture
def platform_entry():
    """One leaderboard entry as returned by the grant platform."""
    return {
        "slug": "xYzAbC",
        "title": "Community Garden",
        "tags": "green, youth ,green,",
        "auto_score": 9.99,
        "scores": {
            "criteria": [
                {"name": {"en_GB": "Impact"}, "value": 1.5, "max_score": 2, "final_score": "1.5/2"},
                {"name": {"en_GB": "Feasibility"}, "value": 2, "max_score": 2, "final_score": "2/2"},
            ]
        },
        "application_fields": [
            {"slug": "other", "value": "ignored"},
            {"slug": "rDkKljjz", "value": "Utrecht - [utrecht]"},
        ],
    }


@pytest.fixture
def platform_page():
    """Build a paginated leaderboard payload."""
    def _page(entries, current_page=1, last_page=1):
        return {"data": entries, "current_page": current_page, "last_page": last_page}
    return _page
