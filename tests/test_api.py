# tests/test_api.py

"""
API Endpoint Tests - Tests for all FastAPI endpoints
"""

from unittest.mock import MagicMock

import pytest
from fastapi import status

from review_dashboard.core.dependencies import get_goodgrants_client, get_leaderboard_repository
from review_dashboard.core.exceptions import (
    GrantPlatformConfigurationException,
    GrantPlatformRateLimitException,
)
from review_dashboard.main import app
from review_dashboard.models.leaderboard import LeaderboardEntry, ScoreBreakdownItem


# ROOT AND HEALTH


class TestRootAndHealth:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "running"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["dependencies"]["redis"] == "unavailable"
        assert data["dependencies"]["goodgrants"] in ("configured", "not_configured")


# SCORING ANALYSIS


class TestScoringAnalysisEndpoints:
    """Tests for /api/v1/scoring-analysis."""

    def test_upload_rows(self, client, jury_records):
        response = client.post("/api/v1/scoring-analysis/Jury Evaluation/rows", json=jury_records)
        assert response.status_code == status.HTTP_201_CREATED

        data = response.json()
        assert data["score_set_name"] == "Jury Evaluation"
        assert data["count"] == 3
        assert data["summary"]["total_apps"] == 2
        assert data["summary"]["avg_final_score"] == 3.5

    def test_get_aggregates(self, client, jury_records):
        client.post("/api/v1/scoring-analysis/Jury Evaluation/rows", json=jury_records)

        response = client.get("/api/v1/scoring-analysis/Jury Evaluation")
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        a1 = data["apps"]["A1"]
        assert a1["final_reviewer_scores"] == {"r1@x.com": 4.0, "r2@x.com": 3.0}
        assert a1["final_average"] == 3.5
        assert a1["display_max"] == 5.0
        assert data["reviewers"]["r1@x.com"]["avg_reviewer_score"] == 3.75
        assert data["summary"]["total_records"] == 3

    def test_eligibility_aggregates(self, client, eligibility_records):
        client.post("/api/v1/scoring-analysis/Eligibility Shortlisting/rows", json=eligibility_records)

        data = client.get("/api/v1/scoring-analysis/Eligibility Shortlisting").json()
        assert data["apps"]["A1"]["display_max"] == 6.0
        assert data["apps"]["A1"]["final_average"] == 2.25

    def test_upload_replaces_previous_rows(self, client, jury_records):
        client.post("/api/v1/scoring-analysis/Jury Evaluation/rows", json=jury_records)
        client.post("/api/v1/scoring-analysis/Jury Evaluation/rows", json=jury_records[:1])

        data = client.get("/api/v1/scoring-analysis/Jury Evaluation").json()
        assert data["summary"]["total_records"] == 1
        assert list(data["apps"]) == ["A1"]

    def test_empty_upload(self, client):
        response = client.post("/api/v1/scoring-analysis/Empty/rows", json=[])
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["summary"]["avg_final_score"] is None

    def test_unknown_score_set(self, client):
        response = client.get("/api/v1/scoring-analysis/Nothing Here")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"]["error_code"] == "SCORE_SET_NOT_FOUND"

    def test_list_score_sets(self, client, jury_records, eligibility_records):
        client.post("/api/v1/scoring-analysis/Jury Evaluation/rows", json=jury_records)
        client.post("/api/v1/scoring-analysis/Eligibility Shortlisting/rows", json=eligibility_records)

        response = client.get("/api/v1/scoring-analysis/score-sets")
        assert response.json() == {"score_sets": ["Eligibility Shortlisting", "Jury Evaluation"]}

    def test_top_applications(self, client, jury_records):
        client.post("/api/v1/scoring-analysis/Jury Evaluation/rows", json=jury_records)

        response = client.get("/api/v1/scoring-analysis/Jury Evaluation/top", params={"limit": 1})
        assert response.status_code == status.HTTP_200_OK
        assert [a["id"] for a in response.json()] == ["A1"]

    def test_top_applications_unknown_set(self, client):
        response = client.get("/api/v1/scoring-analysis/Nothing/top")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_reviewer_rankings(self, client, jury_records):
        client.post("/api/v1/scoring-analysis/Jury Evaluation/rows", json=jury_records)

        response = client.get("/api/v1/scoring-analysis/Jury Evaluation/reviewers")
        assert response.status_code == status.HTTP_200_OK
        assert [(r["email"], r["avg_reviewer_score"], r["count_apps"]) for r in response.json()] == [
            ("r1@x.com", 3.75, 2),
            ("r2@x.com", 3.0, 1),
        ]

    def test_reviewer_app_scores(self, client, jury_records):
        client.post("/api/v1/scoring-analysis/Jury Evaluation/rows", json=jury_records)

        response = client.get("/api/v1/scoring-analysis/Jury Evaluation/reviewers/R1@x.com")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == [
            {"app_id": "A1", "title": "Community Garden", "score": 4.0},
            {"app_id": "A2", "title": "Bike Library", "score": 3.5},
        ]

        unknown = client.get("/api/v1/scoring-analysis/Jury Evaluation/reviewers/nobody@x.com")
        assert unknown.json() == []

    def test_reviewers_unknown_set(self, client):
        assert client.get("/api/v1/scoring-analysis/Nothing/reviewers").status_code == 404
        assert client.get("/api/v1/scoring-analysis/Nothing/reviewers/a@b.c").status_code == 404

    def test_invalid_body(self, client):
        response = client.post("/api/v1/scoring-analysis/Jury/rows", json={"not": "a list"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# LEADERBOARD


@pytest.fixture
def stored_leaderboard():
    repo = get_leaderboard_repository()
    repo.upsert([
        LeaderboardEntry(
            slug="a", score_set_slug="jury", title="Garden", tags=["green"], total_score=6.0,
            municipality="Delft",
            score_breakdown=[ScoreBreakdownItem(name="Impact", score="2/2", raw_value=2)],
        ),
        LeaderboardEntry(slug="b", score_set_slug="jury", title="Bikes", total_score=4.5, municipality="Leiden"),
        LeaderboardEntry(slug="c", score_set_slug="jury", title="Choir", total_score=3.0),
        LeaderboardEntry(slug="z", score_set_slug="other", title="Elsewhere", total_score=5.0),
    ])
    return repo


class TestLeaderboardEndpoints:
    """Tests for /api/v1/leaderboard."""

    def test_page(self, client, stored_leaderboard):
        response = client.get("/api/v1/leaderboard/jury")
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert [e["slug"] for e in data["data"]] == ["a", "b", "c"]
        assert data["total"] == 3
        assert data["criteria"] == ["Impact"]

    def test_filters_and_sort(self, client, stored_leaderboard):
        response = client.get(
            "/api/v1/leaderboard/jury",
            params={"min_score": 4, "sort": "title", "direction": "asc"},
        )
        assert [e["slug"] for e in response.json()["data"]] == ["b", "a"]

    def test_paging(self, client, stored_leaderboard):
        data = client.get("/api/v1/leaderboard/jury", params={"page": 2, "per_page": 2}).json()
        assert [e["slug"] for e in data["data"]] == ["c"]
        assert (data["current_page"], data["last_page"]) == (2, 2)

    def test_invalid_sort(self, client, stored_leaderboard):
        response = client.get("/api/v1/leaderboard/jury", params={"sort": "municipality"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_analytics(self, client, stored_leaderboard):
        data = client.get("/api/v1/leaderboard/jury/analytics").json()
        assert data["total"] == 3
        buckets = {b["id"]: b for b in data["distribution"]}
        assert buckets["SCORE_6"]["value"] == 1
        assert buckets["GTE_4"]["value"] == 2
        assert buckets["LT_4"]["percentage"] == 33.3
        assert data["municipalities"] == ["Delft", "Leiden"]
        assert len(data["municipal_distribution"]) == 3

    def test_analytics_empty(self, client):
        data = client.get("/api/v1/leaderboard/none/analytics").json()
        assert data["total"] == 0
        assert data["distribution"] == []

    def test_entry(self, client, stored_leaderboard):
        response = client.get("/api/v1/leaderboard/jury/entries/a")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["total_score"] == 6.0

    def test_entry_not_found(self, client, stored_leaderboard):
        response = client.get("/api/v1/leaderboard/jury/entries/z")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"]["error_code"] == "ENTRY_NOT_FOUND"


class TestLeaderboardSyncEndpoint:
    """POST /api/v1/leaderboard/{slug}/sync with the platform client overridden."""

    @pytest.fixture(autouse=True)
    def clear_overrides(self):
        yield
        app.dependency_overrides.clear()

    def test_sync(self, client, platform_entry, platform_page):
        platform = MagicMock()
        platform.iter_leaderboard.return_value = iter([platform_entry])
        app.dependency_overrides[get_goodgrants_client] = lambda: platform

        response = client.post("/api/v1/leaderboard/jury/sync")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["synced_count"] == 1

        entry = client.get("/api/v1/leaderboard/jury/entries/xYzAbC").json()
        assert entry["total_score"] == 3.5
        assert entry["municipality"] == "Utrecht"
        assert [b["band"] for b in entry["score_breakdown"]] == ["high", "high"]

    def test_sync_without_api_key(self, client):
        def not_configured():
            raise GrantPlatformConfigurationException()
        app.dependency_overrides[get_goodgrants_client] = not_configured

        response = client.post("/api/v1/leaderboard/jury/sync")
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["detail"]["error_code"] == "PLATFORM_NOT_CONFIGURED"

    def test_sync_rate_limited(self, client):
        platform = MagicMock()
        platform.iter_leaderboard.side_effect = GrantPlatformRateLimitException("/leaderboard", 6)
        app.dependency_overrides[get_goodgrants_client] = lambda: platform

        response = client.post("/api/v1/leaderboard/jury/sync")
        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.json()["detail"]["error_code"] == "PLATFORM_RATE_LIMITED"
