"""Tests for dogmatch/api/routes.py."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from dogmatch.api.app import create_app
from dogmatch.api.routes import _matches_filters, router
from dogmatch.config import Config
from dogmatch.data.schemas import DogRecord
from dogmatch.matching.ranker import DogRanker


@pytest.fixture
def mock_app(example_dogs: list[DogRecord]) -> FastAPI:
    """Create a FastAPI app with in-memory state for testing."""
    app = FastAPI()
    app.include_router(router)

    config = Config(denominator_mode="active")
    app.state.config = config
    app.state.ranker = DogRanker(rules=config.matching_config())
    app.state.dogs = example_dogs

    return app


@pytest.fixture
def client(mock_app: FastAPI) -> TestClient:
    """Create a test client."""
    return TestClient(mock_app)


@pytest.fixture
def example_body() -> dict:
    """Match request for the size / energy / potty example."""
    return {
        "answers": {
            "size_preference": ["small"],
            "energy_preference": "any",
            "potty_requirement": "must",
        }
    }


class TestHealthRoute:
    """Tests for health check endpoint."""

    def test_health_check_healthy(self, client: TestClient) -> None:
        """Should report healthy with a loaded catalog."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "dogs_loaded": 3}

    def test_health_check_degraded(self, mock_app: FastAPI) -> None:
        """Should report degraded with no dogs loaded."""
        mock_app.state.dogs = []
        data = TestClient(mock_app).get("/health").json()
        assert data["status"] == "degraded"


class TestDogRoutes:
    """Tests for catalog browsing endpoints."""

    def test_list_dogs(self, client: TestClient) -> None:
        """Should list every dog with attribute reasons."""
        data = client.get("/api/dogs").json()
        assert len(data) == 3
        alpha = next(item for item in data if item["dog"]["id"] == "d-1")
        assert alpha["reasons"] == ["Size: small", "Energy: high", "Potty trained"]
        assert alpha["age_label"] == "Unknown"

    def test_list_dogs_filtered(self, client: TestClient) -> None:
        """Size filter keeps only matching dogs."""
        data = client.get("/api/dogs", params={"size": "Large"}).json()
        assert [item["dog"]["id"] for item in data] == ["d-2"]

    def test_get_dog(self, client: TestClient) -> None:
        """Should return one dog by id."""
        response = client.get("/api/dogs/d-3")
        assert response.status_code == 200
        assert response.json()["reasons"] == ["General fit"]

    def test_get_dog_not_found(self, client: TestClient) -> None:
        """Unknown ids give 404."""
        assert client.get("/api/dogs/missing").status_code == 404


class TestMatchRoute:
    """Tests for the quiz match endpoint."""

    def test_match_order(self, client: TestClient, example_body: dict) -> None:
        """Results come back best match first."""
        data = client.post("/api/match", json=example_body).json()
        assert [r["dog"]["id"] for r in data["results"]] == ["d-1", "d-2", "d-3"]
        assert [r["score_pct"] for r in data["results"]] == [100.0, 25.0, 25.0]
        assert data["total_candidates"] == 3
        assert data["denominator_mode"] == "active"

    def test_match_labels_and_reasons(self, client: TestClient, example_body: dict) -> None:
        """Each result carries a tier label and reasons."""
        top = client.post("/api/match", json=example_body).json()["results"][0]
        assert top["label"] == "Great match"
        assert top["reasons"] == [
            "Fits your preferred size",
            "Potty training fits your needs",
            "Energy level fits your lifestyle",
        ]
        assert top["breakdown"] == {"energy": 10, "size": 15, "potty": 15}

    def test_detailed_reasons(self, client: TestClient, example_body: dict) -> None:
        """detailed_reasons quotes the matched size and energy level."""
        body = {**example_body, "detailed_reasons": True}
        top = client.post("/api/match", json=body).json()["results"][0]
        assert top["reasons"] == [
            "Fits your preferred size (small)",
            "Potty training fits your needs",
            "Energy level fits your lifestyle (high)",
        ]

    def test_min_score_filter(self, client: TestClient, example_body: dict) -> None:
        """Dogs below the minimum score are filtered after ranking."""
        data = client.post("/api/match", json={**example_body, "min_score_pct": 50}).json()
        assert [r["dog"]["id"] for r in data["results"]] == ["d-1"]
        assert data["total_candidates"] == 3
        assert data["total_matches"] == 1

    def test_top_k(self, client: TestClient, example_body: dict) -> None:
        """top_k truncates the filtered list."""
        data = client.post("/api/match", json={**example_body, "top_k": 2}).json()
        assert len(data["results"]) == 2

    def test_reason_limit(self, client: TestClient, example_body: dict) -> None:
        """reason_limit caps reasons per dog."""
        data = client.post("/api/match", json={**example_body, "reason_limit": 1}).json()
        assert all(len(r["reasons"]) == 1 for r in data["results"])

    def test_messy_answers_accepted(self, client: TestClient) -> None:
        """Comma strings and odd casing are normalized, not rejected."""
        body = {"answers": {"size_preference": "Small, LARGE", "play_styles": ""}}
        response = client.post("/api/match", json=body)
        assert response.status_code == 200
        assert response.json()["results"][0]["score_pct"] == 100.0

    def test_empty_answers(self, client: TestClient) -> None:
        """No answers ranks every dog at zero."""
        data = client.post("/api/match", json={}).json()
        assert all(r["raw_score"] == 0 for r in data["results"])

    def test_invalid_filter_value(self, client: TestClient) -> None:
        """Out-of-range request fields are rejected by validation."""
        assert client.post("/api/match", json={"min_score_pct": 150}).status_code == 422


class TestMatchesFilters:
    """Tests for post-ranking attribute filters."""

    def test_all_disables_filter(self) -> None:
        """'all' and None match every dog."""
        dog = DogRecord(size="small")
        assert _matches_filters(dog, size="all", energy_level=None, bucket="all")

    def test_age_bucket_filter(self) -> None:
        """Age filters compare derived buckets."""
        assert _matches_filters(DogRecord(age_years=8), bucket="senior")
        assert not _matches_filters(DogRecord(age_years=1), bucket="senior")


class TestAppFactory:
    """Tests for the application factory and lifespan."""

    def test_lifespan_loads_catalog(
        self, monkeypatch: pytest.MonkeyPatch, tmp_data_dir: Path
    ) -> None:
        """Startup loads the configured catalog."""
        path = tmp_data_dir / "dogs.csv"
        path.write_text("id,name,size\nd-1,Rex,small\n")
        monkeypatch.setenv("CATALOG_PATH", str(path))
        with TestClient(create_app()) as client:
            assert client.get("/health").json()["dogs_loaded"] == 1

    def test_lifespan_missing_catalog(
        self, monkeypatch: pytest.MonkeyPatch, tmp_data_dir: Path
    ) -> None:
        """A missing catalog starts the service degraded."""
        monkeypatch.setenv("CATALOG_PATH", str(tmp_data_dir / "missing.csv"))
        with TestClient(create_app()) as client:
            assert client.get("/health").json()["status"] == "degraded"
