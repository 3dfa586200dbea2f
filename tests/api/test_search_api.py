"""API tests for the search endpoint."""

from unittest.mock import AsyncMock, Mock

import pytest
from fakes import MockEmbeddingProvider, MockLLMProvider, build_orchestrator

from heirloom.api.dependencies import get_search_archive_use_case
from heirloom.api.main import app
from heirloom.application.use_cases import SearchArchiveUseCase
from heirloom.core.exceptions import LLMUnavailableError


@pytest.fixture
def search_client(client, wedding_llm, wedding_embedder, wedding_index):
    orchestrator = build_orchestrator(wedding_llm, wedding_embedder, wedding_index)
    app.dependency_overrides[get_search_archive_use_case] = lambda: SearchArchiveUseCase(orchestrator)
    return client


class TestSearchAPI:
    """Tests for POST /api/search."""

    def test_requires_user(self, search_client):
        response = search_client.post("/api/search", json={"query": "wedding in chicago"})

        assert response.status_code == 401
        assert response.json()["error_code"] == "AUTH_REQUIRED"

    def test_returns_merged_results(self, search_client, auth_headers):
        response = search_client.post(
            "/api/search", json={"query": "wedding in chicago"}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert [r["id"] for r in data["results"]] == ["a", "b", "c"]
        assert data["results"][0]["score"] == pytest.approx(0.9)
        assert data["results"][0]["title"] == "Item a"
        assert "uploadedBy" in data["results"][0]
        assert data["metadata"]["totalResults"] == 3
        assert data["metadata"]["expandedQueries"] == [
            "chicago family wedding 1955",
            "wedding ceremony photos",
        ]
        assert data["metadata"]["degraded"] == []

    def test_filters_echoed(self, search_client, auth_headers, wedding_index):
        response = search_client.post(
            "/api/search",
            json={
                "query": "wedding in chicago",
                "contentType": "image",
                "tags": ["wedding", "chicago"],
                "timeRange": {"start": "1950-01-01T00:00:00Z", "end": "1960-01-01T00:00:00Z"},
            },
            headers=auth_headers,
        )

        assert response.status_code == 200
        applied = response.json()["metadata"]["appliedFilters"]
        assert applied["contentType"] == "image"
        assert applied["tags"] == ["chicago", "wedding"]
        assert applied["timeRange"]["start"].startswith("1950-01-01")

        _, expression, _ = wedding_index.queries[0]
        assert expression.content_types == frozenset({"image"})
        assert expression.visibility["$or"][1] == {"userId": {"$eq": "u1"}}

    def test_empty_query_rejected(self, search_client, auth_headers, wedding_embedder):
        response = search_client.post("/api/search", json={"query": "   "}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_REQUEST"
        assert wedding_embedder.calls == []

    def test_inverted_time_range_rejected(self, search_client, auth_headers):
        response = search_client.post(
            "/api/search",
            json={
                "query": "wedding",
                "timeRange": {"start": "1960-01-01T00:00:00Z", "end": "1950-01-01T00:00:00Z"},
            },
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "time_range"

    def test_schema_violation_is_bad_request(self, search_client, auth_headers):
        response = search_client.post("/api/search", json={"query": "x" * 1001}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_REQUEST"

    def test_degraded_without_expansion(self, client, auth_headers, wedding_embedder, wedding_index):
        orchestrator = build_orchestrator(
            MockLLMProvider(error=LLMUnavailableError("mock")), wedding_embedder, wedding_index
        )
        app.dependency_overrides[get_search_archive_use_case] = lambda: SearchArchiveUseCase(orchestrator)

        response = client.post("/api/search", json={"query": "wedding in chicago"}, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert [r["id"] for r in data["results"]] == ["a", "b"]
        assert data["metadata"]["expandedQueries"] == []
        assert data["metadata"]["degraded"]

    def test_failure_does_not_leak_provider_error(self, client, auth_headers, wedding_llm, wedding_index):
        embedder = MockEmbeddingProvider(
            failures={"wedding in chicago": RuntimeError("upstream key sk-live-123 rejected")}
        )
        orchestrator = build_orchestrator(wedding_llm, embedder, wedding_index)
        app.dependency_overrides[get_search_archive_use_case] = lambda: SearchArchiveUseCase(orchestrator)

        response = client.post("/api/search", json={"query": "wedding in chicago"}, headers=auth_headers)

        assert response.status_code == 500
        data = response.json()
        assert data["error_code"] == "SEARCH_ERROR"
        assert data["detail"] is None
        assert "sk-live-123" not in response.text

    def test_unexpected_error(self, client, auth_headers):
        use_case = Mock()
        use_case.execute = AsyncMock(side_effect=RuntimeError("boom at /var/secret"))
        app.dependency_overrides[get_search_archive_use_case] = lambda: use_case

        response = client.post("/api/search", json={"query": "wedding"}, headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["error_code"] == "INTERNAL_ERROR"
        assert "/var/secret" not in response.text

    def test_request_id_header(self, search_client, auth_headers):
        response = search_client.post(
            "/api/search", json={"query": "wedding in chicago"}, headers=auth_headers
        )

        assert response.headers.get("X-Request-ID")
        assert response.headers.get("X-Response-Time", "").endswith("ms")
