"""Tests for health endpoints."""

from unittest.mock import AsyncMock, Mock, patch

from fakes import MockEmbeddingProvider, MockLLMProvider, MockVectorIndex

from heirloom.core.exceptions import LLMUnavailableError


def test_root_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "version" in response.json()


def test_api_health_check(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "uptime_seconds" in data["components"]


def test_llm_health(client):
    with patch("heirloom.api.routes.health.get_llm", return_value=MockLLMProvider()):
        response = client.get("/api/health/llm")

    assert response.json()["status"] == "healthy"
    assert response.json()["components"]["llm"]["available"] is True


def test_llm_health_degraded(client):
    llm = MockLLMProvider(error=LLMUnavailableError("mock"))
    with patch("heirloom.api.routes.health.get_llm", return_value=llm):
        response = client.get("/api/health/llm")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"


def test_search_health(client):
    with (
        patch("heirloom.api.routes.health.get_embedder", return_value=MockEmbeddingProvider()),
        patch("heirloom.api.routes.health.get_index", return_value=MockVectorIndex()),
    ):
        response = client.get("/api/health/search")

    data = response.json()
    assert data["status"] == "healthy"
    assert data["components"]["vector_index"]["stats"]["totalVectorCount"] == 0


def test_search_health_index_down(client):
    index = Mock()
    index.describe_index_stats = AsyncMock(side_effect=ConnectionError("refused"))
    with (
        patch("heirloom.api.routes.health.get_embedder", return_value=MockEmbeddingProvider()),
        patch("heirloom.api.routes.health.get_index", return_value=index),
    ):
        response = client.get("/api/health/search")

    data = response.json()
    assert data["status"] == "degraded"
    assert data["components"]["vector_index"]["available"] is False
