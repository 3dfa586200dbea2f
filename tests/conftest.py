"""Pytest configuration and fixtures."""

from collections.abc import Generator

import pytest
from fakes import MockEmbeddingProvider, MockLLMProvider, MockVectorIndex, match, vec
from fastapi.testclient import TestClient

from heirloom.application.services import reset_services
from heirloom.config import reset_settings
from heirloom.core.entities import SearchRequest


@pytest.fixture(autouse=True)
def reset_singletons():
    """Isolate tests from cached settings and services."""
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


@pytest.fixture
def wedding_request() -> SearchRequest:
    """The canonical two-variant search request."""
    return SearchRequest(query="wedding in chicago", requesting_user_id="u1")


@pytest.fixture
def wedding_llm() -> MockLLMProvider:
    return MockLLMProvider(response="chicago family wedding 1955\nwedding ceremony photos\n")


@pytest.fixture
def wedding_embedder() -> MockEmbeddingProvider:
    return MockEmbeddingProvider(
        vectors={
            "wedding in chicago": vec(1.0),
            "chicago family wedding 1955": vec(0.0, 1.0),
            "wedding ceremony photos": vec(0.0, 0.0, 1.0),
        }
    )


@pytest.fixture
def wedding_index() -> MockVectorIndex:
    return MockVectorIndex(
        results={
            tuple(vec(1.0)): [match("a", 0.9), match("b", 0.7)],
            tuple(vec(0.0, 1.0)): [match("a", 0.95), match("c", 0.6)],
            tuple(vec(0.0, 0.0, 1.0)): [],
        }
    )


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Sync test client; dependency overrides are cleared afterwards."""
    from heirloom.api.main import app

    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-User-Id": "u1"}
