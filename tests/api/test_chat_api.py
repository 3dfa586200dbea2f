"""API tests for archive-grounded chat."""

import pytest
from fakes import MockLLMProvider, build_orchestrator

from heirloom.api.dependencies import get_chat_use_case
from heirloom.api.main import app
from heirloom.application.use_cases import ChatWithContextUseCase
from heirloom.core.exceptions import LLMUnavailableError
from heirloom.core.services import ArchiveChatService


@pytest.fixture
def chat_llm() -> MockLLMProvider:
    return MockLLMProvider(response="They married in Chicago in 1955.")


@pytest.fixture
def chat_client(client, chat_llm, wedding_llm, wedding_embedder, wedding_index):
    orchestrator = build_orchestrator(wedding_llm, wedding_embedder, wedding_index)
    service = ArchiveChatService(orchestrator, chat_llm)
    app.dependency_overrides[get_chat_use_case] = lambda: ChatWithContextUseCase(service)
    return client


class TestChatAPI:
    """Tests for POST /api/chat."""

    def test_requires_user(self, chat_client):
        response = chat_client.post(
            "/api/chat", json={"messages": [{"role": "user", "content": "wedding in chicago"}]}
        )
        assert response.status_code == 401

    def test_grounded_answer(self, chat_client, chat_llm, auth_headers):
        response = chat_client.post(
            "/api/chat",
            json={"messages": [{"role": "user", "content": "wedding in chicago"}]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["content"] == "They married in Chicago in 1955."
        assert [s["id"] for s in data["sources"]] == ["a", "b", "c"]
        system_prompt = chat_llm.chat_calls[0][0]["content"]
        assert "[1] Item a" in system_prompt

    def test_explicit_context_skips_retrieval(self, chat_client, chat_llm, wedding_embedder, auth_headers):
        response = chat_client.post(
            "/api/chat",
            json={
                "messages": [{"role": "user", "content": "Who is in the photo?"}],
                "context": "Photo of Rose and Albert, 1955.",
            },
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["sources"] == []
        assert wedding_embedder.calls == []
        assert "Rose and Albert" in chat_llm.chat_calls[0][0]["content"]

    def test_empty_messages_rejected(self, chat_client, auth_headers):
        response = chat_client.post("/api/chat", json={"messages": []}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_REQUEST"

    def test_llm_unavailable(self, client, auth_headers, wedding_llm, wedding_embedder, wedding_index):
        orchestrator = build_orchestrator(wedding_llm, wedding_embedder, wedding_index)
        service = ArchiveChatService(orchestrator, MockLLMProvider(error=LLMUnavailableError("openai")))
        app.dependency_overrides[get_chat_use_case] = lambda: ChatWithContextUseCase(service)

        response = client.post(
            "/api/chat",
            json={"messages": [{"role": "user", "content": "hello"}]},
            headers=auth_headers,
        )

        assert response.status_code == 503
        assert response.json()["error_code"] == "LLM_UNAVAILABLE"
