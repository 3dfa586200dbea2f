"""
Unit tests for EmbeddingClient.
"""

from unittest.mock import patch

import pytest
from fakes import MockEmbeddingProvider

from heirloom.core.exceptions import (
    EmbeddingDimensionMismatchError,
    EmbeddingError,
    ProviderConfigurationError,
)
from heirloom.core.services import EmbeddingClient


class TestEmbeddingClient:
    """Tests for embedding with the dimension contract."""

    @pytest.mark.asyncio
    async def test_returns_vector(self):
        client = EmbeddingClient(MockEmbeddingProvider(vectors={"hi": [0.1, 0.2, 0.3, 0.4]}), 4)
        assert await client.embed("hi") == [0.1, 0.2, 0.3, 0.4]

    @pytest.mark.asyncio
    async def test_wraps_provider_error_with_position(self):
        provider = MockEmbeddingProvider(failures={"hi": ConnectionError("refused")})
        client = EmbeddingClient(provider, 4)

        with pytest.raises(EmbeddingError) as exc_info:
            await client.embed("hi", position=3)

        assert exc_info.value.position == 3
        assert "refused" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_keeps_reason_kind(self):
        provider = MockEmbeddingProvider(
            failures={"hi": EmbeddingError("HTTP 429", reason_kind="rate_limited")}
        )
        client = EmbeddingClient(provider, 4)

        with pytest.raises(EmbeddingError) as exc_info:
            await client.embed("hi", position=1)

        assert exc_info.value.reason_kind == "rate_limited"
        assert exc_info.value.position == 1

    @pytest.mark.asyncio
    async def test_dimension_mismatch_is_configuration_error(self):
        client = EmbeddingClient(MockEmbeddingProvider(vectors={"hi": [0.1, 0.2]}), 4)

        with patch("heirloom.core.services.embedding_client.logger") as mock_logger:
            with pytest.raises(EmbeddingDimensionMismatchError) as exc_info:
                await client.embed("hi")

        assert exc_info.value.details["expected"] == 4
        assert exc_info.value.details["actual"] == 2
        event, fields = mock_logger.error.call_args.args[0], mock_logger.error.call_args.kwargs
        assert event == "provider_configuration_error"
        assert fields["error_code"] == "PROVIDER_CONFIGURATION_ERROR"

    @pytest.mark.asyncio
    async def test_configuration_error_passes_through(self):
        error = ProviderConfigurationError("openai", "missing key")
        client = EmbeddingClient(MockEmbeddingProvider(failures={"hi": error}), 4)

        with pytest.raises(ProviderConfigurationError) as exc_info:
            await client.embed("hi")

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_no_retry(self):
        provider = MockEmbeddingProvider(failures={"hi": TimeoutError()})
        client = EmbeddingClient(provider, 4)

        with pytest.raises(EmbeddingError):
            await client.embed("hi")

        assert provider.calls == ["hi"]
