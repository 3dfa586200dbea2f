"""
Unit tests for ContentIndexingService.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fakes import DIMENSION, MockEmbeddingProvider, MockLLMProvider, MockVectorIndex, build_orchestrator

from heirloom.core.entities import ArchiveItem, ContentType, SearchRequest
from heirloom.core.exceptions import EmbeddingError, ForbiddenError
from heirloom.core.services import ContentIndexingService, EmbeddingClient, split_text
from heirloom.infrastructure.vector import InMemoryVectorIndex

UPLOADED = datetime(2023, 5, 1, 12, 0, tzinfo=timezone.utc)


def item(text: str = "Letter from Rose to Tom, summer 1955.", **overrides) -> ArchiveItem:
    fields = dict(
        document_id="doc-1",
        owner_id="u1",
        title="Letter",
        content_type=ContentType.DOCUMENT,
        text=text,
        tags=["letters", "1955"],
        uploaded_by="Rose",
        uploaded_at=UPLOADED,
    )
    fields.update(overrides)
    return ArchiveItem(**fields)


def service(embedder=None, index=None, **kwargs) -> ContentIndexingService:
    return ContentIndexingService(
        EmbeddingClient(embedder or MockEmbeddingProvider(), DIMENSION),
        index if index is not None else MockVectorIndex(),
        **kwargs,
    )


class TestSplitText:
    """Tests for chunking."""

    def test_short_text_single_chunk(self):
        assert split_text("hello", chunk_size=10, overlap=2) == ["hello"]

    def test_overlapping_windows(self):
        chunks = split_text("abcdefghij", chunk_size=4, overlap=2)
        assert chunks == ["abcd", "cdef", "efgh", "ghij"]

    def test_blank_text(self):
        assert split_text("   \n ") == []

    def test_invalid_overlap(self):
        with pytest.raises(ValueError):
            split_text("abc", chunk_size=4, overlap=4)


class TestContentIndexingService:
    """Tests for best-effort indexing."""

    @pytest.mark.asyncio
    async def test_index_item(self):
        index = MockVectorIndex()
        result = await service(index=index).index_item(item())

        assert result.is_ok
        assert result.value == 1
        record = index.upserted[0]
        assert record.id == "doc-1-0"
        assert record.metadata["documentId"] == "doc-1"
        assert record.metadata["contentType"] == "document"
        assert record.metadata["tags"] == ["letters", "1955"]
        assert record.metadata["userId"] == "u1"
        assert record.metadata["isPrivate"] is False
        assert record.metadata["timestamp"] == UPLOADED.timestamp()
        assert record.metadata["uploadedAt"] == UPLOADED.isoformat()
        assert record.metadata["text"] == "Letter from Rose to Tom, summer 1955."

    @pytest.mark.asyncio
    async def test_chunk_record_ids(self):
        index = MockVectorIndex()
        result = await service(index=index, chunk_size=10, chunk_overlap=0).index_item(item(text="x" * 25))

        assert result.value == 3
        assert [r.id for r in index.upserted] == ["doc-1-0", "doc-1-1", "doc-1-2"]

    @pytest.mark.asyncio
    async def test_custom_metadata_fields(self):
        index = MockVectorIndex()
        await service(index=index, owner_field="ownerId", private_field="private").index_item(
            item(is_private=True)
        )

        metadata = index.upserted[0].metadata
        assert metadata["ownerId"] == "u1"
        assert metadata["private"] is True

    @pytest.mark.asyncio
    async def test_embedding_failure_degrades(self):
        embedder = MockEmbeddingProvider(
            failures={"Letter from Rose to Tom, summer 1955.": EmbeddingError("HTTP 503")}
        )
        index = MockVectorIndex()

        result = await service(embedder=embedder, index=index).index_item(item())

        assert not result.is_ok
        assert result.reason == "indexing_failed: EmbeddingError"
        assert index.upserted == []

    @pytest.mark.asyncio
    async def test_dimension_mismatch_degrades(self):
        embedder = MockEmbeddingProvider(vectors={"Letter from Rose to Tom, summer 1955.": [1.0]})

        result = await service(embedder=embedder).index_item(item())

        assert result.reason == "indexing_failed: PROVIDER_CONFIGURATION_ERROR"

    @pytest.mark.asyncio
    async def test_no_text(self):
        result = await service().index_item(item(text="  "))
        assert result.reason == "no_indexable_text"

    @pytest.mark.asyncio
    async def test_remove_item(self):
        index = MockVectorIndex()
        result = await service(index=index).remove_item("doc-1", "u1")

        assert result.is_ok
        assert index.deleted == [{"ids": None, "document_id": "doc-1"}]

    @pytest.mark.asyncio
    async def test_stats(self):
        assert (await service().stats())["dimension"] == DIMENSION


class TestReindexing:
    """Tests for re-indexing an existing item."""

    @pytest.mark.asyncio
    async def test_reindex_replaces_previous_chunks(self):
        index = InMemoryVectorIndex(dimension=DIMENSION)
        indexer = service(index=index, chunk_size=10, chunk_overlap=0)

        await indexer.index_item(item(text="x" * 50))
        assert (await index.describe_index_stats())["totalVectorCount"] == 5

        result = await indexer.index_item(item(text="secret", is_private=True))

        assert result.value == 1
        assert (await index.describe_index_stats())["totalVectorCount"] == 1

    @pytest.mark.asyncio
    async def test_private_reindex_hidden_from_other_users(self):
        index = InMemoryVectorIndex(dimension=DIMENSION)
        indexer = service(index=index, chunk_size=10, chunk_overlap=0)
        orchestrator = build_orchestrator(MockLLMProvider(response=""), MockEmbeddingProvider(), index)

        await indexer.index_item(item(text="x" * 50))
        before = await orchestrator.search(SearchRequest(query="letters", requesting_user_id="u2"))
        assert [r.id for r in before.results] == ["doc-1"]

        await indexer.index_item(item(text="secret", is_private=True))

        other = await orchestrator.search(SearchRequest(query="letters", requesting_user_id="u2"))
        owner = await orchestrator.search(SearchRequest(query="letters", requesting_user_id="u1"))
        assert other.results == []
        assert [r.id for r in owner.results] == ["doc-1"]


class TestOwnership:
    """Tests for owner checks on existing items."""

    @pytest.mark.asyncio
    async def test_owner_can_reindex(self):
        index = MockVectorIndex()
        indexer = service(index=index)
        await indexer.index_item(item())

        result = await indexer.index_item(item(text="Updated letter"))

        assert result.is_ok
        assert index.records["doc-1-0"].metadata["text"] == "Updated letter"

    @pytest.mark.asyncio
    async def test_other_user_cannot_overwrite(self):
        index = MockVectorIndex()
        indexer = service(index=index)
        await indexer.index_item(item(is_private=True))

        with pytest.raises(ForbiddenError):
            await indexer.index_item(item(owner_id="u2", text="Hijacked"))

        record = index.records["doc-1-0"]
        assert record.metadata["userId"] == "u1"
        assert record.metadata["text"] == "Letter from Rose to Tom, summer 1955."

    @pytest.mark.asyncio
    async def test_other_user_cannot_remove(self):
        index = MockVectorIndex()
        indexer = service(index=index)
        await indexer.index_item(item())

        with pytest.raises(ForbiddenError):
            await indexer.remove_item("doc-1", "u2")

        assert "doc-1-0" in index.records

    @pytest.mark.asyncio
    async def test_owner_lookup_failure_degrades(self):
        index = MockVectorIndex()
        index.fetch = AsyncMock(side_effect=ConnectionError("refused"))

        result = await service(index=index).index_item(item())

        assert result.reason == "indexing_failed: ConnectionError"
        assert index.upserted == []
