"""
Content indexing service.

Vectorizes archive items and writes them to the vector index.
"""

from typing import Any

from heirloom.config import get_logger
from heirloom.core.entities import ArchiveItem, BestEffortResult, VectorRecord
from heirloom.core.exceptions import ForbiddenError, ProviderConfigurationError
from heirloom.core.interfaces import IVectorIndex
from heirloom.core.services.embedding_client import EmbeddingClient

logger = get_logger(__name__)

PREVIEW_LENGTH = 200


def split_text(text: str, chunk_size: int = 1000, overlap: int = 200) -> list[str]:
    """
    Split text into overlapping character windows.

    Whitespace-only windows are dropped.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if overlap < 0 or overlap >= chunk_size:
        raise ValueError("overlap must be in [0, chunk_size)")

    text = text.strip()
    if not text:
        return []

    step = chunk_size - overlap
    chunks = []
    for start in range(0, len(text), step):
        chunk = text[start : start + chunk_size]
        if chunk.strip():
            chunks.append(chunk)
        if start + chunk_size >= len(text):
            break
    return chunks


class ContentIndexingService:
    """
    Best-effort indexing of archive content.

    Called as a side effect of uploads: provider failures are reported
    as Degraded results and never fail the parent request.
    """

    def __init__(
        self,
        embedder: EmbeddingClient,
        index: IVectorIndex,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        owner_field: str = "userId",
        private_field: str = "isPrivate",
        timestamp_field: str = "timestamp",
    ):
        self._embedder = embedder
        self._index = index
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap
        self._owner_field = owner_field
        self._private_field = private_field
        self._timestamp_field = timestamp_field

    def build_metadata(self, item: ArchiveItem, chunk: str) -> dict[str, Any]:
        """Vector metadata for one chunk of an item."""
        preview = item.preview if item.preview is not None else item.text[:PREVIEW_LENGTH]
        return {
            "documentId": item.document_id,
            "title": item.title,
            "contentType": item.content_type.value,
            "tags": list(item.tags),
            "uploadedBy": item.uploaded_by,
            "uploadedAt": item.uploaded_at.isoformat(),
            "preview": preview,
            "text": chunk,
            self._owner_field: item.owner_id,
            self._private_field: item.is_private,
            self._timestamp_field: item.uploaded_at.timestamp(),
        }

    async def _check_owner(self, document_id: str, user_id: str) -> None:
        """
        Reject writes to an item already indexed under another owner.

        Raises:
            ForbiddenError: The item's records carry a different owner
        """
        existing = await self._index.fetch([f"{document_id}-0"])
        owner = existing[0].metadata.get(self._owner_field) if existing else None
        if owner is not None and owner != user_id:
            logger.warning("index_owner_mismatch", document_id=document_id, user_id=user_id)
            raise ForbiddenError(document_id)

    async def index_item(self, item: ArchiveItem) -> BestEffortResult[int]:
        """
        Embed and upsert every chunk of an item.

        Records left from a previous indexing of the same item are
        removed first, so stale chunks never keep outdated visibility.

        Returns:
            Ok(number of records written) or Degraded(reason)

        Raises:
            ForbiddenError: The item is indexed under another owner
        """
        chunks = split_text(item.text, self._chunk_size, self._chunk_overlap)
        if not chunks:
            return BestEffortResult.degraded("no_indexable_text")

        try:
            await self._check_owner(item.document_id, item.owner_id)

            records = []
            for n, chunk in enumerate(chunks):
                vector = await self._embedder.embed(chunk, position=n)
                records.append(
                    VectorRecord(
                        id=f"{item.document_id}-{n}",
                        values=vector,
                        metadata=self.build_metadata(item, chunk),
                    )
                )

            await self._index.delete(document_id=item.document_id)
            written = await self._index.upsert(records)

        except ForbiddenError:
            raise

        except ProviderConfigurationError as e:
            logger.error(
                "indexing_failed",
                document_id=item.document_id,
                error_code=e.code,
                error=str(e),
            )
            return BestEffortResult.degraded(f"indexing_failed: {e.code}")

        except Exception as e:
            logger.warning(
                "indexing_failed",
                document_id=item.document_id,
                error_code=getattr(e, "code", type(e).__name__),
                error=str(e),
            )
            return BestEffortResult.degraded(f"indexing_failed: {type(e).__name__}")

        logger.info("item_indexed", document_id=item.document_id, chunks=written)
        return BestEffortResult.ok(written)

    async def remove_item(self, document_id: str, user_id: str) -> BestEffortResult[str]:
        """
        Delete every record of a content item owned by `user_id`.

        Raises:
            ForbiddenError: The item is indexed under another owner
        """
        try:
            await self._check_owner(document_id, user_id)
            await self._index.delete(document_id=document_id)
        except ForbiddenError:
            raise
        except Exception as e:
            logger.warning("index_delete_failed", document_id=document_id, error=str(e))
            return BestEffortResult.degraded(f"delete_failed: {type(e).__name__}")

        logger.info("item_removed", document_id=document_id)
        return BestEffortResult.ok(document_id)

    async def stats(self) -> dict[str, Any]:
        """Index statistics from the vector index."""
        return await self._index.describe_index_stats()
