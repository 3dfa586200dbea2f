"""
Abstract interfaces for the vector index and access policy.
"""

from abc import ABC, abstractmethod
from typing import Any

from heirloom.core.entities import FilterExpression, ScoredMatch, VectorRecord


class IVectorIndex(ABC):
    """
    Abstract interface for a metadata-filtered nearest-neighbor index.

    Implementations: PineconeVectorIndex, InMemoryVectorIndex
    """

    @abstractmethod
    async def query(
        self,
        vector: list[float],
        filter: FilterExpression,
        top_k: int,
    ) -> list[ScoredMatch]:
        """
        Query nearest neighbors.

        Args:
            vector: Query embedding
            filter: Conjunction of predicates, translated to the index's syntax
            top_k: Maximum number of matches

        Returns:
            Matches in provider order (descending score)
        """
        pass

    @abstractmethod
    async def upsert(self, records: list[VectorRecord]) -> int:
        """Insert or replace records. Returns the number written."""
        pass

    @abstractmethod
    async def fetch(self, ids: list[str]) -> list[VectorRecord]:
        """Return the stored records among `ids`; unknown ids are skipped."""
        pass

    @abstractmethod
    async def delete(
        self,
        ids: list[str] | None = None,
        document_id: str | None = None,
    ) -> None:
        """Delete records by id or by owning content item."""
        pass

    @abstractmethod
    async def describe_index_stats(self) -> dict[str, Any]:
        """Return index statistics (vector count, dimension)."""
        pass


class IAccessPolicy(ABC):
    """
    Supplies the visibility predicate for a requesting user.

    The returned fragment is ANDed with the request's own filters
    and is never exposed to the caller.
    """

    @abstractmethod
    def visibility_filter(self, user_id: str) -> dict[str, Any]:
        """Return the predicate fragment for items `user_id` may see."""
        pass
