"""
In-memory vector index.

Cosine similarity over numpy arrays. Intended for local development
and tests; contents are lost on restart.
"""

import asyncio
from typing import Any

import numpy as np

from heirloom.config import get_logger
from heirloom.core.entities import FilterExpression, ScoredMatch, VectorRecord
from heirloom.core.exceptions import EmbeddingDimensionMismatchError
from heirloom.core.interfaces import IVectorIndex
from heirloom.infrastructure.vector.filters import matches_filter, translate_filter

logger = get_logger(__name__)


class InMemoryVectorIndex(IVectorIndex):
    """Dictionary-backed index evaluating the shared predicate language."""

    def __init__(self, dimension: int, timestamp_field: str = "timestamp"):
        self.dimension = dimension
        self.timestamp_field = timestamp_field
        self._vectors: dict[str, np.ndarray] = {}
        self._metadata: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    def _as_array(self, values: list[float]) -> np.ndarray:
        array = np.asarray(values, dtype=np.float32)
        if array.shape != (self.dimension,):
            raise EmbeddingDimensionMismatchError("memory", self.dimension, int(array.size))
        return array

    async def query(
        self,
        vector: list[float],
        filter: FilterExpression,
        top_k: int,
    ) -> list[ScoredMatch]:
        query = self._as_array(vector)
        predicate = translate_filter(filter, self.timestamp_field)

        async with self._lock:
            candidates = [
                (record_id, self._vectors[record_id], metadata)
                for record_id, metadata in self._metadata.items()
                if matches_filter(metadata, predicate)
            ]

        if not candidates or top_k <= 0:
            return []

        matrix = np.stack([v for _, v, _ in candidates])
        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        scores = np.divide(
            matrix @ query,
            norms,
            out=np.zeros(len(candidates), dtype=np.float32),
            where=norms > 0,
        )

        # Stable sort keeps insertion order among equal scores
        order = np.argsort(-scores, kind="stable")

        matches = []
        for i in order:
            record_id, _, metadata = candidates[i]
            document_id = metadata.get("documentId")
            if not document_id:
                continue
            matches.append(
                ScoredMatch(
                    document_id=str(document_id),
                    score=float(scores[i]),
                    metadata=dict(metadata),
                    record_id=record_id,
                )
            )
            if len(matches) >= top_k:
                break

        return matches

    async def upsert(self, records: list[VectorRecord]) -> int:
        arrays = [(record, self._as_array(record.values)) for record in records]
        async with self._lock:
            for record, array in arrays:
                self._vectors[record.id] = array
                self._metadata[record.id] = dict(record.metadata)
        logger.debug("memory_index_upsert", records=len(arrays))
        return len(arrays)

    async def fetch(self, ids: list[str]) -> list[VectorRecord]:
        async with self._lock:
            return [
                VectorRecord(
                    id=record_id,
                    values=self._vectors[record_id].tolist(),
                    metadata=dict(self._metadata[record_id]),
                )
                for record_id in ids
                if record_id in self._metadata
            ]

    async def delete(
        self,
        ids: list[str] | None = None,
        document_id: str | None = None,
    ) -> None:
        async with self._lock:
            targets = set(ids or ())
            if document_id is not None:
                targets.update(
                    record_id
                    for record_id, metadata in self._metadata.items()
                    if metadata.get("documentId") == document_id
                )
            for record_id in targets:
                self._vectors.pop(record_id, None)
                self._metadata.pop(record_id, None)

    async def describe_index_stats(self) -> dict[str, Any]:
        async with self._lock:
            count = len(self._vectors)
        return {"dimension": self.dimension, "totalVectorCount": count}
