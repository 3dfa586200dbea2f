"""
Pinecone vector index adapter.

Talks to the index data-plane REST API over httpx.
"""

import time
from typing import Any

import httpx

from heirloom.config import get_logger
from heirloom.config.settings import VectorIndexSettings
from heirloom.core.entities import FilterExpression, ScoredMatch, VectorRecord
from heirloom.core.exceptions import ProviderConfigurationError, SearchError
from heirloom.core.interfaces import IVectorIndex
from heirloom.infrastructure.vector.filters import translate_filter

logger = get_logger(__name__)

UPSERT_BATCH_SIZE = 100


class PineconeVectorIndex(IVectorIndex):
    """
    Pinecone serverless/pod index.

    `host` is the index host URL from the Pinecone console
    (e.g. https://family-archive-abc123.svc.pinecone.io).
    """

    def __init__(
        self,
        settings: VectorIndexSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not settings.host:
            raise ProviderConfigurationError("pinecone", "VECTOR_HOST is not set")
        if not settings.api_key:
            raise ProviderConfigurationError("pinecone", "VECTOR_API_KEY is not set")

        self.settings = settings
        self.host = settings.host.rstrip("/")
        self.namespace = settings.namespace
        self.timeout = settings.timeout
        self._transport = transport

    async def _request(
        self,
        method: str,
        endpoint: str,
        payload: dict[str, Any] | None = None,
        params: list[tuple[str, str]] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.host}/{endpoint}"
        headers = {"Api-Key": self.settings.api_key or "", "Content-Type": "application/json"}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.request(method, url, json=payload, params=params, headers=headers)

        if response.status_code in (401, 403):
            raise ProviderConfigurationError(
                "pinecone", f"HTTP {response.status_code}: credentials rejected"
            )

        if response.status_code >= 400:
            raise SearchError(
                f"Pinecone {endpoint} failed: HTTP {response.status_code}",
                code="VECTOR_INDEX_ERROR",
                details={"status": response.status_code, "body": response.text[:200]},
            )

        return response.json() if response.content else {}

    async def query(
        self,
        vector: list[float],
        filter: FilterExpression,
        top_k: int,
    ) -> list[ScoredMatch]:
        payload: dict[str, Any] = {
            "vector": vector,
            "topK": top_k,
            "includeMetadata": True,
            "includeValues": False,
        }
        predicate = translate_filter(filter, self.settings.timestamp_field)
        if predicate:
            payload["filter"] = predicate
        if self.namespace:
            payload["namespace"] = self.namespace

        start_time = time.time()
        body = await self._request("POST", "query", payload)

        matches = []
        skipped = 0
        for match in body.get("matches", []):
            metadata = match.get("metadata") or {}
            document_id = metadata.get("documentId")
            if not document_id:
                skipped += 1
                continue
            matches.append(
                ScoredMatch(
                    document_id=str(document_id),
                    score=float(match.get("score", 0.0)),
                    metadata=metadata,
                    record_id=match.get("id"),
                )
            )

        logger.debug(
            "pinecone_query",
            top_k=top_k,
            matches=len(matches),
            skipped=skipped,
            elapsed_ms=int((time.time() - start_time) * 1000),
        )
        return matches

    async def upsert(self, records: list[VectorRecord]) -> int:
        written = 0
        for i in range(0, len(records), UPSERT_BATCH_SIZE):
            batch = records[i : i + UPSERT_BATCH_SIZE]
            payload: dict[str, Any] = {
                "vectors": [
                    {"id": r.id, "values": r.values, "metadata": r.metadata} for r in batch
                ]
            }
            if self.namespace:
                payload["namespace"] = self.namespace
            body = await self._request("POST", "vectors/upsert", payload)
            written += int(body.get("upsertedCount", len(batch)))

        logger.info("pinecone_upsert", records=written)
        return written

    async def fetch(self, ids: list[str]) -> list[VectorRecord]:
        if not ids:
            return []

        params = [("ids", record_id) for record_id in ids]
        if self.namespace:
            params.append(("namespace", self.namespace))

        body = await self._request("GET", "vectors/fetch", params=params)
        vectors = body.get("vectors") or {}

        return [
            VectorRecord(
                id=record_id,
                values=vectors[record_id].get("values") or [],
                metadata=vectors[record_id].get("metadata") or {},
            )
            for record_id in ids
            if record_id in vectors
        ]

    async def delete(
        self,
        ids: list[str] | None = None,
        document_id: str | None = None,
    ) -> None:
        if not ids and document_id is None:
            return

        payload: dict[str, Any] = {}
        if ids:
            payload["ids"] = list(ids)
        else:
            payload["filter"] = {"documentId": {"$eq": document_id}}
        if self.namespace:
            payload["namespace"] = self.namespace

        await self._request("POST", "vectors/delete", payload)
        logger.info("pinecone_delete", ids=len(ids or ()), document_id=document_id)

    async def describe_index_stats(self) -> dict[str, Any]:
        return await self._request("POST", "describe_index_stats", {})
