"""
Search orchestrator.

Coordinates expansion, embedding, parallel vector queries, merging
and formatting for one search request.
"""

import asyncio
import time
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from heirloom.config import PipelineConfig, get_logger
from heirloom.core.entities import (
    AppliedFilters,
    DisplayRecord,
    FilterExpression,
    MergedResult,
    PipelineStage,
    ScoredMatch,
    SearchRequest,
    SearchResponse,
)
from heirloom.core.exceptions import (
    InvalidRequestError,
    ProviderConfigurationError,
    SearchFailedError,
)
from heirloom.core.interfaces import IAccessPolicy
from heirloom.core.services.embedding_client import EmbeddingClient
from heirloom.core.services.query_expander import QueryExpander
from heirloom.core.services.result_merger import ResultMerger
from heirloom.core.services.vector_search_client import VectorSearchClient

logger = get_logger(__name__)

T = TypeVar("T")


def validate_request(request: SearchRequest) -> None:
    """
    Reject malformed requests before any provider call.

    Raises:
        InvalidRequestError: Empty query, missing user, or inverted time range
    """
    if not request.query or not request.query.strip():
        raise InvalidRequestError("query", "must not be empty", request.query)

    if not request.requesting_user_id or not request.requesting_user_id.strip():
        raise InvalidRequestError("requesting_user_id", "is required")

    if request.time_range is not None:
        try:
            inverted = request.time_range.start > request.time_range.end
        except TypeError:
            raise InvalidRequestError(
                "time_range", "start and end must both be timezone-aware or both naive"
            )
        if inverted:
            raise InvalidRequestError(
                "time_range",
                "start must not be after end",
                f"{request.time_range.start.isoformat()}..{request.time_range.end.isoformat()}",
            )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def _as_tags(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(v) for v in value]
    return []


def format_result(result: MergedResult) -> DisplayRecord:
    """Map a merged match to a display record, with fallbacks for missing metadata."""
    metadata = result.metadata

    return DisplayRecord(
        id=result.document_id,
        title=_as_text(metadata.get("title")) or "Untitled",
        type=_as_text(metadata.get("contentType")),
        preview=_as_text(metadata.get("preview")),
        tags=_as_tags(metadata.get("tags")),
        uploaded_by=_as_text(metadata.get("uploadedBy")),
        uploaded_at=_as_text(metadata.get("uploadedAt")),
        score=result.score,
    )


@dataclass
class _SearchTrace:
    """Per-request stage tracking."""

    stage: PipelineStage = PipelineStage.RECEIVED
    history: list[PipelineStage] = field(default_factory=lambda: [PipelineStage.RECEIVED])
    degraded: list[str] = field(default_factory=list)

    def enter(self, stage: PipelineStage) -> None:
        self.stage = stage
        self.history.append(stage)

    def degrade(self, reason: str) -> None:
        self.degraded.append(reason)


async def _settle(calls: list[Awaitable[T]]) -> list[T | Exception]:
    """
    Run calls concurrently and wait for all of them.

    Outcomes are returned in call order regardless of completion order.
    Cancellation of a child call propagates.
    """
    outcomes = await asyncio.gather(*calls, return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, asyncio.CancelledError):
            raise outcome
    return list(outcomes)


class SearchOrchestrator:
    """
    Multi-query semantic search pipeline.

    RECEIVED -> EXPANDING -> EMBEDDING -> QUERYING -> MERGING -> FORMATTING -> DONE,
    with DEGRADED entered when expansion fails and FAILED reachable from
    EMBEDDING (original query) or QUERYING (every query failed).

    Holds no per-request state; one instance serves concurrent requests.
    """

    def __init__(
        self,
        expander: QueryExpander,
        embedder: EmbeddingClient,
        searcher: VectorSearchClient,
        merger: ResultMerger,
        access_policy: IAccessPolicy,
        config: PipelineConfig,
    ):
        self._expander = expander
        self._embedder = embedder
        self._searcher = searcher
        self._merger = merger
        self._access_policy = access_policy
        self._config = config

    @property
    def config(self) -> PipelineConfig:
        return self._config

    async def search(self, request: SearchRequest) -> SearchResponse:
        """
        Run the pipeline for one request.

        Raises:
            InvalidRequestError: Malformed request, before any provider call
            SearchFailedError: Original query could not be embedded, or every
                vector query failed
            ProviderConfigurationError: Provider contract violation (e.g.
                embedding dimension mismatch)
        """
        validate_request(request)

        trace = _SearchTrace()
        start = time.time()

        logger.info(
            "search_started",
            query=request.query[:100],
            content_type=request.content_type.value if request.content_type else None,
            has_time_range=request.time_range is not None,
            tags=len(request.tag_filter or ()),
        )

        try:
            variants = await self._expand(request, trace)
            queries = [request.query, *variants]

            embedded = await self._embed(queries, trace)

            trace.enter(PipelineStage.QUERYING)
            filter_expression = FilterExpression.for_request(
                request,
                self._access_policy.visibility_filter(request.requesting_user_id),
            )
            result_sets = await self._query(embedded, filter_expression, trace)

            trace.enter(PipelineStage.MERGING)
            merged = self._merger.merge(result_sets, top_k=self._config.result_limit)

            trace.enter(PipelineStage.FORMATTING)
            results = [format_result(m) for m in merged]

        except (SearchFailedError, ProviderConfigurationError) as e:
            trace.enter(PipelineStage.FAILED)
            logger.error(
                "search_failed",
                error_code=e.code,
                stage=trace.history[-2].value,
                details=e.details,
                took_ms=round((time.time() - start) * 1000, 2),
            )
            raise

        trace.enter(PipelineStage.DONE)

        expanded_queries = [query for position, query, _ in embedded if position > 0]

        logger.info(
            "search_complete",
            query=request.query[:50],
            variants=len(expanded_queries),
            results=len(results),
            degraded=trace.degraded,
            took_ms=round((time.time() - start) * 1000, 2),
        )

        return SearchResponse(
            results=results,
            matches=merged,
            expanded_queries=expanded_queries,
            applied_filters=AppliedFilters(
                content_type=request.content_type,
                time_range=request.time_range,
                tags=sorted(request.tag_filter) if request.tag_filter else None,
            ),
            degraded=trace.degraded,
            stage=trace.stage,
        )

    async def _expand(self, request: SearchRequest, trace: _SearchTrace) -> list[str]:
        trace.enter(PipelineStage.EXPANDING)
        expansion = await self._expander.try_expand(request)

        if not expansion.is_ok:
            trace.enter(PipelineStage.DEGRADED)
            trace.degrade(expansion.reason or "expansion_failed")
            logger.info("search_degraded", reason=expansion.reason)
            return []

        return expansion.value_or([])[: self._config.max_variants]

    async def _embed(
        self,
        queries: list[str],
        trace: _SearchTrace,
    ) -> list[tuple[int, str, list[float]]]:
        """Embed every query concurrently; returns surviving (position, query, vector)."""
        trace.enter(PipelineStage.EMBEDDING)

        outcomes = await _settle(
            [self._embedder.embed(query, position=i) for i, query in enumerate(queries)]
        )

        for outcome in outcomes:
            if isinstance(outcome, ProviderConfigurationError):
                raise outcome

        original = outcomes[0]
        if isinstance(original, Exception):
            logger.error(
                "original_embedding_failed",
                error_code=getattr(original, "code", type(original).__name__),
                error=str(original),
            )
            raise SearchFailedError(str(original), stage=PipelineStage.EMBEDDING.value) from original

        embedded: list[tuple[int, str, list[float]]] = []
        for position, (query, outcome) in enumerate(zip(queries, outcomes)):
            if isinstance(outcome, Exception):
                trace.degrade(f"variant_embedding_failed:{position}")
                logger.warning(
                    "variant_dropped",
                    position=position,
                    error_code=getattr(outcome, "code", type(outcome).__name__),
                    error=str(outcome),
                )
                continue
            embedded.append((position, query, outcome))

        return embedded

    async def _query(
        self,
        embedded: list[tuple[int, str, list[float]]],
        filter_expression: FilterExpression,
        trace: _SearchTrace,
    ) -> list[list[ScoredMatch]]:
        """Query the index once per embedding; failed queries become empty sets."""
        outcomes = await _settle(
            [
                self._searcher.query(
                    vector,
                    filter_expression,
                    self._config.default_top_k if position == 0 else self._config.variant_top_k,
                    position=position,
                )
                for position, _, vector in embedded
            ]
        )

        for outcome in outcomes:
            if isinstance(outcome, ProviderConfigurationError):
                raise outcome

        failures = [o for o in outcomes if isinstance(o, Exception)]
        if failures and len(failures) == len(outcomes):
            raise SearchFailedError(
                f"all {len(outcomes)} vector queries failed: {failures[0]}",
                stage=PipelineStage.QUERYING.value,
            ) from failures[0]

        result_sets: list[list[ScoredMatch]] = []
        for (position, _, _), outcome in zip(embedded, outcomes):
            if isinstance(outcome, Exception):
                trace.degrade(f"vector_query_failed:{position}")
                logger.warning(
                    "vector_query_dropped",
                    position=position,
                    error_code=getattr(outcome, "code", type(outcome).__name__),
                    error=str(outcome),
                )
                result_sets.append([])
            else:
                result_sets.append(outcome)

        return result_sets
