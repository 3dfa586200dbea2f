"""
Search domain entities.

All of these are request-scoped: built per search and discarded
after the response is sent.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ContentType(str, Enum):
    """Kinds of archive content."""

    IMAGE = "image"
    DOCUMENT = "document"
    PDF = "pdf"
    VIDEO = "video"
    AUDIO = "audio"


class PipelineStage(str, Enum):
    """Stages a single search request moves through."""

    RECEIVED = "received"
    EXPANDING = "expanding"
    DEGRADED = "degraded"
    EMBEDDING = "embedding"
    QUERYING = "querying"
    MERGING = "merging"
    FORMATTING = "formatting"
    DONE = "done"
    FAILED = "failed"


class TimeRange(BaseModel):
    """Closed time interval used to scope a search."""

    start: datetime
    end: datetime


class SearchRequest(BaseModel):
    """
    Input to the search pipeline.

    Validation happens in the orchestrator so that a malformed request
    is rejected as InvalidRequestError before any provider call.
    """

    query: str
    requesting_user_id: str = ""
    content_type: ContentType | None = None
    context_item_id: str | None = None
    time_range: TimeRange | None = None
    tag_filter: frozenset[str] | None = None


class ScoredMatch(BaseModel):
    """One match returned by a vector index query."""

    document_id: str
    score: float
    metadata: dict[str, Any] = Field(default_factory=dict)
    record_id: str | None = None


class MergedResult(ScoredMatch):
    """A match kept after cross-list deduplication."""

    source_query_index: int = 0


class DisplayRecord(BaseModel):
    """Display-ready search result."""

    id: str
    title: str = "Untitled"
    type: str = ""
    preview: str = ""
    tags: list[str] = Field(default_factory=list)
    uploaded_by: str = ""
    uploaded_at: str = ""
    score: float = 0.0


class AppliedFilters(BaseModel):
    """Echo of the caller's own filters. Never includes the visibility predicate."""

    content_type: ContentType | None = None
    time_range: TimeRange | None = None
    tags: list[str] | None = None


class SearchResponse(BaseModel):
    """Output of the search pipeline."""

    results: list[DisplayRecord] = Field(default_factory=list)
    matches: list[MergedResult] = Field(default_factory=list)
    expanded_queries: list[str] = Field(default_factory=list)
    applied_filters: AppliedFilters = Field(default_factory=AppliedFilters)
    degraded: list[str] = Field(default_factory=list)
    stage: PipelineStage = PipelineStage.DONE


@dataclass(frozen=True)
class FilterExpression:
    """
    Conjunction of predicates applied to every vector query of a request.

    `visibility` is the access-control fragment supplied by the policy,
    already expressed in the index predicate language and treated as opaque.
    Timestamps are epoch seconds.
    """

    visibility: dict[str, Any] = field(default_factory=dict)
    content_types: frozenset[str] = frozenset()
    tags_any: frozenset[str] = frozenset()
    time_start: float | None = None
    time_end: float | None = None

    @classmethod
    def for_request(cls, request: SearchRequest, visibility: dict[str, Any]) -> "FilterExpression":
        """Build the shared filter from a request and a visibility fragment."""
        time_start = time_end = None
        if request.time_range is not None:
            time_start = request.time_range.start.timestamp()
            time_end = request.time_range.end.timestamp()

        return cls(
            visibility=visibility,
            content_types=(
                frozenset({request.content_type.value}) if request.content_type else frozenset()
            ),
            tags_any=frozenset(request.tag_filter or ()),
            time_start=time_start,
            time_end=time_end,
        )


@dataclass(frozen=True)
class BestEffortResult(Generic[T]):
    """
    Outcome of an optional sub-operation: Ok(value) or Degraded(reason).

    Lets callers and tests observe a degradation instead of an
    exception silently swallowed by a catch-and-log block.
    """

    value: T | None = None
    reason: str | None = None

    @classmethod
    def ok(cls, value: T) -> "BestEffortResult[T]":
        return cls(value=value)

    @classmethod
    def degraded(cls, reason: str) -> "BestEffortResult[T]":
        return cls(reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.reason is None

    def value_or(self, default: T) -> T:
        if self.is_ok and self.value is not None:
            return self.value
        return default
