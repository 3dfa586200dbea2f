"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
Serialized with camelCase aliases.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchResultResponse(BaseModel):
    """One display-ready search result."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Content item ID")
    title: str = Field(default="Untitled")
    type: str = Field(default="", description="Content type")
    preview: str = Field(default="")
    tags: list[str] = Field(default_factory=list)
    uploaded_by: str = Field(default="", alias="uploadedBy")
    uploaded_at: str = Field(default="", alias="uploadedAt")
    score: float = Field(..., description="Relevance score, higher is better")


class TimeRangeResponse(BaseModel):
    start: datetime
    end: datetime


class AppliedFiltersResponse(BaseModel):
    """Echo of the caller's own filters."""

    model_config = ConfigDict(populate_by_name=True)

    content_type: str | None = Field(default=None, alias="contentType")
    time_range: TimeRangeResponse | None = Field(default=None, alias="timeRange")
    tags: list[str] | None = Field(default=None)


class SearchMetadataResponse(BaseModel):
    """Search diagnostics returned with the results."""

    model_config = ConfigDict(populate_by_name=True)

    total_results: int = Field(..., alias="totalResults")
    expanded_queries: list[str] = Field(default_factory=list, alias="expandedQueries")
    applied_filters: AppliedFiltersResponse = Field(
        default_factory=AppliedFiltersResponse, alias="appliedFilters"
    )
    degraded: list[str] = Field(
        default_factory=list, description="Optional steps that were skipped"
    )


class SearchArchiveResponse(BaseModel):
    """Response for archive search."""

    results: list[SearchResultResponse] = Field(default_factory=list)
    metadata: SearchMetadataResponse


class ChatResponse(BaseModel):
    """Response for archive-grounded chat."""

    content: str = Field(..., description="Assistant reply")
    sources: list[SearchResultResponse] = Field(default_factory=list)
    degraded: list[str] = Field(default_factory=list)


class IndexContentResponse(BaseModel):
    """Outcome of a best-effort indexing operation."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(..., alias="documentId")
    indexed: bool
    chunks: int = Field(default=0, description="Records written to the index")
    reason: str | None = Field(default=None, description="Why indexing was skipped")


class IndexStatsResponse(BaseModel):
    """Vector index statistics."""

    stats: dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status: healthy, degraded or unhealthy")
    version: str
    components: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Structured error response."""

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    hint: str | None = Field(default=None, description="Suggestion for resolving the error")
    detail: Any = Field(default=None, description="Additional error details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="ISO timestamp",
    )
