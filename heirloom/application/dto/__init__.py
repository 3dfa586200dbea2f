"""Request and response DTOs."""

from heirloom.application.dto.requests import (
    ChatMessage,
    ChatRequest,
    IndexContentRequest,
    SearchArchiveRequest,
    TimeRangeRequest,
)
from heirloom.application.dto.responses import (
    AppliedFiltersResponse,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
    IndexContentResponse,
    IndexStatsResponse,
    SearchArchiveResponse,
    SearchMetadataResponse,
    SearchResultResponse,
    TimeRangeResponse,
)

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "IndexContentRequest",
    "SearchArchiveRequest",
    "TimeRangeRequest",
    "AppliedFiltersResponse",
    "ChatResponse",
    "ErrorResponse",
    "HealthResponse",
    "IndexContentResponse",
    "IndexStatsResponse",
    "SearchArchiveResponse",
    "SearchMetadataResponse",
    "SearchResultResponse",
    "TimeRangeResponse",
]
