"""Domain entities."""

from heirloom.core.entities.content import ArchiveItem, VectorRecord
from heirloom.core.entities.search import (
    AppliedFilters,
    BestEffortResult,
    ContentType,
    DisplayRecord,
    FilterExpression,
    MergedResult,
    PipelineStage,
    ScoredMatch,
    SearchRequest,
    SearchResponse,
    TimeRange,
)

__all__ = [
    "ArchiveItem",
    "VectorRecord",
    "AppliedFilters",
    "BestEffortResult",
    "ContentType",
    "DisplayRecord",
    "FilterExpression",
    "MergedResult",
    "PipelineStage",
    "ScoredMatch",
    "SearchRequest",
    "SearchResponse",
    "TimeRange",
]
