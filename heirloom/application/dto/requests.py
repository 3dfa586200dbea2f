"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
Field names follow the archive's JSON convention (camelCase aliases).
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from heirloom.core.entities import ContentType


class TimeRangeRequest(BaseModel):
    """Closed time interval."""

    start: datetime = Field(..., description="Range start (inclusive)")
    end: datetime = Field(..., description="Range end (inclusive)")


class SearchArchiveRequest(BaseModel):
    """Request for semantic archive search.

    The requesting user is taken from the identity header, never the body.
    """

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(
        ...,
        max_length=1000,
        description="Free-text search query",
        examples=["grandma's wedding in Chicago"],
    )
    content_type: ContentType | None = Field(
        default=None,
        alias="contentType",
        description="Restrict results to one content kind",
    )
    context_id: str | None = Field(
        default=None,
        alias="contextId",
        description="Content item whose context should bias query expansion",
    )
    time_range: TimeRangeRequest | None = Field(
        default=None,
        alias="timeRange",
        description="Restrict results to items uploaded in this interval",
    )
    tags: list[str] | None = Field(
        default=None,
        description="Match items carrying any of these tags",
        examples=[["wedding", "chicago"]],
    )


class ChatMessage(BaseModel):
    """One message in a chat conversation."""

    role: str = Field(default="user", pattern="^(user|assistant|system)$")
    content: str = Field(..., description="Message text")


class ChatRequest(BaseModel):
    """Request for archive-grounded chat."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessage] = Field(
        ...,
        min_length=1,
        description="Conversation so far; the last user message drives retrieval",
    )
    context: str | None = Field(
        default=None,
        description="Explicit context, used verbatim instead of archive retrieval",
    )
    content_type: ContentType | None = Field(default=None, alias="contentType")
    tags: list[str] | None = Field(default=None)


class IndexContentRequest(BaseModel):
    """Request to vectorize one archive item."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(..., min_length=1, alias="documentId")
    title: str = Field(default="Untitled")
    content_type: ContentType = Field(default=ContentType.DOCUMENT, alias="contentType")
    text: str = Field(..., description="Extracted text content to index")
    tags: list[str] = Field(default_factory=list)
    uploaded_by: str = Field(default="", alias="uploadedBy")
    uploaded_at: datetime | None = Field(default=None, alias="uploadedAt")
    is_private: bool = Field(default=False, alias="isPrivate")
    preview: str | None = Field(default=None)
