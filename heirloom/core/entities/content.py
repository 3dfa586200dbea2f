"""
Archive content entities used by indexing.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from heirloom.core.entities.search import ContentType


class ArchiveItem(BaseModel):
    """
    A content item submitted for vector indexing.

    The archive's content store remains the system of record; this is
    only the subset of fields written into vector metadata.
    """

    document_id: str
    owner_id: str
    title: str = "Untitled"
    content_type: ContentType = ContentType.DOCUMENT
    text: str
    tags: list[str] = Field(default_factory=list)
    uploaded_by: str = ""
    uploaded_at: datetime = Field(default_factory=datetime.now)
    is_private: bool = False
    preview: str | None = None


class VectorRecord(BaseModel):
    """A single vector written to the index."""

    id: str
    values: list[float]
    metadata: dict[str, Any] = Field(default_factory=dict)
