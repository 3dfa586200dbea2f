"""Application use cases."""

from heirloom.application.use_cases.chat_with_context import ChatWithContextUseCase
from heirloom.application.use_cases.index_content import IndexContentUseCase
from heirloom.application.use_cases.search_archive import (
    SearchArchiveUseCase,
    to_search_request,
)

__all__ = [
    "ChatWithContextUseCase",
    "IndexContentUseCase",
    "SearchArchiveUseCase",
    "to_search_request",
]
