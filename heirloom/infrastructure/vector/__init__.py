"""Vector index adapters."""

from heirloom.infrastructure.vector.factory import create_vector_index, get_vector_index
from heirloom.infrastructure.vector.filters import matches_filter, translate_filter
from heirloom.infrastructure.vector.memory import InMemoryVectorIndex
from heirloom.infrastructure.vector.pinecone import PineconeVectorIndex

__all__ = [
    "create_vector_index",
    "get_vector_index",
    "matches_filter",
    "translate_filter",
    "InMemoryVectorIndex",
    "PineconeVectorIndex",
]
