"""
Vector index factory.
"""

from heirloom.config import get_logger, get_settings
from heirloom.config.settings import Settings
from heirloom.core.interfaces import IVectorIndex

logger = get_logger(__name__)


def create_vector_index(settings: Settings | None = None) -> IVectorIndex:
    """Build the vector index backend named in configuration."""
    settings = settings or get_settings()

    if settings.vector.backend == "pinecone":
        from heirloom.infrastructure.vector.pinecone import PineconeVectorIndex

        return PineconeVectorIndex(settings.vector)

    elif settings.vector.backend == "memory":
        from heirloom.infrastructure.vector.memory import InMemoryVectorIndex

        return InMemoryVectorIndex(
            dimension=settings.embedding.dimension,
            timestamp_field=settings.vector.timestamp_field,
        )

    else:
        raise ValueError(f"Unknown vector backend: {settings.vector.backend}")


_vector_index: IVectorIndex | None = None


def get_vector_index() -> IVectorIndex:
    """Get or create the vector index singleton."""
    global _vector_index
    if _vector_index is None:
        _vector_index = create_vector_index()
        logger.info(
            "vector_index_created",
            backend=get_settings().vector.backend,
            index=get_settings().vector.index_name,
        )
    return _vector_index
