"""API route modules."""

from heirloom.api.routes.chat import router as chat_router
from heirloom.api.routes.content import router as content_router
from heirloom.api.routes.health import router as health_router
from heirloom.api.routes.search import router as search_router

__all__ = [
    "chat_router",
    "content_router",
    "health_router",
    "search_router",
]
