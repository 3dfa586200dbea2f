"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from heirloom.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from heirloom.api.middleware.error_handler import setup_exception_handlers
from heirloom.api.routes import (
    chat_router,
    content_router,
    health_router,
    search_router,
)
from heirloom.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Builds the search pipeline on startup so configuration errors
    surface before the first request.
    """
    settings = get_settings()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        llm_provider=settings.llm.provider,
        embedding_provider=settings.embedding.provider,
        vector_backend=settings.vector.backend,
    )

    try:
        from heirloom.application.services import get_search_orchestrator

        get_search_orchestrator()
        logger.info("search_pipeline_ready", index=settings.vector.index_name)

    except Exception as e:
        logger.error("search_pipeline_init_failed", error=str(e), error_code=getattr(e, "code", None))

    logger.info("application_started")

    yield

    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title="Heirloom Archive Search API",
        description="Semantic search and archive-grounded chat for a family legacy archive",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(search_router)
    app.include_router(chat_router)
    app.include_router(content_router)

    # Root health endpoint (for container health checks)
    @app.get("/health")
    async def root_health() -> dict[str, str]:
        return {"status": "healthy", "version": settings.app_version}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "heirloom.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
