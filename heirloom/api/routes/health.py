"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from heirloom.api.dependencies import get_embedder, get_index, get_llm
from heirloom.application.dto.responses import HealthResponse
from heirloom.config import get_logger, get_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check with uptime."""
    return HealthResponse(
        status="healthy",
        version=get_settings().app_version,
        components={"uptime_seconds": round(time.time() - _start_time, 2)},
    )


@router.get("/llm", response_model=HealthResponse)
async def llm_health() -> HealthResponse:
    """Generation provider health check."""
    try:
        health = await get_llm().check_health()
        llm_status = health.__dict__
    except Exception as e:
        logger.warning("llm_health_failed", error=str(e))
        llm_status = {"available": False, "error": str(e)}

    return HealthResponse(
        status="healthy" if llm_status.get("available") else "degraded",
        version=get_settings().app_version,
        components={"llm": llm_status},
    )


@router.get("/search", response_model=HealthResponse)
async def search_health() -> HealthResponse:
    """Embedding provider and vector index health check."""
    components: dict = {}

    try:
        embedding = await get_embedder().check_health()
        components["embedding"] = embedding.__dict__
    except Exception as e:
        components["embedding"] = {"available": False, "error": str(e)}

    start = time.time()
    try:
        stats = await get_index().describe_index_stats()
        components["vector_index"] = {
            "available": True,
            "stats": stats,
            "latency_ms": round((time.time() - start) * 1000, 2),
        }
    except Exception as e:
        components["vector_index"] = {"available": False, "error": str(e)}

    available = [c.get("available", False) for c in components.values()]
    if all(available):
        overall = "healthy"
    elif any(available):
        overall = "degraded"
    else:
        overall = "unhealthy"

    return HealthResponse(
        status=overall,
        version=get_settings().app_version,
        components=components,
    )
