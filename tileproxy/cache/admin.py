"""Cache management API endpoints."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from tileproxy.cache.backends.base import CacheBackend
from tileproxy.cache.utils import TemplateKeyGenerator

logger = logging.getLogger(__name__)


class CacheStats(BaseModel):
    """Cache statistics model."""

    backend_type: str = Field(description="Type of cache backend")
    namespace: Optional[str] = Field(description="Cache namespace", default=None)
    hit_rate: Optional[float] = Field(description="Cache hit rate", default=None)
    total_operations: Optional[int] = Field(
        description="Number of store operations", default=None
    )
    total_errors: Optional[int] = Field(
        description="Number of failed store operations", default=None
    )
    health: dict[str, Any] = Field(
        description="Backend health report", default_factory=dict
    )


def _create_status_endpoint(
    cache_backend: CacheBackend, key_generator: TemplateKeyGenerator
):
    """Create cache status endpoint."""

    async def get_cache_status():
        """Get cache status and statistics."""
        try:
            stats = CacheStats(
                backend_type=type(cache_backend)
                .__name__.replace("CacheBackend", "")
                .lower(),
                namespace=key_generator.namespace,
            )

            backend_stats = await cache_backend.get_stats()
            stats.hit_rate = backend_stats.get("hit_rate")
            stats.total_operations = backend_stats.get("total_operations")
            stats.total_errors = backend_stats.get("total_errors")
            stats.health = await cache_backend.health_check()

            return stats

        except Exception as e:
            logger.error(f"Error getting cache status: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error retrieving cache status",
            ) from e

    return get_cache_status


def create_cache_admin_router(
    cache_backend: Optional[CacheBackend] = None,
    key_generator: Optional[TemplateKeyGenerator] = None,
) -> APIRouter:
    """Create cache administration router.

    Args:
        cache_backend: Cache backend instance, None when caching is disabled
        key_generator: Cache key generator instance

    Returns:
        FastAPI router with cache management endpoints
    """
    router = APIRouter(prefix="/admin/cache", tags=["Cache Administration"])

    if not cache_backend or not key_generator:

        @router.get("/status")
        async def unavailable():
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Cache backend not available",
            )

        return router

    router.add_api_route(
        "/status",
        _create_status_endpoint(cache_backend, key_generator),
        methods=["GET"],
        response_model=CacheStats,
    )

    return router
