"""tileproxy.virtualearth Application."""

import logging
import os
from contextlib import asynccontextmanager

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO")
logging.basicConfig(
    level=log_level,
    format="%(levelname)s - %(message)s",
)


import httpx
import redis
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from tileproxy.cache import create_cache_admin_router
from tileproxy.cache.backends import RedisCacheBackend
from tileproxy.cache.settings import CacheRedisSettings

from . import __version__ as tileproxy_version
from .dependencies import (
    cache_settings,
    create_http_client,
    get_key_generator,
    provider_settings,
    setup_dependencies,
)
from .errors import DEFAULT_STATUS_CODES, add_exception_handlers
from .factory import TileProxyFactory
from .settings import ApiSettings

logger = logging.getLogger(__name__)

settings = ApiSettings()

cache_backend = None
if cache_settings.enable:
    cache_backend = RedisCacheBackend.from_settings(CacheRedisSettings())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create and close the shared HTTP client and cache connection."""
    http_client = create_http_client(provider_settings)
    setup_dependencies(http_client, cache_backend)
    logger.info(
        f"Serving tiles from {provider_settings.metadata_url} "
        f"(template cache: {'redis' if cache_backend else 'disabled'})"
    )
    try:
        yield
    finally:
        await http_client.aclose()
        if cache_backend is not None:
            await cache_backend.close()
        setup_dependencies(None, None)


app = FastAPI(
    title=settings.name,
    description="Serve slippy-map tiles from Virtual Earth imagery using quadkey addressing.",
    openapi_url="/api",
    docs_url="/api.html",
    version=tileproxy_version,
    root_path=settings.root_path,
    debug=settings.debug,
    lifespan=lifespan,
)


# Health Check Endpoints
@app.get("/_mgmt/ping", description="Liveliness", tags=["Liveliness/Readiness"])
def ping():
    """Ping."""
    return {"message": "PONG"}


@app.get("/_mgmt/health", description="Readiness", tags=["Liveliness/Readiness"])
def health():
    """Health check."""
    return {
        "status": "UP",
        "versions": {
            "tileproxy": tileproxy_version,
            "httpx": httpx.__version__,
            "redis": redis.__version__,
        },
    }


app.include_router(create_cache_admin_router(cache_backend, get_key_generator()))

# Catch-all tile route, registered last
tiles = TileProxyFactory(
    default_culture=provider_settings.default_culture,
    max_zoom=provider_settings.max_zoom,
)
app.include_router(tiles.router, tags=["Tiles"])

add_exception_handlers(app, DEFAULT_STATUS_CODES)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=settings.cors_allow_methods,
    allow_headers=["*"],
)
