"""Dependency injection for tileproxy.virtualearth."""

from typing import Annotated, Optional

import httpx
from fastapi import Depends

from tileproxy.cache.backends import CacheBackend
from tileproxy.cache.settings import CacheSettings
from tileproxy.cache.utils import TemplateKeyGenerator

from .fetcher import TileFetcher
from .proxy import TileProxy
from .resolver import TemplateResolver
from .settings import ProviderSettings

cache_settings = CacheSettings()
provider_settings = ProviderSettings()

# Initialized by the application lifespan
_http_client: Optional[httpx.AsyncClient] = None
_cache_backend: Optional[CacheBackend] = None
_key_generator = TemplateKeyGenerator(namespace=cache_settings.namespace)


def create_http_client(settings: ProviderSettings) -> httpx.AsyncClient:
    """Create the HTTP client shared by metadata and tile requests."""
    return httpx.AsyncClient(
        timeout=settings.timeout,
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    )


def setup_dependencies(
    http_client: Optional[httpx.AsyncClient],
    cache_backend: Optional[CacheBackend],
) -> None:
    """Register the shared HTTP client and cache backend.

    Args:
        http_client: HTTP client instance
        cache_backend: Cache backend instance, None to disable caching
    """
    global _http_client, _cache_backend
    _http_client = http_client
    _cache_backend = cache_backend


def get_http_client() -> httpx.AsyncClient:
    """Get HTTP client dependency."""
    if _http_client is None:
        raise RuntimeError("HTTP client is not initialized")

    return _http_client


def get_cache_backend() -> Optional[CacheBackend]:
    """Get cache backend dependency.

    Returns:
        Cache backend instance or None if caching disabled
    """
    return _cache_backend


def get_key_generator() -> TemplateKeyGenerator:
    """Get cache key generator dependency."""
    return _key_generator


HttpClientDep = Annotated[httpx.AsyncClient, Depends(get_http_client)]
CacheBackendDep = Annotated[Optional[CacheBackend], Depends(get_cache_backend)]
KeyGeneratorDep = Annotated[TemplateKeyGenerator, Depends(get_key_generator)]


def get_tile_proxy(
    client: HttpClientDep,
    cache_backend: CacheBackendDep,
    key_generator: KeyGeneratorDep,
) -> TileProxy:
    """Assemble the tile proxy for a request."""
    resolver = TemplateResolver(
        client=client,
        cache_backend=cache_backend,
        key_generator=key_generator,
        settings=provider_settings,
        ttl=cache_settings.template_ttl,
    )
    return TileProxy(resolver=resolver, fetcher=TileFetcher(client))


TileProxyDep = Annotated[TileProxy, Depends(get_tile_proxy)]
