"""tileproxy endpoint template cache.

Async key/value backends holding resolved provider URL templates, keyed by
imagery set and hashed credential, with a Redis implementation and an
administrative status router.
"""

from .admin import create_cache_admin_router
from .backends.base import CacheBackend, CacheBackendUnavailable, CacheError
from .settings import CacheRedisSettings, CacheSettings
from .utils import TemplateKeyGenerator, derive_cache_key

__all__ = [
    "CacheBackend",
    "CacheError",
    "CacheBackendUnavailable",
    "CacheSettings",
    "CacheRedisSettings",
    "TemplateKeyGenerator",
    "derive_cache_key",
    "create_cache_admin_router",
]
