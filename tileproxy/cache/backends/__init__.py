"""Cache backend implementations."""

from .base import CacheBackend, CacheBackendUnavailable, CacheError
from .redis import RedisCacheBackend

__all__ = [
    "CacheBackend",
    "CacheError",
    "CacheBackendUnavailable",
    "RedisCacheBackend",
]
