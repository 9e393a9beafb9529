"""Abstract endpoint template store."""

import abc
from typing import Any, Optional


class CacheBackend(abc.ABC):
    """Abstract key/value store holding resolved endpoint templates.

    Implementations may suspend on network I/O. Reads report store failures
    by raising `CacheError`, writes report them by returning False, so that
    callers can degrade to "cache miss" and "skip persistence" respectively.
    """

    @abc.abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Retrieve a template.

        Args:
            key: Cache key derived from imagery set and credential

        Returns:
            The stored template, or None if not found

        Raises:
            CacheError: On backend-specific errors (callers treat it as a miss)
        """
        ...

    @abc.abstractmethod
    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        """Store a template, replacing any previous one.

        Args:
            key: Cache key derived from imagery set and credential
            value: Template with its subdomain already resolved
            ttl: Time to live in seconds, None to keep the entry until replaced

        Returns:
            True if successfully stored, False on error
        """
        ...

    @abc.abstractmethod
    async def health_check(self) -> dict[str, Any]:
        """Check backend health and return backend-specific details."""
        ...

    async def get_stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Base implementation returns empty dict.
        """
        return {}


class CacheError(Exception):
    """Base exception for cache-related errors."""

    pass


class CacheBackendUnavailable(CacheError):
    """Raised when cache backend is unavailable."""

    pass
