"""Redis endpoint template store."""

import logging
from collections import Counter
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..backends.base import CacheBackend, CacheBackendUnavailable, CacheError
from ..settings import CacheRedisSettings

logger = logging.getLogger(__name__)


class RedisCacheBackend(CacheBackend):
    """Templates stored as plain Redis strings, one key per credential/imagery set.

    The connection is opened on first use. Concurrent writers for the same
    key simply overwrite each other: every writer stores an equivalent
    template, so no locking is used.
    """

    def __init__(
        self,
        host: str,
        port: int = 6379,
        password: Optional[str] = None,
        db: int = 0,
        ssl: bool = False,
        client: Optional[redis.Redis] = None,
        **kwargs,
    ):
        """Initialize Redis template store.

        Args:
            host: Redis host
            port: Redis port
            password: Redis password (optional)
            db: Redis database number
            ssl: Connect over TLS
            client: Pre-built client with ``decode_responses=True`` (optional)
            **kwargs: Additional Redis connection parameters
        """
        self.host = host
        self.port = port
        self.db = db
        self._client: Optional[redis.Redis] = client
        self._connection_kwargs = dict(
            host=host,
            port=port,
            password=password,
            db=db,
            ssl=ssl,
            decode_responses=True,
            **kwargs,
        )
        self.counters: Counter = Counter()

    async def _connect(self) -> redis.Redis:
        if self._client is not None:
            return self._client

        client = redis.Redis(**self._connection_kwargs)
        try:
            await client.ping()
        except RedisError as e:
            await client.aclose()
            logger.error(f"Redis at {self.host}:{self.port} unreachable: {e}")
            raise CacheBackendUnavailable(f"Redis unavailable: {e}") from e

        logger.debug(f"Connected to Redis at {self.host}:{self.port}")
        self._client = client
        return client

    async def get(self, key: str) -> Optional[str]:
        """Read a template; a missing key is a miss."""
        try:
            client = await self._connect()
            template = await client.get(key)
        except CacheBackendUnavailable:
            self.counters["errors"] += 1
            raise
        except RedisError as e:
            self.counters["errors"] += 1
            raise CacheError(f"Failed to read template {key}: {e}") from e

        self.counters["hits" if template is not None else "misses"] += 1
        logger.debug(f"Template {'hit' if template is not None else 'miss'}: {key}")
        return template

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        """Upsert a template, with an optional expiry."""
        try:
            client = await self._connect()
            await client.set(key, value, ex=ttl)
        except CacheError:
            self.counters["errors"] += 1
            return False
        except RedisError as e:
            self.counters["errors"] += 1
            logger.error(f"Failed to store template {key}: {e}")
            return False

        self.counters["writes"] += 1
        return True

    async def health_check(self) -> dict[str, Any]:
        """Ping the server."""
        report: dict[str, Any] = {"host": self.host, "port": self.port, "db": self.db}
        try:
            client = await self._connect()
            await client.ping()
        except CacheBackendUnavailable:
            report.update(status="disconnected", error="Backend unavailable")
        except RedisError as e:
            report.update(status="error", error=str(e))
        else:
            report["status"] = "connected"

        return report

    async def get_stats(self) -> dict[str, Any]:
        """Read/write counters since startup."""
        reads = self.counters["hits"] + self.counters["misses"]
        return {
            "backend": "redis",
            "hit_rate": round(100 * self.counters["hits"] / reads, 2) if reads else 0.0,
            "total_hits": self.counters["hits"],
            "total_misses": self.counters["misses"],
            "total_writes": self.counters["writes"],
            "total_errors": self.counters["errors"],
            "total_operations": reads + self.counters["writes"],
        }

    @classmethod
    def from_settings(cls, settings: CacheRedisSettings) -> "RedisCacheBackend":
        """Create Redis backend from settings."""
        if not settings.host:
            raise ValueError("Redis host must be configured")

        return cls(
            host=settings.host,
            port=settings.port,
            password=settings.password.get_secret_value()
            if settings.password
            else None,
            db=settings.db,
            ssl=settings.ssl,
        )

    async def close(self):
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug("Redis connection closed")
