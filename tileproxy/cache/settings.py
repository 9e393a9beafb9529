"""Cache configuration settings."""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseSettings):
    """Endpoint template cache configuration."""

    enable: bool = False
    namespace: str = "tileproxy"
    # None keeps templates until a failed tile fetch replaces them
    template_ttl: int | None = Field(default=None, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="TILEPROXY_CACHE_", env_file=".env", extra="ignore"
    )


class CacheRedisSettings(BaseSettings):
    """Redis cache backend configuration."""

    host: str | None = None
    port: int = Field(default=6379, ge=1, le=65535)
    password: SecretStr | None = None
    db: int = Field(default=0, ge=0)
    ssl: bool = False

    model_config = SettingsConfigDict(
        env_prefix="TILEPROXY_CACHE_REDIS_", env_file=".env", extra="ignore"
    )
