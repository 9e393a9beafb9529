"""API settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """API settings"""

    name: str = "tileproxy: Virtual Earth quadkey tile proxy"
    cors_origins: str = "*"
    cors_allow_methods: str = "GET"
    root_path: str = ""
    debug: bool = False

    model_config = SettingsConfigDict(
        env_prefix="TILEPROXY_API_", env_file=".env", extra="ignore"
    )

    @field_validator("cors_origins")
    def parse_cors_origin(cls, v):
        """Parse CORS origins."""
        return [origin.strip() for origin in v.split(",")]

    @field_validator("cors_allow_methods")
    def parse_cors_allow_methods(cls, v):
        """Parse CORS allowed methods."""
        return [method.strip().upper() for method in v.split(",")]


class ProviderSettings(BaseSettings):
    """Imagery provider settings"""

    # https://learn.microsoft.com/en-us/bingmaps/rest-services/imagery/get-imagery-metadata
    metadata_url: str = "https://dev.virtualearth.net/REST/v1/Imagery/Metadata"
    uri_scheme: str = "https"
    default_culture: str = "en-US"
    max_zoom: int = Field(default=23, ge=1, le=30)
    timeout: float = Field(default=10.0, gt=0)
    user_agent: str = "tileproxy"

    model_config = SettingsConfigDict(
        env_prefix="TILEPROXY_PROVIDER_", env_file=".env", extra="ignore"
    )

    @field_validator("metadata_url")
    def check_metadata_url(cls, v):
        """Require an http(s) URL and drop trailing slashes."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("metadata_url must be an http(s) URL")
        return v.rstrip("/")
