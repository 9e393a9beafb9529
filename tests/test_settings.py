"""test for settings"""

import pytest
from pydantic import ValidationError

from tileproxy.cache.settings import CacheRedisSettings, CacheSettings
from tileproxy.virtualearth.settings import ApiSettings, ProviderSettings


def test_provider_settings_defaults():
    """Default provider endpoint."""
    settings = ProviderSettings()
    assert (
        settings.metadata_url
        == "https://dev.virtualearth.net/REST/v1/Imagery/Metadata"
    )
    assert settings.default_culture == "en-US"
    assert settings.uri_scheme == "https"
    assert settings.max_zoom == 23


def test_provider_settings_env(monkeypatch):
    """Settings are read from the environment."""
    monkeypatch.setenv("TILEPROXY_PROVIDER_METADATA_URL", "http://localhost:8080/meta/")
    monkeypatch.setenv("TILEPROXY_PROVIDER_DEFAULT_CULTURE", "fr-FR")
    settings = ProviderSettings()
    assert settings.metadata_url == "http://localhost:8080/meta"
    assert settings.default_culture == "fr-FR"


@pytest.mark.parametrize(
    "params",
    [
        {"metadata_url": "ftp://example.com/metadata"},
        {"timeout": 0},
        {"max_zoom": 0},
        {"max_zoom": 31},
    ],
)
def test_provider_settings_error(params):
    """Invalid provider settings."""
    with pytest.raises(ValidationError):
        ProviderSettings(**params)


def test_cache_settings(monkeypatch):
    """Cache settings."""
    monkeypatch.setenv("TILEPROXY_CACHE_TEMPLATE_TTL", "86400")
    settings = CacheSettings()
    assert settings.enable
    assert settings.template_ttl == 86400

    with pytest.raises(ValidationError):
        CacheSettings(template_ttl=0)

    with pytest.raises(ValidationError):
        CacheRedisSettings(port=70000)


def test_api_settings_cors(monkeypatch):
    """Comma separated CORS settings."""
    monkeypatch.setenv("TILEPROXY_API_CORS_ORIGINS", "https://a.com, https://b.com")
    monkeypatch.setenv("TILEPROXY_API_CORS_ALLOW_METHODS", "get,head")
    settings = ApiSettings()
    assert settings.cors_origins == ["https://a.com", "https://b.com"]
    assert settings.cors_allow_methods == ["GET", "HEAD"]
