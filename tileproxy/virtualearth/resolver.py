"""Endpoint template resolution."""

import logging
from typing import Optional

import httpx
from attrs import define, field

from tileproxy.cache.backends import CacheBackend, CacheError
from tileproxy.cache.utils import TemplateKeyGenerator

from .errors import ProviderRejected
from .settings import ProviderSettings

logger = logging.getLogger(__name__)


def parse_metadata(metadata: dict) -> str:
    """Build the tile URL template from an imagery metadata document.

    Takes the first resource's ``imageUrl`` and substitutes its
    ``{subdomain}`` placeholder with the first advertised subdomain.

    Raises:
        ProviderRejected: when the document lacks the expected fields.
    """
    try:
        resource = metadata["resourceSets"][0]["resources"][0]
        image_url = resource["imageUrl"]
        subdomain = resource["imageUrlSubdomains"][0]
    except (KeyError, IndexError, TypeError) as e:
        raise ProviderRejected(f"Unexpected imagery metadata layout: {e!r}") from e

    if not isinstance(image_url, str) or not isinstance(subdomain, str):
        raise ProviderRejected("Imagery metadata imageUrl/subdomain are not strings")

    return image_url.replace("{subdomain}", subdomain, 1)


@define(kw_only=True)
class TemplateResolver:
    """Resolve tile URL templates, from the cache or the metadata endpoint.

    Attributes:
        client: HTTP client used for metadata requests.
        cache_backend: Template store, None disables caching.
        key_generator: Derives store keys from imagery set and credential.
        settings: Provider endpoint configuration.
        ttl: Lifetime of stored templates, None keeps them indefinitely.

    """

    client: httpx.AsyncClient
    cache_backend: Optional[CacheBackend] = None
    key_generator: TemplateKeyGenerator = field(factory=TemplateKeyGenerator)
    settings: ProviderSettings = field(factory=ProviderSettings)
    ttl: Optional[int] = None

    async def resolve(
        self, imagery_set: str, credential: str, force_refresh: bool = False
    ) -> str:
        """Return a usable template for the imagery set and credential.

        With ``force_refresh`` the cached value is ignored and replaced by a
        freshly fetched one.
        """
        cache_key = self.key_generator.from_credential(imagery_set, credential)

        if not force_refresh:
            template = await self._get_cached(cache_key)
            if template is not None:
                return template

        template = await self.fetch_template(imagery_set, credential)
        await self._store(cache_key, template)
        return template

    async def fetch_template(self, imagery_set: str, credential: str) -> str:
        """Query the imagery metadata endpoint for a fresh template."""
        url = f"{self.settings.metadata_url}/{imagery_set}"
        params = {"key": credential, "uriScheme": self.settings.uri_scheme}

        try:
            response = await self.client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Imagery metadata request for {imagery_set} failed: {e!r}")
            raise ProviderRejected(f"Metadata request failed: {e!r}") from e

        if not response.is_success:
            logger.error(
                f"Imagery metadata for {imagery_set} rejected with status {response.status_code}"
            )
            raise ProviderRejected(f"Metadata endpoint returned {response.status_code}")

        try:
            metadata = response.json()
        except ValueError as e:
            logger.error(f"Imagery metadata for {imagery_set} is not valid JSON")
            raise ProviderRejected("Metadata response is not valid JSON") from e

        template = parse_metadata(metadata)
        logger.debug(f"Resolved template for {imagery_set}: {template}")
        return template

    async def _get_cached(self, cache_key: str) -> Optional[str]:
        if self.cache_backend is None:
            return None

        try:
            return await self.cache_backend.get(cache_key)
        except CacheError as e:
            logger.warning(f"Template cache read failed, treating as miss: {e}")
            return None

    async def _store(self, cache_key: str, template: str) -> None:
        if self.cache_backend is None:
            return

        try:
            stored = await self.cache_backend.set(cache_key, template, ttl=self.ttl)
        except CacheError as e:
            logger.error(f"Template cache write failed for {cache_key}: {e}")
            return

        if not stored:
            logger.error(f"Template cache write failed for {cache_key}")
