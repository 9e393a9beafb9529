"""Upstream tile requests."""

import logging

import httpx
from attrs import define

logger = logging.getLogger(__name__)


def fill_template(template: str, quadkey: str, zoom: int, culture: str) -> str:
    """Substitute tile parameters into an endpoint template.

    Placeholders are replaced literally, first occurrence only, in the order
    quadkey, culture, zoom.
    """
    return (
        template.replace("{quadkey}", quadkey, 1)
        .replace("{culture}", culture, 1)
        .replace("{zoom}", str(zoom), 1)
    )


@define
class TileFetcher:
    """Fetch tiles from a resolved endpoint template."""

    client: httpx.AsyncClient

    async def fetch(
        self, template: str, quadkey: str, zoom: int, culture: str
    ) -> httpx.Response:
        """GET the tile and return the upstream response as-is."""
        url = fill_template(template, quadkey, zoom, culture)
        logger.debug(f"Fetching tile {url}")
        return await self.client.get(url)
