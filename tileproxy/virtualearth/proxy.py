"""Tile request validation and the resolve/fetch/retry protocol."""

import logging
import re
from typing import Mapping, Optional

import httpx
from attrs import define, field

from .errors import MissingCredential, RouteNotFound, UpstreamUnavailable
from .fetcher import TileFetcher
from .quadkey import tile_to_quadkey
from .resolver import TemplateResolver

logger = logging.getLogger(__name__)

# Digit counts are capped so int() stays cheap; ranges are checked after parsing
TILE_PATH_PATTERN = re.compile(
    r"/(\w+)/(\d{1,10})/(\d{1,10})/(\d{1,10})\.jpg", re.ASCII
)

DEFAULT_CULTURE = "en-US"

# Deepest level of detail served by the imagery provider
MAX_ZOOM = 23


@define(frozen=True, kw_only=True)
class TileRequest:
    """A validated tile request."""

    imagery_set: str
    z: int
    x: int
    y: int
    credential: str
    culture: str = DEFAULT_CULTURE
    quadkey: str = field(init=False)

    @quadkey.default
    def _encode_quadkey(self) -> str:
        return tile_to_quadkey(self.x, self.y, self.z)


def parse_tile_request(
    path: str,
    query_params: Mapping[str, str],
    default_culture: str = DEFAULT_CULTURE,
    max_zoom: int = MAX_ZOOM,
) -> TileRequest:
    """Validate an incoming tile path and query.

    The credential is checked before the path, so a request without ``key``
    is rejected whatever its path.

    Raises:
        MissingCredential: no (or empty) ``key`` query parameter.
        RouteNotFound: path is not ``/{imagerySet}/{zoom}/{x}/{y}.jpg``, or
            the tile lies outside zoom ``0..max_zoom`` and its ``2**zoom`` grid.
    """
    credential = query_params.get("key")
    if not credential:
        raise MissingCredential("Missing 'key' query parameter")

    match = TILE_PATH_PATTERN.fullmatch(path)
    if match is None:
        raise RouteNotFound(f"No tile route for {path}")

    imagery_set, z, x, y = match.groups()
    z, x, y = int(z), int(x), int(y)
    if z > max_zoom:
        raise RouteNotFound(f"Zoom {z} is above the maximum of {max_zoom}")

    if x >= 2**z or y >= 2**z:
        raise RouteNotFound(f"Tile {x}/{y} is outside the zoom {z} grid")

    return TileRequest(
        imagery_set=imagery_set,
        z=z,
        x=x,
        y=y,
        credential=credential,
        culture=query_params.get("culture") or default_culture,
    )


@define(kw_only=True)
class TileProxy:
    """Serve tiles through a resolved endpoint template.

    A tile is first requested with the template as currently resolved
    (usually cached). If that request is not successful the template is
    considered stale: it is refreshed from the metadata endpoint and the
    tile is requested exactly once more. The second response is returned
    whatever its status.
    """

    resolver: TemplateResolver
    fetcher: TileFetcher

    async def get_tile(self, tile: TileRequest) -> httpx.Response:
        """Fetch a tile, retrying once with a refreshed template."""
        response = await self._attempt(tile, force_refresh=False)
        if response is not None and response.is_success:
            return response

        logger.warning(
            f"Tile request for {tile.imagery_set}/{tile.quadkey} failed "
            f"({response.status_code if response is not None else 'no response'}), "
            "refreshing endpoint template"
        )

        response = await self._attempt(tile, force_refresh=True)
        if response is None:
            raise UpstreamUnavailable(
                f"Tile endpoint unreachable for {tile.imagery_set}/{tile.quadkey}"
            )

        return response

    async def _attempt(
        self, tile: TileRequest, force_refresh: bool
    ) -> Optional[httpx.Response]:
        """Resolve a template and fetch the tile; None on transport failure.

        ProviderRejected from the resolver propagates.
        """
        template = await self.resolver.resolve(
            tile.imagery_set, tile.credential, force_refresh=force_refresh
        )
        try:
            return await self.fetcher.fetch(template, tile.quadkey, tile.z, tile.culture)
        except httpx.HTTPError as e:
            logger.warning(f"Tile request for {tile.imagery_set} failed: {e!r}")
            return None
