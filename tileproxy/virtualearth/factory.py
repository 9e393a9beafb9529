"""tileproxy.virtualearth route factory."""

from typing import Annotated, Any, Callable

import httpx
from attrs import define, field
from fastapi import APIRouter, Depends, Path
from starlette.requests import Request
from starlette.responses import Response

from .dependencies import get_tile_proxy
from .proxy import DEFAULT_CULTURE, MAX_ZOOM, TileProxy, parse_tile_request

# Framing headers no longer match once httpx has decoded the body
EXCLUDED_HEADERS = {
    "connection",
    "content-encoding",
    "content-length",
    "keep-alive",
    "transfer-encoding",
}


def tile_response(upstream: httpx.Response) -> Response:
    """Forward an upstream tile response: body, status and headers."""
    response = Response(content=upstream.content, status_code=upstream.status_code)
    response.raw_headers.extend(
        (name.encode("latin-1"), value.encode("latin-1"))
        for name, value in upstream.headers.multi_items()
        if name.lower() not in EXCLUDED_HEADERS
    )
    return response


@define(kw_only=True)
class TileProxyFactory:
    """Quadkey tile proxy route factory.

    Registers a single catch-all GET route. Validation happens inside the
    endpoint rather than in the route pattern, so that a missing credential
    is reported (403) before an unknown path (404).
    """

    router: APIRouter = field(factory=APIRouter)

    proxy_dependency: Callable[..., Any] = get_tile_proxy

    default_culture: str = DEFAULT_CULTURE

    max_zoom: int = MAX_ZOOM

    def __attrs_post_init__(self):
        """Post Init: register routes."""
        self.register_routes()

    def register_routes(self):
        """This Method register routes to the router."""
        self.tile()

    def tile(self):
        """Register /{imagerySet}/{z}/{x}/{y}.jpg endpoint."""

        @self.router.get(
            "/{tile_path:path}",
            response_class=Response,
            responses={
                200: {
                    "content": {"image/jpeg": {}},
                    "description": "Return the upstream tile.",
                },
                403: {"description": "Missing credential or rejected by provider."},
                404: {"description": "Not a tile path."},
            },
            operation_id="getTile",
        )
        async def tile_endpoint(
            request: Request,
            tile_path: Annotated[
                str, Path(description="`{imagerySet}/{zoom}/{x}/{y}.jpg`")
            ],
            proxy: TileProxy = Depends(self.proxy_dependency),
        ):
            """Return a tile for `/{imagerySet}/{zoom}/{x}/{y}.jpg?key={key}`."""
            tile = parse_tile_request(
                "/" + tile_path,
                request.query_params,
                default_culture=self.default_culture,
                max_zoom=self.max_zoom,
            )
            upstream = await proxy.get_tile(tile)
            return tile_response(upstream)
