"""tileproxy errors."""

import logging
from typing import Dict, Type

from fastapi import FastAPI
from starlette import status
from starlette.requests import Request
from starlette.responses import PlainTextResponse

logger = logging.getLogger(__name__)


class TileProxyError(Exception):
    """Base exception class."""


class MissingCredential(TileProxyError):
    """No provider credential in the request."""


class RouteNotFound(TileProxyError):
    """Request path is not a tile path."""


class ProviderRejected(TileProxyError):
    """Imagery metadata could not be obtained or parsed."""


class UpstreamUnavailable(TileProxyError):
    """Tile endpoint could not be reached on the final attempt."""


DEFAULT_STATUS_CODES: Dict[Type[Exception], int] = {
    MissingCredential: status.HTTP_403_FORBIDDEN,
    RouteNotFound: status.HTTP_404_NOT_FOUND,
    ProviderRejected: status.HTTP_403_FORBIDDEN,
    UpstreamUnavailable: status.HTTP_502_BAD_GATEWAY,
}

STATUS_PHRASES: Dict[int, str] = {
    status.HTTP_403_FORBIDDEN: "Forbidden",
    status.HTTP_404_NOT_FOUND: "Not Found",
    status.HTTP_502_BAD_GATEWAY: "Bad Gateway",
}


def exception_handler_factory(status_code: int):
    """Create a FastAPI exception handler returning the bare status phrase."""

    def handler(request: Request, exc: Exception):
        if status_code >= 500:
            logger.error(f"{type(exc).__name__}: {exc}")
        else:
            logger.debug(f"{type(exc).__name__}: {exc}")

        return PlainTextResponse(
            STATUS_PHRASES.get(status_code, ""), status_code=status_code
        )

    return handler


def add_exception_handlers(
    app: FastAPI, status_codes: Dict[Type[Exception], int]
) -> None:
    """Add exception handlers to the FastAPI app."""
    for exc, code in status_codes.items():
        app.add_exception_handler(exc, exception_handler_factory(code))
