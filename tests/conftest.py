"""tileproxy tests configuration."""

from threading import Thread
from typing import Any, Generator, Optional, Union

import httpx
import pytest
import redis
from fakeredis import TcpFakeServer
from starlette.testclient import TestClient

from tileproxy.cache.backends import CacheError

METADATA_HOST = "dev.virtualearth.net"

IMAGE_URL = (
    "https://{subdomain}.ssl.ak.dynamic.tiles.virtualearth.net/comp/ch/{quadkey}"
    "?mkt={culture}&it=G,L&shading=hill&og=2505&n=z&zl={zoom}"
)


def metadata_document(
    image_url: str = IMAGE_URL, subdomains: tuple = ("t0", "t1", "t2", "t3")
) -> dict:
    """Imagery metadata response body."""
    return {
        "authenticationResultCode": "ValidCredentials",
        "statusCode": 200,
        "statusDescription": "OK",
        "resourceSets": [
            {
                "estimatedTotal": 1,
                "resources": [
                    {
                        "__type": "ImageryMetadata:http://schemas.microsoft.com/search/local/ws/rest/v1",
                        "imageHeight": 256,
                        "imageWidth": 256,
                        "imageUrl": image_url,
                        "imageUrlSubdomains": list(subdomains),
                        "zoomMax": 21,
                        "zoomMin": 1,
                    }
                ],
            }
        ],
    }


Reply = Union[httpx.Response, Exception]


class FakeProvider:
    """Stand-in for the imagery metadata and tile endpoints.

    Queued replies are served in order, then the defaults: a valid metadata
    document and a small JPEG payload.
    """

    def __init__(self):
        """Initialize an empty call log."""
        self.metadata_calls: list[httpx.Request] = []
        self.tile_calls: list[httpx.Request] = []
        self.metadata_replies: list[Reply] = []
        self.tile_replies: list[Reply] = []
        self.document = metadata_document()

    def handler(self, request: httpx.Request) -> httpx.Response:
        """httpx.MockTransport handler."""
        if request.url.host == METADATA_HOST:
            self.metadata_calls.append(request)
            reply: Optional[Reply] = (
                self.metadata_replies.pop(0) if self.metadata_replies else None
            )
            if reply is None:
                reply = httpx.Response(200, json=self.document)
        else:
            self.tile_calls.append(request)
            reply = self.tile_replies.pop(0) if self.tile_replies else None
            if reply is None:
                reply = httpx.Response(
                    200,
                    content=b"\xff\xd8\xff\xe0tile",
                    headers={"Content-Type": "image/jpeg", "ETag": '"abc"'},
                )

        if isinstance(reply, Exception):
            raise reply

        return reply


@pytest.fixture
def provider() -> FakeProvider:
    """Fake imagery provider."""
    return FakeProvider()


@pytest.fixture
def mock_client(provider) -> httpx.AsyncClient:
    """HTTP client routed to the fake provider."""
    return httpx.AsyncClient(transport=httpx.MockTransport(provider.handler))


class MockCacheBackend:
    """Mock cache backend for testing."""

    def __init__(self):
        """Initialize mock cache backend."""
        self.storage: dict[str, str] = {}
        self.get_calls: list[str] = []
        self.set_calls: list[tuple] = []
        self.fail_get = False
        self.fail_set = False

    async def get(self, key: str):
        """Get value from mock storage."""
        self.get_calls.append(key)
        if self.fail_get:
            raise CacheError("store down")
        return self.storage.get(key)

    async def set(self, key: str, value, ttl=None):
        """Set value in mock storage."""
        self.set_calls.append((key, value, ttl))
        if self.fail_set:
            return False
        self.storage[key] = value
        return True


@pytest.fixture
def cache_backend() -> MockCacheBackend:
    """In-memory cache backend."""
    return MockCacheBackend()


@pytest.fixture(scope="session")
def redis_server() -> Generator[tuple[str, int], Any, Any]:
    """FakeRedis fixture."""
    server = TcpFakeServer(("127.0.0.1", 0), server_type="redis")
    t = Thread(target=server.serve_forever, daemon=True)
    t.start()
    yield server.server_address[0], server.server_address[1]
    server.shutdown()
    server.server_close()
    t.join()


@pytest.fixture(autouse=True)
def set_env(redis_server, monkeypatch):
    """Set env variables for tests"""
    host, port = redis_server
    monkeypatch.setenv("TILEPROXY_CACHE_ENABLE", "TRUE")
    monkeypatch.setenv("TILEPROXY_CACHE_REDIS_HOST", host)
    monkeypatch.setenv("TILEPROXY_CACHE_REDIS_PORT", str(port))
    monkeypatch.delenv("TILEPROXY_CACHE_TEMPLATE_TTL", raising=False)
    monkeypatch.delenv("TILEPROXY_PROVIDER_METADATA_URL", raising=False)


@pytest.fixture
def redis_client(redis_server) -> Generator[redis.Redis, Any, Any]:
    """Synchronous client on the fake Redis server, flushed per test."""
    host, port = redis_server
    client = redis.Redis(host=host, port=port)
    client.flushall()
    yield client
    client.close()


@pytest.fixture
def app(set_env, redis_client, provider) -> Generator[TestClient, Any, Any]:
    """Create App with the upstream provider mocked."""
    from tileproxy.virtualearth.dependencies import get_http_client
    from tileproxy.virtualearth.main import app

    # the client is bound to the TestClient event loop, create it lazily
    async def mocked_client():
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(provider.handler)
        ) as client:
            yield client

    app.dependency_overrides[get_http_client] = mocked_client

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
