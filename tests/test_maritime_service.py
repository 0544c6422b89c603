"""
Unit tests for the data-fetch layer.

A fake aiohttp session is injected so no network access happens; it records
every request so cache hits can be told apart from queued fetches.
"""

import asyncio
from unittest.mock import MagicMock

import aiohttp
import pytest

from engine.bounds import Bounds
from engine.features import BathymetricContour, HarborFacility, SeaMark
from services.cache import FingerprintCache
from services.maritime import MaritimeService
from services.request_queue import RequestQueue
from shared.config import Settings
from shared.errors import FetchFailed

BOUNDS = Bounds.from_corners((53.65, 5.66), (54.36, 10.09))


class FakeResponse:
    def __init__(self, status=200, json_data=None, text="", body=b""):
        self.status = status
        self._json = json_data
        self._text = text
        self._body = body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status >= 400:
            raise aiohttp.ClientResponseError(
                request_info=MagicMock(), history=(), status=self.status, message="error"
            )

    async def json(self, content_type=None):
        if self._json is None:
            raise ValueError("not json")
        return self._json

    async def text(self):
        return self._text

    async def read(self):
        return self._body


class FakeSession:
    def __init__(self, responses=None, error=None):
        self.responses = responses or {}
        self.error = error
        self.calls = []

    def _respond(self, method, url, params):
        self.calls.append((method, url, dict(params or {})))
        if self.error is not None:
            raise self.error
        return self.responses.get(url, FakeResponse(status=404))

    def get(self, url, params=None, **kwargs):
        return self._respond("GET", url, params)

    def head(self, url, **kwargs):
        return self._respond("HEAD", url, None)


def make_service(session, clock=None):
    settings = Settings(
        PROXY_SERVER_URL="http://proxy/api",
        API_BASE_URL="http://osm/api",
        TILE_SERVER_URL="http://tiles",
    )
    cache = FingerprintCache(ttl_seconds=1800, clock=clock) if clock else FingerprintCache()
    return MaritimeService(settings, cache, RequestQueue(rate_limit=1000), session=session)


HARBOR_TEXT = (
    "putHarbourMarker(1, 8.1, 53.9, 'Wilhelmshaven', 'DE', 3);\n"
    "putHarbourMarker(2, 9.9, 54.3, 'Kiel', 'DE', 4)"
)

# -----------------------------------------------------------------------------
# Harbors
# -----------------------------------------------------------------------------

def test_fetch_harbors_parses_and_caches():
    session = FakeSession({"http://proxy/api/harbors": FakeResponse(text=HARBOR_TEXT)})
    service = make_service(session)

    async def scenario():
        first = await service.fetch_harbor_facilities(BOUNDS)
        second = await service.fetch_harbor_facilities(BOUNDS)
        return first, second

    first, second = asyncio.run(scenario())

    assert [h.name for h in first] == ["Wilhelmshaven", "Kiel"]
    assert all(isinstance(h, HarborFacility) for h in first)
    assert second == first
    # second call was a cache hit
    assert len(session.calls) == 1

    _, url, params = session.calls[0]
    assert url == "http://proxy/api/harbors"
    assert params == {
        "b": "53.65", "t": "54.36", "l": "5.66", "r": "10.09",
        "ucid": "2", "maxSize": "4", "zoom": "10",
    }


def test_expired_entry_is_refetched():
    now = {"ms": 0}
    session = FakeSession({"http://proxy/api/harbors": FakeResponse(text=HARBOR_TEXT)})
    service = make_service(session, clock=lambda: now["ms"])

    async def scenario():
        await service.fetch_harbor_facilities(BOUNDS)
        now["ms"] += 30 * 60 * 1000
        await service.fetch_harbor_facilities(BOUNDS)

    asyncio.run(scenario())
    assert len(session.calls) == 2

# -----------------------------------------------------------------------------
# JSON layers
# -----------------------------------------------------------------------------

def test_fetch_sea_marks():
    payload = [
        {"id": "sm-1", "type": "buoy", "coordinates": [8.0, 54.0], "color": "red"},
        {"id": "sm-2", "type": "light", "coordinates": [8.5, 54.1], "lightCharacteristics": "Fl(2) 10s"},
    ]
    session = FakeSession({"http://osm/api/seamark": FakeResponse(json_data=payload)})
    service = make_service(session)

    marks = asyncio.run(service.fetch_sea_marks(BOUNDS))

    assert all(isinstance(m, SeaMark) for m in marks)
    assert marks[1].light_characteristics == "Fl(2) 10s"
    _, _, params = session.calls[0]
    assert params == {"bbox": "5.66,53.65,10.09,54.36", "type": "seamark"}


def test_fetch_contours():
    payload = [{"depth": 10, "coordinates": [[8.0, 54.0], [8.1, 54.05]]}]
    session = FakeSession({"http://osm/api/contours": FakeResponse(json_data=payload)})
    service = make_service(session)

    contours = asyncio.run(service.fetch_bathymetric_contours(BOUNDS))

    assert contours == [BathymetricContour(depth=10, coordinates=[(8.0, 54.0), (8.1, 54.05)])]


def test_fetch_depth_image_uses_mercator_bbox():
    session = FakeSession({"http://proxy/api/depth/100m": FakeResponse(body=b"\x89PNG")})
    service = make_service(session)

    image = asyncio.run(service.fetch_depth_image(BOUNDS, "100m", width=512, height=256))

    assert image == b"\x89PNG"
    _, _, params = session.calls[0]
    assert params["width"] == "512"
    assert params["height"] == "256"
    assert len(params["bbox"].split(",")) == 4

# -----------------------------------------------------------------------------
# Failures
# -----------------------------------------------------------------------------

def test_http_error_raises_fetch_failed_and_caches_nothing():
    session = FakeSession({"http://proxy/api/harbors": FakeResponse(status=500)})
    service = make_service(session)

    with pytest.raises(FetchFailed) as exc:
        asyncio.run(service.fetch_harbor_facilities(BOUNDS))

    assert exc.value.resource == "harbor facilities"
    assert isinstance(exc.value.cause, aiohttp.ClientResponseError)
    assert len(service.cache) == 0


def test_network_error_raises_fetch_failed():
    session = FakeSession(error=aiohttp.ClientConnectionError("connection refused"))
    service = make_service(session)

    with pytest.raises(FetchFailed, match="sea marks"):
        asyncio.run(service.fetch_sea_marks(BOUNDS))


def test_invalid_payload_raises_fetch_failed():
    payload = [{"id": "x", "type": "submarine", "coordinates": [0, 0]}]
    session = FakeSession({"http://osm/api/seamark": FakeResponse(json_data=payload)})
    service = make_service(session)

    with pytest.raises(FetchFailed):
        asyncio.run(service.fetch_sea_marks(BOUNDS))

# -----------------------------------------------------------------------------
# Tile server reachability
# -----------------------------------------------------------------------------

def test_tile_server_access():
    session = FakeSession({"http://tiles/seamark/1/1/1.png": FakeResponse(status=200)})
    assert asyncio.run(make_service(session).check_tile_server_access()) is True

    session = FakeSession({"http://tiles/seamark/1/1/1.png": FakeResponse(status=503)})
    assert asyncio.run(make_service(session).check_tile_server_access()) is False

    session = FakeSession(error=aiohttp.ClientConnectionError("dns"))
    assert asyncio.run(make_service(session).check_tile_server_access()) is False
    assert session.calls[0][0] == "HEAD"
