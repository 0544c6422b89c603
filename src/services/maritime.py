"""
SeaChart data-fetch layer.

Typed fetch operations for the chart's data layers. Every cached fetch:
1. fingerprints the endpoint and its (normalized) query parameters,
2. returns straight from the cache on a hit, without touching the queue,
3. otherwise runs the HTTP request through the rate-limited queue,
4. caches the decoded result on success,
5. raises FetchFailed on any failure, caching nothing.

Harbor data arrives as text and is parsed before caching, so the cache holds
HarborFacility records rather than the raw response.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

import aiohttp
from pydantic import TypeAdapter

from engine.bounds import Bounds
from engine.features import BathymetricContour, HarborFacility, SeaMark
from engine.harbor_parser import parse_harbor_data
from engine.tiles import depth_wms_url, mercator_bbox
from services.cache import FingerprintCache, fingerprint
from services.request_queue import RequestQueue
from shared.config import Settings
from shared.constants import HARBOR_MAX_SIZE, HARBOR_UCID, HARBOR_ZOOM
from shared.errors import FetchFailed

logger = logging.getLogger("MaritimeService")

_SEA_MARKS = TypeAdapter(List[SeaMark])
_CONTOURS = TypeAdapter(List[BathymetricContour])

# Errors that mean "the upstream did not give us usable data"
_FETCH_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, ValueError)


class MaritimeService:
    def __init__(
        self,
        settings: Settings,
        cache: FingerprintCache,
        queue: RequestQueue,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.settings = settings
        self.cache = cache
        self.queue = queue
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=settings.REQUEST_TIMEOUT_SECONDS)

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[aiohttp.ClientSession]:
        """Injected session if there is one, otherwise a short-lived session."""
        if self._session is not None:
            yield self._session
            return
        async with aiohttp.ClientSession(timeout=self._timeout) as session:
            yield session

    # ─── HTTP primitives ──────────────────────────────────

    async def _get_json(self, url: str, params: Dict[str, str]) -> Any:
        async with self._client() as session:
            async with session.get(url, params=params) as resp:
                resp.raise_for_status()
                return await resp.json(content_type=None)

    async def _get_text(self, url: str, params: Dict[str, str]) -> str:
        async with self._client() as session:
            async with session.get(url, params=params) as resp:
                resp.raise_for_status()
                return await resp.text()

    async def _get_bytes(self, url: str, params: Dict[str, str]) -> bytes:
        async with self._client() as session:
            async with session.get(url, params=params) as resp:
                resp.raise_for_status()
                return await resp.read()

    async def _cached_fetch(
        self,
        resource: str,
        url: str,
        params: Dict[str, str],
        request: Callable[[str, Dict[str, str]], Any],
        decode: Callable[[Any], Any],
    ) -> Any:
        key = fingerprint(url, params)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit: {key}")
            return cached

        async def task():
            raw = await request(url, params)
            return decode(raw)

        try:
            data = await self.queue.enqueue(task)
        except _FETCH_ERRORS as e:
            raise FetchFailed(resource, e) from e

        self.cache.put(key, data)
        return data

    # ─── Data layers ──────────────────────────────────────

    async def fetch_sea_marks(self, bounds: Bounds) -> List[SeaMark]:
        bounds = bounds.normalized()
        params = {"bbox": bounds.to_bbox(), "type": "seamark"}
        return await self._cached_fetch(
            "sea marks",
            f"{self.settings.API_BASE_URL}/seamark",
            params,
            self._get_json,
            _SEA_MARKS.validate_python,
        )

    async def fetch_harbor_facilities(self, bounds: Bounds) -> List[HarborFacility]:
        bounds = bounds.normalized()
        # The harbor service names the edges bottom/top/left/right
        params = {
            "b": str(bounds.south),
            "t": str(bounds.north),
            "l": str(bounds.west),
            "r": str(bounds.east),
            "ucid": HARBOR_UCID,
            "maxSize": HARBOR_MAX_SIZE,
            "zoom": HARBOR_ZOOM,
        }
        harbors = await self._cached_fetch(
            "harbor facilities",
            f"{self.settings.PROXY_SERVER_URL}/harbors",
            params,
            self._get_text,
            parse_harbor_data,
        )
        logger.info(f"Fetched {len(harbors)} harbors")
        return harbors

    async def fetch_bathymetric_contours(self, bounds: Bounds) -> List[BathymetricContour]:
        bounds = bounds.normalized()
        params = {"bbox": bounds.to_bbox()}
        return await self._cached_fetch(
            "bathymetric contours",
            f"{self.settings.API_BASE_URL}/contours",
            params,
            self._get_json,
            _CONTOURS.validate_python,
        )

    async def fetch_depth_image(
        self,
        bounds: Bounds,
        resolution: str = "10m",
        width: int = 256,
        height: int = 256,
    ) -> bytes:
        """PNG depth overlay for the viewport from the proxied WMS."""
        params = {
            "width": str(width),
            "height": str(height),
            "bbox": mercator_bbox(bounds.normalized()),
        }
        return await self._cached_fetch(
            f"depth {resolution}",
            depth_wms_url(resolution, self.settings.PROXY_SERVER_URL),
            params,
            self._get_bytes,
            bytes,
        )

    # ─── Availability ─────────────────────────────────────

    async def check_tile_server_access(self) -> bool:
        """HEAD a known sea mark tile; any failure means "not reachable"."""
        url = f"{self.settings.TILE_SERVER_URL}/seamark/1/1/1.png"
        try:
            async with self._client() as session:
                async with session.head(url, headers={"Cache-Control": "no-cache"}) as resp:
                    return 200 <= resp.status < 300
        except Exception as e:
            logger.error(f"Error checking tile server access: {e}")
            return False
