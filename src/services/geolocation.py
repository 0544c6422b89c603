"""
Approximate user location from an IP geolocation service.

There is no hard failure mode: when the lookup fails for any reason the
default coordinates are returned instead.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from shared.config import settings
from shared.constants import DEFAULT_COORDINATES
from shared.errors import GeolocationUnavailable
from state.models import LatLng

logger = logging.getLogger("Geolocation")


async def _lookup(session: aiohttp.ClientSession, url: str) -> LatLng:
    try:
        async with session.get(url) as resp:
            if resp.status != 200:
                raise GeolocationUnavailable(f"HTTP {resp.status}")
            data = await resp.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        raise GeolocationUnavailable(str(e)) from e

    try:
        return (float(data["lat"]), float(data["lon"]))
    except (KeyError, TypeError, ValueError) as e:
        raise GeolocationUnavailable(f"Unexpected response: {data!r}") from e


async def locate(session: Optional[aiohttp.ClientSession] = None, url: Optional[str] = None) -> LatLng:
    """Resolve (lat, lng) for the current host, or DEFAULT_COORDINATES."""
    url = url or settings.GEOLOCATION_URL
    try:
        if session is not None:
            return await _lookup(session, url)
        timeout = aiohttp.ClientTimeout(total=settings.GEOLOCATION_TIMEOUT_SECONDS)
        async with aiohttp.ClientSession(timeout=timeout) as own_session:
            return await _lookup(own_session, url)
    except GeolocationUnavailable as e:
        logger.warning(f"Geolocation error: {e}")
        return DEFAULT_COORDINATES
