"""
Tile and WMS URL templates for the chart layers.

The depth WMS behind the proxy is served in Web Mercator, so viewport bounds
are projected from WGS84 (EPSG:4326) to EPSG:3857 before being sent.
"""

from typing import Optional, Tuple

from pyproj import Transformer

from engine.bounds import Bounds
from shared.config import settings
from shared.constants import DEPTH_RESOLUTIONS, OSM_TILE_URL

# always_xy=True forces input/output to be (lon, lat) / (x, y) rather than (lat, lon)
TRANSFORM_MERCATOR = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)

# Web Mercator is undefined at the poles
MERCATOR_MAX_LAT = 85.0511287798


def tile_url(layer: str, tile_server: Optional[str] = None) -> str:
    """XYZ template for a chart layer; unknown layers fall back to the base map."""
    if layer in ("seamark", "harbor", "grid"):
        return f"{tile_server or settings.TILE_SERVER_URL}/{layer}/{{z}}/{{x}}/{{y}}.png"
    return OSM_TILE_URL


def depth_wms_url(resolution: str, proxy_url: Optional[str] = None) -> str:
    if resolution not in DEPTH_RESOLUTIONS:
        raise ValueError(f"Unknown depth resolution: {resolution}")
    return f"{proxy_url or settings.PROXY_SERVER_URL}/depth/{resolution}"


def to_mercator(lat: float, lng: float) -> Tuple[float, float]:
    """
    Transform EPSG:4326 (lat, lng) to EPSG:3857 (x, y).
    always_xy expects (lon, lat) order!
    """
    lat = max(-MERCATOR_MAX_LAT, min(MERCATOR_MAX_LAT, lat))
    x, y = TRANSFORM_MERCATOR.transform(lng, lat)
    return x, y


def mercator_bbox(bounds: Bounds) -> str:
    """minx,miny,maxx,maxy in EPSG:3857 for a WMS GetMap request."""
    min_x, min_y = to_mercator(bounds.south, bounds.west)
    max_x, max_y = to_mercator(bounds.north, bounds.east)
    return f"{min_x:.2f},{min_y:.2f},{max_x:.2f},{max_y:.2f}"
