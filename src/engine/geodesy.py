"""
Great-circle distance utilities for the measurement tool.

All points are (lat, lng) tuples in WGS84 degrees.
"""

from math import radians, sin, cos, sqrt, asin, floor
from typing import Sequence, Tuple

from shared.constants import EARTH_RADIUS_M, METERS_PER_NAUTICAL_MILE

LatLng = Tuple[float, float]


def great_circle_m(lat_a: float, lng_a: float, lat_b: float, lng_b: float) -> float:
    """Segment length in meters on a sphere of radius EARTH_RADIUS_M.

    Every leg the measurement tool prices goes through here. The haversine
    term is clamped to [0, 1] before the arcsine, so coincident and
    antipodal points both stay finite.
    """
    half_dlat = radians(lat_b - lat_a) / 2
    half_dlng = radians(lng_b - lng_a) / 2
    h = sin(half_dlat) ** 2 + cos(radians(lat_a)) * cos(radians(lat_b)) * sin(half_dlng) ** 2
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_M * asin(sqrt(h))


def distance(p1: LatLng, p2: LatLng) -> float:
    return great_circle_m(p1[0], p1[1], p2[0], p2[1])


def path_distance(points: Sequence[LatLng]) -> float:
    """Total length in meters of a polyline; 0 for fewer than two points."""
    if len(points) < 2:
        return 0.0
    return sum(distance(points[i - 1], points[i]) for i in range(1, len(points)))


def meters_to_nautical_miles(meters: float) -> float:
    return meters / METERS_PER_NAUTICAL_MILE


def format_distance(meters: float) -> str:
    """
    Human readable distance for the measurement panel.

    Below one kilometre the value is shown in meters, above it in kilometres,
    always followed by the nautical-mile equivalent.
    """
    nm = meters_to_nautical_miles(meters)
    if meters < 1000:
        return f"{meters:.0f} m ({nm:.2f} NM)"
    return f"{meters / 1000:.2f} km ({nm:.2f} NM)"


def _format_dms(value: float, is_latitude: bool) -> str:
    absolute = abs(value)
    degrees = floor(absolute)
    minutes = floor((absolute - degrees) * 60)
    seconds = ((absolute - degrees) * 60 - minutes) * 60

    if is_latitude:
        direction = "N" if value >= 0 else "S"
    else:
        direction = "E" if value >= 0 else "W"

    return f"{degrees}° {minutes}' {seconds:.2f}\" {direction}"


def format_coordinates(coordinates: LatLng, fmt: str = "dd") -> str:
    """
    Format a (lat, lng) pair either as decimal degrees ("dd") or as
    degrees/minutes/seconds ("dms").
    """
    lat, lng = coordinates
    if fmt == "dd":
        return f"{lat:.6f}°, {lng:.6f}°"
    if fmt == "dms":
        return f"{_format_dms(lat, True)}, {_format_dms(lng, False)}"
    raise ValueError(f"Unknown coordinate format: {fmt}")
