"""
Adaptive latitude/longitude grid.

The grid spacing is a step function of the zoom level so that a roughly
constant number of lines is visible on screen. Lines are snapped to
multiples of the spacing, which keeps them stable while the map is panned.

    grid = generate_grid(Bounds(50.0, -2.0, 52.0, 1.0), zoom=8)
    [line.label for line in grid.latitude_lines]
    # → ['N 50°', "N 50° 30'", 'N 51°', "N 51° 30'", 'N 52°']
"""

from dataclasses import dataclass, field
from math import ceil, floor
from typing import List, Tuple

from engine.bounds import Bounds
from shared.constants import (
    GRID_FINEST_TIER,
    GRID_SPACING_TIERS,
    LAT_RANGE,
    LNG_RANGE,
)

# Rounding applied to line positions so that k * spacing stays exact
_VALUE_DECIMALS = 9


@dataclass(frozen=True)
class GridLine:
    value: float
    coordinates: Tuple[Tuple[float, float], Tuple[float, float]]
    label: str
    show_label: bool = True


@dataclass(frozen=True)
class Grid:
    zoom: int
    spacing: float
    latitude_lines: List[GridLine] = field(default_factory=list)
    longitude_lines: List[GridLine] = field(default_factory=list)


def _tier(zoom: int) -> Tuple[float, bool]:
    for max_zoom, spacing, labelled in GRID_SPACING_TIERS:
        if zoom <= max_zoom:
            return spacing, labelled
    return GRID_FINEST_TIER


def grid_spacing(zoom: int) -> float:
    """Line spacing in degrees for a zoom level."""
    return _tier(zoom)[0]


def show_labels(zoom: int) -> bool:
    return _tier(zoom)[1]


def format_grid_label(value: float, is_latitude: bool) -> str:
    """
    Format a grid line position as "<hemisphere> <deg>° [<min>'] [<sec>\"]".

    Minutes and seconds are left out when they are zero, so 53.5 becomes
    "N 53° 30'" and -4.01 becomes "W 4° 36\"".
    """
    if is_latitude:
        hemisphere = "N" if value >= 0 else "S"
    else:
        hemisphere = "E" if value >= 0 else "W"

    total_seconds = round(abs(value) * 3600)
    degrees, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    parts = [f"{hemisphere} {degrees}°"]
    if minutes:
        parts.append(f"{minutes}'")
    if seconds:
        parts.append(f'{seconds}"')
    return " ".join(parts)


def _line_values(lower: float, upper: float, spacing: float, valid: Tuple[float, float]) -> List[float]:
    start = floor(lower / spacing)
    stop = ceil(upper / spacing)

    values = []
    for k in range(start, stop + 1):
        value = round(k * spacing, _VALUE_DECIMALS)
        if valid[0] <= value <= valid[1]:
            values.append(value)
    return values


def _clip(value: float, valid: Tuple[float, float]) -> float:
    return min(valid[1], max(valid[0], value))


def _clipped(bounds: Bounds) -> Bounds:
    return Bounds(
        south=_clip(min(bounds.south, bounds.north), LAT_RANGE),
        west=_clip(min(bounds.west, bounds.east), LNG_RANGE),
        north=_clip(max(bounds.south, bounds.north), LAT_RANGE),
        east=_clip(max(bounds.west, bounds.east), LNG_RANGE),
    )


def line_count(bounds: Bounds, zoom: int) -> int:
    """Upper bound on the number of lines ``generate_grid`` returns, without building them."""
    spacing = grid_spacing(zoom)
    view = _clipped(bounds)
    lat_lines = ceil(view.north / spacing) - floor(view.south / spacing) + 1
    lng_lines = ceil(view.east / spacing) - floor(view.west / spacing) + 1
    return lat_lines + lng_lines


def generate_grid(bounds: Bounds, zoom: int) -> Grid:
    """
    Compute the grid lines covering ``bounds`` at ``zoom``.

    Pure function of its inputs: the same viewport and zoom always produce
    the same grid.
    """
    spacing = grid_spacing(zoom)
    labelled = show_labels(zoom)

    south, west, north, east = _clipped(bounds)

    latitude_lines = [
        GridLine(
            value=lat,
            coordinates=((lat, west), (lat, east)),
            label=format_grid_label(lat, is_latitude=True),
            show_label=labelled,
        )
        for lat in _line_values(south, north, spacing, LAT_RANGE)
    ]
    longitude_lines = [
        GridLine(
            value=lng,
            coordinates=((south, lng), (north, lng)),
            label=format_grid_label(lng, is_latitude=False),
            show_label=labelled,
        )
        for lng in _line_values(west, east, spacing, LNG_RANGE)
    ]

    return Grid(
        zoom=zoom,
        spacing=spacing,
        latitude_lines=latitude_lines,
        longitude_lines=longitude_lines,
    )
