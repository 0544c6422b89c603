from typing import NamedTuple, Tuple

from shared.constants import BOUNDS_PRECISION


class Bounds(NamedTuple):
    """Viewport described by its south-west and north-east corners (degrees)."""

    south: float
    west: float
    north: float
    east: float

    @classmethod
    def from_corners(cls, south_west: Tuple[float, float], north_east: Tuple[float, float]) -> "Bounds":
        """Build from ((south, west), (north, east)) lat/lng pairs."""
        return cls(south_west[0], south_west[1], north_east[0], north_east[1])

    def normalized(self, precision: int = BOUNDS_PRECISION) -> "Bounds":
        return Bounds(*(round(v, precision) for v in self))

    def to_bbox(self) -> str:
        """west,south,east,north as expected by the OpenSeaMap API."""
        return f"{self.west},{self.south},{self.east},{self.north}"
