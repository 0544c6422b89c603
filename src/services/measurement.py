"""
Distance measurement tool.

Collects the points the user clicks, prices each leg with the haversine
distance and, once finished, hands a MeasurementPath over to the store.
Only the in-progress points live here; completed paths belong to the store.
"""

import logging
import uuid
from typing import List, Optional

from engine.geodesy import distance, path_distance
from state.models import LatLng, MeasurementPath, MeasurementPoint
from state.store import MapStore

logger = logging.getLogger("MeasurementTool")


class MeasurementTool:
    def __init__(self, store: MapStore):
        self.store = store
        self.points: List[MeasurementPoint] = []

    def _coordinates(self) -> List[LatLng]:
        return [p.coordinates for p in self.points]

    def add_point(self, coordinates: LatLng, label: Optional[str] = None) -> MeasurementPoint:
        point = MeasurementPoint(coordinates=coordinates, label=label)
        self.points.append(point)
        return point

    def undo(self) -> Optional[MeasurementPoint]:
        """Drop the last point, if any."""
        return self.points.pop() if self.points else None

    def cancel(self) -> None:
        self.points = []

    def segment_distances(self) -> List[float]:
        coords = self._coordinates()
        return [distance(coords[i - 1], coords[i]) for i in range(1, len(coords))]

    def current_distance(self) -> float:
        return path_distance(self._coordinates())

    def finish(self) -> Optional[MeasurementPath]:
        """
        Finalize the in-progress points into a MeasurementPath and store it.

        Returns None (and stores nothing) when fewer than two points were
        collected. The in-progress points are cleared either way.
        """
        points, self.points = self.points, []
        if len(points) < 2:
            return None

        path = MeasurementPath(
            id=str(uuid.uuid4()),
            points=points,
            distance=path_distance([p.coordinates for p in points]),
        )
        self.store.add_measurement_path(path)
        logger.info(f"Measured {len(points)} points: {path.distance:.1f} m")
        return path
