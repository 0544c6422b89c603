"""
SeaChart: grid, distance & measurement API

Endpoints:
    GET    /api/v1/grid
    POST   /api/v1/distance
    GET    /api/v1/measurements
    POST   /api/v1/measurements
    DELETE /api/v1/measurements
    DELETE /api/v1/measurements/{path_id}
    GET    /api/v1/location
"""

import logging
from dataclasses import asdict
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from api.dependencies import get_measurement_tool, get_store, viewport
from engine.bounds import Bounds
from engine.geodesy import format_distance, meters_to_nautical_miles, path_distance
from engine.grid import generate_grid, line_count
from services.geolocation import locate
from services.measurement import MeasurementTool
from shared.constants import GRID_MAX_LINES
from state.store import MapStore

logger = logging.getLogger("MeasureAPI")

router = APIRouter(prefix="/api/v1", tags=["measure"])


class DistanceRequest(BaseModel):
    points: List[Tuple[float, float]]


class PointIn(BaseModel):
    coordinates: Tuple[float, float]
    label: Optional[str] = None


class MeasurementRequest(BaseModel):
    points: List[PointIn]


def _distance_payload(meters: float) -> dict:
    return {
        "distance_m": round(meters, 1),
        "distance_nm": round(meters_to_nautical_miles(meters), 3),
        "formatted": format_distance(meters),
    }


@router.get("/grid")
async def coordinate_grid(
    bounds: Bounds = Depends(viewport),
    zoom: int = Query(..., ge=0, le=22),
):
    if line_count(bounds, zoom) > GRID_MAX_LINES:
        raise HTTPException(
            status_code=422,
            detail=f"INVALID_BOUNDS: viewport too wide for a grid at zoom {zoom}",
        )
    grid = generate_grid(bounds, zoom)
    return asdict(grid)


@router.post("/distance")
async def measure_distance(req: DistanceRequest):
    """Price a polyline without storing it."""
    return _distance_payload(path_distance(req.points))


@router.get("/measurements")
async def list_measurements(store: MapStore = Depends(get_store)):
    return {
        "paths": [p.to_json_dict() for p in store.measurement_paths],
        "activeId": store.active_measurement_id,
    }


@router.post("/measurements")
async def create_measurement(
    req: MeasurementRequest,
    tool: MeasurementTool = Depends(get_measurement_tool),
):
    tool.cancel()
    for point in req.points:
        tool.add_point(point.coordinates, point.label)

    path = tool.finish()
    if path is None:
        raise HTTPException(status_code=422, detail="INVALID_PATH: at least two points are required")

    return {"path": path.to_json_dict(), **_distance_payload(path.distance)}


@router.delete("/measurements/{path_id}")
async def delete_measurement(path_id: str, store: MapStore = Depends(get_store)):
    store.remove_measurement_path(path_id)
    return {"activeId": store.active_measurement_id, "total": len(store.measurement_paths)}


@router.delete("/measurements")
async def clear_measurements(store: MapStore = Depends(get_store)):
    store.clear_measurements()
    return {"activeId": None, "total": 0}


@router.get("/location")
async def user_location(store: MapStore = Depends(get_store)):
    location = await locate()
    store.set_user_location(location)
    return {"location": list(location), "center": list(store.map_settings.center)}
