from fastapi import HTTPException, Query, Request

from engine.bounds import Bounds
from services.layer_controller import LayerController
from services.maritime import MaritimeService
from services.measurement import MeasurementTool
from shared.constants import LAYER_NAMES
from state.store import MapStore


def get_store(request: Request) -> MapStore:
    return request.app.state.store


def get_service(request: Request) -> MaritimeService:
    return request.app.state.service


def get_layer_controller(request: Request) -> LayerController:
    return request.app.state.layers


def get_measurement_tool(request: Request) -> MeasurementTool:
    return request.app.state.measurement


def viewport(
    south: float = Query(..., ge=-90.0, le=90.0),
    west: float = Query(..., ge=-180.0, le=180.0),
    north: float = Query(..., ge=-90.0, le=90.0),
    east: float = Query(..., ge=-180.0, le=180.0),
) -> Bounds:
    if south > north:
        raise HTTPException(status_code=422, detail="INVALID_BOUNDS: south must not exceed north")
    return Bounds(south, west, north, east)


def known_layer(name: str) -> str:
    if name not in LAYER_NAMES:
        raise HTTPException(status_code=404, detail=f"UNKNOWN_LAYER: {name}")
    return name
