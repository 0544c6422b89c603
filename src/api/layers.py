"""
SeaChart: layer & view API

Exposes the map store to the browser UI and loads data layers for the
current viewport through the layer controller.

Endpoints:
    GET    /api/v1/settings
    POST   /api/v1/layers/{name}/toggle
    GET    /api/v1/layers/{name}/features
    POST   /api/v1/layers/refresh
    PUT    /api/v1/view
    PUT    /api/v1/windy
    DELETE /api/v1/windy
    GET    /api/v1/tiles
    GET    /api/v1/tiles/status
"""

import logging
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, ValidationError

from api.dependencies import (
    get_layer_controller,
    get_service,
    get_store,
    known_layer,
    viewport,
)
from engine.bounds import Bounds
from engine.tiles import depth_wms_url, tile_url
from services.layer_controller import LayerController
from services.maritime import MaritimeService
from shared.constants import DATA_LAYERS, DEPTH_RESOLUTIONS
from shared.errors import FetchFailed
from state.store import MapStore

logger = logging.getLogger("LayersAPI")

router = APIRouter(prefix="/api/v1", tags=["layers"])


class ViewRequest(BaseModel):
    center: Tuple[float, float]
    zoom: int = Field(..., ge=0, le=22)


class WindyRequest(BaseModel):
    overlay: Optional[str] = None
    level: Optional[str] = None
    timestamp: Optional[int] = None


class RefreshRequest(BaseModel):
    south: float = Field(..., ge=-90.0, le=90.0)
    west: float = Field(..., ge=-180.0, le=180.0)
    north: float = Field(..., ge=-90.0, le=90.0)
    east: float = Field(..., ge=-180.0, le=180.0)


def _dump(items: List[BaseModel]) -> List[dict]:
    return [item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in items]


def _settings_payload(store: MapStore) -> dict:
    return {
        "mapSettings": store.map_settings.to_json_dict(),
        "windyOptions": store.windy_options.to_json_dict(),
        "userLocation": list(store.user_location) if store.user_location else None,
        "activeMeasurementId": store.active_measurement_id,
    }


@router.get("/settings")
async def get_settings(store: MapStore = Depends(get_store)):
    return _settings_payload(store)


@router.post("/layers/{name}/toggle")
async def toggle_layer(name: str = Depends(known_layer), store: MapStore = Depends(get_store)):
    store.toggle_layer(name)
    return {"layer": name, "state": store.layers[name].to_json_dict()}


@router.get("/layers/{name}/features")
async def layer_features(
    name: str = Depends(known_layer),
    bounds: Bounds = Depends(viewport),
    store: MapStore = Depends(get_store),
    controller: LayerController = Depends(get_layer_controller),
):
    """Fetch one data layer for the viewport, regardless of its visibility."""
    if name not in DATA_LAYERS:
        raise HTTPException(status_code=404, detail=f"UNKNOWN_LAYER: {name} has no feature data")

    try:
        features = await controller.load_layer(name, bounds, raise_errors=True)
    except FetchFailed as e:
        raise HTTPException(status_code=502, detail=f"FETCH_FAILED: {e}")

    return {"layer": name, "features": _dump(features), "state": store.layers[name].to_json_dict()}


@router.post("/layers/refresh")
async def refresh_layers(
    req: RefreshRequest,
    store: MapStore = Depends(get_store),
    controller: LayerController = Depends(get_layer_controller),
):
    """Load every visible data layer; per-layer failures are reported in ``state``."""
    bounds = Bounds(req.south, req.west, req.north, req.east)
    results = await controller.refresh(bounds)
    return {
        "layers": {
            name: {"features": _dump(features), "state": store.layers[name].to_json_dict()}
            for name, features in results.items()
        }
    }


@router.put("/view")
async def update_view(req: ViewRequest, store: MapStore = Depends(get_store)):
    lat, lng = req.center
    if not (-90.0 <= lat <= 90.0) or not (-180.0 <= lng <= 180.0):
        raise HTTPException(status_code=422, detail="INVALID_COORDINATES: center out of range")
    store.update_map_view(req.center, req.zoom)
    return _settings_payload(store)


@router.put("/windy")
async def update_windy(req: WindyRequest, store: MapStore = Depends(get_store)):
    try:
        store.set_windy_options(**req.model_dump(exclude_unset=True))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"INVALID_WINDY_OPTIONS: {e.error_count()} error(s)")
    return {"windyOptions": store.windy_options.to_json_dict()}


@router.delete("/windy")
async def reset_windy(store: MapStore = Depends(get_store)):
    store.reset_windy_options()
    return {"windyOptions": store.windy_options.to_json_dict()}


@router.get("/tiles")
async def tile_templates(service: MaritimeService = Depends(get_service)):
    tile_server = service.settings.TILE_SERVER_URL
    proxy = service.settings.PROXY_SERVER_URL
    return {
        "tiles": {layer: tile_url(layer, tile_server) for layer in ("base", "seamark", "harbor", "grid")},
        "depth": {res: depth_wms_url(res, proxy) for res in DEPTH_RESOLUTIONS},
    }


@router.get("/tiles/status")
async def tile_status(service: MaritimeService = Depends(get_service)):
    return {"accessible": await service.check_tile_server_access()}
