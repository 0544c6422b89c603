"""
SeaChart map store.

Single owner of the chart's UI state: map center/zoom, per-layer
visibility/loading/error, weather overlay options, the user's location and
the completed measurement paths. Other components read it and call its
operations; nothing else writes persisted state.

Persisted subset (under the ``mapSettings`` key):
    { "center": [lat, lng], "zoom": 5, "layers": {...}, "windyOptions": {...} }
"""

import json
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from shared.constants import LAYER_NAMES, SETTINGS_STORAGE_KEY
from shared.errors import PersistenceUnavailable
from state.models import (
    LatLng,
    LayerState,
    MapSettings,
    MeasurementPath,
    WindyOptions,
)

logger = logging.getLogger("MapStore")

M = TypeVar("M", bound=BaseModel)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _merge(model_cls: Type[M], base: M, patch: Any) -> M:
    """Overlay ``patch`` onto ``base``; keep ``base`` when the result is invalid."""
    if not isinstance(patch, dict):
        logger.warning(f"Ignoring persisted {model_cls.__name__}: not an object")
        return base
    try:
        return model_cls.model_validate({**base.model_dump(by_alias=True), **patch})
    except ValidationError as e:
        logger.warning(f"Ignoring invalid persisted {model_cls.__name__}: {e.error_count()} error(s)")
        return base


class MapStore:
    def __init__(self, storage, clock: Callable[[], int] = _now_ms):
        self.storage = storage
        self._clock = clock

        self.map_settings = MapSettings()
        self.windy_options = WindyOptions()
        self.user_location: Optional[LatLng] = None
        self.measurement_paths: List[MeasurementPath] = []
        self.active_measurement_id: Optional[str] = None

    # ─── Persistence ──────────────────────────────────────

    def load_settings(self) -> None:
        """Restore persisted settings, deep-merged onto the current (default) state."""
        try:
            raw = self.storage.get_item(SETTINGS_STORAGE_KEY)
        except PersistenceUnavailable as e:
            logger.error(f"Failed to load map settings: {e}")
            return
        if not raw:
            return

        try:
            parsed = json.loads(raw)
        except ValueError as e:
            logger.error(f"Failed to load map settings: {e}")
            return
        if not isinstance(parsed, dict):
            logger.error("Failed to load map settings: not a JSON object")
            return

        settings = self.map_settings
        for key in ("center", "zoom"):
            if key in parsed:
                settings = _merge(MapSettings, settings, {key: parsed[key]})

        saved_layers = parsed.get("layers")
        if isinstance(saved_layers, dict):
            layers = dict(settings.layers)
            # unknown names are dropped, missing names keep their defaults
            for name in LAYER_NAMES:
                if name in saved_layers:
                    layers[name] = _merge(LayerState, layers[name], saved_layers[name])
            settings = settings.model_copy(update={"layers": layers})

        self.map_settings = settings

        if "windyOptions" in parsed:
            self.windy_options = _merge(WindyOptions, self.windy_options, parsed["windyOptions"])

    def save_settings(self) -> None:
        blob = {
            "center": list(self.map_settings.center),
            "zoom": self.map_settings.zoom,
            "layers": {name: layer.to_json_dict() for name, layer in self.map_settings.layers.items()},
            "windyOptions": self.windy_options.to_json_dict(),
        }
        try:
            self.storage.set_item(SETTINGS_STORAGE_KEY, json.dumps(blob))
        except PersistenceUnavailable as e:
            logger.error(f"Failed to save map settings: {e}")

    # ─── View ─────────────────────────────────────────────

    def set_user_location(self, location: LatLng) -> None:
        self.user_location = location
        self.map_settings.center = location

    def update_map_view(self, center: LatLng, zoom: int) -> None:
        self.map_settings.center = center
        self.map_settings.zoom = zoom
        self.save_settings()

    # ─── Layers ───────────────────────────────────────────

    @property
    def layers(self) -> Dict[str, LayerState]:
        return self.map_settings.layers

    def _layer(self, name: str) -> Optional[LayerState]:
        layer = self.map_settings.layers.get(name)
        if layer is None:
            logger.warning(f"Unknown layer: {name}")
        return layer

    def is_visible(self, name: str) -> bool:
        layer = self.map_settings.layers.get(name)
        return bool(layer and layer.visible)

    def toggle_layer(self, name: str) -> None:
        layer = self._layer(name)
        if layer is None:
            return
        layer.visible = not layer.visible
        layer.last_updated = self._clock()
        logger.info(f"Toggling {name} layer to {'visible' if layer.visible else 'hidden'}")
        self.save_settings()

    def set_layer_loading(self, name: str, loading: bool) -> None:
        layer = self._layer(name)
        if layer is not None:
            layer.loading = loading

    def set_layer_error(self, name: str, error: Optional[str]) -> None:
        layer = self._layer(name)
        if layer is not None:
            layer.error = error

    def update_layer_timestamp(self, name: str) -> None:
        layer = self._layer(name)
        if layer is not None:
            layer.last_updated = self._clock()

    # ─── Weather overlay ──────────────────────────────────

    def set_windy_options(self, **changes) -> None:
        """Update overlay/level/timestamp; raises ValidationError on bad values."""
        self.windy_options = WindyOptions.model_validate(
            {**self.windy_options.model_dump(), **changes}
        )
        self.save_settings()

    def reset_windy_options(self) -> None:
        self.windy_options = WindyOptions()
        self.save_settings()

    # ─── Measurements ─────────────────────────────────────

    @property
    def active_measurement(self) -> Optional[MeasurementPath]:
        if self.active_measurement_id is None:
            return None
        for path in self.measurement_paths:
            if path.id == self.active_measurement_id:
                return path
        return None

    def add_measurement_path(self, path: MeasurementPath) -> None:
        self.measurement_paths.append(path)
        self.active_measurement_id = path.id

    def remove_measurement_path(self, path_id: str) -> None:
        self.measurement_paths = [p for p in self.measurement_paths if p.id != path_id]
        if self.active_measurement_id == path_id:
            self.active_measurement_id = None

    def clear_measurements(self) -> None:
        self.measurement_paths = []
        self.active_measurement_id = None
