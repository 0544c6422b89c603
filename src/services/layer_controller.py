"""
Layer controller: keeps the data layers in sync with the viewport.

For every visible data layer the controller fetches features for the current
bounds and records the outcome on the layer's state in the store:

    error cleared → loading=True → fetch → lastUpdated (or error) → loading=False

The map widget is only seen through the MapHandle protocol, so the
controller works with any front end that can report its bounds and emit a
"moveend" event.
"""

import asyncio
import logging
from collections import Counter
from typing import Any, Callable, Dict, List, Optional, Protocol

from engine.bounds import Bounds
from services.maritime import MaritimeService
from shared.constants import (
    DATA_LAYERS,
    LAYER_BATHYMETRIC_CONTOURS,
    LAYER_HARBOR_FACILITIES,
    LAYER_SEA_MARKS,
)
from shared.errors import FetchFailed
from state.store import MapStore

logger = logging.getLogger("LayerController")


class MapHandle(Protocol):
    def get_bounds(self) -> Bounds: ...

    def on(self, event: str, callback: Callable[[], None]) -> None: ...

    def off(self, event: str, callback: Callable[[], None]) -> None: ...


class LayerController:
    def __init__(self, store: MapStore, service: MaritimeService):
        self.store = store
        self.service = service
        self._map: Optional[MapHandle] = None
        self._pending: Optional[asyncio.Task] = None
        self._in_flight: Counter = Counter()

        self._fetchers = {
            LAYER_SEA_MARKS: service.fetch_sea_marks,
            LAYER_HARBOR_FACILITIES: service.fetch_harbor_facilities,
            LAYER_BATHYMETRIC_CONTOURS: service.fetch_bathymetric_contours,
        }

    async def load_layer(self, name: str, bounds: Bounds, raise_errors: bool = False) -> List[Any]:
        """
        Fetch one data layer for ``bounds``.

        A fetch failure is written to the layer's ``error`` and an empty list
        is returned, unless ``raise_errors`` is set, in which case the
        FetchFailed is re-raised after being recorded.

        Overlapping loads of the same layer are allowed: whichever settles
        last decides ``error`` and ``lastUpdated``, and ``loading`` stays
        True until none is in flight.
        """
        fetch = self._fetchers.get(name)
        if fetch is None:
            raise KeyError(f"{name} is not a data layer")

        self._in_flight[name] += 1
        self.store.set_layer_error(name, None)
        self.store.set_layer_loading(name, True)
        try:
            features = await fetch(bounds)
            self.store.set_layer_error(name, None)
            self.store.update_layer_timestamp(name)
            return features
        except FetchFailed as e:
            logger.error(f"Error loading {name}: {e}")
            self.store.set_layer_error(name, str(e))
            if raise_errors:
                raise
            return []
        finally:
            self._in_flight[name] -= 1
            if not self._in_flight[name]:
                self.store.set_layer_loading(name, False)

    async def refresh(self, bounds: Bounds) -> Dict[str, List[Any]]:
        """Load every visible data layer; hidden layers are left untouched."""
        visible = [name for name in DATA_LAYERS if self.store.is_visible(name)]
        results = await asyncio.gather(*(self.load_layer(name, bounds) for name in visible))
        return dict(zip(visible, results))

    # ─── Map binding ──────────────────────────────────────

    def _on_move_end(self) -> None:
        if self._map is None:
            return
        self._pending = asyncio.ensure_future(self.refresh(self._map.get_bounds()))

    def attach(self, map_handle: MapHandle) -> None:
        self.detach()
        self._map = map_handle
        map_handle.on("moveend", self._on_move_end)

    def detach(self) -> None:
        if self._map is not None:
            self._map.off("moveend", self._on_move_end)
            self._map = None
