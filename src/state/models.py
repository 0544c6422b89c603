"""
Persisted map state models.

Field names are snake_case in Python and camelCase on the wire, matching the
JSON blob the browser UI reads and writes.
"""

from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shared.constants import (
    DEFAULT_CENTER,
    DEFAULT_WINDY_LEVEL,
    DEFAULT_WINDY_OVERLAY,
    DEFAULT_ZOOM,
    LAYER_NAMES,
)

LatLng = Tuple[float, float]

WindyOverlay = Literal["wind", "rain", "temp", "clouds", "waves", "pressure"]
WindyLevel = Literal["surface", "1000h", "850h", "700h", "500h", "300h", "200h"]


class _StateModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class LayerState(_StateModel):
    visible: bool = False
    loading: bool = False
    error: Optional[str] = None
    last_updated: Optional[int] = None  # wall-clock ms


def default_layers() -> Dict[str, LayerState]:
    return {name: LayerState() for name in LAYER_NAMES}


class MapSettings(_StateModel):
    center: LatLng = DEFAULT_CENTER
    zoom: int = DEFAULT_ZOOM
    layers: Dict[str, LayerState] = Field(default_factory=default_layers)


class WindyOptions(_StateModel):
    overlay: WindyOverlay = DEFAULT_WINDY_OVERLAY
    level: WindyLevel = DEFAULT_WINDY_LEVEL
    timestamp: Optional[int] = None  # forecast time, None for "now"


class MeasurementPoint(_StateModel):
    coordinates: LatLng
    label: Optional[str] = None


class MeasurementPath(_StateModel):
    id: str
    points: List[MeasurementPoint]
    distance: float  # meters
