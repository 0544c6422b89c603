"""
Maritime feature records produced by the data-fetch layer.

Coordinates follow the upstream GeoJSON convention: (lng, lat).
"""

from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MaritimeFeature(_Record):
    id: str
    type: str
    coordinates: Tuple[float, float]
    name: Optional[str] = None
    characteristics: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ContactInfo(_Record):
    phone: Optional[str] = None
    website: Optional[str] = None
    vhf_channel: Optional[str] = None


class HarborFacility(MaritimeFeature):
    type: Literal["harbor"] = "harbor"
    services: Optional[List[str]] = None
    capacity: Optional[int] = None
    depth: Optional[float] = None
    contact_info: Optional[ContactInfo] = None


class SeaMark(MaritimeFeature):
    type: Literal["buoy", "beacon", "light"]
    color: Optional[str] = None
    light_characteristics: Optional[str] = None
    purpose: Optional[str] = None


class DepthSounding(_Record):
    coordinates: Tuple[float, float]
    depth: float
    timestamp: Optional[str] = None


class BathymetricContour(_Record):
    depth: float
    coordinates: List[Tuple[float, float]]
