"""Map surface data models for SituationRoom.

Sources and layers mirror the GeoJSON-source / styled-layer model of web map
engines: a layer renders exactly one source and carries paint and layout
properties. Features are plain GeoJSON dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

GeoJSON = Dict[str, Any]


@dataclass
class SourceSpec:
    """A GeoJSON source: inline FeatureCollection or a remote URL."""

    id: str
    data: Union[GeoJSON, str]
    type: str = "geojson"

    @property
    def features(self) -> List[GeoJSON]:
        if isinstance(self.data, dict):
            return list(self.data.get("features") or [])
        return []


@dataclass
class LayerSpec:
    """A styled layer rendering one source."""

    id: str
    type: str                       # "circle", "line", ...
    source: str
    paint: Dict[str, Any] = field(default_factory=dict)
    layout: Dict[str, Any] = field(default_factory=dict)
    filter: Optional[List[Any]] = None

    @property
    def visible(self) -> bool:
        return self.layout.get("visibility", "visible") != "none"


@dataclass
class MapEvent:
    """A pointer event delivered to layer handlers."""

    type: str
    layer_id: Optional[str] = None
    features: List[GeoJSON] = field(default_factory=list)
    lnglat: Optional[Tuple[float, float]] = None

    @property
    def feature(self) -> Optional[GeoJSON]:
        return self.features[0] if self.features else None
