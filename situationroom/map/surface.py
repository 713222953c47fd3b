"""In-memory map surface for SituationRoom.

MapSurface models the parts of a web map engine the controllers rely on:
GeoJSON sources, styled layers, paint / layout properties, per-layer event
handlers, popups and the canvas cursor. It enforces the engine's
consistency rules so controller bugs surface as MapError:

- source and layer ids are unique;
- a layer can only be added when its source exists;
- a source cannot be removed while a layer still references it.

Handlers are plain callables; whatever they return (e.g. an asyncio Task)
is handed back from fire() so callers can await follow-up work.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Tuple

from config.defaults import MAP_CENTER, MAP_STYLE_URL, MAP_ZOOM
from situationroom.errors import MapError
from situationroom.models.map import LayerSpec, MapEvent, SourceSpec

logger = logging.getLogger(__name__)

Handler = Callable[[MapEvent], Any]

# Pseudo layer id for map-level events such as "load"
_MAP_LEVEL = ""


class MapSurface:
    """A single map instance and its source / layer id namespace.

    Args:
        center: Initial (lon, lat) view center.
        zoom: Initial zoom level.
        style: Base style URL.
    """

    def __init__(
        self,
        center: Tuple[float, float] = MAP_CENTER,
        zoom: float = MAP_ZOOM,
        style: str = MAP_STYLE_URL,
    ) -> None:
        self.center = center
        self.zoom = zoom
        self.style = style
        self.cursor: str = ""
        self.loaded: bool = False
        self._sources: Dict[str, SourceSpec] = {}
        self._layers: Dict[str, LayerSpec] = {}
        self._handlers: Dict[Tuple[str, str], List[Handler]] = defaultdict(list)
        self._popups: List[Any] = []

    # ── Sources ────────────────────────────────────────────────────────────────

    def add_source(self, source: SourceSpec) -> None:
        if source.id in self._sources:
            raise MapError(f"source already exists: {source.id}")
        self._sources[source.id] = source

    def get_source(self, source_id: str) -> Optional[SourceSpec]:
        return self._sources.get(source_id)

    def remove_source(self, source_id: str) -> None:
        if source_id not in self._sources:
            raise MapError(f"no such source: {source_id}")
        users = [layer.id for layer in self._layers.values() if layer.source == source_id]
        if users:
            raise MapError(f"source {source_id} is in use by layers {users}")
        del self._sources[source_id]

    # ── Layers ─────────────────────────────────────────────────────────────────

    def add_layer(self, layer: LayerSpec) -> None:
        if layer.id in self._layers:
            raise MapError(f"layer already exists: {layer.id}")
        if layer.source not in self._sources:
            raise MapError(f"layer {layer.id} references missing source {layer.source}")
        self._layers[layer.id] = layer

    def get_layer(self, layer_id: str) -> Optional[LayerSpec]:
        return self._layers.get(layer_id)

    def remove_layer(self, layer_id: str) -> None:
        if layer_id not in self._layers:
            raise MapError(f"no such layer: {layer_id}")
        del self._layers[layer_id]

    @property
    def layer_ids(self) -> List[str]:
        return list(self._layers)

    @property
    def source_ids(self) -> List[str]:
        return list(self._sources)

    def set_paint_property(self, layer_id: str, name: str, value: Any) -> None:
        layer = self._layers.get(layer_id)
        if layer is None:
            raise MapError(f"no such layer: {layer_id}")
        layer.paint[name] = value

    def set_layout_property(self, layer_id: str, name: str, value: Any) -> None:
        layer = self._layers.get(layer_id)
        if layer is None:
            raise MapError(f"no such layer: {layer_id}")
        layer.layout[name] = value

    # ── Events ─────────────────────────────────────────────────────────────────

    def on(self, event_type: str, layer_id: Optional[str], handler: Handler) -> None:
        """Bind ``handler`` to ``event_type`` on a layer (or the map when None)."""
        self._handlers[(event_type, layer_id or _MAP_LEVEL)].append(handler)

    def off(self, event_type: str, layer_id: Optional[str], handler: Handler) -> None:
        """Detach a previously bound handler by reference; unknown handlers are ignored."""
        bound = self._handlers.get((event_type, layer_id or _MAP_LEVEL))
        if bound and handler in bound:
            bound.remove(handler)

    def handler_count(self, event_type: str, layer_id: Optional[str] = None) -> int:
        return len(self._handlers.get((event_type, layer_id or _MAP_LEVEL), []))

    def fire(self, event: MapEvent) -> List[Any]:
        """Dispatch ``event`` to the handlers bound for its type and layer.

        Layer events are dropped when the layer does not exist.

        Returns:
            Handler return values, in binding order.
        """
        if event.layer_id and event.layer_id not in self._layers:
            logger.debug("Event %s for missing layer %s ignored", event.type, event.layer_id)
            return []
        handlers = list(self._handlers.get((event.type, event.layer_id or _MAP_LEVEL), []))
        return [handler(event) for handler in handlers]

    def load(self) -> List[Any]:
        """Mark the style as loaded and fire map-level ``load`` handlers."""
        self.loaded = True
        return self.fire(MapEvent(type="load"))

    # ── Popups ─────────────────────────────────────────────────────────────────

    def _attach_popup(self, popup: Any) -> None:
        if popup not in self._popups:
            self._popups.append(popup)

    def _detach_popup(self, popup: Any) -> None:
        if popup in self._popups:
            self._popups.remove(popup)

    @property
    def open_popups(self) -> List[Any]:
        return list(self._popups)
