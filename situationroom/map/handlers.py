"""Per-layer registry of bound event handlers.

Every binding made through the registry is remembered by reference so it can
be detached before the layer id is recreated. Rebinding without unbinding
first would stack handlers on each refresh.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Tuple

from situationroom.map.surface import Handler, MapSurface

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Tracks (event type, handler) pairs bound per layer id on one surface."""

    def __init__(self, surface: MapSurface) -> None:
        self._surface = surface
        self._bound: Dict[str, List[Tuple[str, Handler]]] = {}

    def bind(self, layer_id: str, event_type: str, handler: Handler) -> None:
        self._surface.on(event_type, layer_id, handler)
        self._bound.setdefault(layer_id, []).append((event_type, handler))

    def bind_all(self, layer_id: str, handlers: Mapping[str, Handler]) -> None:
        for event_type, handler in handlers.items():
            self.bind(layer_id, event_type, handler)

    def unbind(self, layer_id: str) -> int:
        """Detach every handler registered for ``layer_id``.

        Returns:
            Number of handlers detached.
        """
        bound = self._bound.pop(layer_id, [])
        for event_type, handler in bound:
            self._surface.off(event_type, layer_id, handler)
        if bound:
            logger.debug("Detached %d handlers from %s", len(bound), layer_id)
        return len(bound)

    def unbind_all(self) -> None:
        for layer_id in list(self._bound):
            self.unbind(layer_id)

    def bound(self, layer_id: str) -> List[Tuple[str, Handler]]:
        return list(self._bound.get(layer_id, []))
