"""NATO member border overlay.

Draws member-state outlines from a remote countries GeoJSON, filtered by
ISO 3166-1 alpha-3 code, with a visibility toggle.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from config.defaults import COUNTRIES_GEOJSON_URL
from situationroom.map.styles import BORDER_LAYER_ID, BORDER_SOURCE_ID, border_layer_paint
from situationroom.map.surface import MapSurface
from situationroom.models.map import LayerSpec, SourceSpec

logger = logging.getLogger(__name__)

# "-99" matches member polygons the countries dataset ships without an ISO-3 code
NATO_MEMBERS: tuple = (
    "USA", "CAN", "GBR", "FRA", "-99", "DEU", "ITA", "ESP", "PRT", "NLD", "BEL", "LUX",
    "NOR", "DNK", "ISL", "POL", "CZE", "SVK", "HUN", "ROU", "BGR", "HRV", "SVN",
    "ALB", "MNE", "MKD", "GRC", "TUR", "LTU", "LVA", "EST", "FIN", "SWE",
)

ISO3_PROPERTY = "ISO3166-1-Alpha-3"


def member_filter(members: Iterable[str]) -> List:
    return ["in", ["get", ISO3_PROPERTY], ["literal", list(members)]]


class BorderOverlay:
    """Line layer outlining alliance members.

    Args:
        surface: Map surface to draw on.
        members: ISO-3 codes to outline.
        data_url: Countries GeoJSON URL.
        visible: Initial visibility.
    """

    def __init__(
        self,
        surface: MapSurface,
        members: Iterable[str] = NATO_MEMBERS,
        data_url: str = COUNTRIES_GEOJSON_URL,
        visible: bool = True,
    ) -> None:
        self._surface = surface
        self.members = tuple(members)
        self.data_url = data_url
        self._visible = visible

    def install(self) -> bool:
        """Add the countries source and border layer. Returns False if already present."""
        if self._surface.get_layer(BORDER_LAYER_ID) is not None:
            return False
        if self._surface.get_source(BORDER_SOURCE_ID) is None:
            self._surface.add_source(SourceSpec(id=BORDER_SOURCE_ID, data=self.data_url))
        self._surface.add_layer(
            LayerSpec(
                id=BORDER_LAYER_ID,
                type="line",
                source=BORDER_SOURCE_ID,
                paint=border_layer_paint(),
                layout={"visibility": "visible" if self._visible else "none"},
                filter=member_filter(self.members),
            )
        )
        logger.debug("Installed border overlay for %d members", len(self.members))
        return True

    def set_visible(self, visible: bool) -> None:
        """Toggle layer visibility; remembered for install() when the layer is absent."""
        self._visible = visible
        if self._surface.get_layer(BORDER_LAYER_ID) is None:
            return
        self._surface.set_layout_property(BORDER_LAYER_ID, "visibility", "visible" if visible else "none")

    @property
    def visible(self) -> bool:
        layer = self._surface.get_layer(BORDER_LAYER_ID)
        return layer.visible if layer is not None else self._visible
