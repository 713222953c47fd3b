"""Static tension-zone overlay.

The nine zones are curated configuration. The overlay is installed once per
map surface and never refreshed by the live-data path. Zones whose display
name contains a slash carry an explicit drilldown query so the provider
receives a plain keyword phrase.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Tuple

from situationroom.map.handlers import HandlerRegistry
from situationroom.map.popups import PopupController
from situationroom.map.styles import ZONE_LAYER_ID, ZONE_SOURCE_ID, zone_layer_paint
from situationroom.map.surface import MapSurface
from situationroom.models.map import LayerSpec, SourceSpec
from situationroom.models.zones import Severity, TensionZone
from situationroom.utils.geo_utils import feature_collection, point_feature

logger = logging.getLogger(__name__)

TENSION_ZONES: Tuple[TensionZone, ...] = (
    TensionZone(
        name="Sudan civil war",
        severity=Severity.RED,
        coordinates=(30.0, 15.0),
        description=(
            "Ongoing conflict between the Sudanese Armed Forces (SAF) and the Rapid Support "
            "Forces (RSF) since April 2023. Fighting has displaced millions and destabilized "
            "Khartoum and Darfur."
        ),
    ),
    TensionZone(
        name="Syrian civil war",
        severity=Severity.RED,
        coordinates=(38.0, 35.0),
        description=(
            "Multi-sided conflict beginning in 2011 involving the Assad government, rebel "
            "factions, Kurdish forces, ISIS remnants, and foreign actors including Russia, "
            "Iran, Turkey, and the US."
        ),
    ),
    TensionZone(
        name="Ukraine / Russia",
        severity=Severity.RED,
        coordinates=(36.0, 49.0),
        description=(
            "Full-scale Russian invasion launched in February 2022 following the 2014 "
            "annexation of Crimea. Ongoing high-intensity warfare across eastern and "
            "southern Ukraine."
        ),
        query="Ukraine Russia",
    ),
    TensionZone(
        name="India / Pakistan",
        severity=Severity.AMBER,
        coordinates=(74.0, 32.0),
        description=(
            "Longstanding territorial dispute over Kashmir. Periodic cross-border firing and "
            "political escalation between two nuclear-armed states."
        ),
        query="India Pakistan",
    ),
    TensionZone(
        name="Israel / Gaza",
        severity=Severity.AMBER,
        coordinates=(34.8, 31.5),
        description=(
            "Escalating conflict between Israel and Hamas following October 2023 attacks. "
            "Ongoing military operations and regional tensions."
        ),
        query="Israel Gaza",
    ),
    TensionZone(
        name="Greenland",
        severity=Severity.AMBER,
        coordinates=(-42.0, 72.0),
        description=(
            "Strategic Arctic region gaining geopolitical importance due to climate change, "
            "resource competition, and US-China-Russia interest."
        ),
    ),
    TensionZone(
        name="Thailand / Cambodia",
        severity=Severity.AMBER,
        coordinates=(102.5, 14.5),
        description=(
            "Periodic border tensions centered around disputed temple sites and nationalist "
            "political rhetoric."
        ),
        query="Thailand Cambodia",
    ),
    TensionZone(
        name="Taiwan",
        severity=Severity.AMBER,
        coordinates=(121.0, 23.7),
        description=(
            "Rising cross-strait tensions as China increases military pressure while Taiwan "
            "strengthens international partnerships."
        ),
    ),
    TensionZone(
        name="Iran",
        severity=Severity.AMBER,
        coordinates=(53.688, 32.4279),
        description=(
            "Heightened tensions involving Iran's nuclear program, regional proxy conflicts, "
            "and confrontation with Israel and the United States."
        ),
    ),
)


def zones_feature_collection(zones: Iterable[TensionZone]) -> Dict:
    return feature_collection(point_feature(z.coordinates, z.to_properties()) for z in zones)


class StaticZoneOverlay:
    """Installs the tension-zone point layer and its click handler.

    Args:
        surface: Map surface to draw on.
        popups: Popup controller used for zone drilldowns.
        registry: Handler registry recording the zone layer bindings.
        zones: Zones to render.
    """

    def __init__(
        self,
        surface: MapSurface,
        popups: PopupController,
        registry: HandlerRegistry,
        zones: Iterable[TensionZone] = TENSION_ZONES,
    ) -> None:
        self._surface = surface
        self._popups = popups
        self._registry = registry
        self.zones: Tuple[TensionZone, ...] = tuple(zones)
        self.zones_by_name: Dict[str, TensionZone] = {z.name: z for z in self.zones}

    @property
    def installed(self) -> bool:
        return self._surface.get_layer(ZONE_LAYER_ID) is not None

    def install(self) -> bool:
        """Add the zone source, layer and handlers. Returns False if already installed."""
        if self.installed:
            return False
        if self._surface.get_source(ZONE_SOURCE_ID) is None:
            self._surface.add_source(
                SourceSpec(id=ZONE_SOURCE_ID, data=zones_feature_collection(self.zones))
            )
        self._surface.add_layer(
            LayerSpec(id=ZONE_LAYER_ID, type="circle", source=ZONE_SOURCE_ID, paint=zone_layer_paint())
        )
        self._popups.bind_zone_layer(self._registry, ZONE_LAYER_ID, self.zones_by_name)
        logger.info("Installed %d tension zones", len(self.zones))
        return True
