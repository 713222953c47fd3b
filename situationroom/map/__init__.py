"""SituationRoom map layer: surface model, controllers and overlays."""

from situationroom.map.borders import NATO_MEMBERS, BorderOverlay
from situationroom.map.handlers import HandlerRegistry
from situationroom.map.layer_controller import ControllerState, MapLayerController
from situationroom.map.popups import Popup, PopupController
from situationroom.map.scheduling import Debouncer, PulseAnimation
from situationroom.map.surface import MapSurface
from situationroom.map.zones import TENSION_ZONES, StaticZoneOverlay

__all__ = [
    "BorderOverlay",
    "ControllerState",
    "Debouncer",
    "HandlerRegistry",
    "MapLayerController",
    "MapSurface",
    "NATO_MEMBERS",
    "Popup",
    "PopupController",
    "PulseAnimation",
    "StaticZoneOverlay",
    "TENSION_ZONES",
]
