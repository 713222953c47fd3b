"""SituationRoom composition root.

Builds one map surface and wires the live country layer, the tension-zone
overlay, the NATO border overlay and the shared popups onto it. Overlays are
installed, the first refresh is scheduled and the OSINT feed poller starts
from the map's ``load`` event. The poller runs only when the source can
answer ``osint_feed()``.

Usage:
    room = SituationRoom(AppConfig(), EventsApiClient())
    surface = room.mount()
    surface.load()                 # inside a running event loop
    room.set_topic("cyber")
    ...
    room.close()
"""

from __future__ import annotations

import logging
from typing import Optional

from config.settings import AppConfig
from situationroom.clients.events_api_client import EventsApiClient, EventsSource
from situationroom.errors import MapError
from situationroom.feed_monitor import OsintFeedPoller
from situationroom.map.borders import BorderOverlay
from situationroom.map.handlers import HandlerRegistry
from situationroom.map.layer_controller import MapLayerController
from situationroom.map.popups import PopupController
from situationroom.map.surface import MapSurface
from situationroom.map.zones import StaticZoneOverlay
from situationroom.models.map import MapEvent

logger = logging.getLogger(__name__)


class SituationRoom:
    """Owns every map-side component for one surface.

    Args:
        config: Application configuration.
        source: Events source shared by the layer controller and popups.
        show_borders: Initial visibility of the border overlay.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        source: Optional[EventsSource] = None,
        show_borders: bool = True,
    ) -> None:
        self.config = config or AppConfig()
        if source is None:
            source = EventsApiClient(self.config.events_api_url, self.config.events_api_timeout)
        self.source = source
        self.show_borders = show_borders

        self.surface: Optional[MapSurface] = None
        self.registry: Optional[HandlerRegistry] = None
        self.popups: Optional[PopupController] = None
        self.controller: Optional[MapLayerController] = None
        self.zones: Optional[StaticZoneOverlay] = None
        self.borders: Optional[BorderOverlay] = None
        self.feed: Optional[OsintFeedPoller] = None

    def mount(self, surface: Optional[MapSurface] = None) -> MapSurface:
        """Create components on ``surface`` and register the load handler."""
        if self.surface is not None:
            raise MapError("SituationRoom is already mounted")
        surface = surface or MapSurface()
        self.surface = surface
        self.registry = HandlerRegistry(surface)
        self.popups = PopupController(
            surface,
            self.source,
            article_limit=self.config.popup_article_limit,
        )
        self.controller = MapLayerController(
            surface, self.source, self.popups, self.registry, self.config
        )
        self.zones = StaticZoneOverlay(surface, self.popups, self.registry)
        self.borders = BorderOverlay(surface, visible=self.show_borders)
        fetch_feed = getattr(self.source, "osint_feed", None)
        if fetch_feed is not None:
            self.feed = OsintFeedPoller(
                fetch_feed,
                interval=self.config.feed_poll_interval,
                highlight_seconds=self.config.feed_highlight_seconds,
            )
        surface.on("load", None, self._on_load)
        return surface

    def _on_load(self, event: MapEvent) -> None:
        self.borders.install()
        self.zones.install()
        self.controller.mark_ready()
        if self.feed is not None:
            self.feed.start()
        logger.info("Map loaded; overlays installed")

    def set_topic(self, topic: str) -> None:
        self._require_mounted().set_topic(topic)

    def set_time_range(self, timespan: str) -> None:
        self._require_mounted().set_time_range(timespan)

    def set_show_borders(self, visible: bool) -> None:
        self.show_borders = visible
        if self.borders is not None:
            self.borders.set_visible(visible)

    def _require_mounted(self) -> MapLayerController:
        if self.controller is None:
            raise MapError("SituationRoom is not mounted")
        return self.controller

    def close(self) -> None:
        """Cancel all tasks and detach every handler."""
        if self.controller is not None:
            self.controller.close()
        if self.feed is not None:
            self.feed.stop()
        if self.popups is not None:
            self.popups.close()
        if self.registry is not None:
            self.registry.unbind_all()
        if self.surface is not None:
            self.surface.off("load", None, self._on_load)
        close = getattr(self.source, "close", None)
        if callable(close):
            close()
