"""Hover and click popups for SituationRoom map layers.

PopupController owns two popups per map: a hover popup (no close button) that
follows the pointer over country markers, and a click popup (close button,
fixed max width) that opens immediately with a loading message and is filled
once the drilldown resolves.

Click drilldowns are single-flight: a newer click cancels the pending one, and
any result that still arrives for an older click is ignored.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, Tuple

from config.defaults import POPUP_ARTICLE_LIMIT, POPUP_MAX_WIDTH, ZONE_DRILLDOWN_TIMESPAN
from situationroom.clients.events_api_client import EventsSource
from situationroom.map.handlers import HandlerRegistry
from situationroom.map.surface import MapSurface
from situationroom.models.events import DrilldownResult
from situationroom.models.map import MapEvent
from situationroom.models.zones import Severity, TensionZone
from situationroom.utils.geo_utils import feature_coordinates
from situationroom.visualization.popup_html import (
    article_list_html,
    error_html,
    hover_html,
    loading_html,
    zone_html,
)

logger = logging.getLogger(__name__)

LngLat = Tuple[float, float]

COUNTRY_LOADING_TEXT = "Loading news…"
COUNTRY_FAILURE_TEXT = "Failed to load articles"
ZONE_FAILURE_TEXT = "Failed to load updates"


class Popup:
    """A positioned HTML popup that can be attached to one map surface."""

    def __init__(self, close_button: bool = True, max_width: str = "240px") -> None:
        self.close_button = close_button
        self.max_width = max_width
        self.lnglat: Optional[LngLat] = None
        self.html: str = ""
        self._surface: Optional[MapSurface] = None

    def set_lnglat(self, lnglat: Optional[LngLat]) -> "Popup":
        self.lnglat = lnglat
        return self

    def set_html(self, html: str) -> "Popup":
        self.html = html
        return self

    def add_to(self, surface: MapSurface) -> "Popup":
        if self._surface is not None and self._surface is not surface:
            self._surface._detach_popup(self)
        surface._attach_popup(self)
        self._surface = surface
        return self

    def remove(self) -> None:
        if self._surface is not None:
            self._surface._detach_popup(self)
            self._surface = None

    @property
    def is_open(self) -> bool:
        return self._surface is not None


class PopupController:
    """Binds hover / click behaviour to map layers and renders drilldowns.

    Args:
        surface: Map surface the popups are attached to.
        source: Events source used for drilldown queries.
        article_limit: Maximum articles listed in a click popup.
        max_width: CSS max width of the click popup.
        zone_timespan: Time window for tension-zone drilldowns.
    """

    def __init__(
        self,
        surface: MapSurface,
        source: EventsSource,
        article_limit: int = POPUP_ARTICLE_LIMIT,
        max_width: str = POPUP_MAX_WIDTH,
        zone_timespan: str = ZONE_DRILLDOWN_TIMESPAN,
    ) -> None:
        self._surface = surface
        self._source = source
        self.article_limit = article_limit
        self.zone_timespan = zone_timespan
        self.hover_popup = Popup(close_button=False)
        self.click_popup = Popup(close_button=True, max_width=max_width)
        self._click_seq = 0
        self._click_task: Optional[asyncio.Task] = None

    # ── Binding ────────────────────────────────────────────────────────────────

    def bind_country_layer(
        self,
        registry: HandlerRegistry,
        layer_id: str,
        current_params: Callable[[], Tuple[str, str]],
    ) -> None:
        """Attach hover and click handlers to a country marker layer.

        Args:
            registry: Handler registry that records the bindings.
            layer_id: Country layer id.
            current_params: Returns the (topic, timespan) pair in effect at click time.
        """

        def on_click(event: MapEvent) -> Optional[asyncio.Task]:
            return self._on_country_click(event, current_params)

        registry.bind_all(
            layer_id,
            {"mouseenter": self._on_country_enter, "mouseleave": self._on_country_leave, "click": on_click},
        )

    def bind_zone_layer(
        self,
        registry: HandlerRegistry,
        layer_id: str,
        zones_by_name: Mapping[str, TensionZone],
    ) -> None:
        def on_click(event: MapEvent) -> Optional[asyncio.Task]:
            return self._on_zone_click(event, zones_by_name)

        registry.bind_all(
            layer_id,
            {"mouseenter": self._on_pointer_enter, "mouseleave": self._on_pointer_leave, "click": on_click},
        )

    # ── Hover ──────────────────────────────────────────────────────────────────

    def _on_pointer_enter(self, event: MapEvent) -> None:
        self._surface.cursor = "pointer"

    def _on_pointer_leave(self, event: MapEvent) -> None:
        self._surface.cursor = ""

    def _on_country_enter(self, event: MapEvent) -> None:
        self._surface.cursor = "pointer"
        feature = event.feature
        if feature is None:
            return
        props = feature.get("properties") or {}
        self.hover_popup.set_lnglat(feature_coordinates(feature) or event.lnglat).set_html(
            hover_html(str(props.get("country", "")), int(props.get("count", 0) or 0))
        ).add_to(self._surface)

    def _on_country_leave(self, event: MapEvent) -> None:
        self.hide_hover()

    def hide_hover(self) -> None:
        """Remove the hover popup and reset the cursor."""
        self._surface.cursor = ""
        self.hover_popup.remove()

    # ── Click ──────────────────────────────────────────────────────────────────

    def _on_country_click(
        self, event: MapEvent, current_params: Callable[[], Tuple[str, str]]
    ) -> Optional[asyncio.Task]:
        feature = event.feature
        if feature is None:
            return None
        country = str((feature.get("properties") or {}).get("country", ""))
        topic, timespan = current_params()

        def fetch() -> Awaitable[DrilldownResult]:
            return self._source.drilldown(timespan, topic=topic, country=country)

        def render(result: DrilldownResult) -> str:
            return article_list_html(result.articles, self.article_limit)

        return self.open_drilldown(
            feature_coordinates(feature) or event.lnglat,
            loading_html(COUNTRY_LOADING_TEXT),
            fetch,
            render,
            COUNTRY_FAILURE_TEXT,
        )

    def _on_zone_click(
        self, event: MapEvent, zones_by_name: Mapping[str, TensionZone]
    ) -> Optional[asyncio.Task]:
        feature = event.feature
        if feature is None:
            return None
        props = feature.get("properties") or {}
        zone = zones_by_name.get(str(props.get("name", "")))
        if zone is None:
            zone = _zone_from_properties(props, feature_coordinates(feature) or (0.0, 0.0))

        def fetch() -> Awaitable[DrilldownResult]:
            return self._source.drilldown(self.zone_timespan, keyword=zone.drilldown_query)

        def render(result: DrilldownResult) -> str:
            return zone_html(zone, result.articles, self.article_limit)

        return self.open_drilldown(
            feature_coordinates(feature) or event.lnglat,
            loading_html(f"Loading {zone.name}…"),
            fetch,
            render,
            ZONE_FAILURE_TEXT,
        )

    def open_drilldown(
        self,
        lnglat: Optional[LngLat],
        loading: str,
        fetch: Callable[[], Awaitable[DrilldownResult]],
        render: Callable[[DrilldownResult], str],
        failure_text: str,
    ) -> asyncio.Task:
        """Open the click popup with ``loading`` and fill it once ``fetch`` resolves.

        Returns:
            The task settling this click; earlier pending clicks are cancelled.
        """
        self._click_seq += 1
        seq = self._click_seq
        if self._click_task is not None and not self._click_task.done():
            self._click_task.cancel()
        self.click_popup.set_lnglat(lnglat).set_html(loading).add_to(self._surface)
        self._click_task = asyncio.get_running_loop().create_task(
            self._settle(seq, fetch, render, failure_text)
        )
        return self._click_task

    async def _settle(
        self,
        seq: int,
        fetch: Callable[[], Awaitable[DrilldownResult]],
        render: Callable[[DrilldownResult], str],
        failure_text: str,
    ) -> None:
        try:
            result = await fetch()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("Drilldown failed: %s", exc)
            if seq == self._click_seq:
                self.click_popup.set_html(error_html(failure_text))
            return
        if seq != self._click_seq:
            logger.debug("Discarding stale drilldown result (click %d, latest %d)", seq, self._click_seq)
            return
        self.click_popup.set_html(render(result))

    @property
    def click_sequence(self) -> int:
        return self._click_seq

    def close(self) -> None:
        if self._click_task is not None and not self._click_task.done():
            self._click_task.cancel()
        self._click_task = None
        self.hover_popup.remove()
        self.click_popup.remove()


def _zone_from_properties(props: Mapping[str, Any], coordinates: LngLat) -> TensionZone:
    try:
        severity = Severity(str(props.get("status", "amber")))
    except ValueError:
        severity = Severity.AMBER
    return TensionZone(
        name=str(props.get("name", "")),
        severity=severity,
        coordinates=coordinates,
        description=str(props.get("description", "")),
        query=props.get("query") or None,
    )
