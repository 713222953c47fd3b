"""Live country-marker layer controller.

MapLayerController keeps the ``top-countries`` layer in sync with the selected
topic and time range:

1. Topic / time-range changes are validated and debounced; a burst of changes
   inside the window produces a single refresh.
2. Every refresh carries a sequence number. Only the response for the latest
   issued sequence may touch the map; older responses are discarded.
3. A successful response replaces the layer in one synchronous step (remove
   layer, remove source, add source, add layer), rebinds the popup handlers
   after detaching the previous ones, and restarts the pulse animation.
4. Failed or empty responses leave the rendered layer untouched.

State machine: UNINITIALIZED → READY ⇄ REFRESHING, and CLOSED after close().
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import List, Mapping, Optional, Set, Tuple

from config.settings import AppConfig
from situationroom.analysis.event_aggregator import select_top_countries
from situationroom.clients.events_api_client import EventsSource
from situationroom.map.handlers import HandlerRegistry
from situationroom.map.popups import PopupController
from situationroom.map.scheduling import Debouncer, PulseAnimation
from situationroom.map.styles import COUNTRY_LAYER_ID, COUNTRY_SOURCE_ID, country_layer_paint
from situationroom.map.surface import MapSurface
from situationroom.models.events import AggregationResult, CountryTally
from situationroom.models.map import LayerSpec, SourceSpec
from situationroom.models.query import TimeRange, Topic
from situationroom.utils.geo_utils import COUNTRY_CENTROIDS, build_country_features
from situationroom.utils.logging_utils import get_request_logger

logger = logging.getLogger(__name__)


class ControllerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    REFRESHING = "refreshing"
    CLOSED = "closed"


class MapLayerController:
    """Owns the live country layer, its refresh cycle and its pulse animation.

    Args:
        surface: Map surface to draw on.
        source: Events source answering aggregation queries.
        popups: Popup controller bound to each new layer incarnation.
        registry: Handler registry for the country layer bindings.
        config: Application configuration (debounce, top-N, pulse timings).
        centroids: Country display name to (lon, lat) lookup.
    """

    def __init__(
        self,
        surface: MapSurface,
        source: EventsSource,
        popups: PopupController,
        registry: HandlerRegistry,
        config: Optional[AppConfig] = None,
        centroids: Mapping[str, Tuple[float, float]] = COUNTRY_CENTROIDS,
    ) -> None:
        self._surface = surface
        self._source = source
        self._popups = popups
        self._registry = registry
        self._config = config or AppConfig()
        self._centroids = centroids

        self.topic: Topic = Topic.parse(self._config.default_topic)
        self.timespan: TimeRange = TimeRange.parse(self._config.default_timespan)

        self._state = ControllerState.UNINITIALIZED
        self._debouncer = Debouncer(self._config.debounce_seconds, self._issue_refresh)
        self._seq = 0
        self._in_flight: Set[asyncio.Task] = set()
        self._animation: Optional[PulseAnimation] = None
        self.rendered_countries: List[CountryTally] = []

    # ── Properties ─────────────────────────────────────────────────────────────

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def sequence(self) -> int:
        """Sequence number of the most recently issued refresh."""
        return self._seq

    @property
    def loading(self) -> bool:
        return self._state is ControllerState.REFRESHING

    @property
    def animation(self) -> Optional[PulseAnimation]:
        return self._animation

    @property
    def debouncer(self) -> Debouncer:
        return self._debouncer

    def current_params(self) -> Tuple[str, str]:
        return self.topic.value, self.timespan.value

    # ── Controls ───────────────────────────────────────────────────────────────

    def mark_ready(self) -> None:
        """Called once the map style has loaded; schedules the first refresh."""
        if self._state is not ControllerState.UNINITIALIZED:
            return
        self._state = ControllerState.READY
        self._debouncer.trigger()

    def set_topic(self, topic: str) -> Topic:
        self.topic = Topic.parse(topic, self._config.default_topic)
        self._schedule()
        return self.topic

    def set_time_range(self, timespan: str) -> TimeRange:
        self.timespan = TimeRange.parse(timespan, self._config.default_timespan)
        self._schedule()
        return self.timespan

    def _schedule(self) -> None:
        # Before READY changes are only recorded; mark_ready() issues the first refresh
        if self._state in (ControllerState.READY, ControllerState.REFRESHING):
            self._debouncer.trigger()

    async def wait_idle(self) -> None:
        """Wait until no debounce window or refresh is outstanding."""
        while True:
            await self._debouncer.wait()
            pending = {t for t in self._in_flight if not t.done()}
            if not pending and not self._debouncer.pending:
                return
            if pending:
                await asyncio.wait(pending)

    def refresh_now(self) -> asyncio.Task:
        """Skip the debounce window and issue a refresh immediately."""
        self._debouncer.cancel()
        return self._issue_refresh()

    # ── Refresh cycle ──────────────────────────────────────────────────────────

    def _issue_refresh(self) -> asyncio.Task:
        self._seq += 1
        seq = self._seq
        topic, timespan = self.current_params()
        self._state = ControllerState.REFRESHING
        logger.debug("Refresh %d issued (topic=%s, timespan=%s)", seq, topic, timespan)
        task = asyncio.get_running_loop().create_task(self._refresh(seq, topic, timespan))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def _refresh(self, seq: int, topic: str, timespan: str) -> None:
        log = get_request_logger(__name__, f"refresh#{seq}")
        result: Optional[AggregationResult]
        try:
            result = await self._source.aggregate(topic, timespan)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            log.warning("Fetch failed: %s", exc)
            result = None

        if seq != self._seq or self._state is ControllerState.CLOSED:
            log.debug("Discarding stale response (latest is %d)", self._seq)
            return

        try:
            if result is None or not result.countries:
                log.info("No countries returned; keeping current layer")
            else:
                self._apply(result)
        finally:
            if self._state is ControllerState.REFRESHING:
                self._state = ControllerState.READY

    def _apply(self, result: AggregationResult) -> None:
        top = select_top_countries(result.countries, self._config.top_n_countries)
        data = build_country_features(top, self._centroids)
        self._swap_layer(data)
        self.rendered_countries = top
        logger.info(
            "Rendered %d of top %d countries (%d articles)",
            len(data["features"]), len(top), result.total_articles,
        )

    def _swap_layer(self, data: dict) -> None:
        # No await between removal and re-adding: nothing else can observe a half-built layer
        self._registry.unbind(COUNTRY_LAYER_ID)
        # The hover popup belongs to the old layer incarnation
        self._popups.hide_hover()
        if self._animation is not None:
            self._animation.stop()
        if self._surface.get_layer(COUNTRY_LAYER_ID) is not None:
            self._surface.remove_layer(COUNTRY_LAYER_ID)
        if self._surface.get_source(COUNTRY_SOURCE_ID) is not None:
            self._surface.remove_source(COUNTRY_SOURCE_ID)

        self._surface.add_source(SourceSpec(id=COUNTRY_SOURCE_ID, data=data))
        self._surface.add_layer(
            LayerSpec(
                id=COUNTRY_LAYER_ID,
                type="circle",
                source=COUNTRY_SOURCE_ID,
                paint=country_layer_paint(),
            )
        )
        self._popups.bind_country_layer(self._registry, COUNTRY_LAYER_ID, self.current_params)
        self._animation = PulseAnimation(
            self._surface,
            COUNTRY_LAYER_ID,
            step=self._config.pulse_phase_step,
            amplitude=self._config.pulse_amplitude,
            frame_interval=self._config.pulse_frame_interval,
        ).start()

    # ── Teardown ───────────────────────────────────────────────────────────────

    def close(self) -> None:
        """Cancel debounce, animation and in-flight refreshes; detach handlers."""
        self._state = ControllerState.CLOSED
        self._debouncer.cancel()
        for task in list(self._in_flight):
            task.cancel()
        if self._animation is not None:
            self._animation.stop()
        self._registry.unbind(COUNTRY_LAYER_ID)
