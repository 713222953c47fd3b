"""Unit tests for situationroom.map.layer_controller.MapLayerController."""

from __future__ import annotations

import asyncio

from situationroom.map.layer_controller import ControllerState
from situationroom.map.styles import COUNTRY_LAYER_ID, COUNTRY_SOURCE_ID
from situationroom.models.events import AggregationResult, CountryTally
from situationroom.models.map import MapEvent
from situationroom.models.query import TimeRange, Topic


def _rendered(surface):
    source = surface.get_source(COUNTRY_SOURCE_ID)
    return {f["properties"]["country"]: f["properties"]["count"] for f in source.features}


class TestLifecycle:
    async def test_changes_before_ready_are_recorded_only(self, controller, fake_source):
        controller.set_topic("cyber")
        await asyncio.sleep(0.03)
        assert fake_source.aggregate_calls == []
        assert controller.state is ControllerState.UNINITIALIZED
        assert controller.topic is Topic.CYBER

    async def test_mark_ready_issues_first_refresh(self, controller, fake_source, surface):
        controller.mark_ready()
        await controller.wait_idle()
        assert fake_source.aggregate_calls == [("protest", "24h")]
        assert controller.state is ControllerState.READY
        assert _rendered(surface) == {"United States": 2, "France": 1}

    async def test_close_cancels_and_detaches(self, controller, surface):
        controller.mark_ready()
        await controller.wait_idle()
        controller.close()
        assert controller.state is ControllerState.CLOSED
        assert surface.handler_count("click", COUNTRY_LAYER_ID) == 0
        await asyncio.wait_for(controller.animation.wait(), timeout=1.0)
        assert controller.animation.running is False


class TestDebounce:
    async def test_rapid_changes_collapse_into_one_fetch(self, controller, fake_source):
        controller.mark_ready()
        for topic in ("cyber", "election", "sanctions", "military", "disaster"):
            controller.set_topic(topic)
        controller.set_time_range("7d")
        await controller.wait_idle()
        assert fake_source.aggregate_calls == [("disaster", "7d")]

    async def test_invalid_values_fall_back_to_defaults(self, controller):
        assert controller.set_topic("knitting") is Topic.PROTEST
        assert controller.set_time_range("1y") is TimeRange.ONE_DAY


class TestRefresh:
    async def test_top_five_only(self, controller, fake_source, surface):
        fake_source.aggregate_results = [
            AggregationResult(
                total_articles=21,
                countries=[
                    CountryTally("France", 1),
                    CountryTally("Germany", 2),
                    CountryTally("Japan", 3),
                    CountryTally("India", 4),
                    CountryTally("Brazil", 5),
                    CountryTally("United States", 6),
                ],
            )
        ]
        await controller.refresh_now()
        assert set(_rendered(surface)) == {"Germany", "Japan", "India", "Brazil", "United States"}
        assert [t.country for t in controller.rendered_countries][0] == "United States"

    async def test_unmapped_country_dropped_from_layer(self, controller, fake_source, surface):
        fake_source.aggregate_results = [
            AggregationResult(3, [CountryTally("Atlantis", 2), CountryTally("France", 1)])
        ]
        await controller.refresh_now()
        assert _rendered(surface) == {"France": 1}

    async def test_empty_result_leaves_layer_untouched(self, controller, fake_source, surface):
        fake_source.aggregate_results = [fake_source.default_aggregation, AggregationResult()]
        await controller.refresh_now()
        layer_before = surface.get_layer(COUNTRY_LAYER_ID)
        await controller.refresh_now()
        assert surface.get_layer(COUNTRY_LAYER_ID) is layer_before
        assert controller.loading is False

    async def test_failed_fetch_leaves_layer_untouched(self, controller, fake_source, surface):
        fake_source.aggregate_results = [fake_source.default_aggregation, RuntimeError("boom")]
        await controller.refresh_now()
        await controller.refresh_now()
        assert _rendered(surface) == {"United States": 2, "France": 1}
        assert controller.state is ControllerState.READY

    async def test_stale_response_discarded(self, controller, fake_source, surface):
        gate = asyncio.Event()
        fake_source.aggregate_gates = {0: gate}
        fake_source.aggregate_results = [
            AggregationResult(5, [CountryTally("Germany", 5)]),
            AggregationResult(4, [CountryTally("Japan", 4)]),
        ]
        first = controller.refresh_now()
        second = controller.refresh_now()
        await second
        assert _rendered(surface) == {"Japan": 4}
        gate.set()
        await first
        assert _rendered(surface) == {"Japan": 4}
        assert controller.sequence == 2

    async def test_loading_clears_only_for_latest(self, controller, fake_source):
        gate = asyncio.Event()
        fake_source.aggregate_gates = {1: gate}
        first = controller.refresh_now()
        controller.refresh_now()
        await first
        assert controller.loading is True
        gate.set()
        await controller.wait_idle()
        assert controller.loading is False


class TestLayerSwap:
    async def test_handler_counts_do_not_accumulate(self, controller, surface):
        for _ in range(3):
            await controller.refresh_now()
        assert surface.handler_count("click", COUNTRY_LAYER_ID) == 1
        assert surface.handler_count("mouseenter", COUNTRY_LAYER_ID) == 1
        assert surface.handler_count("mouseleave", COUNTRY_LAYER_ID) == 1

    async def test_previous_animation_ends_on_swap(self, controller):
        await controller.refresh_now()
        old = controller.animation
        await controller.refresh_now()
        await asyncio.wait_for(old.wait(), timeout=1.0)
        assert old.running is False
        assert controller.animation is not old
        assert controller.animation.running is True

    async def test_click_uses_current_topic(self, controller, surface, fake_source):
        await controller.refresh_now()
        controller.topic = Topic.CYBER
        feature = surface.get_source(COUNTRY_SOURCE_ID).features[0]
        (task,) = surface.fire(MapEvent(type="click", layer_id=COUNTRY_LAYER_ID, features=[feature]))
        await task
        assert fake_source.drilldown_calls == [
            {"timespan": "24h", "topic": "cyber", "country": "United States", "keyword": None}
        ]

    async def test_hover_popup_closed_on_swap(self, controller, surface, popups):
        await controller.refresh_now()
        feature = surface.get_source(COUNTRY_SOURCE_ID).features[0]
        surface.fire(MapEvent(type="mouseenter", layer_id=COUNTRY_LAYER_ID, features=[feature]))
        assert popups.hover_popup.is_open
        await controller.refresh_now()
        assert not popups.hover_popup.is_open
        assert surface.cursor == ""
