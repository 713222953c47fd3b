"""Unit tests for situationroom.map.surface, handlers and styles."""

from __future__ import annotations

import math

import pytest

from situationroom.errors import MapError
from situationroom.map.handlers import HandlerRegistry
from situationroom.map.styles import (
    ZONE_AMBER,
    ZONE_FALLBACK,
    ZONE_RED,
    evaluate_expression,
    marker_radius_expression,
    zone_layer_paint,
)
from situationroom.map.surface import MapSurface
from situationroom.models.map import LayerSpec, MapEvent, SourceSpec


def _add_point_layer(surface: MapSurface, layer_id: str = "dots", source_id: str = "points") -> None:
    surface.add_source(SourceSpec(id=source_id, data={"type": "FeatureCollection", "features": []}))
    surface.add_layer(LayerSpec(id=layer_id, type="circle", source=source_id))


class TestSourcesAndLayers:
    def test_layer_requires_source(self, surface):
        with pytest.raises(MapError):
            surface.add_layer(LayerSpec(id="dots", type="circle", source="missing"))

    def test_duplicate_ids_rejected(self, surface):
        _add_point_layer(surface)
        with pytest.raises(MapError):
            surface.add_source(SourceSpec(id="points", data={}))
        with pytest.raises(MapError):
            surface.add_layer(LayerSpec(id="dots", type="circle", source="points"))

    def test_source_in_use_cannot_be_removed(self, surface):
        _add_point_layer(surface)
        with pytest.raises(MapError):
            surface.remove_source("points")
        surface.remove_layer("dots")
        surface.remove_source("points")
        assert surface.source_ids == []

    def test_layout_property_controls_visibility(self, surface):
        _add_point_layer(surface)
        surface.set_layout_property("dots", "visibility", "none")
        assert surface.get_layer("dots").visible is False

    def test_paint_property_on_missing_layer(self, surface):
        with pytest.raises(MapError):
            surface.set_paint_property("nope", "circle-radius", 3)


class TestEvents:
    def test_fire_returns_handler_results(self, surface):
        _add_point_layer(surface)
        surface.on("click", "dots", lambda e: "clicked")
        assert surface.fire(MapEvent(type="click", layer_id="dots")) == ["clicked"]

    def test_events_for_missing_layer_ignored(self, surface):
        surface.on("click", "dots", lambda e: "clicked")
        assert surface.fire(MapEvent(type="click", layer_id="dots")) == []

    def test_off_by_reference(self, surface):
        handler = lambda e: None  # noqa: E731
        surface.on("click", "dots", handler)
        surface.off("click", "dots", handler)
        assert surface.handler_count("click", "dots") == 0

    def test_load_fires_map_level_handlers(self, surface):
        seen = []
        surface.on("load", None, seen.append)
        surface.load()
        assert surface.loaded is True
        assert len(seen) == 1


class TestHandlerRegistry:
    def test_unbind_detaches_everything_bound(self, surface):
        registry = HandlerRegistry(surface)
        registry.bind_all("dots", {"click": lambda e: 1, "mouseenter": lambda e: 2})
        assert surface.handler_count("click", "dots") == 1
        assert registry.unbind("dots") == 2
        assert surface.handler_count("click", "dots") == 0
        assert surface.handler_count("mouseenter", "dots") == 0

    def test_unbind_unknown_layer(self, surface):
        assert HandlerRegistry(surface).unbind("nope") == 0


class TestStyles:
    def test_static_radius(self):
        expr = marker_radius_expression()
        assert evaluate_expression(expr, {"count": 2}) == pytest.approx(3.5)
        assert evaluate_expression(expr, {"count": 100}) == pytest.approx(7.0)

    def test_pulsed_radius(self):
        expr = marker_radius_expression(phase=math.pi / 2, amplitude=1.5)
        assert evaluate_expression(expr, {"count": 0}) == pytest.approx(4.5)

    def test_zone_colors(self):
        color = zone_layer_paint()["circle-color"]
        assert evaluate_expression(color, {"status": "red"}) == ZONE_RED
        assert evaluate_expression(color, {"status": "amber"}) == ZONE_AMBER
        assert evaluate_expression(color, {"status": "other"}) == ZONE_FALLBACK

    def test_unsupported_operator(self):
        with pytest.raises(ValueError):
            evaluate_expression(["interpolate", 1, 2], {})
