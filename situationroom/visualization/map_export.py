"""Standalone HTML export of a map surface snapshot.

Renders every visible circle layer of a MapSurface as Folium CircleMarkers on
a dark base map, resolving each marker's radius and color from the layer's
paint expressions. Rendering only; no data transformation.
"""

from __future__ import annotations

import logging
from html import escape
from pathlib import Path
from typing import Any, Dict, Optional

import folium

from situationroom.map.styles import evaluate_expression
from situationroom.map.surface import MapSurface
from situationroom.models.map import LayerSpec
from situationroom.utils.geo_utils import feature_coordinates
from situationroom.visualization.theme import (
    EXPORT_TILES,
    THEME_ACCENT,
    THEME_BACKGROUND,
    THEME_PANEL,
    THEME_TEXT,
)

logger = logging.getLogger(__name__)


def _tooltip(properties: Dict[str, Any]) -> str:
    if "country" in properties:
        return f"{properties['country']}: {properties.get('count', 0)} articles"
    return str(properties.get("name", ""))


def _add_circle_layer(fmap: folium.Map, surface: MapSurface, layer: LayerSpec) -> int:
    source = surface.get_source(layer.source)
    if source is None:
        return 0
    added = 0
    for feature in source.features:
        coords = feature_coordinates(feature)
        if coords is None:
            continue
        props = feature.get("properties") or {}
        radius = float(evaluate_expression(layer.paint.get("circle-radius", 5), props))
        fill = evaluate_expression(layer.paint.get("circle-color", THEME_ACCENT), props)
        stroke = evaluate_expression(layer.paint.get("circle-stroke-color", fill), props)
        lon, lat = coords
        folium.CircleMarker(
            location=[lat, lon],
            radius=max(radius, 1.0),
            color=stroke,
            weight=float(layer.paint.get("circle-stroke-width", 1)),
            fill=True,
            fill_color=fill,
            fill_opacity=0.7,
            tooltip=escape(_tooltip(props)),
        ).add_to(fmap)
        added += 1
    return added


def render_map_html(
    surface: MapSurface,
    output_path: str | Path,
    title: Optional[str] = None,
) -> Path:
    """Render a snapshot of ``surface`` to a standalone HTML file.

    Args:
        surface: Map surface to export.
        output_path: Destination HTML path; parent directories are created.
        title: Optional overlay title.

    Returns:
        The written path.
    """
    lon, lat = surface.center
    fmap = folium.Map(location=[lat, lon], zoom_start=max(int(round(surface.zoom)), 1), tiles=EXPORT_TILES)

    if title:
        title_html = (
            f'<div style="position:fixed;top:10px;left:50px;z-index:9999;'
            f'background-color:{THEME_PANEL};padding:8px 14px;border-radius:4px;'
            f'border:1px solid {THEME_BACKGROUND};color:{THEME_TEXT};font-size:14px;font-weight:bold;">{escape(title)}</div>'
        )
        fmap.get_root().html.add_child(folium.Element(title_html))

    markers = 0
    for layer_id in surface.layer_ids:
        layer = surface.get_layer(layer_id)
        if layer is None or not layer.visible:
            continue
        if layer.type == "circle":
            markers += _add_circle_layer(fmap, surface, layer)
        else:
            logger.debug("Skipping %s layer %s in export", layer.type, layer_id)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fmap.save(str(output_path))
    logger.info("Saved map snapshot with %d markers: %s", markers, output_path)
    return output_path
