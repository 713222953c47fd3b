"""Layer ids, paint definitions and style expressions for SituationRoom maps.

Each subsystem owns a disjoint source / layer id namespace so no two writers
contend for the same id.

Expressions use the engine's JSON expression syntax. evaluate_expression()
implements the small subset used here so renderers and tests can resolve a
marker radius for a given feature.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from config.defaults import (
    MARKER_BASE_RADIUS,
    MARKER_COUNT_SCALE,
    MARKER_MAX_GROWTH,
    PULSE_AMPLITUDE,
)

# ── Id namespaces ─────────────────────────────────────────────────────────────
COUNTRY_SOURCE_ID = "top-countries"
COUNTRY_LAYER_ID = "top-countries-layer"

ZONE_SOURCE_ID = "tension-zones"
ZONE_LAYER_ID = "tension-zones-layer"

BORDER_SOURCE_ID = "countries"
BORDER_LAYER_ID = "nato-borders"

# ── Colors ────────────────────────────────────────────────────────────────────
MARKER_FILL = "rgba(255,255,255,0.7)"
MARKER_STROKE = "#ffffff"
ZONE_RED = "#dc2626"
ZONE_AMBER = "#f59e0b"
ZONE_FALLBACK = "#6b7280"
BORDER_COLOR = "#3b82f6"


def marker_radius_expression(phase: Optional[float] = None, amplitude: float = PULSE_AMPLITUDE) -> List[Any]:
    """Radius expression ``3 + min(4, 0.25 * count)``, plus a sine pulse term.

    Args:
        phase: Animation phase in radians; None for the static radius.
        amplitude: Pulse amplitude in pixels.
    """
    expr: List[Any] = [
        "+",
        MARKER_BASE_RADIUS,
        ["min", MARKER_MAX_GROWTH, ["*", MARKER_COUNT_SCALE, ["get", "count"]]],
    ]
    if phase is not None:
        expr.append(["*", amplitude, math.sin(phase)])
    return expr


def country_layer_paint() -> Dict[str, Any]:
    return {
        "circle-radius": marker_radius_expression(),
        "circle-color": MARKER_FILL,
        "circle-stroke-color": MARKER_STROKE,
        "circle-stroke-width": 1.5,
    }


def zone_layer_paint() -> Dict[str, Any]:
    return {
        "circle-radius": 7,
        "circle-color": ["match", ["get", "status"], "red", ZONE_RED, "amber", ZONE_AMBER, ZONE_FALLBACK],
        "circle-stroke-color": "#000",
        "circle-stroke-width": 1.5,
    }


def border_layer_paint() -> Dict[str, Any]:
    return {"line-color": BORDER_COLOR, "line-width": 3}


def evaluate_expression(expr: Any, properties: Dict[str, Any]) -> Any:
    """Evaluate a style expression against feature properties.

    Supports literals and the ``+``, ``*``, ``min``, ``max``, ``get`` and
    ``match`` operators.

    Raises:
        ValueError: For unsupported operators.
    """
    if not isinstance(expr, list):
        return expr
    if not expr:
        raise ValueError("empty expression")
    op, args = expr[0], expr[1:]
    if op == "get":
        return properties.get(args[0])
    if op == "match":
        value = evaluate_expression(args[0], properties)
        pairs, fallback = args[1:-1], args[-1]
        for i in range(0, len(pairs), 2):
            if pairs[i] == value:
                return pairs[i + 1]
        return fallback
    values = [evaluate_expression(a, properties) for a in args]
    if op == "+":
        return sum(float(v or 0) for v in values)
    if op == "*":
        return math.prod(float(v or 0) for v in values)
    if op == "min":
        return min(float(v or 0) for v in values)
    if op == "max":
        return max(float(v or 0) for v in values)
    raise ValueError(f"unsupported expression operator: {op!r}")
