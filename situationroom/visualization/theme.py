"""Shared dark-theme constants for SituationRoom popups, feed and map export.

Rendering only; no data transformation.
"""

from __future__ import annotations

# ── Color palette ─────────────────────────────────────────────────────────────
THEME_BACKGROUND: str = "#0A0E17"    # Deep navy page background
THEME_PANEL: str = "#111827"         # Popup / panel background
THEME_TEXT: str = "#E5E7EB"          # Off-white text
THEME_ACCENT: str = "#60A5FA"        # Sky-blue accent
THEME_MUTED: str = "#9CA3AF"         # Secondary text (source • date)
THEME_BODY: str = "#D1D5DB"          # Zone description text
THEME_BORDER: str = "#333333"        # Article list divider

# Article links and failure text
THEME_LINK: str = "#F87171"
THEME_ERROR: str = "#F87171"

# Feed status colors
_STATUS_RED: str = "#EF4444"
_STATUS_AMBER: str = "#F59E0B"
_STATUS_GREEN: str = "#10B981"

# Base map tiles for exported snapshots
EXPORT_TILES: str = "CartoDB dark_matter"


def status_color(status: str) -> str:
    """Return the display color for a feed or zone status.

    Args:
        status: "red", "amber" or "green"; anything else renders green.

    Returns:
        Hex color string.
    """
    if status == "red":
        return _STATUS_RED
    if status == "amber":
        return _STATUS_AMBER
    return _STATUS_GREEN
