"""SituationRoom visualization: popup HTML and theme constants.

Map export lives in ``situationroom.visualization.map_export`` and is imported
directly so the map package can depend on the popup helpers.
"""

from situationroom.visualization.popup_html import (
    article_list_html,
    error_html,
    hover_html,
    loading_html,
    zone_html,
)

__all__ = [
    "article_list_html",
    "error_html",
    "hover_html",
    "loading_html",
    "zone_html",
]
