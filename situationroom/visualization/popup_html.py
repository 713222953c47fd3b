"""HTML fragments rendered into map popups.

All provider-supplied text (titles, sources, URLs, zone descriptions) is
HTML-escaped before interpolation.
"""

from __future__ import annotations

from html import escape
from typing import Iterable, List

from config.defaults import POPUP_ARTICLE_LIMIT
from situationroom.models.events import ArticleSummary
from situationroom.models.zones import TensionZone
from situationroom.utils.date_utils import format_local
from situationroom.visualization.theme import (
    THEME_BODY,
    THEME_BORDER,
    THEME_ERROR,
    THEME_LINK,
    THEME_MUTED,
    status_color,
)

NO_ARTICLES_TEXT = "No recent articles"

_SEVERITY_MARKER = {"red": "\U0001F534", "amber": "\U0001F7E0"}


def hover_html(country: str, count: int) -> str:
    return f"<div><strong>{escape(country)}</strong>: {int(count)} articles</div>"


def loading_html(message: str = "Loading news…") -> str:
    return f'<div style="color:{THEME_MUTED};font-size:12px;">{escape(message)}</div>'


def error_html(message: str) -> str:
    return f'<div style="color:{THEME_ERROR};font-size:12px;">{escape(message)}</div>'


def _article_html(article: ArticleSummary) -> str:
    meta = escape(article.source or "")
    stamp = format_local(article.published_at)
    if stamp:
        meta = f"{meta} • {stamp}"
    return (
        '<div style="margin-bottom:8px;">'
        f'<a href="{escape(article.url, quote=True)}" target="_blank" rel="noopener" '
        f'style="color:{THEME_LINK};font-weight:600;font-size:12px;">{escape(article.title)}</a>'
        f'<div style="font-size:10px;color:{THEME_MUTED};">{meta}</div>'
        "</div>"
    )


def article_list_html(articles: Iterable[ArticleSummary], limit: int = POPUP_ARTICLE_LIMIT) -> str:
    """Render up to ``limit`` articles, or the empty-state message.

    Args:
        articles: Drilldown articles, most recent first.
        limit: Maximum rows rendered.
    """
    rows: List[str] = [_article_html(a) for a in list(articles)[:limit]]
    if not rows:
        return f'<div style="color:{THEME_MUTED};font-size:12px;">{NO_ARTICLES_TEXT}</div>'
    return (
        f'<div style="max-height:200px;overflow:auto;border-top:1px solid {THEME_BORDER};'
        f'padding-top:6px;">{"".join(rows)}</div>'
    )


def zone_html(zone: TensionZone, articles: Iterable[ArticleSummary], limit: int = POPUP_ARTICLE_LIMIT) -> str:
    """Render the zone header (name, severity label, description) above its articles."""
    marker = _SEVERITY_MARKER.get(zone.severity.value, "")
    return (
        '<div style="max-width:340px;">'
        f'<strong style="font-size:14px;">{escape(zone.name)}</strong>'
        f'<div style="font-size:12px;margin:4px 0 6px 0;color:{status_color(zone.severity.value)};">'
        f"{marker} {zone.severity.label}</div>"
        f'<div style="font-size:12px;color:{THEME_BODY};margin-bottom:8px;line-height:1.4;">'
        f"{escape(zone.description)}</div>"
        f"{article_list_html(articles, limit)}"
        "</div>"
    )
