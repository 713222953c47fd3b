"""Keyword severity classification for OSINT feed headlines."""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List

from situationroom.models.events import FeedItem

_RED_PATTERN = re.compile(r"(war|conflict|attack|bomb|missile|invasion|fighting)", re.IGNORECASE)
_AMBER_PATTERN = re.compile(r"(protest|strike|demonstration|tension|cyber)", re.IGNORECASE)


def classify_headline(title: str) -> str:
    """Return "red", "amber" or "green" for a headline.

    Red terms win over amber terms; anything else is green.
    """
    if not title:
        return "green"
    if _RED_PATTERN.search(title):
        return "red"
    if _AMBER_PATTERN.search(title):
        return "amber"
    return "green"


def build_feed(raw_articles: Iterable[Dict[str, Any]]) -> List[FeedItem]:
    """Convert NewsAPI records into classified FeedItems.

    Records without a title are skipped.
    """
    items: List[FeedItem] = []
    for raw in raw_articles:
        title = raw.get("title")
        if not title:
            continue
        source = raw.get("source")
        source_name = source.get("name", "") if isinstance(source, dict) else ""
        items.append(
            FeedItem(
                title=str(title),
                url=str(raw.get("url") or ""),
                source=str(source_name or ""),
                date=str(raw.get("publishedAt") or ""),
                status=classify_headline(str(title)),
            )
        )
    return items
