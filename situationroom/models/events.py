"""Event and article data models for SituationRoom.

Defines the records produced by the GDELT fetcher and the two response shapes
of the aggregation boundary (country tallies and drilldown article lists).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from situationroom.utils.date_utils import parse_seendate


@dataclass(frozen=True)
class Article:
    """A single article from the provider. Immutable; discarded after render."""

    url: str
    title: str
    source: str = ""
    seendate: str = ""          # Compact 14-digit UTC string (YYYYMMDDHHMMSS)
    source_country: str = ""
    language: str = ""

    @property
    def published_at(self) -> Optional[datetime]:
        """Parse ``seendate`` on demand; None when absent or malformed."""
        return parse_seendate(self.seendate)

    @classmethod
    def from_gdelt(cls, raw: Dict[str, Any]) -> "Article":
        """Build an Article from a raw ArtList row.

        GDELT rows carry ``domain`` rather than ``source``; either is accepted.
        """
        return cls(
            url=str(raw.get("url") or ""),
            title=str(raw.get("title") or ""),
            source=str(raw.get("source") or raw.get("domain") or ""),
            seendate=str(raw.get("seendate") or ""),
            source_country=str(raw.get("sourcecountry") or "").strip(),
            language=str(raw.get("language") or ""),
        )


@dataclass
class ArticleList:
    """Result of one provider fetch.

    ``available`` is False when the provider returned no article collection at
    all (timeout, non-success status, malformed body or missing ``articles``).
    """

    articles: List[Article] = field(default_factory=list)
    available: bool = True

    @classmethod
    def unavailable(cls) -> "ArticleList":
        return cls(articles=[], available=False)

    def __iter__(self) -> Iterator[Article]:
        return iter(self.articles)

    def __len__(self) -> int:
        return len(self.articles)


@dataclass
class CountryTally:
    """Article count for one source country."""

    country: str
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"country": self.country, "count": self.count}


@dataclass
class AggregationResult:
    """Aggregation-mode response: per-country tallies plus the total fetched."""

    total_articles: int = 0
    countries: List[CountryTally] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalArticles": self.total_articles,
            "countries": [c.to_dict() for c in self.countries],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AggregationResult":
        """Parse an endpoint body; degraded or partial bodies yield empty fields."""
        countries: List[CountryTally] = []
        for entry in data.get("countries") or []:
            if not isinstance(entry, dict) or not entry.get("country"):
                continue
            try:
                count = int(entry.get("count", 0))
            except (TypeError, ValueError):
                continue
            countries.append(CountryTally(country=str(entry["country"]), count=count))
        try:
            total = int(data.get("totalArticles", 0) or 0)
        except (TypeError, ValueError):
            total = 0
        return cls(total_articles=total, countries=countries)


@dataclass
class ArticleSummary:
    """Drilldown projection of an Article: title, url, source, raw date."""

    title: str
    url: str
    source: str = ""
    date: str = ""

    @property
    def published_at(self) -> Optional[datetime]:
        return parse_seendate(self.date)

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "url": self.url, "source": self.source, "date": self.date}

    @classmethod
    def from_article(cls, article: Article) -> "ArticleSummary":
        return cls(
            title=article.title,
            url=article.url,
            source=article.source,
            date=article.seendate,
        )


@dataclass
class DrilldownResult:
    """Drilldown-mode response: capped, most-recent-first article list."""

    articles: List[ArticleSummary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"articles": [a.to_dict() for a in self.articles]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DrilldownResult":
        articles: List[ArticleSummary] = []
        for entry in data.get("articles") or []:
            if not isinstance(entry, dict):
                continue
            articles.append(
                ArticleSummary(
                    title=str(entry.get("title") or ""),
                    url=str(entry.get("url") or ""),
                    source=str(entry.get("source") or ""),
                    date=str(entry.get("date") or ""),
                )
            )
        return cls(articles=articles)


@dataclass
class DegradedResult:
    """Empty-shaped body returned when the provider gave no article collection."""

    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"countries": [], "articles": []}


@dataclass
class FeedItem:
    """A classified OSINT headline."""

    title: str
    url: str
    source: str = ""
    date: str = ""      # ISO 8601 string as published by NewsAPI
    status: str = "green"   # "red", "amber", "green"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "source": self.source,
            "date": self.date,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeedItem":
        return cls(
            title=str(data.get("title") or ""),
            url=str(data.get("url") or ""),
            source=str(data.get("source") or ""),
            date=str(data.get("date") or ""),
            status=str(data.get("status") or "green"),
        )
