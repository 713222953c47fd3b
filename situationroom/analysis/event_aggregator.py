"""Event aggregation for SituationRoom.

Two modes over one provider fetch:

- Aggregation: tally articles by source country, in first-seen order.
  Articles without a country are dropped from the tallies but still counted
  in ``total_articles``.
- Drilldown: the first N articles in provider order (already most recent
  first), projected to title / url / source / date.

Both modes return a DegradedResult when the provider produced no article
collection at all.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Union

from config.defaults import DRILLDOWN_LIMIT, TOP_N_COUNTRIES
from situationroom.models.events import (
    AggregationResult,
    Article,
    ArticleList,
    ArticleSummary,
    CountryTally,
    DegradedResult,
    DrilldownResult,
)
from situationroom.models.query import QueryMode

logger = logging.getLogger(__name__)

EventsResult = Union[AggregationResult, DrilldownResult, DegradedResult]


def tally_countries(articles: Iterable[Article]) -> List[CountryTally]:
    """Count articles per source country, preserving first-seen order.

    Args:
        articles: Fetched articles in provider order.

    Returns:
        One CountryTally per distinct non-empty country.
    """
    counts: Dict[str, int] = {}
    skipped = 0
    for article in articles:
        country = article.source_country
        if not country:
            skipped += 1
            continue
        counts[country] = counts.get(country, 0) + 1
    if skipped:
        logger.debug("Aggregation: %d articles without a source country", skipped)
    return [CountryTally(country=c, count=n) for c, n in counts.items()]


def aggregate(articles: ArticleList) -> Union[AggregationResult, DegradedResult]:
    """Aggregation mode: per-country tallies plus the total fetched count."""
    if not articles.available:
        return DegradedResult(reason="no article collection")
    return AggregationResult(
        total_articles=len(articles),
        countries=tally_countries(articles),
    )


def drilldown(
    articles: ArticleList,
    limit: int = DRILLDOWN_LIMIT,
) -> Union[DrilldownResult, DegradedResult]:
    """Drilldown mode: the first ``limit`` articles in provider order."""
    if not articles.available:
        return DegradedResult(reason="no article collection")
    return DrilldownResult(
        articles=[ArticleSummary.from_article(a) for a in articles.articles[:limit]]
    )


def build_result(
    mode: QueryMode,
    articles: ArticleList,
    drilldown_limit: int = DRILLDOWN_LIMIT,
) -> EventsResult:
    """Dispatch to the aggregation or drilldown projection."""
    if mode is QueryMode.DRILLDOWN:
        return drilldown(articles, limit=drilldown_limit)
    return aggregate(articles)


def select_top_countries(
    tallies: Iterable[CountryTally],
    n: int = TOP_N_COUNTRIES,
) -> List[CountryTally]:
    """Return the ``n`` highest tallies, descending by count.

    ``sorted`` is stable, so ties keep their original (provider) order.
    """
    return sorted(tallies, key=lambda t: t.count, reverse=True)[:n]
