"""SituationRoom fetch / aggregate boundary.

EventService wires QueryNormalizer -> GDELTClient -> event aggregator for one
request. Each call is independent; the only shared state is the read-only
normalization tables. The service always produces a body: provider failures
become the empty-shaped DegradedResult, never an exception.

Usage:
    from config.settings import AppConfig
    from situationroom.service import EventService

    service = EventService(AppConfig())
    response = service.query(QueryParams.from_raw(topic="protest", timespan="24h"))
    response.body   # {"totalArticles": ..., "countries": [...]}
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config.settings import AppConfig
from situationroom.analysis.event_aggregator import EventsResult, build_result
from situationroom.analysis.headline_classifier import build_feed
from situationroom.analysis.query_normalizer import QueryNormalizer
from situationroom.clients.gdelt_client import GDELTClient
from situationroom.clients.newsapi_client import NewsAPIClient
from situationroom.models.events import (
    AggregationResult,
    DegradedResult,
    DrilldownResult,
    FeedItem,
)
from situationroom.models.query import QueryParams

logger = logging.getLogger(__name__)


def cache_control(max_age: int) -> Dict[str, str]:
    return {"Cache-Control": f"public, max-age={max_age}"}


@dataclass
class ServiceResponse:
    """A response body plus the headers the HTTP layer should send."""

    result: EventsResult
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def body(self) -> Dict[str, Any]:
        return self.result.to_dict()

    @property
    def degraded(self) -> bool:
        return isinstance(self.result, DegradedResult)


class EventService:
    """Stateless aggregation / drilldown service over the GDELT DOC API.

    Args:
        config: Application configuration.
        client: Optional pre-built GDELTClient (injected in tests).
        normalizer: Optional QueryNormalizer.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        client: Optional[GDELTClient] = None,
        normalizer: Optional[QueryNormalizer] = None,
    ) -> None:
        self.config = config or AppConfig()
        self.client = client or GDELTClient(
            base_url=self.config.gdelt_base_url,
            request_timeout=self.config.gdelt_request_timeout,
        )
        self.normalizer = normalizer or QueryNormalizer()

    def query(self, params: QueryParams) -> ServiceResponse:
        """Run one aggregation or drilldown request.

        Args:
            params: Validated request parameters.

        Returns:
            ServiceResponse; degraded bodies are cached for a shorter window.
        """
        normalized = self.normalizer.from_params(params)
        logger.info(
            "Events query: mode=%s timespan=%s query=%.80s",
            normalized.mode.value,
            params.timespan.value,
            normalized.query,
        )

        articles = self.client.fetch_articles(
            normalized.query,
            params.timespan.value,
            max_records=self.config.max_records,
        )
        result = build_result(normalized.mode, articles, self.config.drilldown_limit)

        if isinstance(result, DegradedResult):
            logger.warning("Events query degraded to empty body: %s", result.reason)
            return ServiceResponse(result, cache_control(self.config.degraded_cache_max_age))
        return ServiceResponse(result, cache_control(self.config.cache_max_age))

    def close(self) -> None:
        self.client.close()


class LocalEventsSource:
    """In-process EventsSource that calls an EventService from the event loop.

    The blocking provider call runs in a worker thread. A degraded service
    response is an empty answer, the same as the HTTP endpoint's degraded body.

    Args:
        service: Shared EventService.
        feed: FeedService for osint_feed(); built on first use otherwise.
    """

    def __init__(self, service: EventService, feed: Optional["FeedService"] = None) -> None:
        self.service = service
        self.feed = feed

    async def aggregate(self, topic: str, timespan: str) -> AggregationResult:
        params = QueryParams.from_raw(topic=topic, timespan=timespan)
        response = await asyncio.to_thread(self.service.query, params)
        if isinstance(response.result, AggregationResult):
            return response.result
        return AggregationResult()

    async def drilldown(
        self,
        timespan: str,
        topic: Optional[str] = None,
        country: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> DrilldownResult:
        params = QueryParams.from_raw(
            topic=topic, timespan=timespan, country=country, keyword=keyword
        )
        response = await asyncio.to_thread(self.service.query, params)
        if isinstance(response.result, DrilldownResult):
            return response.result
        return DrilldownResult()

    async def osint_feed(self) -> List[FeedItem]:
        """Classified headlines.

        Raises:
            MissingConfigurationError: NEWSAPI_KEY is unset.
        """
        if self.feed is None:
            self.feed = FeedService(self.service.config)
        return await asyncio.to_thread(self.feed.headlines)


class FeedService:
    """OSINT headline feed: NewsAPI top headlines with severity classification.

    Raises:
        MissingConfigurationError: On construction when NEWSAPI_KEY is unset.
    """

    def __init__(self, config: Optional[AppConfig] = None, client: Optional[NewsAPIClient] = None) -> None:
        self.config = config or AppConfig()
        self.client = client or NewsAPIClient(
            api_key=self.config.newsapi_key,
            base_url=self.config.newsapi_base_url,
            request_timeout=self.config.newsapi_request_timeout,
            page_size=self.config.newsapi_page_size,
        )

    def headlines(self) -> List[FeedItem]:
        items = build_feed(self.client.top_headlines())
        logger.info("OSINT feed: %d headlines", len(items))
        return items

    @property
    def headers(self) -> Dict[str, str]:
        return cache_control(self.config.feed_cache_max_age)

    def close(self) -> None:
        self.client.close()
