"""Unit tests for situationroom.service and situationroom.clients.events_api_client."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from situationroom.clients.events_api_client import EventsApiClient
from situationroom.errors import (
    MalformedResponseBody,
    MissingConfigurationError,
    NetworkTimeout,
    UpstreamNonSuccess,
)
from situationroom.models.events import (
    AggregationResult,
    Article,
    ArticleList,
    DegradedResult,
    DrilldownResult,
    FeedItem,
)
from situationroom.models.query import QueryParams
from situationroom.service import EventService, FeedService, LocalEventsSource, cache_control


def _stub_client(result: ArticleList) -> MagicMock:
    client = MagicMock()
    client.fetch_articles.return_value = result
    return client


def _taiwan_articles(n: int) -> ArticleList:
    return ArticleList(
        articles=[
            Article(url=f"https://e.com/{i}", title=f"Taiwan {i}", source="e.com",
                    seendate="20240115123045", source_country="Taiwan")
            for i in range(n)
        ]
    )


class TestEventService:
    def test_aggregation_body_and_headers(self, test_config, sample_articles):
        service = EventService(test_config, client=_stub_client(sample_articles))
        response = service.query(QueryParams.from_raw(topic="protest", timespan="24h"))
        assert response.body["totalArticles"] == 5
        assert response.headers == {"Cache-Control": "public, max-age=300"}
        assert response.degraded is False

    def test_country_drilldown_query(self, test_config, sample_articles):
        client = _stub_client(sample_articles)
        service = EventService(test_config, client=client)
        service.query(QueryParams.from_raw(timespan="7d", country="US"))
        args, kwargs = client.fetch_articles.call_args
        assert args == ("sourcecountry:unitedstates", "7d")
        assert kwargs["max_records"] == 250

    def test_keyword_drilldown_capped(self, test_config):
        service = EventService(test_config, client=_stub_client(_taiwan_articles(40)))
        response = service.query(QueryParams.from_raw(keyword="Taiwan", timespan="7d"))
        assert len(response.body["articles"]) <= 20

    def test_degraded_short_cache(self, test_config):
        service = EventService(test_config, client=_stub_client(ArticleList.unavailable()))
        response = service.query(QueryParams.from_raw(topic="protest"))
        assert response.degraded is True
        assert response.body == {"countries": [], "articles": []}
        assert response.headers == cache_control(60)


class TestLocalEventsSource:
    async def test_aggregate(self, test_config, sample_articles):
        source = LocalEventsSource(EventService(test_config, client=_stub_client(sample_articles)))
        result = await source.aggregate("protest", "24h")
        assert isinstance(result, AggregationResult)
        assert result.countries[0].country == "United States"

    async def test_degraded_becomes_empty(self, test_config):
        source = LocalEventsSource(EventService(test_config, client=_stub_client(ArticleList.unavailable())))
        assert (await source.aggregate("protest", "24h")).countries == []
        assert (await source.drilldown("7d", keyword="Taiwan")).articles == []


class TestEventsApiClient:
    async def test_aggregate_parses_body(self, mock_response):
        body = {"totalArticles": 3, "countries": [{"country": "France", "count": 3}]}
        client = EventsApiClient("http://events.test")
        with patch.object(client._session, "get", return_value=mock_response(200, json.dumps(body))) as mock_get:
            result = await client.aggregate("protest", "24h")
        assert result.countries[0].country == "France"
        assert mock_get.call_args.kwargs["params"] == {"topic": "protest", "timespan": "24h"}

    async def test_degraded_body_is_empty(self, mock_response):
        client = EventsApiClient("http://events.test")
        degraded = json.dumps(DegradedResult().to_dict())
        with patch.object(client._session, "get", return_value=mock_response(200, degraded)):
            assert (await client.aggregate("protest", "24h")).countries == []
            assert (await client.drilldown("24h", country="France")).articles == []

    async def test_drilldown_params(self, mock_response):
        body = {"articles": [{"title": "T", "url": "https://e.com", "source": "e", "date": "20240115123045"}]}
        client = EventsApiClient("http://events.test")
        with patch.object(client._session, "get", return_value=mock_response(200, json.dumps(body))) as mock_get:
            result = await client.drilldown("7d", keyword="Taiwan")
        assert isinstance(result, DrilldownResult)
        assert result.articles[0].title == "T"
        assert mock_get.call_args.kwargs["params"] == {"timespan": "7d", "keyword": "Taiwan"}

    async def test_transport_failure_raises(self):
        client = EventsApiClient("http://events.test")
        with patch.object(client._session, "get", side_effect=requests.exceptions.ConnectionError):
            with pytest.raises(UpstreamNonSuccess):
                await client.aggregate("protest", "24h")
            with pytest.raises(UpstreamNonSuccess):
                await client.drilldown("24h", country="France")

    async def test_timeout_raises(self):
        client = EventsApiClient("http://events.test", request_timeout=0.5)
        with patch.object(client._session, "get", side_effect=requests.exceptions.Timeout):
            with pytest.raises(NetworkTimeout):
                await client.drilldown("7d", keyword="Taiwan")

    async def test_error_status_raises(self, mock_response):
        client = EventsApiClient("http://events.test")
        with patch.object(client._session, "get", return_value=mock_response(503, "")):
            with pytest.raises(UpstreamNonSuccess) as exc_info:
                await client.aggregate("protest", "24h")
        assert exc_info.value.status_code == 503

    async def test_unparseable_body_raises(self, mock_response):
        client = EventsApiClient("http://events.test")
        with patch.object(client._session, "get", return_value=mock_response(200, "<html>oops</html>")):
            with pytest.raises(MalformedResponseBody):
                await client.aggregate("protest", "24h")
        with patch.object(client._session, "get", return_value=mock_response(200, "[1, 2]")):
            with pytest.raises(MalformedResponseBody):
                await client.drilldown("24h", country="France")

    async def test_osint_feed_items(self, mock_response):
        body = {"articles": [{"title": "Missile strike", "url": "https://e.com/1", "source": "Reuters",
                              "date": "2024-01-15T12:00:00Z", "status": "red"}]}
        client = EventsApiClient("http://events.test")
        with patch.object(client._session, "get", return_value=mock_response(200, json.dumps(body))) as mock_get:
            items = await client.osint_feed()
        assert items == [FeedItem("Missile strike", "https://e.com/1", "Reuters", "2024-01-15T12:00:00Z", "red")]
        assert mock_get.call_args[0][0] == "http://events.test/api/osint-feed"

    async def test_osint_feed_missing_key_text(self, mock_response):
        client = EventsApiClient("http://events.test")
        with patch.object(client._session, "get", return_value=mock_response(500, "NewsAPI key not set")):
            with pytest.raises(UpstreamNonSuccess, match="NewsAPI key not set"):
                await client.osint_feed()


class TestLocalEventsSourceFeed:
    async def test_osint_feed_uses_feed_service(self, test_config):
        newsapi = MagicMock()
        newsapi.top_headlines.return_value = [
            {"title": "Cyber attack on grid", "url": "https://e.com/2", "source": {"name": "AP"},
             "publishedAt": "2024-01-15T10:00:00Z"},
        ]
        source = LocalEventsSource(MagicMock(), feed=FeedService(test_config, client=newsapi))
        items = await source.osint_feed()
        assert [(i.title, i.status) for i in items] == [("Cyber attack on grid", "red")]

    async def test_osint_feed_without_key_raises(self, test_config):
        source = LocalEventsSource(EventService(test_config, client=MagicMock()))
        with pytest.raises(MissingConfigurationError):
            await source.osint_feed()
