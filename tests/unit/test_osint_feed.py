"""Unit tests for the OSINT feed: classifier, NewsAPI client and poller."""

from __future__ import annotations

import asyncio
from unittest.mock import patch

import pytest
import requests

from situationroom.analysis.headline_classifier import build_feed, classify_headline
from situationroom.clients.newsapi_client import NewsAPIClient
from situationroom.errors import MissingConfigurationError
from situationroom.feed_monitor import OsintFeedPoller, new_item_indices
from situationroom.models.events import FeedItem


def _item(url: str) -> FeedItem:
    return FeedItem(title=url, url=url)


class TestClassifyHeadline:
    @pytest.mark.parametrize(
        "title",
        ["Missile strike hits port", "Invasion fears grow", "Fighting resumes in the north"],
    )
    def test_red(self, title):
        assert classify_headline(title) == "red"

    @pytest.mark.parametrize("title", ["Dock workers strike", "Cyber incident at bank", "PROTEST in capital"])
    def test_amber(self, title):
        assert classify_headline(title) == "amber"

    def test_green(self):
        assert classify_headline("Central bank holds rates") == "green"

    def test_red_wins_over_amber(self):
        assert classify_headline("Protest after missile attack") == "red"


class TestBuildFeed:
    def test_fields_and_untitled_skipped(self):
        raw = [
            {
                "title": "Missile attack reported",
                "url": "https://e.com/1",
                "source": {"id": None, "name": "Reuters"},
                "publishedAt": "2024-01-15T12:30:45Z",
            },
            {"title": None, "url": "https://e.com/2"},
        ]
        items = build_feed(raw)
        assert len(items) == 1
        assert items[0].to_dict() == {
            "title": "Missile attack reported",
            "url": "https://e.com/1",
            "source": "Reuters",
            "date": "2024-01-15T12:30:45Z",
            "status": "red",
        }


class TestNewsAPIClient:
    def test_missing_key_raises(self):
        with pytest.raises(MissingConfigurationError, match="NewsAPI key not set"):
            NewsAPIClient(api_key=None)

    def test_key_sent_as_header(self):
        client = NewsAPIClient(api_key="secret")
        assert client._session.headers["X-Api-Key"] == "secret"

    def test_success(self, mock_response):
        client = NewsAPIClient(api_key="secret")
        payload = {"status": "ok", "articles": [{"title": "A"}, "junk"]}
        with patch.object(client._session, "get", return_value=mock_response(200, json_data=payload)):
            assert client.top_headlines() == [{"title": "A"}]

    def test_failures_return_empty(self, mock_response):
        client = NewsAPIClient(api_key="secret")
        with patch.object(client._session, "get", side_effect=requests.exceptions.Timeout):
            assert client.top_headlines() == []
        with patch.object(client._session, "get", return_value=mock_response(401, "")):
            assert client.top_headlines() == []
        with patch.object(client._session, "get", return_value=mock_response(200, "<html>")):
            assert client.top_headlines() == []


class TestNewItemIndices:
    def test_first_poll_flags_nothing(self):
        assert new_item_indices([], [_item("a")]) == set()

    def test_changed_positions_flagged(self):
        previous = [_item("a"), _item("b")]
        current = [_item("c"), _item("b"), _item("d")]
        assert new_item_indices(previous, current) == {0, 2}


class TestOsintFeedPoller:
    async def test_highlight_then_clear(self):
        batches = [[_item("a"), _item("b")], [_item("c"), _item("b")]]

        async def fetch():
            return batches.pop(0)

        poller = OsintFeedPoller(fetch, interval=60, highlight_seconds=0.01)
        await poller.poll_once()
        assert poller.highlighted == set()
        await poller.poll_once()
        assert poller.highlighted == {0}
        await asyncio.sleep(0.03)
        assert poller.highlighted == set()
        poller.stop()

    async def test_failed_poll_keeps_items(self):
        calls = []

        async def fetch():
            calls.append(1)
            if len(calls) > 1:
                raise RuntimeError("down")
            return [_item("a")]

        poller = OsintFeedPoller(fetch)
        await poller.poll_once()
        assert [i.url for i in await poller.poll_once()] == ["a"]

    async def test_start_polls_on_interval(self):
        async def fetch():
            return [_item("a")]

        poller = OsintFeedPoller(fetch, interval=0.005)
        poller.start()
        await asyncio.sleep(0.03)
        poller.stop()
        assert poller.polls >= 2
        assert poller.running is False
