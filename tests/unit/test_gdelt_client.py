"""Unit tests for situationroom.clients.gdelt_client.

Covers:
- _safe_parse_json: valid JSON, empty body, HTTP header bleed-through, garbage
- GDELTClient._build_url: correct URL construction
- GDELTClient.fetch_articles: success, non-success status, timeout, connection
  error, unparseable body, missing articles key, maxrecords clamping

No real HTTP calls are made; requests.Session.get is patched throughout.
"""

from __future__ import annotations

import json
from unittest.mock import patch

import requests

from situationroom.clients.gdelt_client import GDELTClient, _safe_parse_json


# ── _safe_parse_json ──────────────────────────────────────────────────────────────

class TestSafeParseJson:
    def test_valid_json_object(self):
        result = _safe_parse_json('{"articles": [{"url": "https://example.com"}]}')
        assert result == {"articles": [{"url": "https://example.com"}]}

    def test_empty_string_returns_none(self):
        assert _safe_parse_json("") is None

    def test_whitespace_only_returns_none(self):
        assert _safe_parse_json("   \n\t  ") is None

    def test_http_header_bleed_through(self):
        """HTTP header lines before the JSON body must be stripped."""
        body = (
            "HTTP/1.1 200 OK\r\n"
            "Content-Type: application/json\r\n"
            "\r\n"
            '{"articles": []}'
        )
        assert _safe_parse_json(body) == {"articles": []}

    def test_garbage_body_returns_none(self):
        assert _safe_parse_json("this is not json at all !!!!") is None

    def test_only_http_headers_returns_none(self):
        assert _safe_parse_json("HTTP/1.1 200 OK\nContent-Type: text/html\n") is None


# ── GDELTClient URL construction ──────────────────────────────────────────────────

class TestGDELTClientBuildUrl:
    def test_build_url_contains_base_url(self):
        client = GDELTClient()
        url = client._build_url({"query": "protest", "mode": "ArtList"})
        assert "api.gdeltproject.org/api/v2/doc/doc" in url

    def test_build_url_encodes_source_country_fragment(self):
        client = GDELTClient()
        url = client._build_url({"query": "sourcecountry:unitedstates"})
        assert "sourcecountry%3Aunitedstates" in url


# ── GDELTClient.fetch_articles ────────────────────────────────────────────────────

class TestGDELTClientFetchArticles:
    def test_success_returns_available_articles(self, mock_response, artlist_text):
        client = GDELTClient()
        with patch.object(client._session, "get", return_value=mock_response(200, artlist_text)):
            result = client.fetch_articles("protest", "24h")

        assert result.available is True
        assert len(result) == 5
        first = result.articles[0]
        assert first.source_country == "United States"
        assert first.seendate == "20240115123045"

    def test_source_falls_back_to_domain(self, mock_response, artlist_text):
        client = GDELTClient()
        with patch.object(client._session, "get", return_value=mock_response(200, artlist_text)):
            result = client.fetch_articles("protest", "24h")
        assert result.articles[1].source == "lemonde.fr"

    def test_request_parameters(self, mock_response):
        client = GDELTClient()
        with patch.object(client._session, "get", return_value=mock_response()) as mock_get:
            client.fetch_articles("protest", "6h", max_records=50)

        call_url = mock_get.call_args[0][0]
        assert "mode=ArtList" in call_url
        assert "format=json" in call_url
        assert "sort=DateDesc" in call_url
        assert "maxrecords=50" in call_url
        assert "timespan=6h" in call_url

    def test_request_uses_bounded_timeout(self, mock_response):
        client = GDELTClient(request_timeout=8.0)
        with patch.object(client._session, "get", return_value=mock_response()) as mock_get:
            client.fetch_articles("protest", "24h")
        assert mock_get.call_args.kwargs["timeout"] == 8.0

    def test_max_records_clamped_to_provider_limit(self, mock_response):
        client = GDELTClient()
        with patch.object(client._session, "get", return_value=mock_response()) as mock_get:
            client.fetch_articles("protest", "24h", max_records=1000)
        assert "maxrecords=250" in mock_get.call_args[0][0]

    def test_non_success_status_is_unavailable(self, mock_response):
        client = GDELTClient()
        with patch.object(client._session, "get", return_value=mock_response(503, "")):
            result = client.fetch_articles("protest", "24h")
        assert result.available is False
        assert len(result) == 0

    def test_timeout_is_unavailable_without_retry(self):
        client = GDELTClient()
        with patch.object(
            client._session, "get", side_effect=requests.exceptions.Timeout
        ) as mock_get:
            result = client.fetch_articles("protest", "24h")
        assert result.available is False
        assert mock_get.call_count == 1

    def test_connection_error_is_unavailable(self):
        client = GDELTClient()
        with patch.object(
            client._session, "get", side_effect=requests.exceptions.ConnectionError("down")
        ):
            result = client.fetch_articles("protest", "24h")
        assert result.available is False

    def test_plain_text_error_page_is_unavailable(self, mock_response):
        """GDELT answers invalid queries with a 200 plain-text page."""
        client = GDELTClient()
        body = "Your search contained a keyword that was too short."
        with patch.object(client._session, "get", return_value=mock_response(200, body)):
            result = client.fetch_articles("ab", "24h")
        assert result.available is False

    def test_body_without_articles_key_is_unavailable(self, mock_response):
        client = GDELTClient()
        with patch.object(client._session, "get", return_value=mock_response(200, "{}")):
            result = client.fetch_articles("protest", "24h")
        assert result.available is False

    def test_empty_article_list_is_available(self, mock_response):
        client = GDELTClient()
        with patch.object(
            client._session, "get", return_value=mock_response(200, json.dumps({"articles": []}))
        ):
            result = client.fetch_articles("protest", "24h")
        assert result.available is True
        assert len(result) == 0

    def test_context_manager_closes_session(self):
        with patch("requests.Session.close") as mock_close:
            with GDELTClient():
                pass
        mock_close.assert_called_once()
