"""GDELT DOC 2.0 REST API client for SituationRoom.

Handles all HTTP communication with the GDELT API: request construction,
bounded timeouts and safe JSON parsing.

No business logic lives here: the client returns Article lists. Tallying and
drilldown projection happen in the analysis layer.

Contract: fetch_articles() never raises to its caller. A timeout, a connection
failure, a non-success status or an unparseable body all degrade to an
unavailable, empty ArticleList plus a logged diagnostic. There are no
automatic retries; recovery comes from the next poll or user interaction.

Known GDELT API gotchas:
- Responses occasionally contain HTTP header blocks instead of JSON bodies.
  Always use _safe_parse_json(), never resp.json() directly.
- Invalid queries (e.g. too-short keywords) return a plain-text error page
  with status 200.
"""

from __future__ import annotations

import ast
import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests
from requests import Session
from requests.adapters import HTTPAdapter

from config.defaults import GDELT_BASE_URL, GDELT_MAX_RECORDS_LIMIT, USER_AGENT
from situationroom.errors import (
    DataPathError,
    MalformedResponseBody,
    MissingField,
    NetworkTimeout,
    UpstreamNonSuccess,
)
from situationroom.models.events import Article, ArticleList

logger = logging.getLogger(__name__)

# Known HTTP header line prefixes that GDELT occasionally returns in response bodies
_HTTP_HEADER_PREFIXES = (
    "HTTP/",
    "Date:",
    "Content-Type:",
    "Server:",
    "Transfer-Encoding:",
    "Connection:",
    "Cache-Control:",
    "Pragma:",
    "Expires:",
    "X-",
    "Vary:",
    "Set-Cookie:",
    "Access-Control:",
    "ETag:",
    "Last-Modified:",
)


def _safe_parse_json(text: str) -> Optional[Any]:
    """Defensive JSON parser that handles GDELT HTTP header bleed-through.

    GDELT occasionally returns HTTP header lines prepended to the JSON body.
    This function strips those and attempts multiple parse strategies.

    Args:
        text: Raw response text from GDELT.

    Returns:
        Parsed Python object, or None on failure.
    """
    if not text or not text.strip():
        return None

    lines = text.split("\n")
    json_start = 0
    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith(_HTTP_HEADER_PREFIXES):
            json_start = i + 1
        elif stripped.startswith("{") or stripped.startswith("["):
            json_start = i
            break

    if json_start > 0:
        text = "\n".join(lines[json_start:]).strip()
        if not text:
            logger.warning("GDELT response body contained only HTTP headers")
            return None

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # Fallback: ast.literal_eval for near-JSON Python literals
    try:
        return ast.literal_eval(text)
    except (ValueError, SyntaxError, MemoryError, RecursionError):
        pass

    logger.debug("GDELT unparseable response body: %.200s", text)
    return None


class GDELTClient:
    """Client for the GDELT DOC 2.0 ArtList endpoint.

    Args:
        base_url: DOC API endpoint.
        request_timeout: Timeout in seconds applied to connect and read.
    """

    def __init__(
        self,
        base_url: str = GDELT_BASE_URL,
        request_timeout: float = 8.0,
    ) -> None:
        self.base_url = base_url
        self.request_timeout = request_timeout

        self._session = Session()
        adapter = HTTPAdapter(max_retries=0)   # No automatic retries
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)
        self._session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})

    def _build_url(self, params: Dict[str, Any]) -> str:
        """Construct a GDELT DOC API URL from a parameter dict."""
        return f"{self.base_url}?{urlencode(params)}"

    def _get_text(self, url: str) -> str:
        """Execute a single bounded GET.

        Raises:
            NetworkTimeout: The request exceeded ``request_timeout``.
            UpstreamNonSuccess: Non-2xx status or any other transport failure.
        """
        try:
            resp = self._session.get(url, timeout=self.request_timeout)
        except requests.exceptions.Timeout as exc:
            raise NetworkTimeout(f"GDELT request timed out after {self.request_timeout}s") from exc
        except requests.exceptions.RequestException as exc:
            raise UpstreamNonSuccess(0, f"GDELT request failed: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            raise UpstreamNonSuccess(resp.status_code)
        return resp.text

    def fetch_articles(
        self,
        query: str,
        timespan: str,
        max_records: int = 250,
        sort: str = "DateDesc",
    ) -> ArticleList:
        """Fetch an ArtList for ``query`` over ``timespan``.

        Args:
            query: GDELT query string (keyword, topic or sourcecountry: fragment).
            timespan: GDELT TIMESPAN value, e.g. '6h', '24h', '7d'.
            max_records: Maximum records to return (clamped to 250).
            sort: ArtList sort order; DateDesc yields most-recent-first.

        Returns:
            ArticleList. ``available`` is False when the provider produced no
            article collection; the caller never sees an exception.
        """
        params: Dict[str, Any] = {
            "query": query,
            "mode": "ArtList",
            "format": "json",
            "maxrecords": max(1, min(max_records, GDELT_MAX_RECORDS_LIMIT)),
            "sort": sort,
            "timespan": timespan,
        }
        url = self._build_url(params)
        logger.debug("GDELT fetch: timespan=%s query=%.80s", timespan, query)

        try:
            raw = self._get_text(url)
            parsed = _safe_parse_json(raw)
            if not isinstance(parsed, dict):
                raise MalformedResponseBody(f"unparseable body (length={len(raw)})")
            rows = parsed.get("articles")
            if not isinstance(rows, list):
                raise MissingField("articles", "no article collection in response")
        except DataPathError as exc:
            logger.warning("GDELT fetch degraded to empty (%s): %s", exc.kind, exc)
            return ArticleList.unavailable()

        articles = [Article.from_gdelt(row) for row in rows if isinstance(row, dict)]
        logger.debug("GDELT fetch returned %d articles", len(articles))
        return ArticleList(articles=articles)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> "GDELTClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
