"""Client for the SituationRoom HTTP API, used by the map and the OSINT feed.

The map side talks to the aggregation boundary through the EventsSource
protocol. EventsApiClient implements it over HTTP; the blocking requests call
runs in a worker thread so the event loop stays responsive.

Unlike the provider client, this one raises: a transport failure, a non-200
status or an unparseable body becomes a DataPathError, which the layer
controller and popups absorb into their failure states. A degraded endpoint
body (``{"countries": [], "articles": []}``) is a valid, empty answer.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol

import requests
from requests import Session
from requests.adapters import HTTPAdapter

from config.defaults import EVENTS_API_URL, USER_AGENT
from situationroom.errors import MalformedResponseBody, NetworkTimeout, UpstreamNonSuccess
from situationroom.models.events import AggregationResult, DrilldownResult, FeedItem

logger = logging.getLogger(__name__)

EVENTS_PATH = "/api/gdelt-events"
FEED_PATH = "/api/osint-feed"


class EventsSource(Protocol):
    """Anything that can answer aggregation and drilldown queries asynchronously."""

    async def aggregate(self, topic: str, timespan: str) -> AggregationResult:
        ...

    async def drilldown(
        self,
        timespan: str,
        topic: Optional[str] = None,
        country: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> DrilldownResult:
        ...


class EventsApiClient:
    """HTTP EventsSource backed by the SituationRoom API.

    Args:
        base_url: Root URL of the SituationRoom API.
        request_timeout: HTTP timeout in seconds.
    """

    def __init__(self, base_url: str = EVENTS_API_URL, request_timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.request_timeout = request_timeout
        self._session = Session()
        adapter = HTTPAdapter(max_retries=0)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)
        self._session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})

    def _get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """Execute one GET against the API and return the JSON object body.

        Raises:
            NetworkTimeout: The request exceeded ``request_timeout``.
            UpstreamNonSuccess: Transport failure or a non-200 status. The
                plain-text error body, if any, becomes the message.
            MalformedResponseBody: The body is not a JSON object.
        """
        url = f"{self.base_url}{path}"
        try:
            resp = self._session.get(url, params=params, timeout=self.request_timeout)
        except requests.exceptions.Timeout as exc:
            raise NetworkTimeout(f"{path} timed out after {self.request_timeout}s") from exc
        except requests.exceptions.RequestException as exc:
            raise UpstreamNonSuccess(0, f"{path} request failed: {exc}") from exc

        if resp.status_code != 200:
            detail = (resp.text or "").strip()[:200]
            raise UpstreamNonSuccess(resp.status_code, detail)
        try:
            data = resp.json()
        except ValueError as exc:
            raise MalformedResponseBody(f"{path} returned an unparseable body") from exc
        if not isinstance(data, dict):
            raise MalformedResponseBody(f"{path} returned {type(data).__name__}, expected an object")
        return data

    async def aggregate(self, topic: str, timespan: str) -> AggregationResult:
        data = await asyncio.to_thread(
            self._get_json, EVENTS_PATH, {"topic": topic, "timespan": timespan}
        )
        return AggregationResult.from_dict(data)

    async def drilldown(
        self,
        timespan: str,
        topic: Optional[str] = None,
        country: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> DrilldownResult:
        params = {"timespan": timespan}
        if topic:
            params["topic"] = topic
        if country:
            params["country"] = country
        if keyword:
            params["keyword"] = keyword
        data = await asyncio.to_thread(self._get_json, EVENTS_PATH, params)
        return DrilldownResult.from_dict(data)

    async def osint_feed(self) -> List[FeedItem]:
        """Fetch the classified headline list from ``/api/osint-feed``.

        Raises:
            UpstreamNonSuccess: Including the 500 sent when NEWSAPI_KEY is unset.
        """
        data = await asyncio.to_thread(self._get_json, FEED_PATH)
        items = [FeedItem.from_dict(a) for a in data.get("articles") or [] if isinstance(a, dict)]
        logger.debug("OSINT feed returned %d items", len(items))
        return items

    def close(self) -> None:
        self._session.close()
