"""NewsAPI top-headlines client for the SituationRoom OSINT feed.

The API key is required configuration: constructing a client without one
raises MissingConfigurationError, which the API layer turns into visible
error text. Transport and parse failures degrade to an empty list.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests
from requests import Session
from requests.adapters import HTTPAdapter

from config.defaults import NEWSAPI_BASE_URL, USER_AGENT
from situationroom.errors import MissingConfigurationError

logger = logging.getLogger(__name__)


class NewsAPIClient:
    """Client for the NewsAPI ``top-headlines`` endpoint.

    Args:
        api_key: NewsAPI key (``NEWSAPI_KEY``).
        base_url: Endpoint URL.
        request_timeout: HTTP timeout in seconds.
        page_size: Number of headlines requested.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = NEWSAPI_BASE_URL,
        request_timeout: float = 8.0,
        page_size: int = 20,
    ) -> None:
        if not api_key:
            raise MissingConfigurationError("NEWSAPI_KEY", "NewsAPI key not set")
        self.base_url = base_url
        self.request_timeout = request_timeout
        self.page_size = page_size

        self._session = Session()
        adapter = HTTPAdapter(max_retries=0)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)
        self._session.headers.update({"X-Api-Key": api_key, "User-Agent": USER_AGENT})

    def top_headlines(self, language: str = "en", category: str = "general") -> List[Dict[str, Any]]:
        """Fetch raw top-headline records.

        Returns:
            List of NewsAPI article dicts; empty on any upstream failure.
        """
        params = {"language": language, "category": category, "pageSize": self.page_size}
        try:
            resp = self._session.get(self.base_url, params=params, timeout=self.request_timeout)
        except requests.exceptions.RequestException as exc:
            logger.warning("NewsAPI request failed: %s", exc)
            return []

        if resp.status_code != 200:
            logger.warning("NewsAPI returned HTTP %d", resp.status_code)
            return []

        try:
            data = resp.json()
        except ValueError:
            logger.warning("NewsAPI returned an unparseable body")
            return []

        articles = data.get("articles") if isinstance(data, dict) else None
        if not isinstance(articles, list):
            return []
        return [a for a in articles if isinstance(a, dict)]

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "NewsAPIClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
