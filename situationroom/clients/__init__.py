"""SituationRoom clients package.

HTTP API clients only; no business logic in this layer.
Each client handles connection management, timeouts, and response parsing.
"""

from situationroom.clients.events_api_client import EventsApiClient, EventsSource
from situationroom.clients.gdelt_client import GDELTClient
from situationroom.clients.newsapi_client import NewsAPIClient

__all__ = [
    "EventsApiClient",
    "EventsSource",
    "GDELTClient",
    "NewsAPIClient",
]
