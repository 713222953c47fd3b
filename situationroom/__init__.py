"""SituationRoom — live world-events map backed by GDELT.

Fetches recent news articles for a topic, aggregates them by source country,
and renders the busiest countries as pulsing markers next to a static
tension-zone overlay.
"""

__version__ = "1.0.0"

from config.settings import AppConfig  # noqa: E402
from situationroom.service import EventService, FeedService, LocalEventsSource  # noqa: E402
from situationroom.situation_room import SituationRoom  # noqa: E402

__all__ = [
    "AppConfig",
    "EventService",
    "FeedService",
    "LocalEventsSource",
    "SituationRoom",
    "__version__",
]
