"""SituationRoom HTTP routes.

Routes:
  GET  /api/gdelt-events  — per-country tallies, or a drilldown article list
                            when ``country`` or ``keyword`` is supplied
  GET  /api/osint-feed    — classified top headlines
  GET  /healthz           — liveness check

/api/gdelt-events never surfaces a server error: upstream failures, timeouts
and malformed bodies all return 200 with ``{"countries": [], "articles": []}``.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from config.defaults import DEFAULT_TIMESPAN, DEFAULT_TOPIC
from situationroom.errors import MissingConfigurationError
from situationroom.models.events import DegradedResult
from situationroom.models.query import QueryParams
from situationroom.service import FeedService, cache_control

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


@router.get("/api/gdelt-events")
def get_gdelt_events(
    request: Request,
    topic: str = Query(default=DEFAULT_TOPIC, description="Topic filter (protest, cyber, ...)"),
    timespan: str = Query(default=DEFAULT_TIMESPAN, description="Look-back window: 6h, 24h or 7d"),
    country: Optional[str] = Query(default=None, description="Country name or ISO code (drilldown)"),
    keyword: Optional[str] = Query(default=None, description="Free-text keyword (drilldown)"),
):
    """Return country tallies, or a drilldown list when country/keyword is set."""
    service = request.app.state.event_service
    params = QueryParams.from_raw(topic=topic, timespan=timespan, country=country, keyword=keyword)
    try:
        response = service.query(params)
    except Exception as exc:
        logger.error("Events query failed unexpectedly: %s", exc, exc_info=True)
        return JSONResponse(
            DegradedResult(reason=str(exc)).to_dict(),
            headers=cache_control(request.app.state.config.degraded_cache_max_age),
        )
    return JSONResponse(response.body, headers=response.headers)


def _feed_service(request: Request) -> FeedService:
    """Build the feed service on first use and keep it on app state."""
    feed = getattr(request.app.state, "feed_service", None)
    if feed is None:
        feed = FeedService(request.app.state.config)
        request.app.state.feed_service = feed
    return feed


@router.get("/api/osint-feed")
def get_osint_feed(request: Request):
    """Return classified top headlines; visible error text when unconfigured."""
    try:
        feed = _feed_service(request)
    except MissingConfigurationError as exc:
        logger.error("OSINT feed unavailable: %s", exc)
        return PlainTextResponse(str(exc), status_code=500)

    items = feed.headlines()
    return JSONResponse({"articles": [i.to_dict() for i in items]}, headers=feed.headers)


@router.get("/healthz")
def healthz():
    return {"status": "ok"}
