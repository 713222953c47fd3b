"""SituationRoom — AppConfig and environment-based configuration loading.

All runtime configuration flows through AppConfig. API keys come exclusively
from environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from config.defaults import (
    CACHE_MAX_AGE,
    DEBOUNCE_SECONDS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_TIMESPAN,
    DEFAULT_TOPIC,
    DEGRADED_CACHE_MAX_AGE,
    DRILLDOWN_LIMIT,
    EVENTS_API_TIMEOUT,
    EVENTS_API_URL,
    FEED_CACHE_MAX_AGE,
    FEED_HIGHLIGHT_SECONDS,
    FEED_POLL_INTERVAL,
    GDELT_BASE_URL,
    GDELT_MAX_RECORDS_LIMIT,
    GDELT_REQUEST_TIMEOUT,
    MAX_RECORDS,
    NEWSAPI_BASE_URL,
    NEWSAPI_PAGE_SIZE,
    NEWSAPI_REQUEST_TIMEOUT,
    OUTPUT_ROOT,
    POPUP_ARTICLE_LIMIT,
    PULSE_AMPLITUDE,
    PULSE_FRAME_INTERVAL,
    PULSE_PHASE_STEP,
    TOP_N_COUNTRIES,
)

# Load .env file if present; silently skip if missing
load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class AppConfig:
    """Single configuration object shared by the service, API and map layers.

    All tuneable thresholds, API keys, URLs and timings live here.
    """

    # ── Provider ───────────────────────────────────────────────────────────────
    gdelt_base_url: str = field(
        default_factory=lambda: os.getenv("GDELT_BASE_URL", GDELT_BASE_URL)
    )
    gdelt_request_timeout: float = field(
        default_factory=lambda: _env_float("GDELT_REQUEST_TIMEOUT", GDELT_REQUEST_TIMEOUT)
    )
    max_records: int = MAX_RECORDS

    # ── Query defaults ─────────────────────────────────────────────────────────
    default_topic: str = DEFAULT_TOPIC
    default_timespan: str = DEFAULT_TIMESPAN

    # ── Aggregation and caching ────────────────────────────────────────────────
    drilldown_limit: int = DRILLDOWN_LIMIT
    top_n_countries: int = TOP_N_COUNTRIES
    cache_max_age: int = CACHE_MAX_AGE
    degraded_cache_max_age: int = DEGRADED_CACHE_MAX_AGE

    # ── Map controller ─────────────────────────────────────────────────────────
    debounce_seconds: float = DEBOUNCE_SECONDS
    pulse_phase_step: float = PULSE_PHASE_STEP
    pulse_amplitude: float = PULSE_AMPLITUDE
    pulse_frame_interval: float = PULSE_FRAME_INTERVAL
    popup_article_limit: int = POPUP_ARTICLE_LIMIT

    # ── Events endpoint used by the map ───────────────────────────────────────
    events_api_url: str = field(
        default_factory=lambda: os.getenv("EVENTS_API_URL", EVENTS_API_URL)
    )
    events_api_timeout: float = EVENTS_API_TIMEOUT

    # ── OSINT feed (from environment only) ────────────────────────────────────
    newsapi_key: Optional[str] = field(default_factory=lambda: os.getenv("NEWSAPI_KEY"))
    newsapi_base_url: str = NEWSAPI_BASE_URL
    newsapi_page_size: int = NEWSAPI_PAGE_SIZE
    newsapi_request_timeout: float = NEWSAPI_REQUEST_TIMEOUT
    feed_cache_max_age: int = FEED_CACHE_MAX_AGE
    feed_poll_interval: float = FEED_POLL_INTERVAL
    feed_highlight_seconds: float = FEED_HIGHLIGHT_SECONDS

    # ── Output and logging ─────────────────────────────────────────────────────
    output_root: str = field(default_factory=lambda: os.getenv("OUTPUT_ROOT", OUTPUT_ROOT))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL))

    def __post_init__(self) -> None:
        # Clamp max_records to the provider's hard limit
        if self.max_records > GDELT_MAX_RECORDS_LIMIT:
            self.max_records = GDELT_MAX_RECORDS_LIMIT
        if self.max_records < 1:
            self.max_records = 1
