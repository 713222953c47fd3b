"""SituationRoom configuration package."""

from config.defaults import (
    CACHE_MAX_AGE,
    DEBOUNCE_SECONDS,
    DEFAULT_TIMESPAN,
    DEFAULT_TOPIC,
    DRILLDOWN_LIMIT,
    GDELT_REQUEST_TIMEOUT,
    MAX_RECORDS,
    TOP_N_COUNTRIES,
)
from config.settings import AppConfig

__all__ = [
    "AppConfig",
    "CACHE_MAX_AGE",
    "DEBOUNCE_SECONDS",
    "DEFAULT_TIMESPAN",
    "DEFAULT_TOPIC",
    "DRILLDOWN_LIMIT",
    "GDELT_REQUEST_TIMEOUT",
    "MAX_RECORDS",
    "TOP_N_COUNTRIES",
]
