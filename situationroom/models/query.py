"""Query parameter models for SituationRoom.

Topic and time range are closed enumerations validated at the boundary:
unrecognized values fall back to the configured default with a warning
instead of being passed through to the provider.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from config.defaults import DEFAULT_TIMESPAN, DEFAULT_TOPIC

logger = logging.getLogger(__name__)


class Topic(str, Enum):
    """Coarse category filters offered by the map controls."""

    PROTEST = "protest"
    CYBER = "cyber"
    ELECTION = "election"
    SANCTIONS = "sanctions"
    MILITARY = "military"
    DISASTER = "disaster"

    @classmethod
    def parse(cls, raw: Optional[str], default: str = DEFAULT_TOPIC) -> "Topic":
        """Return the matching Topic, or the default for blank/unknown values."""
        if raw is None or not str(raw).strip():
            return cls(default)
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            logger.warning("Unknown topic %r, using default %r", raw, default)
            return cls(default)


class TimeRange(str, Enum):
    """Look-back windows accepted by the provider's TIMESPAN parameter."""

    SIX_HOURS = "6h"
    ONE_DAY = "24h"
    SEVEN_DAYS = "7d"

    @classmethod
    def parse(cls, raw: Optional[str], default: str = DEFAULT_TIMESPAN) -> "TimeRange":
        """Return the matching TimeRange, or the default for blank/unknown values."""
        if raw is None or not str(raw).strip():
            return cls(default)
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            logger.warning("Unknown timespan %r, using default %r", raw, default)
            return cls(default)


class QueryMode(str, Enum):
    """Response mode selected by the presence of a country filter or keyword."""

    AGGREGATION = "aggregation"
    DRILLDOWN = "drilldown"


@dataclass(frozen=True)
class QueryParams:
    """Validated request parameters. Precedence: keyword > country > topic."""

    topic: Topic = Topic(DEFAULT_TOPIC)
    timespan: TimeRange = TimeRange(DEFAULT_TIMESPAN)
    country: Optional[str] = None
    keyword: Optional[str] = None

    @classmethod
    def from_raw(
        cls,
        topic: Optional[str] = None,
        timespan: Optional[str] = None,
        country: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> "QueryParams":
        return cls(
            topic=Topic.parse(topic),
            timespan=TimeRange.parse(timespan),
            country=(country.strip() or None) if country else None,
            keyword=(keyword.strip() or None) if keyword else None,
        )

    @property
    def mode(self) -> QueryMode:
        if self.country or self.keyword:
            return QueryMode.DRILLDOWN
        return QueryMode.AGGREGATION


@dataclass(frozen=True)
class NormalizedQuery:
    """Output of the QueryNormalizer.

    ``query`` is the provider query string; ``country`` is the canonical
    display name when a country filter drove the query, else None.
    """

    query: str
    mode: QueryMode
    country: Optional[str] = None
