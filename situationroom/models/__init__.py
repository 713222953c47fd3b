"""SituationRoom data models package.

All boundary input/output schemas are defined here as typed dataclasses.
"""

from situationroom.models.events import (
    AggregationResult,
    Article,
    ArticleList,
    ArticleSummary,
    CountryTally,
    DegradedResult,
    DrilldownResult,
    FeedItem,
)
from situationroom.models.map import LayerSpec, MapEvent, SourceSpec
from situationroom.models.query import NormalizedQuery, QueryMode, QueryParams, TimeRange, Topic
from situationroom.models.zones import Severity, TensionZone

__all__ = [
    # events
    "Article",
    "ArticleList",
    "ArticleSummary",
    "CountryTally",
    "AggregationResult",
    "DrilldownResult",
    "DegradedResult",
    "FeedItem",
    # query
    "Topic",
    "TimeRange",
    "QueryMode",
    "QueryParams",
    "NormalizedQuery",
    # zones
    "Severity",
    "TensionZone",
    # map
    "SourceSpec",
    "LayerSpec",
    "MapEvent",
]
