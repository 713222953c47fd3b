"""SituationRoom analysis package.

Pure transformation logic: query normalization, country tallies, drilldown
projection, top-N ranking and headline classification.
"""

from situationroom.analysis.event_aggregator import (
    aggregate,
    build_result,
    drilldown,
    select_top_countries,
    tally_countries,
)
from situationroom.analysis.headline_classifier import build_feed, classify_headline
from situationroom.analysis.query_normalizer import QueryNormalizer

__all__ = [
    "QueryNormalizer",
    "aggregate",
    "build_result",
    "drilldown",
    "select_top_countries",
    "tally_countries",
    "build_feed",
    "classify_headline",
]
