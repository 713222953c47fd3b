"""SituationRoom utilities package.

All utilities are stateless functions or read-only tables with no external
calls or side effects.
"""

from situationroom.utils.countries import resolve_country_name
from situationroom.utils.date_utils import format_local, parse_iso_datetime, parse_seendate
from situationroom.utils.geo_utils import (
    COUNTRY_CENTROIDS,
    build_country_features,
    country_centroid,
    feature_collection,
    point_feature,
)

__all__ = [
    "resolve_country_name",
    "parse_seendate",
    "parse_iso_datetime",
    "format_local",
    "COUNTRY_CENTROIDS",
    "country_centroid",
    "build_country_features",
    "feature_collection",
    "point_feature",
]
