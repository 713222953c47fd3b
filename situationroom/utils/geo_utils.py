"""Geographic utility functions for SituationRoom.

Pure geographic computations and GeoJSON builders. No I/O, no external calls.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional, Tuple

if TYPE_CHECKING:
    from situationroom.models.events import CountryTally

logger = logging.getLogger(__name__)

# Approximate country centroids (lon, lat), keyed by provider display name.
# Countries missing here are silently left off the map.
COUNTRY_CENTROIDS: Mapping[str, Tuple[float, float]] = MappingProxyType({
    "Turkey": (35.2433, 38.9637),
    "Malaysia": (101.9758, 4.2105),
    "China": (104.1954, 35.8617),
    "Iran": (53.688, 32.4279),
    "Russia": (105.3188, 61.524),
    "Ukraine": (31.1656, 48.3794),
    "Israel": (34.8516, 31.0461),
    "Palestine": (35.2332, 31.9522),
    "United States": (-95.7129, 37.0902),
    # Europe
    "Germany": (10.4515, 51.1657),
    "France": (2.2137, 46.2276),
    "United Kingdom": (-3.4359, 55.3781),
    "Italy": (12.5674, 41.8719),
    "Spain": (-3.7492, 40.4637),
    "Poland": (19.1451, 51.9194),
    "Greece": (21.8243, 39.0742),
    "Romania": (24.9668, 45.9432),
    "Serbia": (21.0059, 44.0165),
    # Americas
    "Canada": (-106.3468, 56.1304),
    "Brazil": (-51.9253, -14.235),
    "Mexico": (-102.5528, 23.6345),
    "Argentina": (-63.6167, -38.4161),
    "Colombia": (-74.2973, 4.5709),
    "Peru": (-75.0152, -9.19),
    # Asia / ME
    "India": (78.9629, 20.5937),
    "Pakistan": (69.3451, 30.3753),
    "Japan": (138.2529, 36.2048),
    "South Korea": (127.7669, 35.9078),
    "Saudi Arabia": (45.0792, 23.8859),
    "Indonesia": (113.9213, -0.7893),
    "Bangladesh": (90.3563, 23.685),
    "Taiwan": (120.9605, 23.6978),
    "Thailand": (100.9925, 15.87),
    "Vietnam": (108.2772, 14.0583),
    "Philippines": (121.774, 12.8797),
    # Africa
    "Egypt": (30.8025, 26.8206),
    "Nigeria": (8.6753, 9.082),
    "Kenya": (37.9062, -0.0236),
    "South Africa": (22.9375, -30.5595),
    # Oceania
    "Australia": (133.7751, -25.2744),
})


def country_centroid(name: str) -> Optional[Tuple[float, float]]:
    """Return the (lon, lat) centroid for a provider display name.

    Args:
        name: Country display name (exact, as reported by the provider).

    Returns:
        (lon, lat) tuple, or None if the country is not in the lookup table.
    """
    return COUNTRY_CENTROIDS.get(name)


def point_feature(coordinates: Tuple[float, float], properties: Dict[str, Any]) -> Dict[str, Any]:
    """Build a GeoJSON Point feature."""
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [coordinates[0], coordinates[1]]},
        "properties": dict(properties),
    }


def feature_collection(features: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Wrap features in a GeoJSON FeatureCollection."""
    return {"type": "FeatureCollection", "features": list(features)}


def build_country_features(
    tallies: Iterable["CountryTally"],
    centroids: Mapping[str, Tuple[float, float]] = COUNTRY_CENTROIDS,
) -> Dict[str, Any]:
    """Map country tallies to a point FeatureCollection.

    Countries absent from ``centroids`` are dropped without affecting the rest.

    Args:
        tallies: Ranked country tallies.
        centroids: Display name -> (lon, lat) lookup.

    Returns:
        FeatureCollection with ``country`` and ``count`` properties per point.
    """
    features: List[Dict[str, Any]] = []
    for tally in tallies:
        coords = centroids.get(tally.country)
        if coords is None:
            logger.debug("No centroid for %r, excluded from map", tally.country)
            continue
        features.append(point_feature(coords, {"country": tally.country, "count": tally.count}))
    return feature_collection(features)


def feature_coordinates(feature: Dict[str, Any]) -> Optional[Tuple[float, float]]:
    """Extract (lon, lat) from a Point feature; None for other geometries."""
    geometry = feature.get("geometry") or {}
    if geometry.get("type") != "Point":
        return None
    coords = geometry.get("coordinates") or []
    if len(coords) < 2:
        return None
    return float(coords[0]), float(coords[1])
