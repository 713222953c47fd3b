"""Provider query construction for SituationRoom.

Maps the request parameters onto the single query string sent to GDELT.
Precedence: keyword > country filter > topic; only one drives the query.

Country filters are resolved to the canonical display name (case-insensitive
name / alias lookup, then ISO alpha-2 / alpha-3 reverse lookup) and turned
into a ``sourcecountry:`` fragment. GDELT's sourcecountry operator takes the
country name with spaces removed. Unknown countries pass through unchanged;
normalization never raises.
"""

from __future__ import annotations

import logging
from typing import Optional

from situationroom.models.query import NormalizedQuery, QueryMode, QueryParams
from situationroom.utils.countries import resolve_country_name

logger = logging.getLogger(__name__)


def normalize_country(raw: str) -> str:
    """Return the canonical display name for ``raw``, or ``raw`` stripped."""
    name = resolve_country_name(raw)
    if name is None:
        logger.debug("No country mapping for %r, passing through", raw)
        return raw.strip()
    return name


def source_country_fragment(country: str) -> str:
    """Build the provider ``sourcecountry:`` operator for a display name."""
    return f"sourcecountry:{country.lower().replace(' ', '')}"


class QueryNormalizer:
    """Turns raw topic / country / keyword strings into a provider query."""

    def normalize(
        self,
        topic: str,
        country: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> NormalizedQuery:
        """Build the provider query.

        Args:
            topic: Topic value (used only when neither keyword nor country is set).
            country: Country filter in any supported form (name, alias, ISO code).
            keyword: Free-text keyword, used verbatim.

        Returns:
            NormalizedQuery with the query string, the mode and, for country
            filters, the canonical country name.
        """
        if keyword and keyword.strip():
            return NormalizedQuery(query=keyword.strip(), mode=QueryMode.DRILLDOWN)

        if country and country.strip():
            name = normalize_country(country)
            return NormalizedQuery(
                query=source_country_fragment(name),
                mode=QueryMode.DRILLDOWN,
                country=name,
            )

        return NormalizedQuery(query=topic, mode=QueryMode.AGGREGATION)

    def from_params(self, params: QueryParams) -> NormalizedQuery:
        """Normalize a validated QueryParams."""
        return self.normalize(params.topic.value, params.country, params.keyword)
