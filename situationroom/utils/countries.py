"""Country name and ISO code lookup tables for SituationRoom.

The canonical internal country representation is the provider display name
(the value GDELT reports in ``sourcecountry``, e.g. "United States"). The
tables below are built once at import time and exposed as read-only mappings:

- COUNTRY_NAMES: lower-cased name or alias -> display name
- ISO_TO_NAME:   ISO 3166-1 alpha-2 and alpha-3 code -> display name
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

# (display name, alpha-2, alpha-3)
_COUNTRIES: Tuple[Tuple[str, str, str], ...] = (
    ("Afghanistan", "AF", "AFG"),
    ("Albania", "AL", "ALB"),
    ("Algeria", "DZ", "DZA"),
    ("Argentina", "AR", "ARG"),
    ("Armenia", "AM", "ARM"),
    ("Australia", "AU", "AUS"),
    ("Austria", "AT", "AUT"),
    ("Azerbaijan", "AZ", "AZE"),
    ("Bangladesh", "BD", "BGD"),
    ("Belarus", "BY", "BLR"),
    ("Belgium", "BE", "BEL"),
    ("Bolivia", "BO", "BOL"),
    ("Brazil", "BR", "BRA"),
    ("Bulgaria", "BG", "BGR"),
    ("Cambodia", "KH", "KHM"),
    ("Canada", "CA", "CAN"),
    ("Chile", "CL", "CHL"),
    ("China", "CN", "CHN"),
    ("Colombia", "CO", "COL"),
    ("Croatia", "HR", "HRV"),
    ("Cyprus", "CY", "CYP"),
    ("Czech Republic", "CZ", "CZE"),
    ("Denmark", "DK", "DNK"),
    ("Dominican Republic", "DO", "DOM"),
    ("Egypt", "EG", "EGY"),
    ("Estonia", "EE", "EST"),
    ("Ethiopia", "ET", "ETH"),
    ("Finland", "FI", "FIN"),
    ("France", "FR", "FRA"),
    ("Georgia", "GE", "GEO"),
    ("Germany", "DE", "DEU"),
    ("Greece", "GR", "GRC"),
    ("Greenland", "GL", "GRL"),
    ("Hong Kong", "HK", "HKG"),
    ("Hungary", "HU", "HUN"),
    ("Iceland", "IS", "ISL"),
    ("India", "IN", "IND"),
    ("Indonesia", "ID", "IDN"),
    ("Iran", "IR", "IRN"),
    ("Iraq", "IQ", "IRQ"),
    ("Ireland", "IE", "IRL"),
    ("Israel", "IL", "ISR"),
    ("Italy", "IT", "ITA"),
    ("Japan", "JP", "JPN"),
    ("Jordan", "JO", "JOR"),
    ("Kazakhstan", "KZ", "KAZ"),
    ("Kenya", "KE", "KEN"),
    ("Kosovo", "XK", "XKX"),
    ("Latvia", "LV", "LVA"),
    ("Lebanon", "LB", "LBN"),
    ("Liberia", "LR", "LBR"),
    ("Libya", "LY", "LBY"),
    ("Lithuania", "LT", "LTU"),
    ("Luxembourg", "LU", "LUX"),
    ("Macedonia", "MK", "MKD"),
    ("Malaysia", "MY", "MYS"),
    ("Mexico", "MX", "MEX"),
    ("Montenegro", "ME", "MNE"),
    ("Morocco", "MA", "MAR"),
    ("Myanmar", "MM", "MMR"),
    ("Netherlands", "NL", "NLD"),
    ("New Zealand", "NZ", "NZL"),
    ("Nigeria", "NG", "NGA"),
    ("North Korea", "KP", "PRK"),
    ("Norway", "NO", "NOR"),
    ("Pakistan", "PK", "PAK"),
    ("Palestine", "PS", "PSE"),
    ("Peru", "PE", "PER"),
    ("Philippines", "PH", "PHL"),
    ("Poland", "PL", "POL"),
    ("Portugal", "PT", "PRT"),
    ("Qatar", "QA", "QAT"),
    ("Romania", "RO", "ROU"),
    ("Russia", "RU", "RUS"),
    ("Saudi Arabia", "SA", "SAU"),
    ("Serbia", "RS", "SRB"),
    ("Singapore", "SG", "SGP"),
    ("Slovakia", "SK", "SVK"),
    ("Slovenia", "SI", "SVN"),
    ("South Africa", "ZA", "ZAF"),
    ("South Korea", "KR", "KOR"),
    ("Spain", "ES", "ESP"),
    ("Sri Lanka", "LK", "LKA"),
    ("Sudan", "SD", "SDN"),
    ("Sweden", "SE", "SWE"),
    ("Switzerland", "CH", "CHE"),
    ("Syria", "SY", "SYR"),
    ("Taiwan", "TW", "TWN"),
    ("Thailand", "TH", "THA"),
    ("Turkey", "TR", "TUR"),
    ("Ukraine", "UA", "UKR"),
    ("United Arab Emirates", "AE", "ARE"),
    ("United Kingdom", "GB", "GBR"),
    ("United States", "US", "USA"),
    ("Venezuela", "VE", "VEN"),
    ("Vietnam", "VN", "VNM"),
    ("Yemen", "YE", "YEM"),
)

# Common alternative spellings -> display name
_ALIASES: Dict[str, str] = {
    "usa": "United States",
    "u.s.": "United States",
    "united states of america": "United States",
    "america": "United States",
    "uk": "United Kingdom",
    "britain": "United Kingdom",
    "great britain": "United Kingdom",
    "russian federation": "Russia",
    "republic of korea": "South Korea",
    "korea": "South Korea",
    "north macedonia": "Macedonia",
    "czechia": "Czech Republic",
    "turkiye": "Turkey",
    "türkiye": "Turkey",
    "uae": "United Arab Emirates",
    "burma": "Myanmar",
    "viet nam": "Vietnam",
}


def _build_tables() -> Tuple[Mapping[str, str], Mapping[str, str]]:
    names: Dict[str, str] = {}
    iso_to_name: Dict[str, str] = {}
    for name, iso2, iso3 in _COUNTRIES:
        names[name.lower()] = name
        iso_to_name[iso2] = name
        iso_to_name[iso3] = name
    for alias, name in _ALIASES.items():
        names.setdefault(alias, name)
    return MappingProxyType(names), MappingProxyType(iso_to_name)


COUNTRY_NAMES, ISO_TO_NAME = _build_tables()


def resolve_country_name(raw: Optional[str]) -> Optional[str]:
    """Resolve a country name, alias or ISO code to its display name.

    Lookup is case-insensitive: first against names and aliases, then against
    alpha-2 / alpha-3 codes.

    Args:
        raw: User-supplied country string.

    Returns:
        Display name, or None when no mapping exists (or input is blank).
    """
    if raw is None:
        return None
    key = raw.strip()
    if not key:
        return None
    name = COUNTRY_NAMES.get(key.lower())
    if name:
        return name
    return ISO_TO_NAME.get(key.upper())
