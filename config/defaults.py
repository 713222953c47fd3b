"""SituationRoom — All default threshold values and configuration constants.

All tuneable values live here. Never hard-code magic numbers in source files.
Import constants from this module; override via AppConfig at runtime.
"""

# ── GDELT DOC 2.0 provider ─────────────────────────────────────────────────────
GDELT_BASE_URL: str = "https://api.gdeltproject.org/api/v2/doc/doc"

# HTTP request timeout for GDELT calls (seconds)
GDELT_REQUEST_TIMEOUT: float = 8.0

# Maximum articles returned per ArtList call (GDELT hard limit: 250)
MAX_RECORDS: int = 250
GDELT_MAX_RECORDS_LIMIT: int = 250

# User-Agent sent with every provider request
USER_AGENT: str = "SituationRoom/1.0"

# ── Query defaults ─────────────────────────────────────────────────────────────
DEFAULT_TOPIC: str = "protest"
DEFAULT_TIMESPAN: str = "24h"

# Time window used for tension-zone drilldowns
ZONE_DRILLDOWN_TIMESPAN: str = "7d"

# ── Aggregation ────────────────────────────────────────────────────────────────
# Maximum articles emitted in drilldown mode
DRILLDOWN_LIMIT: int = 20

# Number of countries rendered on the map
TOP_N_COUNTRIES: int = 5

# ── Response caching ──────────────────────────────────────────────────────────
CACHE_MAX_AGE: int = 300

# Degraded (empty-shaped) bodies are cached briefly so the next poll retries sooner
DEGRADED_CACHE_MAX_AGE: int = 60

# ── Map controller ─────────────────────────────────────────────────────────────
# Debounce window for topic / time-range changes (seconds)
DEBOUNCE_SECONDS: float = 0.3

# Pulse animation: phase increment per frame, radius amplitude, frame interval
PULSE_PHASE_STEP: float = 0.04
PULSE_AMPLITUDE: float = 1.5
PULSE_FRAME_INTERVAL: float = 1.0 / 60.0

# Base marker radius: 3 + min(4, 0.25 * count)
MARKER_BASE_RADIUS: float = 3.0
MARKER_MAX_GROWTH: float = 4.0
MARKER_COUNT_SCALE: float = 0.25

# Initial map view (lon, lat) and zoom
MAP_CENTER: tuple = (0.0, 20.0)
MAP_ZOOM: float = 1.5
MAP_STYLE_URL: str = "https://basemaps.cartocdn.com/gl/dark-matter-gl-style/style.json"

# ── Popups ─────────────────────────────────────────────────────────────────────
# Articles listed inside a click popup
POPUP_ARTICLE_LIMIT: int = 8
POPUP_MAX_WIDTH: str = "360px"

# ── Border overlay ─────────────────────────────────────────────────────────────
COUNTRIES_GEOJSON_URL: str = (
    "https://raw.githubusercontent.com/datasets/geo-countries/master/data/countries.geojson"
)

# ── Events API (client side) ──────────────────────────────────────────────────
EVENTS_API_URL: str = "http://localhost:8000"

# Client-side timeout when the map calls the events endpoint (seconds)
EVENTS_API_TIMEOUT: float = 10.0

# ── OSINT feed (NewsAPI) ──────────────────────────────────────────────────────
NEWSAPI_BASE_URL: str = "https://newsapi.org/v2/top-headlines"
NEWSAPI_PAGE_SIZE: int = 20
NEWSAPI_REQUEST_TIMEOUT: float = 8.0
FEED_CACHE_MAX_AGE: int = 60

# Poll interval for the feed monitor and highlight duration for new items (seconds)
FEED_POLL_INTERVAL: float = 60.0
FEED_HIGHLIGHT_SECONDS: float = 3.0

# ── Output paths ──────────────────────────────────────────────────────────────
OUTPUT_ROOT: str = "outputs/maps"

# ── Logging ────────────────────────────────────────────────────────────────────
DEFAULT_LOG_LEVEL: str = "INFO"
