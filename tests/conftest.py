"""Shared pytest fixtures for SituationRoom tests.

Conventions:
- Fixture data lives in tests/fixtures/ as static JSON files
- Provider HTTP calls are mocked at the requests.Session level
- The map side talks to FakeEventsSource, an in-memory EventsSource whose
  calls can be held open with asyncio.Event gates
- No real external HTTP calls are made in any test
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import MagicMock

import pytest

from config.settings import AppConfig
from situationroom.models.events import (
    AggregationResult,
    Article,
    ArticleList,
    ArticleSummary,
    CountryTally,
    DrilldownResult,
)

_FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ── Raw fixture data loaders ─────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def artlist_raw() -> Dict[str, Any]:
    """Raw GDELT ArtList API response dict loaded from fixture JSON."""
    with open(_FIXTURES_DIR / "sample_artlist.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture(scope="session")
def artlist_text(artlist_raw) -> str:
    return json.dumps(artlist_raw)


# ── Model object fixtures ────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def sample_articles(artlist_raw) -> ArticleList:
    """5 articles: United States x2, France, one without country, Atlantis (no centroid)."""
    return ArticleList(articles=[Article.from_gdelt(raw) for raw in artlist_raw["articles"]])


@pytest.fixture
def mock_response():
    """Factory for requests.Response stand-ins."""

    def _make(status_code: int = 200, text: str = '{"articles": []}', json_data: Any = None):
        resp = MagicMock()
        resp.status_code = status_code
        resp.text = text
        if json_data is not None:
            resp.json.return_value = json_data
        else:
            resp.json.side_effect = lambda: json.loads(text)
        return resp

    return _make


@pytest.fixture
def test_config() -> AppConfig:
    """AppConfig with short timings so async tests settle quickly."""
    return AppConfig(
        gdelt_base_url="https://api.gdeltproject.org/api/v2/doc/doc",
        debounce_seconds=0.01,
        pulse_frame_interval=0.001,
        newsapi_key=None,
        events_api_url="http://events.test",
    )


# ── Fake events source ───────────────────────────────────────────────────────────

class FakeEventsSource:
    """In-memory EventsSource.

    ``aggregate_results`` / ``drilldown_results`` are consumed per call index
    (falling back to the defaults); an Exception entry is raised instead of
    returned. ``aggregate_gates`` / ``drilldown_gates`` map a call index to an
    asyncio.Event the call waits on before answering.
    """

    def __init__(self) -> None:
        self.aggregate_calls: List[Tuple[str, str]] = []
        self.drilldown_calls: List[Dict[str, Optional[str]]] = []
        self.aggregate_results: List[Any] = []
        self.drilldown_results: List[Any] = []
        self.aggregate_gates: Dict[int, asyncio.Event] = {}
        self.drilldown_gates: Dict[int, asyncio.Event] = {}
        self.default_aggregation = AggregationResult(
            total_articles=3,
            countries=[CountryTally("United States", 2), CountryTally("France", 1)],
        )
        self.default_drilldown = DrilldownResult(
            articles=[
                ArticleSummary(
                    title="Thousands march on state capitol",
                    url="https://example.com/a",
                    source="nytimes.com",
                    date="20240115123045",
                )
            ]
        )

    async def aggregate(self, topic: str, timespan: str) -> AggregationResult:
        index = len(self.aggregate_calls)
        self.aggregate_calls.append((topic, timespan))
        gate = self.aggregate_gates.get(index)
        if gate is not None:
            await gate.wait()
        result = self.aggregate_results[index] if index < len(self.aggregate_results) else self.default_aggregation
        if isinstance(result, Exception):
            raise result
        return result

    async def drilldown(
        self,
        timespan: str,
        topic: Optional[str] = None,
        country: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> DrilldownResult:
        index = len(self.drilldown_calls)
        self.drilldown_calls.append(
            {"timespan": timespan, "topic": topic, "country": country, "keyword": keyword}
        )
        gate = self.drilldown_gates.get(index)
        if gate is not None:
            await gate.wait()
        result = self.drilldown_results[index] if index < len(self.drilldown_results) else self.default_drilldown
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_source() -> FakeEventsSource:
    return FakeEventsSource()


# ── Map fixtures ─────────────────────────────────────────────────────────────────

@pytest.fixture
def surface():
    from situationroom.map.surface import MapSurface

    return MapSurface()


@pytest.fixture
def registry(surface):
    from situationroom.map.handlers import HandlerRegistry

    return HandlerRegistry(surface)


@pytest.fixture
def popups(surface, fake_source):
    from situationroom.map.popups import PopupController

    return PopupController(surface, fake_source)


@pytest.fixture
async def controller(surface, fake_source, popups, registry, test_config):
    from situationroom.map.layer_controller import MapLayerController

    ctrl = MapLayerController(surface, fake_source, popups, registry, test_config)
    yield ctrl
    ctrl.close()
    popups.close()
