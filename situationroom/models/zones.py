"""Tension zone models for SituationRoom.

Tension zones are curated static configuration, not derived from live data.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Severity(str, Enum):
    RED = "red"
    AMBER = "amber"

    @property
    def label(self) -> str:
        return "Active Conflict" if self is Severity.RED else "Heightened Tensions"


@dataclass(frozen=True)
class TensionZone:
    """A named risk/conflict location rendered on the static overlay."""

    name: str
    severity: Severity
    coordinates: Tuple[float, float]   # (lon, lat)
    description: str
    query: Optional[str] = None        # Explicit drilldown override

    @property
    def drilldown_query(self) -> str:
        """Keyword used for the drilldown fetch: the override, else the name."""
        return self.query or self.name

    def to_properties(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.severity.value,
            "description": self.description,
            "query": self.drilldown_query,
        }
