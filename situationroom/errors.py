"""Error taxonomy for SituationRoom.

Data-path failures (timeouts, upstream non-success, malformed bodies, missing
fields) are absorbed at the fetch / aggregation boundary and degrade to empty
or partial results. They are modelled as exceptions so clients can raise them
internally and log them uniformly, but they never escape to callers.

MissingConfigurationError is the only fatal condition: it must become visible
error text, never a crash.
"""

from __future__ import annotations


class SituationRoomError(Exception):
    """Base class for all SituationRoom errors."""


class DataPathError(SituationRoomError):
    """A recoverable data-path failure, absorbed at the boundary."""

    kind: str = "data_path"


class NetworkTimeout(DataPathError):
    kind = "network_timeout"


class UpstreamNonSuccess(DataPathError):
    kind = "upstream_non_success"

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        super().__init__(message or f"upstream returned HTTP {status_code}")


class MalformedResponseBody(DataPathError):
    kind = "malformed_response_body"


class MissingField(DataPathError):
    """A record lacks a field required for one purpose (country, date, centroid)."""

    kind = "missing_field"

    def __init__(self, field_name: str, message: str = "") -> None:
        self.field_name = field_name
        super().__init__(message or f"missing field: {field_name}")


class MissingConfigurationError(SituationRoomError):
    """Required configuration (e.g. a provider credential) is absent."""

    def __init__(self, setting: str, message: str = "") -> None:
        self.setting = setting
        super().__init__(message or f"{setting} is not configured")


class MapError(SituationRoomError):
    """Invalid operation on the map surface (duplicate id, missing source, etc.)."""
