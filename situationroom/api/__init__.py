"""SituationRoom HTTP API package (FastAPI)."""

from situationroom.api.app import create_app

__all__ = ["create_app"]
