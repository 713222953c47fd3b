"""Logging setup for SituationRoom entry points.

configure_logging() applies config/logging.yaml (console handler for the
``situationroom`` and ``uvicorn`` loggers) with optional level and file
overrides. get_request_logger() tags messages from one refresh cycle.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, MutableMapping, Optional

import yaml

_DEFAULT_CONFIG = Path(__file__).resolve().parent.parent.parent / "config" / "logging.yaml"
_FALLBACK_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _add_file_handler(cfg: Dict[str, Any], log_file: str) -> None:
    cfg.setdefault("handlers", {})["file"] = {
        "class": "logging.FileHandler",
        "formatter": "standard",
        "filename": log_file,
        "encoding": "utf-8",
    }
    for logger_cfg in cfg.get("loggers", {}).values():
        logger_cfg.setdefault("handlers", []).append("file")


def configure_logging(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    """Configure logging from the YAML file, or basicConfig when it is missing.

    Args:
        config_path: Path to logging.yaml (defaults to config/logging.yaml).
        log_level: Level applied to every configured logger and the root.
        log_file: Also write records to this file.
    """
    path = Path(config_path) if config_path else _DEFAULT_CONFIG
    if not path.is_file():
        logging.basicConfig(
            level=getattr(logging, (log_level or "INFO").upper(), logging.INFO),
            format=_FALLBACK_FORMAT,
            filename=log_file,
        )
        return

    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)

    if log_file:
        _add_file_handler(cfg, log_file)
    if log_level:
        level = log_level.upper()
        for logger_cfg in cfg.get("loggers", {}).values():
            logger_cfg["level"] = level
        cfg.setdefault("root", {})["level"] = level

    logging.config.dictConfig(cfg)


class RefreshTagAdapter(logging.LoggerAdapter):
    """Prefixes each message with ``[tag]``, e.g. ``[refresh#3] Fetch failed``."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        return f"[{self.extra['tag']}] {msg}", kwargs


def get_request_logger(name: str, tag: str) -> RefreshTagAdapter:
    return RefreshTagAdapter(logging.getLogger(name), {"tag": tag})
