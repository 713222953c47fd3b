#!/usr/bin/env python3
"""SituationRoom — pre-flight environment validation.

Checks:
  1. Python version compatibility (3.10+)
  2. Required package imports
  3. SituationRoom module imports
  4. Environment variable presence
  5. GDELT, NewsAPI and events endpoint connectivity

Usage:
    python scripts/validate_env.py
    python scripts/validate_env.py --skip-network
"""

from __future__ import annotations

import argparse
import importlib
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

# Ensure project root is on sys.path
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import requests  # noqa: E402
from dotenv import load_dotenv  # noqa: E402

from config.defaults import EVENTS_API_URL, GDELT_BASE_URL, NEWSAPI_BASE_URL  # noqa: E402

CheckResult = Tuple[Optional[bool], str]

# ── ANSI colours ────────────────────────────────────────────────────────────────
_GREEN = "\033[32m"
_RED = "\033[31m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"
_BOLD = "\033[1m"


def _ok(msg: str) -> str:
    return f"{_GREEN}✓{_RESET}  {msg}"


def _fail(msg: str) -> str:
    return f"{_RED}✗{_RESET}  {msg}"


def _warn(msg: str) -> str:
    return f"{_YELLOW}⚠{_RESET}  {msg}"


def _header(msg: str) -> str:
    return f"\n{_BOLD}{msg}{_RESET}"


# ── Check functions ──────────────────────────────────────────────────────────────

def check_python_version() -> Tuple[bool, str]:
    """Verify Python version is 3.10 or newer."""
    major, minor = sys.version_info[:2]
    version_str = f"{major}.{minor}.{sys.version_info.micro}"
    if major < 3 or (major == 3 and minor < 10):
        return False, f"Python {version_str} detected, requires >= 3.10"
    return True, f"Python {version_str}"


def check_package_imports() -> List[CheckResult]:
    """Verify all required packages can be imported."""
    required = [
        ("requests", "requests"),
        ("dotenv", "python-dotenv"),
        ("yaml", "PyYAML"),
        ("dateutil", "python-dateutil"),
        ("folium", "folium"),
        ("fastapi", "fastapi"),
        ("uvicorn", "uvicorn"),
    ]
    results: List[CheckResult] = []
    for import_name, package_name in required:
        try:
            mod = importlib.import_module(import_name)
            version = getattr(mod, "__version__", "?")
            results.append((True, f"{package_name} ({version})"))
        except ImportError:
            results.append((False, f"{package_name} NOT installed (pip install {package_name})"))
    return results


def check_situationroom_imports() -> List[CheckResult]:
    """Verify the situationroom package modules can be imported."""
    modules = [
        "config.defaults",
        "config.settings",
        "situationroom.models.events",
        "situationroom.analysis.query_normalizer",
        "situationroom.analysis.event_aggregator",
        "situationroom.clients.gdelt_client",
        "situationroom.clients.newsapi_client",
        "situationroom.map.layer_controller",
        "situationroom.api.app",
        "situationroom.visualization.map_export",
    ]
    results: List[CheckResult] = []
    for module in modules:
        try:
            importlib.import_module(module)
            results.append((True, module))
        except ImportError as exc:
            results.append((False, f"{module}: {exc}"))
    return results


def check_env_vars() -> List[CheckResult]:
    """Check presence of important environment variables."""
    load_dotenv()
    results: List[CheckResult] = []

    api_key = os.getenv("NEWSAPI_KEY")
    if api_key:
        masked = api_key[:4] + "..." + api_key[-4:] if len(api_key) > 8 else "***"
        results.append((True, f"NEWSAPI_KEY = {masked}"))
    else:
        results.append((None, "NEWSAPI_KEY not set (required for /api/osint-feed)"))

    results.append((True, f"GDELT_BASE_URL = {os.getenv('GDELT_BASE_URL', GDELT_BASE_URL)!r}"))
    results.append((True, f"EVENTS_API_URL = {os.getenv('EVENTS_API_URL', EVENTS_API_URL)!r}"))
    return results


def check_gdelt_connectivity(timeout: int = 10) -> Tuple[bool, str]:
    """Ping the GDELT DOC 2.0 API to verify network reachability."""
    try:
        resp = requests.head(
            f"{GDELT_BASE_URL}?query=test&mode=ArtList&maxrecords=1&format=json", timeout=timeout
        )
    except requests.exceptions.RequestException as exc:
        return False, f"GDELT API unreachable: {exc}"
    if resp.status_code in (200, 301, 302, 405):
        return True, f"GDELT API reachable (HTTP {resp.status_code})"
    return False, f"GDELT API returned unexpected HTTP {resp.status_code}"


def check_newsapi_connectivity(timeout: int = 10) -> Tuple[bool, str]:
    """Ping NewsAPI; a 401 still proves the host is reachable."""
    try:
        resp = requests.head(NEWSAPI_BASE_URL, timeout=timeout)
    except requests.exceptions.RequestException as exc:
        return False, f"NewsAPI unreachable: {exc}"
    return True, f"NewsAPI reachable (HTTP {resp.status_code})"


def check_events_api(timeout: int = 5) -> CheckResult:
    """Check the events API the map talks to; a stopped server is only a warning."""
    base = os.getenv("EVENTS_API_URL", EVENTS_API_URL).rstrip("/")
    try:
        resp = requests.get(f"{base}/healthz", timeout=timeout)
    except requests.exceptions.RequestException:
        return None, f"Events API not running at {base} (start it with scripts/serve.py)"
    if resp.status_code == 200:
        return True, f"Events API healthy at {base}"
    return False, f"Events API at {base} returned HTTP {resp.status_code}"


# ── Report ───────────────────────────────────────────────────────────────────────

def _print_results(results: List[CheckResult], indent: int = 2) -> int:
    """Print check results and return count of failures."""
    failures = 0
    pad = " " * indent
    for ok, msg in results:
        if ok is True:
            print(f"{pad}{_ok(msg)}")
        elif ok is False:
            print(f"{pad}{_fail(msg)}")
            failures += 1
        else:
            print(f"{pad}{_warn(msg)}")
    return failures


def main() -> None:
    """Run all pre-flight checks and report results."""
    parser = argparse.ArgumentParser(description="SituationRoom — pre-flight environment validation")
    parser.add_argument(
        "--skip-network",
        action="store_true",
        default=False,
        help="Skip network connectivity checks",
    )
    args = parser.parse_args()

    sections = [
        ("1. Python Version", [check_python_version()], True),
        ("2. Required Package Imports", check_package_imports(), True),
        ("3. SituationRoom Module Imports", check_situationroom_imports(), True),
        # Missing env vars are warnings, not hard failures
        ("4. Environment Variables", check_env_vars(), False),
    ]

    total_failures = 0
    for title, results, counted in sections:
        print(_header(title))
        failures = _print_results(results)
        if counted:
            total_failures += failures

    print(_header("5. Network Connectivity"))
    if args.skip_network:
        print(f"  {_warn('Skipped (--skip-network)')}")
    else:
        network = [check_gdelt_connectivity(), check_newsapi_connectivity(), check_events_api()]
        # Unreachable hosts are reported but never fail the run
        _print_results([(ok or None, msg) for ok, msg in network])

    print(f"\n{'═' * 54}")
    if total_failures == 0:
        print(f"{_GREEN}{_BOLD}All required checks passed.{_RESET} Environment is ready.")
        sys.exit(0)
    print(f"{_RED}{_BOLD}{total_failures} check(s) failed.{_RESET} Resolve the errors above first.")
    sys.exit(1)


if __name__ == "__main__":
    main()
