"""
Root conftest.py — registers custom markers.

Markers:
  @pytest.mark.tty   — needs a real controlling terminal; skipped unless TOON_TTY_TESTS=1 or --tty
"""
from __future__ import annotations

import os

import pytest


# ---------------------------------------------------------------------------
# Custom markers
# ---------------------------------------------------------------------------

def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "tty: mark test as requiring a real terminal (run with TOON_TTY_TESTS=1 or --tty flag)",
    )


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--tty",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.tty (requires a controlling terminal)",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip @pytest.mark.tty tests unless --tty flag or TOON_TTY_TESTS=1 is set."""
    run_tty = config.getoption("--tty") or os.environ.get("TOON_TTY_TESTS", "").lower() in ("1", "true", "yes")
    skip_tty = pytest.mark.skip(reason="Real terminal test — run with --tty or TOON_TTY_TESTS=1")
    for item in items:
        if "tty" in item.keywords and not run_tty:
            item.add_marker(skip_tty)
