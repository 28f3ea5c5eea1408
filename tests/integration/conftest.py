"""
tests/integration/conftest.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Gating and shared fixtures for the live checks.

Nothing here runs unless ``INTEGRATION_TESTS=1``. Tests that need a
credential ask for the matching fixture, which skips when the variable is
unset, so a partial environment still runs what it can.

Usage:
    # Unit tests only (default, CI-safe)
    pytest -q

    # Feed and flight page only
    INTEGRATION_TESTS=1 pytest tests/integration/ -v

    # Everything, spending one search credit
    INTEGRATION_TESTS=1 SERPAPI_API_KEY=... pytest tests/integration/ -v
"""

from __future__ import annotations

import os
import time
from typing import Generator

import pytest

from flightglobe.config import Settings, load_settings
from flightglobe.token_service import TokenCache

# Delay after each live test; anonymous OpenSky polling is the tightest quota.
_PAUSE_S = 1.0


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip every live check unless INTEGRATION_TESTS=1."""
    if os.getenv("INTEGRATION_TESTS"):
        return

    skip_marker = pytest.mark.skip(
        reason="Live checks disabled (set INTEGRATION_TESTS=1 to enable)"
    )
    for item in items:
        if "integration" in item.path.parts:
            item.add_marker(skip_marker)


@pytest.fixture
def rate_limiter() -> Generator[None, None, None]:
    """Pause after the test so consecutive live calls stay spaced out."""
    yield
    time.sleep(_PAUSE_S)


@pytest.fixture
def integration_timeout() -> float:
    """Timeout for live HTTP calls (seconds); slower than the service default."""
    return 30.0


@pytest.fixture
def live_settings() -> Settings:
    """Settings read from the environment and ``.env``, as the service does."""
    return load_settings()


@pytest.fixture
def serpapi_key(live_settings: Settings) -> str:
    key = live_settings.serpapi_api_key.strip()
    if not key:
        pytest.skip("SERPAPI_API_KEY not set")
    return key


@pytest.fixture
def feed_tokens(live_settings: Settings) -> TokenCache:
    if not live_settings.has_feed_credentials:
        pytest.skip("OPENSKY_CLIENT_ID / OPENSKY_CLIENT_SECRET not set")
    return TokenCache(live_settings.opensky_client_id, live_settings.opensky_client_secret)
