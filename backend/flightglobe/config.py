"""
config.py
~~~~~~~~~
Runtime configuration, read once from the environment.

A ``.env`` file next to the process is honoured via *python-dotenv*.  Every
credential is optional:

* ``OPENSKY_CLIENT_ID`` / ``OPENSKY_CLIENT_SECRET`` – enable the OAuth2
  client-credentials exchange; without them the feed is polled anonymously.
* ``SERPAPI_API_KEY`` – enables the search-based route strategies; without
  it the resolver goes straight to the flight-tracking page.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .constants import (
    HTTP_TIMEOUT_S,
    PAGE_TIMEOUT_S,
    POLL_INTERVAL_S,
    ROUTE_CACHE_TTL_S,
)


@dataclass(frozen=True)
class Settings:
    opensky_client_id: str = ""
    opensky_client_secret: str = ""
    serpapi_api_key: str = ""
    route_cache_ttl_s: int = ROUTE_CACHE_TTL_S
    poll_interval_s: int = POLL_INTERVAL_S
    http_timeout_s: float = HTTP_TIMEOUT_S
    page_timeout_s: float = PAGE_TIMEOUT_S
    route_rate_limit: str = "60/minute"
    log_level: str = "INFO"

    @property
    def has_feed_credentials(self) -> bool:
        return bool(self.opensky_client_id.strip() and self.opensky_client_secret.strip())

    @property
    def has_search_credential(self) -> bool:
        return bool(self.serpapi_api_key.strip())


def validate_settings(settings: Settings) -> Settings:
    """Raise ``ValueError`` listing every invalid value at once."""
    errors = []

    if settings.route_cache_ttl_s <= 0:
        errors.append("ROUTE_CACHE_TTL_H must be > 0.")
    if settings.poll_interval_s <= 0:
        errors.append("FLIGHT_POLL_SECONDS must be > 0.")
    if settings.http_timeout_s <= 0:
        errors.append("HTTP_TIMEOUT_S must be > 0.")
    if settings.page_timeout_s <= 0:
        errors.append("PAGE_TIMEOUT_S must be > 0.")
    if not isinstance(getattr(logging, settings.log_level.upper(), None), int):
        errors.append(f"LOG_LEVEL {settings.log_level!r} is not a logging level.")

    if errors:
        raise ValueError("Invalid configuration:\n- " + "\n- ".join(errors))
    return settings


def _number(name: str, default: float, cast=float):
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be numeric, got {raw!r}") from exc


def load_settings() -> Settings:
    """Build :class:`Settings` from the process environment (and ``.env``)."""
    load_dotenv()
    ttl_h = _number("ROUTE_CACHE_TTL_H", ROUTE_CACHE_TTL_S / 3_600)
    return validate_settings(
        Settings(
            opensky_client_id=os.getenv("OPENSKY_CLIENT_ID", ""),
            opensky_client_secret=os.getenv("OPENSKY_CLIENT_SECRET", ""),
            serpapi_api_key=os.getenv("SERPAPI_API_KEY", ""),
            route_cache_ttl_s=int(ttl_h * 3_600),
            poll_interval_s=_number("FLIGHT_POLL_SECONDS", POLL_INTERVAL_S, int),
            http_timeout_s=_number("HTTP_TIMEOUT_S", HTTP_TIMEOUT_S),
            page_timeout_s=_number("PAGE_TIMEOUT_S", PAGE_TIMEOUT_S),
            route_rate_limit=os.getenv("ROUTE_RATE_LIMIT", "60/minute"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
    )
