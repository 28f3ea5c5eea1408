# backend/flightglobe/constants.py

"""
Global constants shared by the feed, projector and route resolver.

Two User-Agent strings live here: our own (sent to APIs that want to know
who is calling) and a browser one for the flight-tracking HTML page, which
serves a stripped page to unknown agents.
"""

from __future__ import annotations

from typing import Final

USER_AGENT: Final = "flightglobe/0.1 (live flight tracker backend)"
BROWSER_USER_AGENT: Final = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# ── External endpoints ───────────────────────────────────────────────────
OPENSKY_STATES_URL: Final = "https://opensky-network.org/api/states/all"
OPENSKY_TOKEN_URL: Final = (
    "https://auth.opensky-network.org/auth/realms/opensky-network"
    "/protocol/openid-connect/token"
)
SERPAPI_URL: Final = "https://serpapi.com/search.json"
FLIGHTAWARE_URL: Final = "https://www.flightaware.com/live/flight/{callsign}"

# ── Geometry ─────────────────────────────────────────────────────────────
EARTH_RADIUS_KM: Final[float] = 6_371.0
GLOBE_RADIUS: Final[float] = 100.0  # scene units

# ── Timing ───────────────────────────────────────────────────────────────
POLL_INTERVAL_S: Final[int] = 15
ROUTE_CACHE_TTL_S: Final[int] = 6 * 3_600
TOKEN_EXPIRY_MARGIN_S: Final[int] = 60
TOKEN_DEFAULT_LIFETIME_S: Final[int] = 1_800  # when expires_in is missing
HTTP_TIMEOUT_S: Final[float] = 10.0
PAGE_TIMEOUT_S: Final[float] = 8.0
