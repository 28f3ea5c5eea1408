"""
errors.py
~~~~~~~~~
Exception taxonomy for the flight core.

Only :class:`NotFoundError` (route chain exhausted) and :class:`UpstreamError`
(live feed down) ever reach the HTTP layer; the others are raised and caught
inside a single strategy or token exchange.
"""

from __future__ import annotations


class FlightGlobeError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(FlightGlobeError):
    """Required input missing or malformed; rejected before any work."""


class UpstreamError(FlightGlobeError):
    """An external source answered with a non-success status or not at all."""

    def __init__(self, source: str, status: int | None = None, detail: str = "") -> None:
        self.source = source
        self.status = status
        self.detail = detail
        what = f"HTTP {status}" if status is not None else "request failed"
        super().__init__(f"{source}: {what}" + (f" ({detail})" if detail else ""))


class ParseError(FlightGlobeError):
    """A strategy found no registry-valid airport pair in its source."""

    def __init__(self, source: str, callsign: str) -> None:
        self.source = source
        self.callsign = callsign
        super().__init__(f"{source}: no airport pair found for {callsign}")


class AuthError(FlightGlobeError):
    """OAuth2 token exchange with the feed failed."""


class NotFoundError(FlightGlobeError):
    """Every route strategy was exhausted without two valid airport codes."""

    def __init__(self, callsign: str) -> None:
        self.callsign = callsign
        super().__init__(f"Could not determine flight route for {callsign}")


__all__ = [
    "AuthError",
    "FlightGlobeError",
    "NotFoundError",
    "ParseError",
    "UpstreamError",
    "ValidationError",
]
