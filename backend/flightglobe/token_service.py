"""
token_service.py
~~~~~~~~~~~~~~~~
OAuth2 *client-credentials* bearer token for the OpenSky feed.

The token is re-used until 60 s before the expiry the auth server states
(``expires_in``; 30 min assumed when absent).  A failed exchange clears the
cached token and raises :class:`AuthError` – the caller then polls the feed
anonymously instead of giving up.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any

import httpx

from .api_logging import logged_request_async
from .clock import Clock, utcnow
from .constants import (
    OPENSKY_TOKEN_URL,
    TOKEN_DEFAULT_LIFETIME_S,
    TOKEN_EXPIRY_MARGIN_S,
)
from .errors import AuthError, UpstreamError

LOG = logging.getLogger("token_service")


class TokenCache:
    """Holds at most one bearer token and knows when it goes stale."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        token_url: str = OPENSKY_TOKEN_URL,
        clock: Clock = utcnow,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_url = token_url
        self._clock = clock
        self._token: str | None = None
        self._expires_at: dt.datetime | None = None

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def cached_token(self) -> str | None:
        """Return the held token if it is still outside the safety margin."""
        if self._token is None or self._expires_at is None:
            return None
        margin = dt.timedelta(seconds=TOKEN_EXPIRY_MARGIN_S)
        if self._clock() < self._expires_at - margin:
            return self._token
        return None

    def invalidate(self) -> None:
        self._token = None
        self._expires_at = None

    async def get_token(self, client: httpx.AsyncClient) -> str:
        """
        Return a valid bearer token, exchanging credentials when needed.

        Raises
        ------
        AuthError
            Credentials missing, transport failure, non-2xx answer, or a
            body without ``access_token``.
        """
        token = self.cached_token()
        if token:
            return token
        if not self.configured:
            raise AuthError("OpenSky client credentials not configured")

        try:
            resp = await logged_request_async(
                client,
                "post",
                self.token_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
                source="OpenSky auth",
                expect_ok=True,
            )
            payload: Any = resp.json()
        except (UpstreamError, ValueError) as exc:
            self.invalidate()
            raise AuthError(f"token exchange failed: {exc}") from exc

        if not isinstance(payload, dict):
            self.invalidate()
            raise AuthError("token response is not a JSON object")

        token = payload.get("access_token")
        if not token:
            self.invalidate()
            raise AuthError("token response carried no access_token")

        lifetime = payload.get("expires_in") or TOKEN_DEFAULT_LIFETIME_S
        try:
            expires_at = self._clock() + dt.timedelta(seconds=float(lifetime))
        except (TypeError, ValueError, OverflowError) as exc:
            self.invalidate()
            raise AuthError(f"token response has bad expires_in {lifetime!r}") from exc

        self._token = str(token)
        self._expires_at = expires_at
        LOG.info("[token] new OpenSky token valid for %ss", lifetime)
        return self._token


__all__ = ["TokenCache"]
