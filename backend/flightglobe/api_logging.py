"""
api_logging.py
~~~~~~~~~~~~~~
Thin wrapper that prints **one concise log line** per outbound HTTP request
(feed poll, token exchange, search query, page fetch) and turns transport
failures and non-2xx answers into :class:`~flightglobe.errors.UpstreamError`
when asked to.

Credentials travel in query strings (``api_key``) and form bodies
(``client_secret``); only the URL is ever logged and its query values for
known secret keys are masked.

Usage example
-------------
>>> async with httpx.AsyncClient() as cli:
...     resp = await logged_request_async(cli, "get", url, source="OpenSky")
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from .errors import UpstreamError

LOG = logging.getLogger("extapi")

SECRET_PARAMS = frozenset({"api_key", "client_secret", "access_token"})


def redact(url: str | httpx.URL) -> str:
    """Return *url* with the values of secret query parameters masked."""
    parsed = httpx.URL(str(url))
    if not parsed.query:
        return str(parsed)
    params = [
        (k, "***" if k.lower() in SECRET_PARAMS else v)
        for k, v in parsed.params.multi_items()
    ]
    return str(parsed.copy_with(params=params))


async def logged_request_async(
    client: Any,
    method: str,
    url: str,
    *args: Any,
    source: str = "http",
    expect_ok: bool = False,
    **kwargs: Any,
) -> httpx.Response:
    """
    Issue one HTTP request through ``httpx.AsyncClient`` and log it.

    Parameters
    ----------
    client:
        ``httpx.AsyncClient`` (or anything with awaitable verb methods).
    method:
        HTTP verb, lower-case – ``"get"`` or ``"post"``.
    source:
        Short name of the upstream used in error messages.
    expect_ok:
        *True* ⇒ any non-2xx status raises :class:`UpstreamError`.
        *False* ⇒ never raise on status; the caller decides.

    Raises
    ------
    UpstreamError
        Transport failure (timeout, DNS, reset) always; non-2xx only when
        ``expect_ok`` is set.
    """
    verb = method.upper()
    params = kwargs.get("params")
    shown = redact(httpx.URL(url, params=params) if params else url)
    t0 = time.perf_counter()
    try:
        response = await getattr(client, method)(url, *args, **kwargs)
    except httpx.HTTPError as exc:
        latency_ms = (time.perf_counter() - t0) * 1000.0
        LOG.warning("FAIL %s %s %.0f ms %s", verb, shown, latency_ms, exc)
        raise UpstreamError(source, detail=str(exc) or type(exc).__name__) from exc

    latency_ms = (time.perf_counter() - t0) * 1000.0
    code = response.status_code

    if code >= 500:
        LOG.warning("%s %s → %s (%.0f ms)", verb, shown, code, latency_ms)
    else:
        LOG.info("%s %s → %s (%.0f ms)", verb, shown, code, latency_ms)

    if expect_ok and not response.is_success:
        raise UpstreamError(source, status=code, detail=response.text[:200])

    return response


__all__ = ["logged_request_async", "redact"]
