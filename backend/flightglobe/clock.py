"""
clock.py
~~~~~~~~
Injectable UTC clock shared by every expiring cache.
"""

from __future__ import annotations

import datetime as dt
from typing import Callable, Final

from dateutil import tz

UTC: Final = tz.UTC

Clock = Callable[[], dt.datetime]


def utcnow() -> dt.datetime:
    return dt.datetime.now(UTC)


__all__ = ["Clock", "UTC", "utcnow"]
