"""
Service-day resolution.

Meals are counted per calendar day at the venue, so "today" is evaluated in a
single civil time zone no matter where the server process runs.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo

DEFAULT_SERVICE_TIMEZONE = "America/Los_Angeles"


@lru_cache(maxsize=8)
def _zone(tz_name: str) -> ZoneInfo:
    return ZoneInfo(tz_name)


def service_date(
    now: Optional[datetime] = None, tz_name: str = DEFAULT_SERVICE_TIMEZONE
) -> date:
    """Calendar date of ``now`` (default: the current instant) in ``tz_name``.

    A naive ``now`` is taken to be UTC.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(_zone(tz_name)).date()


def today_key(
    now: Optional[datetime] = None, tz_name: str = DEFAULT_SERVICE_TIMEZONE
) -> str:
    """``YYYY-MM-DD`` key for the service day containing ``now``."""
    return service_date(now, tz_name).isoformat()
