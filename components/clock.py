"""
components/clock.py
Header wall clock, 24-hour format.
"""

from __future__ import annotations

import os
from datetime import datetime, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

CLOCK_TIMEZONE = os.getenv("CLOCK_TIMEZONE", "")


def clock_zone(name: str = CLOCK_TIMEZONE) -> Optional[tzinfo]:
    """ZoneInfo for a configured zone name; None means server local time."""
    return ZoneInfo(name) if name else None


def format_clock(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> str:
    """Current time as 'HH:MM:SS'. An aware `now` is converted to tz when one is given."""
    if now is None:
        now = datetime.now(tz)
    elif tz is not None and now.tzinfo is not None:
        now = now.astimezone(tz)
    return now.strftime("%H:%M:%S")
