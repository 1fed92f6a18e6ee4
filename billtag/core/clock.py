"""Clocks used to timestamp call contexts.

All datetimes are aware and in UTC TZ.
"""
from datetime import date, datetime, timedelta
from typing import Optional

from .util import utc_dt, utcnow


class Clock:
    """Wall clock."""

    def utcnow(self) -> datetime:
        return utcnow()

    def today(self) -> date:
        return self.utcnow().date()


class ClockMock(Clock):
    """A clock frozen at a given instant, which can be moved by hand.

    Used by tests, and by tools replaying billing at a past date.
    """

    def __init__(self, now: Optional[datetime] = None) -> None:
        self._now = utc_dt(now) if now is not None else utcnow()

    def utcnow(self) -> datetime:
        return self._now

    def set_time(self, now: datetime) -> None:
        self._now = utc_dt(now)

    def add_delta(self, delta: timedelta) -> None:
        self._now += delta

    def add_days(self, days: int) -> None:
        self.add_delta(timedelta(days=days))

    def reset(self) -> None:
        self._now = utcnow()

    def __repr__(self):
        return f"<{self.__class__.__name__} now={self._now.isoformat()}>"
