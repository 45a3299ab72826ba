"""Calendar-date arithmetic pinned to the reference timezone."""
from datetime import date, datetime, timedelta
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from speakbuddy.config import settings

DATE_FORMAT = "%Y-%m-%d"


def parse_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def format_date(value: date) -> str:
    """Format date as YYYY-MM-DD."""
    return value.strftime(DATE_FORMAT)


class ClockSource:
    """Supplies civil dates in one fixed timezone, never the host's local one.

    ``now`` receives the reference timezone and returns an aware datetime;
    tests replace it to pin "today".
    """

    def __init__(
        self,
        timezone: Optional[str] = None,
        now: Optional[Callable[[ZoneInfo], datetime]] = None,
    ):
        self.tz = ZoneInfo(timezone or settings.clock.timezone)
        self._now = now or datetime.now

    def now(self) -> datetime:
        return self._now(self.tz).astimezone(self.tz)

    def today(self) -> date:
        """Current calendar date in the reference timezone."""
        return self.now().date()

    @staticmethod
    def add_days(day: date, delta: int) -> date:
        return day + timedelta(days=delta)

    @staticmethod
    def diff_days(a: date, b: date) -> int:
        """Whole days from ``a`` to ``b`` (``b - a``)."""
        return (b - a).days

    @classmethod
    def is_consecutive(cls, prev: Optional[date], day: date) -> bool:
        if prev is None:
            return False
        return cls.add_days(prev, 1) == day
