"""Calendar windows for the today / week / month reports."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum


class Period(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"

    @property
    def title(self) -> str:
        return _TITLES[self]


_TITLES = {
    Period.TODAY: "Today",
    Period.WEEK: "This Week",
    Period.MONTH: "This Month",
}


@dataclass(frozen=True)
class PeriodWindow:
    period: Period
    start: datetime  # local midnight the window opens at

    @property
    def start_date(self) -> str:
        return self.start.strftime("%Y-%m-%d")

    def contains_date(self, date: str) -> bool:
        """True for ``YYYY-MM-DD`` strings on or after the window start."""
        return date >= self.start_date


def period_start(period: Period, now: datetime | None = None) -> datetime:
    """Return the midnight a period begins at, in now's time zone.

    Weeks start on Monday.
    """
    if now is None:
        now = datetime.now().astimezone()

    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period is Period.TODAY:
        return today
    if period is Period.WEEK:
        return today - timedelta(days=today.weekday())
    return today.replace(day=1)


def period_window(period: Period | str, now: datetime | None = None) -> PeriodWindow:
    period = Period(period)
    return PeriodWindow(period=period, start=period_start(period, now=now))
