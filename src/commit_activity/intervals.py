"""Calendar arithmetic for interval buckets.

Labels are derived from dates only, never from locale formatting:

    day    2024-01-15
    week   2024-W03   (ISO year and week, weeks start on Monday)
    month  2024-01
"""

from __future__ import annotations

import calendar
import datetime as dt
from dataclasses import dataclass
from enum import Enum

from .exceptions import InvalidInputError


class Granularity(str, Enum):
    """Bucket size used to group commit timestamps."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def parse(cls, value: str | Granularity) -> Granularity:
        if isinstance(value, Granularity):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidInputError("interval", value, "expected day, week or month")


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range."""

    start: dt.date
    end: dt.date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidInputError(
                "date range",
                f"{self.start.isoformat()}..{self.end.isoformat()}",
                "start date is after end date",
            )

    @property
    def since(self) -> str:
        """Start of the first day as a UTC ISO-8601 timestamp."""
        return f"{self.start.isoformat()}T00:00:00Z"

    @property
    def until(self) -> str:
        """End of the last day as a UTC ISO-8601 timestamp."""
        return f"{self.end.isoformat()}T23:59:59Z"

    @classmethod
    def from_options(
        cls,
        start: dt.date | None = None,
        end: dt.date | None = None,
        months: int = 1,
        today: dt.date | None = None,
    ) -> DateRange:
        """Resolve ``--from`` / ``--to`` / ``--months`` into a range.

        A missing end defaults to *today*; a missing start defaults to
        *months* calendar months before the end.
        """
        if months < 1:
            raise InvalidInputError("months", months, "must be a positive integer")
        if end is None:
            end = today or dt.date.today()
        if start is None:
            start = months_before(end, months)
        return cls(start=start, end=end)


def parse_date(value: str) -> dt.date:
    """Parse a ``YYYY-MM-DD`` string."""
    try:
        return dt.date.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        raise InvalidInputError("date", value, "expected YYYY-MM-DD")


def months_before(day: dt.date, months: int) -> dt.date:
    """Same day-of-month *months* earlier, clamped to the month's length."""
    index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    last = calendar.monthrange(year, month)[1]
    return dt.date(year, month, min(day.day, last))


def bucket_start(day: dt.date, granularity: Granularity) -> dt.date:
    """First date of the bucket containing *day*."""
    if granularity is Granularity.DAY:
        return day
    if granularity is Granularity.WEEK:
        return day - dt.timedelta(days=day.weekday())
    return day.replace(day=1)


def next_bucket(day: dt.date, granularity: Granularity) -> dt.date:
    """First date of the bucket after the one starting at *day*."""
    if granularity is Granularity.DAY:
        return day + dt.timedelta(days=1)
    if granularity is Granularity.WEEK:
        return day + dt.timedelta(days=7)
    if day.month == 12:
        return dt.date(day.year + 1, 1, 1)
    return dt.date(day.year, day.month + 1, 1)


def interval_label(day: dt.date, granularity: Granularity) -> str:
    if granularity is Granularity.DAY:
        return day.isoformat()
    if granularity is Granularity.WEEK:
        iso = day.isocalendar()
        return f"{iso.year:04d}-W{iso.week:02d}"
    return f"{day.year:04d}-{day.month:02d}"


def interval_labels(date_range: DateRange, granularity: Granularity) -> list[str]:
    """Every bucket label touching *date_range*, ascending and without gaps."""
    labels: list[str] = []
    cur = bucket_start(date_range.start, granularity)
    while cur <= date_range.end:
        labels.append(interval_label(cur, granularity))
        cur = next_bucket(cur, granularity)
    return labels
