"""Semi-monthly pay period arithmetic.

Periods run from the 1st to the 15th and from the 16th to the last day of
each month. All dates are civil dates in the employer's calendar; callers
normalize to that calendar (see ``today_in_timezone``) before calling in.
Nothing here converts between timezones.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from paytrack.calculators.types import PayPeriod

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class InvalidDateError(ValueError):
    """Raised when an input is not, or does not lead to, a real calendar day."""

    def __init__(self, value: Any, reason: str | None = None):
        self.value = value
        self.reason = reason
        shown = value.isoformat() if isinstance(value, date) else repr(value)
        message = f"Invalid date: {shown}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidOffsetError(ValueError):
    """Raised when a period offset is not an integer."""

    def __init__(self, offset: Any):
        self.offset = offset
        super().__init__(f"Invalid period offset: {offset!r}")


def to_local_date(value: date | datetime | str) -> date:
    """Coerce a date-like value to a civil date.

    Date-only strings are read as that exact day. Datetimes (and datetime
    strings) contribute their wall-clock date without any conversion, so a
    value is never shifted onto a neighbouring day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if _DATE_ONLY.match(text):
                return date.fromisoformat(text)
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            raise InvalidDateError(value) from None
    raise InvalidDateError(value)


def period_containing(value: date | datetime | str) -> PayPeriod:
    """Return the pay period that contains the given date."""
    day = to_local_date(value)
    if day.day <= 15:
        return PayPeriod(start=day.replace(day=1), end=day.replace(day=15))

    last_day = calendar.monthrange(day.year, day.month)[1]
    return PayPeriod(start=day.replace(day=16), end=day.replace(day=last_day))


def period_by_offset(offset: int, reference_date: date | datetime | str) -> PayPeriod:
    """Return the pay period ``offset`` periods away from the reference date.

    Each step moves one whole period: backwards to the day before the current
    start, forwards to the day after the current end.

    Raises:
        InvalidOffsetError: If ``offset`` is not an integer
        InvalidDateError: If the reference date is invalid, or the target
            period falls outside the supported calendar (years 1-9999)
    """
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise InvalidOffsetError(offset)

    period = period_containing(reference_date)
    try:
        for _ in range(abs(offset)):
            if offset < 0:
                period = period_containing(period.start - timedelta(days=1))
            else:
                period = period_containing(period.end + timedelta(days=1))
    except OverflowError as exc:
        raise InvalidDateError(
            reference_date, f"offset {offset} leaves the supported calendar"
        ) from exc
    return period


def format_for_storage(value: date | datetime | str) -> str:
    """Format a date as ``YYYY-MM-DD`` for storage keys and range filters."""
    day = to_local_date(value)
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def label(period: PayPeriod) -> str:
    """Human-readable period label, e.g. ``Feb 1–15, 2026``."""
    month = MONTH_ABBREVIATIONS[period.start.month - 1]
    return f"{month} {period.start.day}–{period.end.day}, {period.start.year}"


def effective_end_date(period: PayPeriod, today: date | datetime | str) -> date:
    """Clamp a period's end to today, for previews of a period in progress."""
    today_date = to_local_date(today)
    return period.end if period.end <= today_date else today_date


def is_pay_period(start: date | datetime | str, end: date | datetime | str) -> bool:
    """Check that ``start``/``end`` are exactly the bounds of one pay period."""
    start_date = to_local_date(start)
    end_date = to_local_date(end)
    period = period_containing(start_date)
    return period.start == start_date and period.end == end_date


def today_in_timezone(tz_name: str) -> date:
    """Current civil date in the given IANA timezone."""
    return datetime.now(ZoneInfo(tz_name)).date()
