"""
Date and time helpers for the booking desk.

Everything here is pure. Display helpers never raise on missing input; they
return a fixed sentinel ("Invalid Date", "Unknown", "" or False) so that
rendering code can call them unguarded. ``generate_time_slots`` is the one
exception and expects well-formed "HH:MM" strings.
"""

import calendar
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional, Tuple

from cueclub.config.settings import BusinessHours, BusinessSchedule, DEFAULT_BUSINESS_SCHEDULE

logger = logging.getLogger(__name__)

INVALID_DATE = "Invalid Date"
UNKNOWN = "Unknown"
EXPIRED = "Expired"

_MS_PER_SECOND = 1000


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


# ── Formatting ───────────────────────────────────────────────────────────


def format_date(value, fmt: str = "short") -> str:
    """
    Format a date or datetime for display.

    Args:
        value: date or datetime to format
        fmt: One of "short", "long", "time", "datetime". Unknown formats
            fall back to "short".

    Returns:
        Formatted string, or "Invalid Date" when value is not a date

    Example:
        >>> format_date(datetime(2025, 12, 20, 14, 30), "datetime")
        "Dec 20, 2025, 02:30 PM"
    """
    if not isinstance(value, date):
        return INVALID_DATE

    moment = value if isinstance(value, datetime) else datetime.combine(value, time.min)
    short = f"{moment.strftime('%b')} {moment.day}, {moment.year}"
    clock = moment.strftime("%I:%M %p")

    if fmt == "long":
        return f"{moment.strftime('%A')}, {moment.strftime('%B')} {moment.day}, {moment.year}"
    if fmt == "time":
        return clock
    if fmt == "datetime":
        return f"{short}, {clock}"
    return short


def format_duration(milliseconds: float) -> str:
    """
    Render an elapsed time given in milliseconds.

    Returns "Xh Ym Zs", "Ym Zs" or "Zs" depending on the most significant
    non-zero unit. Values are floored; negative input is a caller error.
    """
    total_seconds = int(math.floor(milliseconds / _MS_PER_SECOND))
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60

    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def format_hours_minutes(hours: float) -> str:
    """
    Render decimal hours as "Xh Ym".

    The zero component is omitted ("2h", "45m"); zero renders as "0m".
    """
    h = int(math.floor(hours))
    m = _round_half_up((hours - h) * 60)
    if m == 60:
        h, m = h + 1, 0

    if h == 0:
        return f"{m}m"
    if m == 0:
        return f"{h}h"
    return f"{h}h {m}m"


def get_elapsed_time(start: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Human-readable time since ``start`` ("3 hours ago")."""
    if not isinstance(start, datetime):
        return UNKNOWN

    now = now or datetime.now()
    seconds = int(math.floor((now - start).total_seconds()))
    minutes, hours, days = seconds // 60, seconds // 3600, seconds // 86400

    if days > 0:
        return f"{_plural(days, 'day')} ago"
    if hours > 0:
        return f"{_plural(hours, 'hour')} ago"
    if minutes > 0:
        return f"{_plural(minutes, 'minute')} ago"
    return f"{_plural(seconds, 'second')} ago"


def get_time_remaining(target: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Human-readable time until ``target`` ("25 minutes remaining")."""
    if not isinstance(target, datetime):
        return UNKNOWN

    now = now or datetime.now()
    remaining = (target - now).total_seconds()
    if remaining <= 0:
        return EXPIRED

    seconds = int(math.floor(remaining))
    minutes, hours, days = seconds // 60, seconds // 3600, seconds // 86400

    if days > 0:
        return f"{_plural(days, 'day')} remaining"
    if hours > 0:
        return f"{_plural(hours, 'hour')} remaining"
    if minutes > 0:
        return f"{_plural(minutes, 'minute')} remaining"
    return f"{_plural(seconds, 'second')} remaining"


def format_to_12_hour(time24: Optional[str]) -> str:
    """Convert "14:30" to "2:30 PM". Empty or malformed input gives ""."""
    if not time24:
        return ""
    try:
        hours, minutes = time24.split(":")[:2]
        hour24 = int(hours)
    except ValueError:
        return ""

    hour12 = 12 if hour24 % 12 == 0 else hour24 % 12
    period = "PM" if hour24 >= 12 else "AM"
    return f"{hour12}:{minutes} {period}"


def format_to_24_hour(time12: Optional[str]) -> str:
    """Convert "2:30 PM" to "14:30". Empty or malformed input gives ""."""
    if not time12:
        return ""
    try:
        clock, period = time12.strip().split(" ")
        hours, minutes = clock.split(":")
        hour24 = int(hours)
    except ValueError:
        return ""

    period = period.upper()
    if period == "PM" and hour24 != 12:
        hour24 += 12
    elif period == "AM" and hour24 == 12:
        hour24 = 0

    return f"{hour24:02d}:{minutes}"


# ── Calendar checks ──────────────────────────────────────────────────────


def _as_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def is_today(value, now: Optional[datetime] = None) -> bool:
    day = _as_date(value)
    if day is None:
        return False
    return day == (now or datetime.now()).date()


def is_tomorrow(value, now: Optional[datetime] = None) -> bool:
    day = _as_date(value)
    if day is None:
        return False
    return day == (now or datetime.now()).date() + timedelta(days=1)


def is_within_days(value: Optional[datetime], days: int, now: Optional[datetime] = None) -> bool:
    """True when ``value`` falls between now and ``days`` days ahead (rounded up)."""
    if not isinstance(value, datetime):
        return False

    diff_days = math.ceil((value - (now or datetime.now())).total_seconds() / 86400)
    return 0 <= diff_days <= days


def get_today_range(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    now = now or datetime.now()
    start = datetime(now.year, now.month, now.day)
    return start, start.replace(hour=23, minute=59, second=59)


def get_week_range(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Current week, Sunday 00:00 through Saturday 23:59:59.999."""
    now = now or datetime.now()
    days_since_sunday = (now.weekday() + 1) % 7
    start = datetime(now.year, now.month, now.day) - timedelta(days=days_since_sunday)
    end = (start + timedelta(days=6)).replace(hour=23, minute=59, second=59, microsecond=999000)
    return start, end


def get_month_range(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    now = now or datetime.now()
    last_day = calendar.monthrange(now.year, now.month)[1]
    return (
        datetime(now.year, now.month, 1),
        datetime(now.year, now.month, last_day, 23, 59, 59),
    )


# ── Clock arithmetic ─────────────────────────────────────────────────────


def time_str_to_minutes(value: str) -> int:
    """"HH:MM" -> minutes since midnight."""
    hours, minutes = value.split(":")[:2]
    return int(hours) * 60 + int(minutes)


def minutes_to_time_str(minutes: int) -> str:
    """Minutes since midnight -> "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def combine(day: date, hhmm: str) -> datetime:
    """Naive datetime for ``day`` at wall-clock ``hhmm``."""
    base = datetime(day.year, day.month, day.day)
    return base + timedelta(minutes=time_str_to_minutes(hhmm))


def do_time_ranges_overlap(start1, end1, start2, end2) -> bool:
    """
    Half-open interval overlap test.

    ``[start1, end1)`` and ``[start2, end2)`` overlap iff
    ``start1 < end2 and start2 < end1``. Touching endpoints do not overlap.
    """
    return start1 < end2 and start2 < end1


overlaps = do_time_ranges_overlap


# ── Slots and business hours ─────────────────────────────────────────────


@dataclass(frozen=True)
class TimeSlot:
    """A bookable start time on a given day."""

    time: str
    display: str
    datetime: datetime


class TimeSlots:
    """
    Lazy, restartable sequence of slots between two wall-clock times.

    Iterating twice yields the same slots; nothing is materialized until
    iteration.
    """

    def __init__(self, day: date, interval_minutes: int, start_time: str, end_time: str):
        if interval_minutes <= 0:
            raise ValueError(f"interval_minutes must be positive, got {interval_minutes}")
        self.day = day
        self.interval = timedelta(minutes=interval_minutes)
        self.start = combine(day, start_time)
        self.end = combine(day, end_time)

    def __iter__(self) -> Iterator[TimeSlot]:
        current = self.start
        while current < self.end:
            hhmm = current.strftime("%H:%M")
            yield TimeSlot(time=hhmm, display=format_to_12_hour(hhmm), datetime=current)
            current += self.interval

    def __len__(self) -> int:
        if self.end <= self.start:
            return 0
        return math.ceil((self.end - self.start) / self.interval)

    def __repr__(self) -> str:
        return f"TimeSlots({self.start:%Y-%m-%d %H:%M} -> {self.end:%H:%M}, every {self.interval})"


def generate_time_slots(
    day: date,
    interval_minutes: int = 30,
    start_time: str = "08:00",
    end_time: str = "22:00",
) -> TimeSlots:
    """
    Slots every ``interval_minutes`` from ``start_time`` (inclusive) up to
    ``end_time`` (exclusive).
    """
    return TimeSlots(_as_date(day) or day, interval_minutes, start_time, end_time)


def get_business_hours(day, schedule: Optional[BusinessSchedule] = None) -> Optional[BusinessHours]:
    """
    Opening hours for ``day``.

    Weekdays, Saturday and Sunday each have their own schedule. Returns None
    when ``day`` is not a date.
    """
    day = _as_date(day)
    if day is None:
        logger.debug("get_business_hours: no date supplied")
        return None
    return (schedule or DEFAULT_BUSINESS_SCHEDULE).for_date(day)
