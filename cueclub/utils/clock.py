"""
Clock helpers for cueclub.

All booking and billing arithmetic happens in the club's local wall-clock
time using naive datetimes. Operations that need "now" accept a clock
callable so callers and tests can pin the current time.
"""

from datetime import datetime, tzinfo
from typing import Callable, Optional

Clock = Callable[[], datetime]


def club_now(tz: Optional[tzinfo] = None) -> datetime:
    """
    Return the current club wall-clock time as a naive datetime.

    Args:
        tz: Club timezone. When None the host's local time is used.

    Returns:
        datetime: Current time with tzinfo stripped.
    """
    if tz is None:
        return datetime.now()
    return datetime.now(tz).replace(tzinfo=None)


def fixed_clock(moment: datetime) -> Clock:
    """Return a clock that always reports ``moment``."""
    return lambda: moment


def resolve_now(now: Optional[datetime] = None, clock: Optional[Clock] = None) -> datetime:
    """Pick an explicit ``now`` over ``clock`` over the real club time."""
    if now is not None:
        return now
    if clock is not None:
        return clock()
    return club_now()
