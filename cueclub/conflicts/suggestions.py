"""
Alternative slot search.

Scans forward from the requested start on a fixed step grid and returns
the first free intervals of the requested length. The scan is bounded by
the day's closing time, so it always terminates.
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from cueclub.config.settings import BusinessHours
from cueclub.domain.booking import Booking
from cueclub.domain.conflict import SlotSuggestion
from cueclub.utils.timeutils import combine, do_time_ranges_overlap, format_to_12_hour


def slot_label(start: datetime, end: datetime) -> str:
    """"3:00 PM - 5:00 PM" style label for a suggestion."""
    return f"{format_to_12_hour(start.strftime('%H:%M'))} - {format_to_12_hour(end.strftime('%H:%M'))}"


def is_slot_free(
    start: datetime,
    end: datetime,
    bookings: Iterable[Booking],
    buffer_minutes: int = 0,
) -> bool:
    """True when [start, end), widened by the buffer, touches no booking."""
    buffer = timedelta(minutes=buffer_minutes)
    return not any(
        do_time_ranges_overlap(start - buffer, end + buffer, booking.start, booking.end)
        for booking in bookings
    )


def find_free_slots(
    bookings: Iterable[Booking],
    requested_start: datetime,
    duration_hours: float,
    hours: Optional[BusinessHours],
    step_minutes: int = 30,
    limit: int = 3,
    buffer_minutes: int = 0,
) -> List[SlotSuggestion]:
    """
    Find up to ``limit`` free slots at or after ``requested_start``.

    Args:
        bookings: Active bookings on the same table
        requested_start: Where the scan begins
        duration_hours: Length every suggestion must have
        hours: Opening hours of the requested day; None disables the search
        step_minutes: Scan increment
        limit: Maximum number of suggestions
        buffer_minutes: Gap required between a suggestion and any booking

    Returns:
        Suggestions in chronological order, possibly empty
    """
    if hours is None or limit <= 0 or step_minutes <= 0 or duration_hours <= 0:
        return []

    bookings = list(bookings)
    day = requested_start.date()
    opening = combine(day, hours.open)
    closing = combine(day, hours.close)
    length = timedelta(hours=duration_hours)
    step = timedelta(minutes=step_minutes)

    suggestions: List[SlotSuggestion] = []
    current = max(requested_start, opening)

    while current + length <= closing and len(suggestions) < limit:
        end = current + length
        if is_slot_free(current, end, bookings, buffer_minutes):
            suggestions.append(SlotSuggestion(start_time=current, end_time=end, label=slot_label(current, end)))
        current += step

    return suggestions
