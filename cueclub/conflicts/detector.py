"""
Booking conflict detection.

Given a candidate booking and the bookings already held for the club,
decides whether the candidate's table is free:

- only bookings on the same table that are not cancelled are considered
- intervals are half-open, [start, start + duration); touching is fine
- overlapping a confirmed or completed booking is an "error" (hard block)
- overlapping a pending or no-show booking is a "warning" (may force)
- with a cleanup buffer, bookings closer than the buffer are "adjacent"
  warnings

The detector keeps no state between calls. Conflicts are a normal result,
never an exception.
"""

from datetime import timedelta
from typing import Iterable, List, Optional, Sequence

from cueclub.config.settings import BookingPolicy, BusinessSchedule, Settings, get_settings
from cueclub.domain.booking import Booking, BookingStatus
from cueclub.domain.conflict import (
    Conflict,
    ConflictKind,
    ConflictResult,
    Severity,
    SlotSuggestion,
)
from cueclub.utils.logger import get_logger, log_operation, mask_phone
from cueclub.utils.timeutils import do_time_ranges_overlap, get_business_hours

from .suggestions import find_free_slots

logger = get_logger(__name__)

HARD_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.COMPLETED})


def same_table(a: Booking, b: Booking) -> bool:
    """Table ids compare as strings; the API mixes 1 and "1"."""
    return str(a.table_id) == str(b.table_id)


def relevant_bookings(candidate: Booking, existing: Iterable[Booking]) -> List[Booking]:
    """Active bookings on the candidate's table, excluding the candidate itself."""
    return [
        booking
        for booking in existing
        if same_table(booking, candidate)
        and booking.is_active
        and not (candidate.id is not None and booking.id == candidate.id)
    ]


def overlap_severity(booking: Booking) -> Severity:
    return Severity.ERROR if booking.status in HARD_STATUSES else Severity.WARNING


def _who(booking: Booking) -> str:
    return booking.customer_name or "another customer"


def _overlap_conflict(candidate: Booking, booking: Booking) -> Conflict:
    overlap_start = max(candidate.start, booking.start)
    overlap_end = min(candidate.end, booking.end)
    return Conflict(
        booking=booking,
        kind=ConflictKind.OVERLAP,
        severity=overlap_severity(booking),
        message=(
            f"Table {booking.table_id} is booked {booking.start:%H:%M}-{booking.end:%H:%M} "
            f"by {_who(booking)} ({booking.status.value}); overlaps "
            f"{overlap_start:%H:%M}-{overlap_end:%H:%M}"
        ),
        overlap_start=overlap_start,
        overlap_end=overlap_end,
    )


def _adjacent_conflict(booking: Booking, buffer_minutes: int) -> Conflict:
    return Conflict(
        booking=booking,
        kind=ConflictKind.ADJACENT,
        severity=Severity.WARNING,
        message=(
            f"Table {booking.table_id} is booked {booking.start:%H:%M}-{booking.end:%H:%M} "
            f"by {_who(booking)}, less than {buffer_minutes} minutes apart"
        ),
    )


def find_conflicts(
    candidate: Booking,
    existing: Iterable[Booking],
    buffer_minutes: int = 0,
) -> List[Conflict]:
    """
    Every conflict between ``candidate`` and ``existing``, ordered by start.

    Args:
        candidate: Proposed booking
        existing: Bookings to check against (any table, any status)
        buffer_minutes: Minimum gap; closer bookings become adjacent warnings
    """
    buffer = timedelta(minutes=buffer_minutes)
    conflicts: List[Conflict] = []

    for booking in sorted(relevant_bookings(candidate, existing), key=lambda b: b.start):
        if do_time_ranges_overlap(candidate.start, candidate.end, booking.start, booking.end):
            conflicts.append(_overlap_conflict(candidate, booking))
        elif buffer_minutes > 0 and do_time_ranges_overlap(
            candidate.start - buffer, candidate.end + buffer, booking.start, booking.end
        ):
            conflicts.append(_adjacent_conflict(booking, buffer_minutes))

    return conflicts


def _summary(candidate: Booking, conflicts: Sequence[Conflict], severity: Severity) -> dict:
    if severity == Severity.ERROR:
        return {
            "title": "Booking Conflict",
            "question": None,
        }
    if severity == Severity.WARNING:
        return {
            "title": "Booking Warning",
            "question": f"Book table {candidate.table_id} anyway?",
        }
    return {"title": "Available", "question": None}


class ConflictDetector:
    """
    Conflict checks bound to the club's opening hours and booking policy.

    Args:
        settings: Club settings; defaults to the loaded configuration
    """

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.schedule: BusinessSchedule = settings.business_hours
        self.policy: BookingPolicy = settings.booking

    def find_free_slots(
        self,
        candidate: Booking,
        existing: Iterable[Booking],
        limit: Optional[int] = None,
    ) -> List[SlotSuggestion]:
        """Free slots of the candidate's length on its table, from its start onwards."""
        return find_free_slots(
            relevant_bookings(candidate, existing),
            candidate.start,
            candidate.duration,
            get_business_hours(candidate.date, self.schedule),
            step_minutes=self.policy.slot_step_minutes,
            limit=self.policy.max_suggestions if limit is None else limit,
            buffer_minutes=self.policy.buffer_minutes,
        )

    @log_operation("detect_conflicts")
    def check(
        self,
        candidate: Booking,
        existing: Iterable[Booking],
        suggest: bool = True,
    ) -> ConflictResult:
        """
        Check a candidate booking.

        Args:
            candidate: Proposed booking
            existing: Bookings fetched from the API
            suggest: Search for alternative slots when conflicts exist

        Returns:
            ConflictResult with conflicts, suggestions, severity and can_force
        """
        existing = list(existing)
        conflicts = find_conflicts(candidate, existing, self.policy.buffer_minutes)
        severity = Severity.worst(*(c.severity for c in conflicts))

        suggestions: List[SlotSuggestion] = []
        if conflicts and suggest:
            suggestions = self.find_free_slots(candidate, existing)

        if conflicts:
            message = f"{len(conflicts)} conflicting booking(s) on table {candidate.table_id}"
        else:
            message = f"Table {candidate.table_id} is available"

        logger.info(
            message,
            operation="detect_conflicts",
            context={
                "table_id": candidate.table_id,
                "start": candidate.start.isoformat(),
                "duration": candidate.duration,
                "severity": severity.value,
                "conflicts": [
                    {"booking_id": c.booking.id, "phone": mask_phone(c.booking.customer_phone)}
                    for c in conflicts
                ],
                "suggestions": len(suggestions),
            },
        )

        return ConflictResult(
            conflicts=tuple(conflicts),
            suggestions=tuple(suggestions),
            severity=severity,
            message=message,
            details=_summary(candidate, conflicts, severity),
        )


def detect_conflicts(
    candidate: Booking,
    existing: Iterable[Booking],
    settings: Optional[Settings] = None,
    suggest: bool = True,
) -> ConflictResult:
    """Check ``candidate`` against ``existing`` with the club's settings."""
    return ConflictDetector(settings).check(candidate, existing, suggest=suggest)
