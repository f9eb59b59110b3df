"""
Conflict detection result objects.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .booking import Booking


class Severity(str, Enum):
    """How strongly a conflict blocks a booking. Ordered none < warning < error."""

    NONE = "none"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def worst(cls, *severities: "Severity") -> "Severity":
        return max(severities, key=lambda s: s.rank, default=cls.NONE)


_SEVERITY_RANK = {Severity.NONE: 0, Severity.WARNING: 1, Severity.ERROR: 2}


class ConflictKind(str, Enum):
    OVERLAP = "overlap"
    ADJACENT = "adjacent"


@dataclass(frozen=True)
class Conflict:
    """
    One existing booking that clashes with the candidate.

    ``overlap_start``/``overlap_end`` bound the shared interval for overlap
    conflicts and are None for adjacent (buffer) conflicts.
    """

    booking: Booking
    kind: ConflictKind
    severity: Severity
    message: str
    overlap_start: Optional[datetime] = None
    overlap_end: Optional[datetime] = None

    @property
    def overlap_minutes(self) -> float:
        if self.overlap_start is None or self.overlap_end is None:
            return 0.0
        return (self.overlap_end - self.overlap_start).total_seconds() / 60

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bookingId": self.booking.id,
            "tableId": self.booking.table_id,
            "source": "booking",
            "customer": self.booking.customer_name,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "message": self.message,
            "startTime": self.booking.start.isoformat(),
            "endTime": self.booking.end.isoformat(),
            "overlapStart": self.overlap_start.isoformat() if self.overlap_start else None,
            "overlapEnd": self.overlap_end.isoformat() if self.overlap_end else None,
            "details": {"phone": self.booking.customer_phone, "status": self.booking.status.value},
        }


@dataclass(frozen=True)
class SlotSuggestion:
    """A free interval of the requested length on the same table."""

    start_time: datetime
    end_time: datetime
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startTime": self.start_time.isoformat(),
            "endTime": self.end_time.isoformat(),
            "label": self.label,
        }


@dataclass(frozen=True)
class ConflictResult:
    """Outcome of checking a candidate booking against existing bookings."""

    conflicts: Tuple[Conflict, ...] = ()
    suggestions: Tuple[SlotSuggestion, ...] = ()
    severity: Severity = Severity.NONE
    message: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def available(self) -> bool:
        return not self.conflicts

    @property
    def can_force(self) -> bool:
        """Only error-level conflicts forbid proceeding anyway."""
        return self.severity != Severity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "available": self.available,
            "canForce": self.can_force,
            "severity": self.severity.value,
            "message": self.message,
            "conflicts": [c.to_dict() for c in self.conflicts],
            "suggestions": [s.to_dict() for s in self.suggestions],
            "details": dict(self.details, severity=self.severity.value),
        }
