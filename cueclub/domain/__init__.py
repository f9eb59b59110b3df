"""Domain models - bookings, cost breakdowns and conflict results."""

from .booking import Booking, BookingStatus, MembershipType, TableType, normalize_keys
from .conflict import Conflict, ConflictKind, ConflictResult, Severity, SlotSuggestion
from .cost import CostBreakdown, CostFlags

__all__ = [
    "Booking",
    "BookingStatus",
    "MembershipType",
    "TableType",
    "normalize_keys",
    "Conflict",
    "ConflictKind",
    "ConflictResult",
    "Severity",
    "SlotSuggestion",
    "CostBreakdown",
    "CostFlags",
]
