"""
cueclub - pricing and booking-conflict engine for snooker and pool clubs.
"""

from cueclub.conflicts import ConflictDetector, detect_conflicts
from cueclub.domain import Booking, BookingStatus, ConflictResult, CostBreakdown, MembershipType
from cueclub.exceptions import BookingValidationError, ConfigurationError, CueClubError
from cueclub.pricing import PricingEngine, current_cost, estimate_cost, finalize_bill
from cueclub.utils.timeutils import overlaps

__version__ = "1.0.0"

__all__ = [
    "Booking",
    "BookingStatus",
    "BookingValidationError",
    "ConfigurationError",
    "ConflictDetector",
    "ConflictResult",
    "CostBreakdown",
    "CueClubError",
    "MembershipType",
    "PricingEngine",
    "current_cost",
    "detect_conflicts",
    "estimate_cost",
    "finalize_bill",
    "overlaps",
]
