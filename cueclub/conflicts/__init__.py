"""Booking conflict detection and alternative slot suggestions."""

from cueclub.utils.timeutils import overlaps

from .detector import ConflictDetector, detect_conflicts, find_conflicts, relevant_bookings
from .suggestions import find_free_slots, is_slot_free

__all__ = [
    "ConflictDetector",
    "detect_conflicts",
    "find_conflicts",
    "relevant_bookings",
    "find_free_slots",
    "is_slot_free",
    "overlaps",
]
