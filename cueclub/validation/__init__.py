"""Booking request normalization and form-rule validation."""

from .booking_request import (
    BOOKING_REQUEST_SCHEMA,
    check_booking_rules,
    normalize_booking,
    parse_booking,
    validate_booking_request,
)

__all__ = [
    "BOOKING_REQUEST_SCHEMA",
    "check_booking_rules",
    "normalize_booking",
    "parse_booking",
    "validate_booking_request",
]
