"""
Booking request validation.

Requests arrive from the REST API with inconsistent key spellings and
loosely typed values. This module normalizes them onto one schema, rejects
malformed payloads, and applies the booking-form rules (duration range,
advance-booking window, opening hours) before the pricing and conflict
engines ever see the booking.
"""

import math
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Union

import jsonschema

from cueclub.config.settings import Settings, get_settings
from cueclub.domain.booking import Booking, normalize_keys
from cueclub.exceptions import BookingValidationError
from cueclub.utils.clock import Clock, resolve_now
from cueclub.utils.logger import get_logger
from cueclub.utils.timeutils import combine, get_business_hours

logger = get_logger(__name__)

BOOKING_REQUEST_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Normalized booking request",
    "type": "object",
    "required": ["table_id", "start_time", "duration"],
    "properties": {
        "id": {"type": ["string", "integer", "null"]},
        "table_id": {"type": ["string", "integer"], "minLength": 1},
        "date": {
            "type": ["string", "null"],
            "pattern": r"^\d{4}-\d{2}-\d{2}",
        },
        "start_time": {
            "type": "string",
            "pattern": r"^(\d{4}-\d{2}-\d{2}[T ])?([01]?\d|2[0-3]):[0-5]\d",
        },
        "duration": {"type": "number", "exclusiveMinimum": 0},
        "status": {
            "type": ["string", "null"],
            "enum": [
                "pending", "confirmed", "cancelled", "completed",
                "no-show", "no_show", "noshow", None,
            ],
        },
        "hourly_rate": {"type": ["number", "null"], "exclusiveMinimum": 0},
        "membership_type": {"type": ["string", "null"]},
        "table_type": {"type": ["string", "null"]},
        "booking_type": {"type": ["string", "null"]},
        "customer_name": {"type": ["string", "null"]},
        "customer_phone": {"type": ["string", "null"]},
    },
}

_VALIDATOR = jsonschema.Draft7Validator(BOOKING_REQUEST_SCHEMA)


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    """Loosen the types forms send as strings ("2", "25.00", "Confirmed")."""
    coerced = dict(values)
    for key in ("duration", "hourly_rate"):
        value = coerced.get(key)
        if isinstance(value, str):
            try:
                coerced[key] = float(value)
            except ValueError:
                pass
    if isinstance(coerced.get("status"), str):
        coerced["status"] = coerced["status"].strip().lower()
    if isinstance(coerced.get("start_time"), datetime):
        coerced["start_time"] = coerced["start_time"].isoformat(timespec="minutes")
    if isinstance(coerced.get("date"), date):
        coerced["date"] = coerced["date"].isoformat()
    return coerced


def _non_finite(values: Dict[str, Any]) -> List[str]:
    """JSON schema bounds let "inf" and "nan" through; reject them here."""
    return [
        f"{key}: must be a finite number"
        for key in ("duration", "hourly_rate")
        if isinstance(values.get(key), float) and not math.isfinite(values[key])
    ]


def normalize_booking(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize a raw payload onto canonical keys and validate its shape.

    Args:
        payload: Booking dict in any of the API's key spellings

    Returns:
        Normalized dict

    Raises:
        BookingValidationError: Listing every schema violation
    """
    values = _coerce(normalize_keys(payload))
    errors = sorted(_VALIDATOR.iter_errors(values), key=lambda e: list(e.path))
    messages = [
        f"{'.'.join(str(p) for p in error.path) or 'request'}: {error.message}"
        for error in errors
    ]
    messages += _non_finite(values)

    if messages:
        logger.warning(
            "Booking request rejected by schema",
            operation="normalize_booking",
            context={"errors": messages},
        )
        raise BookingValidationError("Invalid booking request", messages)

    if "T" not in values["start_time"] and " " not in values["start_time"] and not values.get("date"):
        raise BookingValidationError("Invalid booking request", ["date: required with a HH:MM start_time"])

    return values


def parse_booking(payload: Union[Dict[str, Any], Booking]) -> Booking:
    """Normalize and build a Booking, or raise BookingValidationError."""
    if isinstance(payload, Booking):
        return payload

    values = normalize_booking(payload)
    try:
        return Booking.from_dict(values)
    except (KeyError, ValueError) as e:
        raise BookingValidationError("Invalid booking request", [str(e)]) from e


def check_booking_rules(
    booking: Booking,
    now: Optional[datetime] = None,
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
) -> List[str]:
    """
    Apply the booking-form rules.

    Returns:
        Violations as human-readable strings; empty when the booking is valid
    """
    settings = settings or get_settings()
    policy = settings.booking
    now = resolve_now(now, clock)
    errors: List[str] = []

    if not policy.min_duration <= booking.duration <= policy.max_duration:
        errors.append(
            f"duration must be between {policy.min_duration} and {policy.max_duration} hours"
        )

    if booking.start < now + timedelta(minutes=policy.min_advance_minutes):
        errors.append(f"start must be at least {policy.min_advance_minutes} minutes from now")

    if booking.start > now + timedelta(days=policy.max_advance_days):
        errors.append(f"start must be within {policy.max_advance_days} days from now")

    hours = get_business_hours(booking.date, settings.business_hours)
    if booking.start < combine(booking.date, hours.open) or booking.end > combine(
        booking.date, hours.close
    ):
        errors.append(f"booking must fall within business hours {hours.open}-{hours.close}")

    return errors


def validate_booking_request(
    payload: Union[Dict[str, Any], Booking],
    now: Optional[datetime] = None,
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
) -> Booking:
    """
    Normalize a request and enforce the booking-form rules.

    Args:
        payload: Raw API payload or an already built Booking
        now: Reference time for the advance-booking window
        settings: Club settings; defaults to the loaded configuration
        clock: Used when ``now`` is not given

    Returns:
        The validated Booking

    Raises:
        BookingValidationError: With every violated rule in ``errors``
    """
    booking = parse_booking(payload)
    errors = check_booking_rules(booking, now=now, settings=settings, clock=clock)
    if errors:
        logger.warning(
            "Booking request failed form rules",
            operation="validate_booking_request",
            context={"table_id": booking.table_id, "errors": errors},
        )
        raise BookingValidationError("Booking request violates booking rules", errors)
    return booking
