"""
Booking domain model.

A booking reserves one table for ``duration`` hours starting at a local
wall-clock time. The REST backend has returned the same field under several
spellings over time (``tableId``/``table_id``, ``booking_type``/``bookingtype``),
so ``Booking.from_dict`` maps every known alias onto one canonical key before
building the model.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, Optional, Union


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no-show"

    @classmethod
    def parse(cls, value: Union[str, "BookingStatus", None]) -> "BookingStatus":
        """Parse a status, accepting "no_show"/"noshow" spellings. None means pending."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.PENDING
        key = str(value).strip().lower().replace("_", "-")
        if key == "noshow":
            key = "no-show"
        return cls(key)


class MembershipType(str, Enum):
    BASIC = "basic"
    STANDARD = "standard"
    PREMIUM = "premium"

    @classmethod
    def parse(cls, value: Union[str, "MembershipType", None]) -> Optional["MembershipType"]:
        """Case-insensitive lookup; unknown or empty tiers mean no membership."""
        if isinstance(value, cls):
            return value
        if not value:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class TableType(str, Enum):
    FULL_SIZE = "full-size"
    COMPACT = "compact"
    PREMIUM = "premium"


# Canonical key -> spellings seen in API payloads
FIELD_ALIASES: Dict[str, tuple] = {
    "id": ("id", "booking_id", "bookingId", "_id"),
    "table_id": ("table_id", "tableId", "tableid", "table"),
    "date": ("date", "booking_date", "bookingDate"),
    "start_time": ("start_time", "startTime", "starttime"),
    "duration": ("duration", "duration_hours", "durationHours"),
    "status": ("status", "booking_status", "bookingStatus"),
    "hourly_rate": ("hourly_rate", "hourlyRate", "rate"),
    "membership_type": ("membership_type", "membershipType", "membershiptype", "membership"),
    "booking_type": ("booking_type", "bookingType", "bookingtype", "game_type", "gameType"),
    "table_type": ("table_type", "tableType", "tabletype"),
    "customer_name": ("customer_name", "customerName", "name"),
    "customer_phone": ("customer_phone", "customerPhone", "phone"),
}

_ALIAS_LOOKUP = {alias: canonical for canonical, aliases in FIELD_ALIASES.items() for alias in aliases}


def normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map aliased keys onto canonical snake_case names.

    The first non-None value wins when a payload carries more than one alias
    of the same field. Unknown keys are kept as they are.
    """
    normalized: Dict[str, Any] = {}
    for key, value in data.items():
        canonical = _ALIAS_LOOKUP.get(key, key)
        if canonical in normalized and normalized[canonical] is not None:
            continue
        normalized[canonical] = value
    return normalized


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def _split_start(start: Any, day: Any) -> tuple:
    """Accept either "HH:MM" plus a date, or a full timestamp."""
    if isinstance(start, datetime):
        return start.date(), start.strftime("%H:%M")

    text = str(start).strip()
    if "T" in text or " " in text:
        moment = datetime.fromisoformat(text.replace(" ", "T"))
        return moment.date(), moment.strftime("%H:%M")

    hours, minutes = text.split(":")[:2]
    return _parse_date(day), f"{int(hours):02d}:{int(minutes):02d}"


@dataclass
class Booking:
    """
    A table reservation.

    Attributes:
        table_id: Table identifier (opaque key)
        date: Local calendar date
        start_time: Local wall-clock start, "HH:MM"
        duration: Hours, normally within [0.5, 8.0]
        status: Lifecycle status
        id: Backend identifier, None for a booking not yet created
        hourly_rate: Rate override; None means the table type's default rate
        membership_type: Customer's membership tier, if any
        table_type: Table category used to look up the default rate
        booking_type: Game type ("standard", "tournament", ...)
        customer_name: Display name of the customer
        customer_phone: Customer phone (masked whenever it is logged)
        extra_fields: Any payload keys the model does not know about
    """

    table_id: Any
    date: date
    start_time: str
    duration: float
    status: BookingStatus = BookingStatus.PENDING
    id: Any = None
    hourly_rate: Optional[float] = None
    membership_type: Optional[MembershipType] = None
    table_type: Optional[str] = None
    booking_type: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def start(self) -> datetime:
        hours, minutes = self.start_time.split(":")
        return datetime(self.date.year, self.date.month, self.date.day) + timedelta(
            hours=int(hours), minutes=int(minutes)
        )

    @property
    def end(self) -> datetime:
        return self.start + timedelta(hours=self.duration)

    @property
    def is_active(self) -> bool:
        """Cancelled bookings never block a table."""
        return self.status != BookingStatus.CANCELLED

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Booking":
        """
        Create a Booking from an API payload.

        Args:
            data: Payload with any of the known key spellings

        Returns:
            Booking instance

        Raises:
            KeyError: If table_id, start_time or duration is missing
            ValueError: If a date, time, status or number cannot be parsed
        """
        values = normalize_keys(data)
        core = set(FIELD_ALIASES)

        day, start_time = _split_start(values["start_time"], values.get("date"))
        rate = values.get("hourly_rate")

        return cls(
            table_id=values["table_id"],
            date=day,
            start_time=start_time,
            duration=float(values["duration"]),
            status=BookingStatus.parse(values.get("status")),
            id=values.get("id"),
            hourly_rate=float(rate) if rate is not None else None,
            membership_type=MembershipType.parse(values.get("membership_type")),
            table_type=values.get("table_type"),
            booking_type=values.get("booking_type"),
            customer_name=values.get("customer_name"),
            customer_phone=values.get("customer_phone"),
            extra_fields={k: v for k, v in values.items() if k not in core},
        )

    def to_dict(self, include_extra: bool = True) -> Dict[str, Any]:
        """
        Convert to a JSON-friendly dict with canonical keys.

        Args:
            include_extra: If True, flatten extra_fields into the output
        """
        data: Dict[str, Any] = {
            "id": self.id,
            "table_id": self.table_id,
            "date": self.date.isoformat(),
            "start_time": self.start_time,
            "duration": self.duration,
            "status": self.status.value,
            "hourly_rate": self.hourly_rate,
            "membership_type": self.membership_type.value if self.membership_type else None,
            "table_type": self.table_type,
            "booking_type": self.booking_type,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
        }
        if include_extra:
            data.update(self.extra_fields)
        return data
