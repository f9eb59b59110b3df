"""
Unit tests for the Booking domain model (cueclub/domain/booking.py)
"""

from datetime import date, datetime

import pytest

from cueclub.domain.booking import (
    Booking,
    BookingStatus,
    MembershipType,
    normalize_keys,
)


class TestNormalizeKeys:
    def test_maps_known_aliases(self):
        result = normalize_keys(
            {"tableId": 1, "startTime": "14:00", "bookingtype": "standard", "membershipType": "basic"}
        )
        assert result == {
            "table_id": 1,
            "start_time": "14:00",
            "booking_type": "standard",
            "membership_type": "basic",
        }

    def test_first_non_null_alias_wins(self):
        result = normalize_keys({"booking_type": None, "bookingtype": "tournament", "bookingType": "practice"})
        assert result["booking_type"] == "tournament"

    def test_unknown_keys_kept(self):
        assert normalize_keys({"notes": "Birthday"}) == {"notes": "Birthday"}


class TestBookingFromDict:
    def test_api_payload(self):
        booking = Booking.from_dict(
            {
                "id": 1,
                "customerName": "John Doe",
                "customerPhone": "+1234567890",
                "tableId": 1,
                "date": "2025-12-20",
                "startTime": "14:00",
                "duration": 2,
                "gameType": "standard",
                "status": "confirmed",
                "totalAmount": 50,
                "notes": "Birthday celebration",
            }
        )

        assert booking.id == 1
        assert booking.table_id == 1
        assert booking.date == date(2025, 12, 20)
        assert booking.start_time == "14:00"
        assert booking.duration == 2.0
        assert booking.status == BookingStatus.CONFIRMED
        assert booking.booking_type == "standard"
        assert booking.customer_name == "John Doe"
        assert booking.extra_fields == {"totalAmount": 50, "notes": "Birthday celebration"}

    def test_full_timestamp_start(self):
        booking = Booking.from_dict({"table_id": "T2", "start_time": "2025-12-20T18:30:00", "duration": "1.5"})

        assert booking.date == date(2025, 12, 20)
        assert booking.start_time == "18:30"
        assert booking.duration == 1.5
        assert booking.status == BookingStatus.PENDING

    def test_datetime_start(self):
        booking = Booking.from_dict({"table_id": 1, "start_time": datetime(2025, 12, 22, 9, 15), "duration": 1})
        assert booking.start == datetime(2025, 12, 22, 9, 15)

    def test_pads_single_digit_hour(self):
        booking = Booking.from_dict({"table_id": 1, "date": "2025-12-22", "start_time": "9:00", "duration": 1})
        assert booking.start_time == "09:00"

    def test_missing_required_field(self):
        with pytest.raises(KeyError):
            Booking.from_dict({"table_id": 1, "date": "2025-12-22", "duration": 1})

    def test_unparseable_date(self):
        with pytest.raises(ValueError):
            Booking.from_dict({"table_id": 1, "date": "20/12/2025", "start_time": "14:00", "duration": 1})

    def test_unknown_membership_is_none(self):
        booking = Booking.from_dict(
            {"table_id": 1, "date": "2025-12-22", "start_time": "14:00", "duration": 1, "membership": "gold"}
        )
        assert booking.membership_type is None


class TestBookingProperties:
    def test_interval(self):
        booking = Booking(table_id=1, date=date(2025, 12, 22), start_time="14:00", duration=1.5)
        assert booking.start == datetime(2025, 12, 22, 14, 0)
        assert booking.end == datetime(2025, 12, 22, 15, 30)

    def test_interval_across_midnight(self):
        booking = Booking(table_id=1, date=date(2025, 12, 22), start_time="23:00", duration=2)
        assert booking.end == datetime(2025, 12, 23, 1, 0)

    def test_cancelled_is_inactive(self):
        booking = Booking(1, date(2025, 12, 22), "14:00", 1, status=BookingStatus.CANCELLED)
        assert booking.is_active is False

    def test_to_dict(self):
        booking = Booking(
            table_id=1,
            date=date(2025, 12, 22),
            start_time="14:00",
            duration=2,
            membership_type=MembershipType.PREMIUM,
            extra_fields={"notes": "x"},
        )
        data = booking.to_dict()

        assert data["date"] == "2025-12-22"
        assert data["status"] == "pending"
        assert data["membership_type"] == "premium"
        assert data["notes"] == "x"
        assert "notes" not in booking.to_dict(include_extra=False)

    def test_to_dict_rebuilds_equal_booking(self):
        booking = Booking(1, date(2025, 12, 22), "14:00", 2.0, status=BookingStatus.NO_SHOW, id=9)
        assert Booking.from_dict(booking.to_dict()) == booking


class TestEnums:
    @pytest.mark.parametrize("raw", ["no-show", "no_show", "NoShow", "NO-SHOW"])
    def test_status_spellings(self, raw):
        assert BookingStatus.parse(raw) == BookingStatus.NO_SHOW

    def test_status_none_is_pending(self):
        assert BookingStatus.parse(None) == BookingStatus.PENDING

    def test_unknown_status_raises(self):
        with pytest.raises(ValueError):
            BookingStatus.parse("archived")

    def test_membership_parse(self):
        assert MembershipType.parse("Standard") == MembershipType.STANDARD
        assert MembershipType.parse(MembershipType.BASIC) == MembershipType.BASIC
        assert MembershipType.parse("") is None
        assert MembershipType.parse("gold") is None
