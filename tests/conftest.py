"""Shared fixtures: fixed dates and isolated settings."""

from datetime import datetime

import pytest

from cueclub.config.settings import CONFIG_FILE_ENV, Settings, get_settings
from cueclub.domain.booking import Booking, BookingStatus

# 2025-12-20 is a Saturday, 2025-12-21 a Sunday, 2025-12-22 a Monday
SATURDAY = datetime(2025, 12, 20)
SUNDAY = datetime(2025, 12, 21)
MONDAY = datetime(2025, 12, 22)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep tests independent of CUECLUB_CONFIG_FILE and the settings cache."""
    monkeypatch.delenv(CONFIG_FILE_ENV, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def make_booking():
    """Factory for bookings on Monday 2025-12-22 unless told otherwise."""

    def _make(
        start_time="14:00",
        duration=2.0,
        table_id=1,
        status=BookingStatus.CONFIRMED,
        day=MONDAY,
        **extra,
    ):
        return Booking(
            table_id=table_id,
            date=day.date(),
            start_time=start_time,
            duration=duration,
            status=status,
            **extra,
        )

    return _make
