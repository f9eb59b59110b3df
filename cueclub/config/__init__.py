"""Club configuration: pricing constants, opening hours, booking policy."""

from .settings import (
    BookingPolicy,
    BusinessHours,
    BusinessSchedule,
    PeakHours,
    PricingConfig,
    Settings,
    get_settings,
    load_settings,
    validate_config,
)

__all__ = [
    "BookingPolicy",
    "BusinessHours",
    "BusinessSchedule",
    "PeakHours",
    "PricingConfig",
    "Settings",
    "get_settings",
    "load_settings",
    "validate_config",
]
