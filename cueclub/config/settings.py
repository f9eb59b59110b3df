"""
Configuration for cueclub

Holds the club's pricing constants, opening hours and booking-form policy.
Defaults mirror the club's published rates; a YAML file validated against
``pricing.schema.json`` can override any of them.
"""

import json
import logging
import os
from dataclasses import dataclass, field, replace
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
import yaml

from cueclub.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("pricing.schema.json")

# Optional override of the configuration file location
CONFIG_FILE_ENV = "CUECLUB_CONFIG_FILE"


@dataclass(frozen=True)
class BusinessHours:
    """Opening and closing wall-clock times ("HH:MM") for one day."""

    open: str
    close: str

    def to_dict(self) -> Dict[str, str]:
        return {"open": self.open, "close": self.close}


@dataclass(frozen=True)
class BusinessSchedule:
    """Three fixed schedules: Monday-Friday, Saturday and Sunday."""

    weekday: BusinessHours = BusinessHours("08:00", "22:00")
    saturday: BusinessHours = BusinessHours("09:00", "23:00")
    sunday: BusinessHours = BusinessHours("10:00", "20:00")

    def for_date(self, day: date) -> BusinessHours:
        weekday = day.weekday()  # 0 = Monday, 6 = Sunday
        if weekday == 6:
            return self.sunday
        if weekday == 5:
            return self.saturday
        return self.weekday


DEFAULT_BUSINESS_SCHEDULE = BusinessSchedule()


@dataclass(frozen=True)
class PeakHours:
    """Peak window [start, end) in whole hours and its price multiplier."""

    start: int = 18
    end: int = 22
    multiplier: float = 1.5


@dataclass(frozen=True)
class PricingConfig:
    """
    Pricing constants.

    Attributes:
        default_rates: Hourly rate per table type
        default_table_type: Table type used when the requested one is unknown
        tax_rate: Flat tax applied once on the final subtotal
        peak_hours: Peak window and multiplier
        weekend_multiplier: Applied on Saturday and Sunday starts
        membership_discounts: Discount rate per membership tier
        minimum_duration: Billing floor in hours
        round_up_interval: Billing grid in minutes
        currency_symbol: Prefix used by format_currency
    """

    default_rates: Dict[str, float] = field(
        default_factory=lambda: {"full-size": 25.0, "compact": 20.0, "premium": 35.0}
    )
    default_table_type: str = "full-size"
    tax_rate: float = 0.1
    peak_hours: PeakHours = PeakHours()
    weekend_multiplier: float = 1.2
    membership_discounts: Dict[str, float] = field(
        default_factory=lambda: {"basic": 0.05, "standard": 0.1, "premium": 0.15}
    )
    minimum_duration: float = 0.5
    round_up_interval: int = 15
    currency_symbol: str = "$"


@dataclass(frozen=True)
class BookingPolicy:
    """Booking-form limits checked before a request reaches the engines."""

    min_duration: float = 0.5
    max_duration: float = 8.0
    max_advance_days: int = 30
    min_advance_minutes: int = 30
    slot_step_minutes: int = 30
    max_suggestions: int = 3
    buffer_minutes: int = 0


@dataclass(frozen=True)
class Settings:
    """Complete club configuration."""

    pricing: PricingConfig = field(default_factory=PricingConfig)
    business_hours: BusinessSchedule = DEFAULT_BUSINESS_SCHEDULE
    booking: BookingPolicy = BookingPolicy()
    source: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "Settings":
        """
        Build settings from an already validated configuration mapping.

        Missing sections and keys keep their defaults.

        Raises:
            ConfigurationError: If the peak window is empty or inverted
        """
        pricing = PricingConfig()
        pricing_data = dict(data.get("pricing") or {})
        if "peak_hours" in pricing_data:
            pricing_data["peak_hours"] = replace(pricing.peak_hours, **pricing_data["peak_hours"])
            peak = pricing_data["peak_hours"]
            if peak.start >= peak.end:
                raise ConfigurationError(
                    f"peak_hours.start ({peak.start}) must be before peak_hours.end ({peak.end})"
                )
        for key in ("default_rates", "membership_discounts"):
            if key in pricing_data:
                pricing_data[key] = {
                    str(name).lower(): float(rate) for name, rate in pricing_data[key].items()
                }
        pricing = replace(pricing, **pricing_data)

        schedule = DEFAULT_BUSINESS_SCHEDULE
        hours_data = data.get("business_hours") or {}
        if hours_data:
            schedule = replace(
                schedule,
                **{day: BusinessHours(**hours) for day, hours in hours_data.items()},
            )

        booking = replace(BookingPolicy(), **(data.get("booking") or {}))

        return cls(pricing=pricing, business_hours=schedule, booking=booking, source=source)


def load_schema(schema_path: Path = SCHEMA_PATH) -> Dict[str, Any]:
    """
    Load the JSON schema for configuration files.

    Raises:
        ConfigurationError: If the schema is missing or not valid JSON
    """
    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        logger.error(f"Pricing schema file not found: {schema_path}")
        raise ConfigurationError(f"Pricing schema file not found: {schema_path}") from e
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in pricing schema: {e}")
        raise ConfigurationError(f"Invalid JSON in {schema_path}: {e}") from e


def validate_config(config: Dict[str, Any], schema: Optional[Dict[str, Any]] = None) -> None:
    """
    Validate a configuration mapping against the pricing schema.

    Raises:
        ConfigurationError: If the mapping or the schema is invalid
    """
    schema = schema if schema is not None else load_schema()
    try:
        jsonschema.validate(instance=config, schema=schema)
    except jsonschema.ValidationError as e:
        logger.error(f"Pricing configuration failed schema validation: {e.message}")
        raise ConfigurationError(f"Pricing configuration validation failed: {e.message}") from e
    except jsonschema.SchemaError as e:
        logger.error(f"Pricing schema is invalid: {e.message}")
        raise ConfigurationError(f"Pricing schema is invalid: {e.message}") from e


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Load settings from a YAML file, or return defaults.

    Resolution order: explicit ``config_path``, then the CUECLUB_CONFIG_FILE
    environment variable, then built-in defaults.

    Args:
        config_path: Path to a pricing YAML file

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If the file is missing, not YAML, or fails the schema
    """
    config_path = config_path or os.getenv(CONFIG_FILE_ENV)
    if not config_path:
        logger.debug("No pricing configuration file given; using defaults")
        return Settings()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except FileNotFoundError as e:
        logger.error(f"Pricing configuration file not found: {config_path}")
        raise ConfigurationError(f"Pricing configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        logger.error(f"Invalid YAML in pricing configuration: {e}")
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not config:
        logger.warning(f"Empty pricing configuration: {config_path}")
        return Settings(source=str(config_path))

    validate_config(config)
    logger.info(f"Loaded pricing configuration from {config_path}")
    return Settings.from_dict(config, source=str(config_path))


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""
    return load_settings()
