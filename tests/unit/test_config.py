"""
Unit tests for configuration loader (cueclub/config/settings.py)

Tests covering:
- Built-in defaults
- YAML overrides validated against pricing.schema.json
- ConfigurationError for missing, malformed and invalid files
- CUECLUB_CONFIG_FILE resolution and the settings cache
"""

from datetime import date
from pathlib import Path

import pytest

from cueclub.config.settings import (
    CONFIG_FILE_ENV,
    BusinessHours,
    PeakHours,
    Settings,
    get_settings,
    load_schema,
    load_settings,
    validate_config,
)
from cueclub.exceptions import ConfigurationError

PACKAGED_CONFIG = Path(__file__).resolve().parents[2] / "config" / "pricing.yaml"


@pytest.fixture
def write_config(tmp_path):
    """Write a YAML document to a temp file and return its path."""

    def _write(text):
        path = tmp_path / "pricing.yaml"
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write


class TestDefaults:
    def test_pricing_defaults(self):
        pricing = Settings().pricing

        assert pricing.default_rates == {"full-size": 25.0, "compact": 20.0, "premium": 35.0}
        assert pricing.tax_rate == 0.1
        assert pricing.peak_hours == PeakHours(18, 22, 1.5)
        assert pricing.weekend_multiplier == 1.2
        assert pricing.membership_discounts["premium"] == 0.15
        assert pricing.round_up_interval == 15

    def test_no_file_means_defaults(self):
        assert load_settings() == Settings()

    def test_schedule_by_weekday(self):
        schedule = Settings().business_hours
        assert schedule.for_date(date(2025, 12, 19)) == BusinessHours("08:00", "22:00")
        assert schedule.for_date(date(2025, 12, 20)) == BusinessHours("09:00", "23:00")
        assert schedule.for_date(date(2025, 12, 21)) == BusinessHours("10:00", "20:00")


class TestLoadSettings:
    def test_packaged_config_matches_defaults(self):
        loaded = load_settings(str(PACKAGED_CONFIG))
        defaults = Settings()

        assert loaded.pricing == defaults.pricing
        assert loaded.business_hours == defaults.business_hours
        assert loaded.booking == defaults.booking
        assert loaded.source == str(PACKAGED_CONFIG)

    def test_partial_override_keeps_other_defaults(self, write_config):
        path = write_config(
            "pricing:\n"
            "  tax_rate: 0.2\n"
            "  peak_hours:\n"
            "    multiplier: 2\n"
            "  default_rates:\n"
            "    Snooker-Pro: 40\n"
            "business_hours:\n"
            "  sunday:\n"
            "    open: '12:00'\n"
            "    close: '18:00'\n"
            "booking:\n"
            "  buffer_minutes: 10\n"
        )

        settings = load_settings(path)

        assert settings.pricing.tax_rate == 0.2
        assert settings.pricing.peak_hours == PeakHours(18, 22, 2.0)
        assert settings.pricing.default_rates == {"snooker-pro": 40.0}
        assert settings.pricing.weekend_multiplier == 1.2
        assert settings.business_hours.sunday == BusinessHours("12:00", "18:00")
        assert settings.business_hours.weekday == BusinessHours("08:00", "22:00")
        assert settings.booking.buffer_minutes == 10
        assert settings.booking.max_suggestions == 3

    def test_empty_file_means_defaults(self, write_config):
        path = write_config("")
        settings = load_settings(path)
        assert settings.pricing == Settings().pricing
        assert settings.source == path

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_settings(str(tmp_path / "absent.yaml"))

    def test_malformed_yaml(self, write_config):
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_settings(write_config("pricing: [unclosed\n"))

    @pytest.mark.parametrize(
        "text",
        [
            "pricing:\n  tax_rate: 10\n",
            "pricing:\n  happy_hour: 0.5\n",
            "booking:\n  slot_step_minutes: 20\n",
            "business_hours:\n  weekday:\n    open: '8am'\n    close: '22:00'\n",
            "business_hours:\n  saturday:\n    open: '09:00'\n    close: '24:59'\n",
        ],
    )
    def test_schema_violations(self, write_config, text):
        with pytest.raises(ConfigurationError, match="validation failed"):
            load_settings(write_config(text))

    @pytest.mark.parametrize(
        "window",
        ["    start: 22\n    end: 18\n", "    start: 18\n    end: 18\n", "    start: 23\n"],
    )
    def test_inverted_peak_window(self, write_config, window):
        with pytest.raises(ConfigurationError, match="peak_hours.start"):
            load_settings(write_config("pricing:\n  peak_hours:\n" + window))

    def test_environment_variable(self, write_config, monkeypatch):
        monkeypatch.setenv(CONFIG_FILE_ENV, write_config("pricing:\n  currency_symbol: '£'\n"))
        assert load_settings().pricing.currency_symbol == "£"

    def test_get_settings_is_cached(self, write_config, monkeypatch):
        monkeypatch.setenv(CONFIG_FILE_ENV, write_config("pricing:\n  tax_rate: 0.05\n"))

        first = get_settings()
        assert first.pricing.tax_rate == 0.05
        assert get_settings() is first


class TestSchema:
    def test_schema_loads(self):
        schema = load_schema()
        assert set(schema["properties"]) == {"pricing", "business_hours", "booking"}

    def test_missing_schema(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_schema(tmp_path / "missing.json")

    def test_validate_config_accepts_empty_sections(self):
        validate_config({"pricing": {}, "booking": {}})

    def test_invalid_schema_reported(self):
        with pytest.raises(ConfigurationError, match="schema is invalid"):
            validate_config({}, schema={"type": "no-such-type"})
