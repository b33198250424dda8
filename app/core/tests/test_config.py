"""Tests for application configuration."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings, get_settings


def test_settings_has_defaults():
    """Settings should have sensible defaults."""
    settings = Settings()

    assert settings.app_name == "StorePulse"
    assert settings.app_env == "development"
    assert settings.log_format == "json"
    assert settings.api_port == 8123


def test_dashboard_defaults():
    """Dashboard settings default to Bangkok, month metrics and a weekly snapshot."""
    settings = Settings()

    assert settings.dashboard_time_zone == "Asia/Bangkok"
    assert settings.dashboard_default_range_mode == "month"
    assert settings.dashboard_snapshot_range_mode == "week"
    assert settings.dashboard_trend_days == 7
    assert settings.dashboard_top_products == 5
    assert settings.alert_sales_drop_percent == -20.0
    assert settings.alert_ticket_spike_percent == 50.0


def test_settings_is_production_property():
    """is_production should return True for production env."""
    settings = Settings(app_env="production")
    assert settings.is_development is False
    assert settings.is_production is True


def test_get_settings_returns_singleton():
    """get_settings should return cached singleton."""
    assert get_settings() is get_settings()


def test_unknown_time_zone_is_rejected():
    """Time zones must exist in the IANA database."""
    with pytest.raises(ValidationError, match="Unknown time zone"):
        Settings(dashboard_time_zone="Mars/Olympus_Mons")


def test_range_mode_is_validated():
    with pytest.raises(ValidationError):
        Settings(dashboard_default_range_mode="fortnight")


@pytest.mark.parametrize("field", ["dashboard_trend_days", "dashboard_top_products"])
def test_window_sizes_must_be_positive(field):
    with pytest.raises(ValidationError):
        Settings(**{field: 0})


def test_settings_from_environment(monkeypatch):
    """Settings should load from environment variables."""
    monkeypatch.setenv("DASHBOARD_TIME_ZONE", "Europe/Berlin")
    monkeypatch.setenv("DASHBOARD_TREND_DAYS", "14")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = Settings()

    assert settings.dashboard_time_zone == "Europe/Berlin"
    assert settings.dashboard_trend_days == 14
    assert settings.log_level == "DEBUG"
