"""Tests for runtime settings loading and validation."""

from __future__ import annotations

import pytest

from fleetmanager.config import SettingsLoadError, config_load_database_url, config_load_settings


def test_config_load_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Load normalized values from environment variables.

    Args:
        monkeypatch: Pytest fixture for environment overrides.

    Returns:
        None: Assertions validate loaded values.

    Raises:
        AssertionError: Raised when values are not normalized.
    """

    monkeypatch.setenv("OWNER_ID", "  owner-7  ")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("REPORT_TIMEZONE", "Europe/Berlin")

    settings = config_load_settings()

    assert settings.owner_id == "owner-7"
    assert settings.log_level == "DEBUG"
    assert settings.report_timezone == "Europe/Berlin"


@pytest.mark.parametrize(
    ("variable_name", "variable_value"),
    [
        ("REPORT_TIMEZONE", "Mars/Olympus"),
        ("LOG_LEVEL", "LOUD"),
        ("OWNER_ID", "   "),
        ("ANOMALY_THRESHOLD_RATIO", "1.5"),
    ],
)
def test_config_load_settings_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch,
    variable_name: str,
    variable_value: str,
) -> None:
    """Wrap validation failures in a settings load error.

    Args:
        monkeypatch: Pytest fixture for environment overrides.
        variable_name: Environment variable to override.
        variable_value: Invalid value.

    Returns:
        None: Assertions validate error mapping.

    Raises:
        AssertionError: Raised when invalid values are accepted.
    """

    monkeypatch.setenv(variable_name, variable_value)

    with pytest.raises(SettingsLoadError):
        config_load_settings()


def test_config_load_settings_rejects_high_threshold_below_medium(monkeypatch: pytest.MonkeyPatch) -> None:
    """Require the HIGH income band to start at or above the MEDIUM band.

    Args:
        monkeypatch: Pytest fixture for environment overrides.

    Returns:
        None: Assertions validate cross-field validation.

    Raises:
        AssertionError: Raised when inverted thresholds are accepted.
    """

    monkeypatch.setenv("MEDIUM_INCOME_THRESHOLD", "300")
    monkeypatch.setenv("HIGH_INCOME_THRESHOLD", "200")

    with pytest.raises(SettingsLoadError):
        config_load_settings()


def test_config_load_database_url_rejects_blank_value(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reject a blank database URL for migration tooling.

    Args:
        monkeypatch: Pytest fixture for environment overrides.

    Returns:
        None: Assertions validate blank URL handling.

    Raises:
        AssertionError: Raised when a blank URL is accepted.
    """

    monkeypatch.setenv("DATABASE_URL", "   ")

    with pytest.raises(SettingsLoadError):
        config_load_database_url()
