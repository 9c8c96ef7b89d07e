"""Tests for configuration constants."""

import os

import config


def test_charging_icon_exists() -> None:
    assert os.path.exists(config.CHARGING_ICON_PATH)


def test_charging_icon_checked_in_install_location() -> None:
    assert any(
        path.endswith(os.path.join("share", "battery-gauge", "charging.svg"))
        for path in config.CHARGING_ICON_CANDIDATES
    )


def test_default_thresholds_in_range() -> None:
    for value in (config.DEFAULT_CHARGING_THRESHOLD, config.DEFAULT_DISCHARGING_THRESHOLD):
        assert config.MIN_BATTERY_PERCENT <= value <= config.MAX_BATTERY_PERCENT
