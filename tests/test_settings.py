"""Tests for persisted thresholds."""

import json
import logging
from pathlib import Path

import pytest

import config
from settings import ThresholdSettings


def test_defaults(settings: ThresholdSettings) -> None:
    assert settings.charging_threshold == 80
    assert settings.discharging_threshold == 90


def test_set_persists(settings: ThresholdSettings) -> None:
    settings.set_int(config.CHARGING_KEY, 60)

    reloaded = ThresholdSettings(settings.path)
    reloaded.load()
    assert reloaded.charging_threshold == 60
    assert reloaded.discharging_threshold == 90


def test_reads_are_clamped(settings: ThresholdSettings) -> None:
    settings.set_int(config.CHARGING_KEY, 150)
    settings.set_int(config.DISCHARGING_KEY, -5)

    assert settings.get_int(config.CHARGING_KEY) == 150
    assert settings.charging_threshold == 100
    assert settings.discharging_threshold == 0


def test_corrupt_file_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json")

    store = ThresholdSettings(str(path))
    store.load()
    assert store.charging_threshold == 80


def test_invalid_values_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({config.CHARGING_KEY: "high", config.DISCHARGING_KEY: 70}))

    store = ThresholdSettings(str(path))
    store.load()
    assert store.charging_threshold == 80
    assert store.discharging_threshold == 70


def test_unknown_key(settings: ThresholdSettings) -> None:
    with pytest.raises(KeyError):
        settings.set_int("critical-threshold", 5)


def test_listeners_notified_on_change(settings: ThresholdSettings) -> None:
    changes = []
    handler_id = settings.connect(changes.append)

    settings.set_int(config.DISCHARGING_KEY, 50)
    settings.set_int(config.DISCHARGING_KEY, 50)
    settings.disconnect(handler_id)
    settings.set_int(config.DISCHARGING_KEY, 40)

    assert changes == [config.DISCHARGING_KEY]


def test_failed_save_still_notifies(
    settings: ThresholdSettings, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    def read_only_disk() -> None:
        raise OSError("Read-only file system")

    monkeypatch.setattr(settings, "save", read_only_disk)
    changes = []
    settings.connect(changes.append)

    with caplog.at_level(logging.WARNING, logger="settings"):
        settings.set_int(config.CHARGING_KEY, 55)

    assert changes == [config.CHARGING_KEY]
    assert settings.charging_threshold == 55
    assert "Could not save settings" in caplog.text
