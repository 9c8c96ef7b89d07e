"""Tests for the indicator lifecycle and update path."""

from typing import Callable, Dict

import pytest

import config
import controller
from controller import IndicatorContext
from status import BatterySourceError, BatteryStatus


class FakeGLib:
    """Stands in for GLib's main loop timer functions."""

    SOURCE_CONTINUE = True

    class Error(Exception):
        pass

    def __init__(self) -> None:
        self.timers: Dict[int, Callable[[], bool]] = {}
        self.intervals: Dict[int, int] = {}
        self._next_id = 1

    def timeout_add_seconds(self, interval: int, callback: Callable[[], bool]) -> int:
        source_id = self._next_id
        self._next_id += 1
        self.timers[source_id] = callback
        self.intervals[source_id] = interval
        return source_id

    def source_remove(self, source_id: int) -> None:
        del self.timers[source_id]

    def tick(self) -> None:
        for callback in list(self.timers.values()):
            callback()


@pytest.fixture
def glib(monkeypatch: pytest.MonkeyPatch) -> FakeGLib:
    fake = FakeGLib()
    monkeypatch.setattr(controller, "GLib", fake)
    return fake


def test_unavailable_status_hides(glib, fake_source, settings, fake_view) -> None:
    fake_source.status = BatteryStatus.unknown()
    context = IndicatorContext(fake_source, settings, fake_view)

    assert context.update() is False
    assert fake_view.visible is False
    assert fake_view.rendered == []


def test_shows_below_threshold(glib, fake_source, settings, fake_view) -> None:
    fake_source.status = BatteryStatus(85, False)
    context = IndicatorContext(fake_source, settings, fake_view)

    assert context.update() is True
    assert fake_view.visible is True
    assert fake_view.rendered == [BatteryStatus(85, False)]


def test_hides_above_threshold(glib, fake_source, settings, fake_view) -> None:
    fake_source.status = BatteryStatus(95, True)
    context = IndicatorContext(fake_source, settings, fake_view)

    assert context.update() is False
    assert fake_view.visible is False
    assert fake_view.rendered == [BatteryStatus(95, True)]


def test_out_of_range_thresholds_are_clamped(glib, fake_source, settings, fake_view) -> None:
    settings.set_int(config.DISCHARGING_KEY, 250)
    fake_source.status = BatteryStatus(100, False)
    context = IndicatorContext(fake_source, settings, fake_view)

    assert context.update() is False


def test_source_error_hides(glib, fake_source, settings, fake_view) -> None:
    def broken() -> BatteryStatus:
        raise BatterySourceError("device went away")

    fake_source.read = broken
    fake_view.visible = True
    context = IndicatorContext(fake_source, settings, fake_view)

    assert context.update() is False
    assert fake_view.visible is False


def test_enable_starts_timer_and_updates(glib, fake_source, settings, fake_view) -> None:
    fake_source.status = BatteryStatus(20, False)
    context = IndicatorContext(fake_source, settings, fake_view)
    context.enable()
    context.enable()

    assert list(glib.intervals.values()) == [config.UPDATE_INTERVAL]
    assert len(fake_view.rendered) == 1
    assert fake_view.visible is True

    fake_source.status = BatteryStatus(95, False)
    glib.tick()
    assert fake_view.visible is False
    assert len(fake_view.rendered) == 2


def test_notifications_share_update_path(glib, fake_source, settings, fake_view) -> None:
    fake_source.status = BatteryStatus(85, True)
    context = IndicatorContext(fake_source, settings, fake_view)
    context.enable()
    assert fake_view.visible is True

    settings.set_int(config.DISCHARGING_KEY, 50)
    settings.set_int(config.CHARGING_KEY, 50)
    assert fake_view.visible is False

    fake_source.status = BatteryStatus(30, True)
    fake_source.emit()
    assert fake_view.visible is True


def test_disable_tears_down(glib, fake_source, settings, fake_view) -> None:
    context = IndicatorContext(fake_source, settings, fake_view)
    context.enable()
    context.disable()
    context.disable()

    assert glib.timers == {}
    assert fake_source.disconnected is True
    assert fake_view.destroyed is True
    assert context.update() is False

    rendered = len(fake_view.rendered)
    settings.set_int(config.CHARGING_KEY, 10)
    assert len(fake_view.rendered) == rendered
