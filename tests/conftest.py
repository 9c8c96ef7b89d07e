from pathlib import Path
from typing import Callable, List, Optional

import pytest

from settings import ThresholdSettings
from status import BatteryStatus


class FakeSource:
    """Battery source returning a settable status."""

    def __init__(self, status: Optional[BatteryStatus] = None) -> None:
        self.status = status or BatteryStatus(50, False)
        self.callbacks: List[Callable[[], None]] = []
        self.disconnected = False

    def read(self) -> BatteryStatus:
        return self.status

    def connect(self, callback: Callable[[], None]) -> None:
        self.callbacks.append(callback)

    def disconnect(self) -> None:
        self.callbacks = []
        self.disconnected = True

    def emit(self) -> None:
        for callback in list(self.callbacks):
            callback()


class FakeView:
    """Records what the indicator asked the view to do."""

    def __init__(self) -> None:
        self.visible = False
        self.rendered: List[BatteryStatus] = []
        self.destroyed = False

    def update(self, status: BatteryStatus) -> None:
        self.rendered.append(status)

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def destroy(self) -> None:
        self.destroyed = True


@pytest.fixture
def settings(tmp_path: Path) -> ThresholdSettings:
    store = ThresholdSettings(str(tmp_path / "battery-gauge" / "settings.json"))
    store.load()
    return store


@pytest.fixture
def fake_source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def fake_view() -> FakeView:
    return FakeView()
