"""
Battery status snapshots and the sources that produce them.

Two backends are available: the UPower display device (via GObject
introspection) and the kernel's /sys/class/power_supply tree.
"""

import logging
import math
import os
from dataclasses import dataclass
from typing import Callable, List, Optional

import config

logger = logging.getLogger(__name__)


class BatterySourceError(Exception):
    """Raised when a battery status source cannot be opened or read."""


@dataclass(frozen=True)
class BatteryStatus:
    """A single battery reading. A negative percentage means unavailable."""

    percentage: int
    is_charging: bool = False

    @classmethod
    def unknown(cls) -> "BatteryStatus":
        return cls(config.UNKNOWN_PERCENTAGE, False)

    @property
    def is_available(self) -> bool:
        return config.MIN_BATTERY_PERCENT <= self.percentage <= config.MAX_BATTERY_PERCENT


StatusCallback = Callable[[], None]


class SysfsBatterySource:
    """
    Read battery status from the sysfs power supply directory.

    sysfs offers no change notifications, so this source relies on the
    periodic update timer alone.
    """

    def __init__(self, paths: Optional[List[str]] = None) -> None:
        self.paths: List[str] = list(paths if paths is not None else config.BATTERY_PATHS)

    def _find_battery_path(self) -> Optional[str]:
        """
        Find the battery path from the configured paths.

        Returns:
            The path to the battery directory, or None if no battery is found.
        """
        for path in self.paths:
            if os.path.exists(path):
                return path
        return None

    def _read_battery_file(self, battery_path: str, filename: str) -> Optional[str]:
        filepath = os.path.join(battery_path, filename)
        try:
            with open(filepath, 'r') as f:
                return f.read().strip()
        except (IOError, OSError):
            return None

    def read(self) -> BatteryStatus:
        """
        Get the current battery status.

        Returns:
            A BatteryStatus, or the unknown sentinel if no battery is readable.
        """
        battery_path = self._find_battery_path()
        if battery_path is None:
            return BatteryStatus.unknown()

        capacity = self._read_battery_file(battery_path, "capacity")
        if capacity is None:
            return BatteryStatus.unknown()
        try:
            percentage = int(capacity)
        except ValueError:
            logger.debug("[BatteryGauge] Unparseable capacity %r in %s", capacity, battery_path)
            return BatteryStatus.unknown()

        # Some firmware reports slightly above 100
        percentage = min(percentage, config.MAX_BATTERY_PERCENT)

        status = self._read_battery_file(battery_path, "status") or "Unknown"
        return BatteryStatus(percentage, status.lower() == "charging")

    def connect(self, callback: StatusCallback) -> None:
        return None

    def disconnect(self) -> None:
        return None


class UPowerBatterySource:
    """Read battery status from the UPower display device."""

    def __init__(self) -> None:
        try:
            import gi
            gi.require_version('UPowerGlib', '1.0')
            from gi.repository import GLib, UPowerGlib
        except (ImportError, ValueError) as exc:
            raise BatterySourceError(f"UPower bindings unavailable: {exc}") from exc

        self._device_state = UPowerGlib.DeviceState
        try:
            self._client = UPowerGlib.Client.new()
        except GLib.Error as exc:
            raise BatterySourceError(f"Could not connect to UPower: {exc.message}") from exc

        self._device = self._client.get_display_device()
        if self._device is None:
            raise BatterySourceError("Failed to get UPower display device")

        self._handler_ids: List[int] = []

    def read(self) -> BatteryStatus:
        props = self._device.props
        if not props.is_present:
            return BatteryStatus.unknown()

        return BatteryStatus(int(math.floor(props.percentage + 0.5)), props.state == self._device_state.CHARGING)

    def connect(self, callback: StatusCallback) -> None:
        """Call callback whenever the device percentage or state changes."""
        for signal in ("notify::percentage", "notify::state"):
            handler_id = self._device.connect(signal, lambda *args: callback())
            self._handler_ids.append(handler_id)

    def disconnect(self) -> None:
        for handler_id in self._handler_ids:
            self._device.disconnect(handler_id)
        self._handler_ids = []


def create_source(backend: str = config.STATUS_BACKEND):
    """
    Build the battery status source for a backend name.

    Args:
        backend: "upower", "sysfs" or "auto" (UPower, falling back to sysfs).

    Returns:
        An object with read(), connect() and disconnect().
    """
    if backend == "sysfs":
        return SysfsBatterySource()
    if backend == "upower":
        return UPowerBatterySource()
    if backend == "auto":
        try:
            return UPowerBatterySource()
        except BatterySourceError as exc:
            logger.warning("[BatteryGauge] %s, reading sysfs instead", exc)
            return SysfsBatterySource()
    raise ValueError(f"Unknown status backend: {backend!r}")
