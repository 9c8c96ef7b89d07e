"""
Persistent visibility thresholds.

Thresholds live in a small JSON file in the user config directory.
Listeners are notified when a value changes so the indicator can refresh.
"""

import json
import logging
import os
from typing import Callable, Dict, Optional

import config
from visibility import clamp_percentage

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, int] = {
    config.CHARGING_KEY: config.DEFAULT_CHARGING_THRESHOLD,
    config.DISCHARGING_KEY: config.DEFAULT_DISCHARGING_THRESHOLD,
}

ChangeCallback = Callable[[str], None]


class ThresholdSettings:
    """Charging and discharging thresholds backed by a JSON file."""

    def __init__(self, path: Optional[str] = None) -> None:
        self.path: str = path or config.SETTINGS_PATH
        self._values: Dict[str, int] = dict(DEFAULTS)
        self._listeners: Dict[int, ChangeCallback] = {}
        self._next_handler_id: int = 1

    def load(self) -> None:
        """Load thresholds from disk, keeping defaults for anything missing or invalid."""
        self._values = dict(DEFAULTS)
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("[BatteryGauge] Could not read settings %s: %s", self.path, exc)
            return

        if not isinstance(data, dict):
            logger.warning("[BatteryGauge] Ignoring malformed settings file %s", self.path)
            return

        for key in DEFAULTS:
            value = data.get(key)
            if isinstance(value, int) and not isinstance(value, bool):
                self._values[key] = value

    def save(self) -> None:
        """Save current thresholds to the user config directory."""
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(self._values, f, indent=2)

    def get_int(self, key: str) -> int:
        """Raw stored value, which may be out of range."""
        return self._values[key]

    def get_threshold(self, key: str) -> int:
        return clamp_percentage(self.get_int(key))

    @property
    def charging_threshold(self) -> int:
        return self.get_threshold(config.CHARGING_KEY)

    @property
    def discharging_threshold(self) -> int:
        return self.get_threshold(config.DISCHARGING_KEY)

    def set_int(self, key: str, value: int) -> None:
        """
        Store a threshold, persist it, and notify listeners if it changed.

        A failed write is logged; the new value still applies in memory.

        Raises:
            KeyError: If key is not a known threshold.
        """
        if key not in DEFAULTS:
            raise KeyError(key)
        value = int(value)
        if self._values[key] == value:
            return
        self._values[key] = value
        try:
            self.save()
        except OSError as exc:
            logger.warning("[BatteryGauge] Could not save settings %s: %s", self.path, exc)
        for callback in list(self._listeners.values()):
            callback(key)

    def connect(self, callback: ChangeCallback) -> int:
        handler_id = self._next_handler_id
        self._next_handler_id += 1
        self._listeners[handler_id] = callback
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        self._listeners.pop(handler_id, None)
