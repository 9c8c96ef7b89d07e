"""
Indicator lifecycle.

IndicatorContext owns every external handle (status source, settings,
view, timer) between enable() and disable(). The periodic timer and the
change notifications all feed the same update() call.
"""

import logging
from typing import Optional

from gi.repository import GLib

import config
from settings import ThresholdSettings
from status import BatterySourceError, BatteryStatus
from visibility import should_show

logger = logging.getLogger(__name__)


class IndicatorContext:
    """
    Wire a battery status source and threshold settings to a gauge view.

    The view must provide update(status), show(), hide() and destroy().
    """

    def __init__(self, source, settings: ThresholdSettings, view,
                 interval: int = config.UPDATE_INTERVAL) -> None:
        self.source = source
        self.settings = settings
        self.view = view
        self.interval: int = interval
        self.update_source_id: Optional[int] = None
        self._settings_handler_id: Optional[int] = None
        self.enabled: bool = False

    def enable(self) -> None:
        """Connect signals, do an initial update and start the update timer."""
        if self.enabled:
            return
        self.enabled = True

        self.source.connect(self.update)
        self._settings_handler_id = self.settings.connect(lambda key: self.update())

        self.update()
        self._setup_update_timer()
        logger.debug("[BatteryGauge] Indicator enabled")

    def _setup_update_timer(self) -> None:
        """Set up the GLib timer for periodic updates."""
        self._stop_update_timer()
        self.update_source_id = GLib.timeout_add_seconds(self.interval, self._periodic_update)

    def _stop_update_timer(self) -> None:
        if self.update_source_id is not None:
            GLib.source_remove(self.update_source_id)
            self.update_source_id = None

    def _periodic_update(self) -> bool:
        """
        Periodic update callback.

        Returns:
            GLib.SOURCE_CONTINUE to keep the timeout running.
        """
        self.update()
        return GLib.SOURCE_CONTINUE

    def _read_status(self) -> BatteryStatus:
        try:
            return self.source.read()
        except (BatterySourceError, OSError, GLib.Error) as exc:
            logger.warning("[BatteryGauge] Could not read battery status: %s", exc)
            return BatteryStatus.unknown()

    def update(self) -> bool:
        """
        Refresh the gauge and its visibility.

        Returns:
            Whether the gauge is now shown.
        """
        if self.view is None:
            return False

        status = self._read_status()

        # Hide indicator if battery info unavailable
        if not status.is_available:
            self.view.hide()
            return False

        self.view.update(status)

        visible = should_show(status, self.settings.charging_threshold,
                              self.settings.discharging_threshold)
        if visible:
            self.view.show()
        else:
            self.view.hide()
        return visible

    def disable(self) -> None:
        """Stop the timer, disconnect signals and destroy the view."""
        self._stop_update_timer()

        if self.source is not None:
            self.source.disconnect()
        if self.settings is not None and self._settings_handler_id is not None:
            self.settings.disconnect(self._settings_handler_id)
            self._settings_handler_id = None

        if self.view is not None:
            self.view.hide()
            self.view.destroy()

        self.view = None
        self.source = None
        self.settings = None
        self.enabled = False
        logger.debug("[BatteryGauge] Indicator disabled")
