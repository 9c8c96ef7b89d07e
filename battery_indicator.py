#!/usr/bin/env python3
"""
Battery Gauge Indicator

A system tray battery indicator for Linux using GTK3 and AppIndicator3.
Draws the battery percentage as a colored ring and only shows itself
below user-configured thresholds.
"""

import logging
import os
import sys
from typing import Callable, Optional

import cairo
import gi
gi.require_version('Gtk', '3.0')
gi.require_version('AppIndicator3', '0.1')
gi.require_version('Gdk', '3.0')
from gi.repository import Gtk, AppIndicator3, Gdk

import config
from controller import IndicatorContext
from gauge import GaugeRenderer
from settings import ThresholdSettings
from status import BatterySourceError, BatteryStatus, create_source

logger = logging.getLogger(__name__)


# CSS for the menu and thresholds dialog, respecting the system theme
MENU_CSS = """
.battery-header {
    font-weight: bold;
    font-size: 1.1em;
    padding: 8px 12px;
}
.battery-status {
    padding: 4px 12px;
    font-size: 0.95em;
}
.threshold-title {
    font-weight: 500;
}
.threshold-subtitle {
    font-size: 0.9em;
    opacity: 0.7;
}
"""


class TrayGaugeView:
    """
    Tray icon showing the rendered gauge, with a menu for thresholds.
    """

    def __init__(self, settings: ThresholdSettings, renderer: Optional[GaugeRenderer] = None,
                 size: int = config.INDICATOR_SIZE) -> None:
        """Initialize the tray icon, hidden until the first update."""
        self.settings = settings
        self.renderer = renderer or GaugeRenderer()
        self.size = size
        self.refresh_callback: Optional[Callable[[], None]] = None
        self._icon_index: int = 0

        os.makedirs(config.ICON_CACHE_DIR, exist_ok=True)

        # Apply CSS styling
        self._apply_css()

        # Create the indicator
        self.indicator = AppIndicator3.Indicator.new(
            "battery-gauge",
            "battery-missing-symbolic",
            AppIndicator3.IndicatorCategory.HARDWARE
        )
        self.indicator.set_status(AppIndicator3.IndicatorStatus.PASSIVE)

        # Build the menu
        self.menu = self._build_menu()
        self.indicator.set_menu(self.menu)

    def _apply_css(self) -> None:
        """Apply CSS styling to the application."""
        css_provider = Gtk.CssProvider()
        css_provider.load_from_data(MENU_CSS.encode())
        Gtk.StyleContext.add_provider_for_screen(
            Gdk.Screen.get_default(),
            css_provider,
            Gtk.STYLE_PROVIDER_PRIORITY_APPLICATION
        )

    def _build_menu(self) -> Gtk.Menu:
        """
        Build the dropdown menu for the indicator.

        Returns:
            A Gtk.Menu with battery information and controls.
        """
        menu = Gtk.Menu()

        # Battery percentage header
        self.header_item = Gtk.MenuItem()
        self.header_label = Gtk.Label(label="---%")
        self.header_label.set_halign(Gtk.Align.START)
        self.header_label.get_style_context().add_class("battery-header")
        self.header_item.add(self.header_label)
        self.header_item.set_sensitive(False)
        menu.append(self.header_item)

        # Charging state
        self.status_item = Gtk.MenuItem()
        self.status_label = Gtk.Label(label="Unknown")
        self.status_label.set_halign(Gtk.Align.START)
        self.status_label.get_style_context().add_class("battery-status")
        self.status_item.add(self.status_label)
        self.status_item.set_sensitive(False)
        menu.append(self.status_item)

        menu.append(Gtk.SeparatorMenuItem())

        thresholds_item = Gtk.MenuItem(label="Thresholds…")
        thresholds_item.connect("activate", self._on_thresholds_clicked)
        menu.append(thresholds_item)

        refresh_item = Gtk.MenuItem(label="Refresh")
        refresh_item.connect("activate", self._on_refresh_clicked)
        menu.append(refresh_item)

        menu.append(Gtk.SeparatorMenuItem())

        quit_item = Gtk.MenuItem(label="Quit")
        quit_item.connect("activate", self._on_quit_clicked)
        menu.append(quit_item)

        menu.show_all()
        return menu

    def _icon_path(self) -> str:
        # Alternate file names so the indicator sees a new icon each update
        self._icon_index = 1 - self._icon_index
        return os.path.join(config.ICON_CACHE_DIR, f"gauge-{self._icon_index}.png")

    def update(self, status: BatteryStatus) -> None:
        """Render the gauge for status and use it as the tray icon."""
        path = self._icon_path()
        try:
            self.renderer.render_to_png(status, self.size, path)
        except (cairo.Error, OSError) as exc:
            logger.error("[BatteryGauge] Could not render gauge icon: %s", exc)
            return

        description = f"Battery {status.percentage}%"
        self.indicator.set_icon_full(path, description)
        self.indicator.set_title(description)

        self.header_label.set_text(f"{status.percentage}%")
        self.status_label.set_text("Charging" if status.is_charging else "On Battery")

    def show(self) -> None:
        self.indicator.set_status(AppIndicator3.IndicatorStatus.ACTIVE)

    def hide(self) -> None:
        self.indicator.set_status(AppIndicator3.IndicatorStatus.PASSIVE)

    def destroy(self) -> None:
        """Clean up the rendered icon files."""
        for index in (0, 1):
            path = os.path.join(config.ICON_CACHE_DIR, f"gauge-{index}.png")
            if os.path.exists(path):
                try:
                    os.remove(path)
                except OSError as exc:
                    logger.debug("[BatteryGauge] Could not remove %s: %s", path, exc)
        self.renderer.glyphs.clear()

    def _add_threshold_row(self, grid: Gtk.Grid, row: int, key: str,
                           title: str, subtitle: str) -> None:
        """Add a labelled 0-100 slider bound to a threshold setting."""
        title_label = Gtk.Label(label=title)
        title_label.set_halign(Gtk.Align.START)
        title_label.get_style_context().add_class("threshold-title")
        grid.attach(title_label, 0, row * 2, 1, 1)

        subtitle_label = Gtk.Label(label=subtitle)
        subtitle_label.set_halign(Gtk.Align.START)
        subtitle_label.get_style_context().add_class("threshold-subtitle")
        grid.attach(subtitle_label, 0, row * 2 + 1, 1, 1)

        adjustment = Gtk.Adjustment(
            value=self.settings.get_threshold(key),
            lower=config.MIN_BATTERY_PERCENT,
            upper=config.MAX_BATTERY_PERCENT,
            step_increment=1,
            page_increment=10,
        )
        scale = Gtk.Scale(orientation=Gtk.Orientation.HORIZONTAL, adjustment=adjustment)
        scale.set_digits(0)
        scale.set_hexpand(True)
        scale.set_value_pos(Gtk.PositionType.RIGHT)
        scale.connect("value-changed", lambda s: self.settings.set_int(key, round(s.get_value())))
        grid.attach(scale, 1, row * 2, 1, 2)

    def _on_thresholds_clicked(self, widget: Gtk.MenuItem) -> None:
        """Open the thresholds dialog. Changes apply as the sliders move."""
        dialog = Gtk.Dialog(title="Battery Thresholds", transient_for=None, flags=0)
        dialog.add_button("Close", Gtk.ResponseType.CLOSE)
        dialog.set_default_size(650, 220)

        content = dialog.get_content_area()
        grid = Gtk.Grid(column_spacing=12, row_spacing=4)
        grid.set_border_width(12)
        content.add(grid)

        self._add_threshold_row(grid, 0, config.CHARGING_KEY, "Charging Threshold",
                                "Show indicator when charging below this percentage")
        self._add_threshold_row(grid, 1, config.DISCHARGING_KEY, "Discharging Threshold",
                                "Show indicator when battery is below this percentage")

        dialog.show_all()
        dialog.run()
        dialog.destroy()

    def _on_refresh_clicked(self, widget: Gtk.MenuItem) -> None:
        """Handle refresh button click."""
        if self.refresh_callback is not None:
            self.refresh_callback()

    def _on_quit_clicked(self, widget: Gtk.MenuItem) -> None:
        """Handle quit button click."""
        Gtk.main_quit()


def main() -> None:
    """Main entry point for the battery gauge application."""
    logging.basicConfig(
        level=logging.DEBUG if os.environ.get('BATTERY_GAUGE_DEBUG') else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Check if running on a system with a display
    if not os.environ.get('DISPLAY') and not os.environ.get('WAYLAND_DISPLAY'):
        logger.error("No display server found. This application requires X11 or Wayland.")
        sys.exit(1)

    try:
        source = create_source(config.STATUS_BACKEND)
    except BatterySourceError as exc:
        logger.error("[BatteryGauge] %s", exc)
        sys.exit(1)

    settings = ThresholdSettings()
    settings.load()

    view = TrayGaugeView(settings)
    context = IndicatorContext(source, settings, view)
    view.refresh_callback = context.update

    context.enable()
    try:
        Gtk.main()
    except KeyboardInterrupt:
        logger.info("Exiting...")
    finally:
        context.disable()


if __name__ == "__main__":
    main()
