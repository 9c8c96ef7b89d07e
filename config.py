"""
Configuration options for the Battery Gauge Indicator.

This module contains all configurable settings for the gauge indicator
application. Modify these values to customize the behavior.
"""

import os
import sys

# Update interval in seconds (how often to refresh battery status)
UPDATE_INTERVAL: int = 2

# Settings keys
CHARGING_KEY: str = "charging-threshold"
DISCHARGING_KEY: str = "discharging-threshold"

# Default visibility thresholds: the gauge shows below these percentages
DEFAULT_CHARGING_THRESHOLD: int = 80
DEFAULT_DISCHARGING_THRESHOLD: int = 90

# Battery percentage limits
MIN_BATTERY_PERCENT: int = 0
MAX_BATTERY_PERCENT: int = 100
UNKNOWN_PERCENTAGE: int = -1

# Color midpoint: red (0%) -> yellow (this) -> green (100%)
LOW_BATTERY_THRESHOLD: int = 50

# Ring geometry
RING_OUTER_PADDING: float = 2.0
RING_INNER_RATIO: float = 0.9
DEGREES_PER_PERCENT: float = 3.6

# Label and charging glyph
FONT_FACE: str = "Sans"
FONT_SIZE_RATIO: float = 0.33
CHARGING_ICON_SCALE: float = 1.7
CHARGING_ICON_SPACING: float = 1.05
CHARGING_TEXT_OVERLAP: float = 5.0

# Rendered icon size in pixels
INDICATOR_SIZE: int = 22

# Where battery status comes from: "upower", "sysfs" or "auto"
STATUS_BACKEND: str = "auto"

# Battery paths (will try these in order)
BATTERY_PATHS: list = [
    "/sys/class/power_supply/BAT0",
    "/sys/class/power_supply/BAT1",
]

# Files
CONFIG_DIR: str = os.path.expanduser("~/.config/battery-gauge")
SETTINGS_PATH: str = os.path.join(CONFIG_DIR, "settings.json")
ICON_CACHE_DIR: str = os.path.expanduser("~/.cache/battery-gauge")
# Charging glyph: beside the modules in a checkout, under share/ when installed
CHARGING_ICON_CANDIDATES: list = [
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "charging.svg"),
    os.path.join(sys.prefix, "share", "battery-gauge", "charging.svg"),
]
CHARGING_ICON_PATH: str = next(
    (path for path in CHARGING_ICON_CANDIDATES if os.path.exists(path)),
    CHARGING_ICON_CANDIDATES[0],
)
