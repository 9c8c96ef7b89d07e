"""
Visibility policy for the battery gauge.

Decides whether the gauge should be on screen for a status snapshot and
the user's thresholds.
"""

import config
from status import BatteryStatus


def clamp_percentage(value: int) -> int:
    """Clamp a stored threshold to the valid percentage range."""
    return max(config.MIN_BATTERY_PERCENT, min(config.MAX_BATTERY_PERCENT, int(value)))


def should_show(status: BatteryStatus, charging_threshold: int, discharging_threshold: int) -> bool:
    """
    Decide whether the gauge is visible.

    Thresholds must already be clamped; they are used as given.

    Args:
        status: Current battery status snapshot.
        charging_threshold: Show while charging below this percentage.
        discharging_threshold: Show while discharging below this percentage.

    Returns:
        True if the gauge should be shown.
    """
    # Battery info unavailable
    if status.percentage < config.MIN_BATTERY_PERCENT:
        return False

    if status.is_charging:
        return status.percentage < charging_threshold or status.percentage < discharging_threshold

    return status.percentage < discharging_threshold
