"""
Circular battery gauge rendering.

Draws the battery percentage as a colored progress ring with a centered
label and, while charging, a tinted bolt glyph. Color and geometry are
plain functions of the percentage so they can be computed without a
surface.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import cairo

import config
from status import BatteryStatus

logger = logging.getLogger(__name__)

Color = Tuple[float, float, float]

BLACK: Color = (0.0, 0.0, 0.0)
ARC_START_ANGLE: float = -math.pi / 2


def _in_range(percentage: int) -> bool:
    return config.MIN_BATTERY_PERCENT <= percentage <= config.MAX_BATTERY_PERCENT


def gauge_color(percentage: int) -> Color:
    """
    Calculate the gauge color for a battery percentage.
    Red (0%) -> Yellow (50%) -> Green (100%)

    Args:
        percentage: Battery percentage (0-100).

    Returns:
        RGB tuple with components in [0, 1]. Out-of-range input gives black.
    """
    if not _in_range(percentage):
        return BLACK

    midpoint = config.LOW_BATTERY_THRESHOLD
    if percentage <= midpoint:
        return (1.0, percentage / midpoint, 0.0)
    return (1.0 - (percentage - midpoint) / midpoint, 1.0, 0.0)


def arc_sweep(percentage: int) -> float:
    """Filled arc sweep in degrees, 0 for out-of-range input."""
    if not _in_range(percentage):
        return 0.0
    return percentage * config.DEGREES_PER_PERCENT


@dataclass(frozen=True)
class RingGeometry:
    center_x: float
    center_y: float
    outer_radius: float
    inner_radius: float
    start_angle: float
    end_angle: float

    @property
    def sweep(self) -> float:
        """Sweep in radians, clockwise on a y-down surface."""
        return self.end_angle - self.start_angle


def ring_geometry(percentage: int, width: float, height: float,
                  padding: float = config.RING_OUTER_PADDING,
                  inner_ratio: float = config.RING_INNER_RATIO) -> RingGeometry:
    """
    Compute the ring for a percentage on a surface of the given size.

    Args:
        percentage: Battery percentage (0-100).
        width: Surface width in pixels.
        height: Surface height in pixels.
        padding: Gap between the surface edge and the outer radius.
        inner_ratio: Inner radius as a fraction of the outer radius.

    Returns:
        The RingGeometry, with a zero sweep for out-of-range input.
    """
    outer_radius = max(0.0, min(width, height) / 2 - padding)
    end_angle = ARC_START_ANGLE + math.radians(arc_sweep(percentage))
    return RingGeometry(
        center_x=width / 2,
        center_y=height / 2,
        outer_radius=outer_radius,
        inner_radius=outer_radius * inner_ratio,
        start_angle=ARC_START_ANGLE,
        end_angle=end_angle,
    )


@dataclass(frozen=True)
class GaugeLayout:
    """What render_gauge put on the surface."""

    geometry: RingGeometry
    color: Color
    text_x: float
    text_y: float
    font_size: int
    glyph_drawn: bool
    drawn: bool
    glyph_x: Optional[float] = None


def load_charging_glyph(path: str) -> Optional[cairo.ImageSurface]:
    """
    Rasterize the charging SVG into an image surface.

    Args:
        path: Path to the SVG file.

    Returns:
        The rendered surface, or None if the file can't be loaded.
    """
    try:
        import gi
        gi.require_foreign('cairo')
        gi.require_version('Rsvg', '2.0')
        from gi.repository import Rsvg

        handle = Rsvg.Handle.new_from_file(path)
        if handle is None:
            raise ValueError(f"Failed to load SVG from {path}")

        dimensions = handle.get_dimensions()
        surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, dimensions.width, dimensions.height)
        context = cairo.Context(surface)
        handle.render_cairo(context)
        return surface
    except Exception as exc:
        logger.warning("[BatteryGauge] Failed to load charging icon %s: %s", path, exc)
        return None


def tint_surface(surface: cairo.ImageSurface, color: Color) -> cairo.ImageSurface:
    """Paint a flat color through the alpha channel of surface."""
    tinted = cairo.ImageSurface(cairo.FORMAT_ARGB32, surface.get_width(), surface.get_height())
    context = cairo.Context(tinted)
    context.set_source_surface(surface, 0, 0)
    context.paint()
    context.set_operator(cairo.OPERATOR_IN)
    context.set_source_rgb(*color)
    context.paint()
    return tinted


class GlyphCache:
    """
    Tinted charging glyph, recomputed whenever the gauge color changes.

    A glyph that failed to load stays failed, so the failure is logged once.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._glyph: Optional[cairo.ImageSurface] = None
        self._load_failed = False
        self._tinted: Dict[Color, cairo.ImageSurface] = {}

    def get(self, color: Color) -> Optional[cairo.ImageSurface]:
        if self._load_failed:
            return None
        if self._glyph is None:
            self._glyph = load_charging_glyph(self.path)
            if self._glyph is None:
                self._load_failed = True
                return None
        if color not in self._tinted:
            self._tinted = {color: tint_surface(self._glyph, color)}
        return self._tinted[color]

    def clear(self) -> None:
        self._glyph = None
        self._load_failed = False
        self._tinted = {}


def _clear(context: cairo.Context) -> None:
    context.save()
    context.set_source_rgba(0, 0, 0, 0)
    context.set_operator(cairo.OPERATOR_CLEAR)
    context.paint()
    context.restore()
    context.set_operator(cairo.OPERATOR_OVER)


def _draw_ring(context: cairo.Context, geometry: RingGeometry) -> None:
    if geometry.sweep <= 0 or geometry.outer_radius <= 0:
        return
    cx, cy = geometry.center_x, geometry.center_y
    context.new_path()
    context.arc(cx, cy, geometry.outer_radius, geometry.start_angle, geometry.end_angle)
    context.arc_negative(cx, cy, geometry.inner_radius, geometry.end_angle, geometry.start_angle)
    context.close_path()
    context.fill()


def _draw_charging_glyph(context: cairo.Context, glyph: cairo.ImageSurface,
                         center_x: float, center_y: float,
                         text_width: float, text_height: float) -> Tuple[float, float]:
    """
    Draw the glyph left of the label, centering glyph and label together.

    Returns:
        The glyph X position and the new X position for the label.
    """
    glyph_width = glyph.get_width()
    glyph_height = glyph.get_height()

    scale = (text_height * config.CHARGING_ICON_SCALE) / glyph_height
    scaled_width = glyph_width * scale
    scaled_height = glyph_height * scale

    icon_x = center_x - config.CHARGING_ICON_SPACING * (text_width + scaled_width) / 2
    icon_y = center_y - scaled_height / 2

    context.save()
    context.scale(scale, scale)
    context.set_source_surface(glyph, icon_x / scale, icon_y / scale)
    context.paint()
    context.restore()

    return icon_x, icon_x + scaled_width - config.CHARGING_TEXT_OVERLAP


def render_gauge(context: cairo.Context, status: BatteryStatus, width: float, height: float,
                 glyph: Optional[cairo.ImageSurface] = None) -> GaugeLayout:
    """
    Draw the battery gauge onto a cairo context.

    Args:
        context: Target cairo context; the surface is cleared first.
        status: Battery status to draw.
        width: Surface width in pixels.
        height: Surface height in pixels.
        glyph: Charging glyph already tinted to the gauge color, or None.

    Returns:
        A GaugeLayout describing what was drawn. Unavailable status draws
        nothing and returns drawn=False.
    """
    _clear(context)

    color = gauge_color(status.percentage)
    geometry = ring_geometry(status.percentage, width, height)
    font_size = int(round(height * config.FONT_SIZE_RATIO))

    if not status.is_available:
        return GaugeLayout(geometry, color, geometry.center_x, geometry.center_y,
                           font_size, glyph_drawn=False, drawn=False)

    context.set_source_rgb(*color)
    _draw_ring(context, geometry)

    context.select_font_face(config.FONT_FACE, cairo.FONT_SLANT_NORMAL, cairo.FONT_WEIGHT_BOLD)
    context.set_font_size(font_size)

    text = str(status.percentage)
    extents = context.text_extents(text)
    text_x = geometry.center_x - extents.width / 2
    text_y = geometry.center_y + extents.height / 2

    glyph_x = None
    if status.is_charging and glyph is not None and extents.height > 0 and glyph.get_height() > 0:
        glyph_x, text_x = _draw_charging_glyph(context, glyph, geometry.center_x, geometry.center_y,
                                              extents.width, extents.height)

    context.set_source_rgb(*color)
    context.move_to(text_x, text_y)
    context.show_text(text)
    context.new_path()

    return GaugeLayout(geometry, color, text_x, text_y, font_size,
                       glyph_drawn=glyph_x is not None, drawn=True, glyph_x=glyph_x)


class GaugeRenderer:
    """Render gauges with a cached, tinted charging glyph."""

    def __init__(self, glyph_path: str = config.CHARGING_ICON_PATH) -> None:
        self.glyphs = GlyphCache(glyph_path)

    def render(self, context: cairo.Context, status: BatteryStatus,
               width: float, height: float) -> GaugeLayout:
        glyph = None
        if status.is_available and status.is_charging:
            glyph = self.glyphs.get(gauge_color(status.percentage))
        return render_gauge(context, status, width, height, glyph)

    def render_to_png(self, status: BatteryStatus, size: int, path: str) -> GaugeLayout:
        """Render a size x size gauge and write it to a PNG file."""
        surface = cairo.ImageSurface(cairo.FORMAT_ARGB32, size, size)
        context = cairo.Context(surface)
        layout = self.render(context, status, size, size)
        surface.flush()
        surface.write_to_png(path)
        return layout
