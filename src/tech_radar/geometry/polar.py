"""Polar geometry for the radar chart.

The chart is a full circle centred at ``(cx, cy)`` with radius ``R``.
Angles are degrees, counter-clockwise from 3 o'clock.  Screen Y grows
downward, so ``y = cy - r * sin(angle)``.

Quadrant sectors::

    position 0:   0° –  90°   (top-right)
    position 1:  90° – 180°   (top-left)
    position 2: 180° – 270°   (bottom-left)
    position 3: 270° – 360°   (bottom-right)

Ring 0 is innermost; ring *r* of *N* owns the band ``[r/N, (r+1)/N] * R``.
"""

from __future__ import annotations

import math

from tech_radar.geometry.models import Point

QUADRANT_SPAN_DEG = 90.0

DEFAULT_ANGLE_PADDING = 5.0
"""Degrees trimmed from each side of a sector when placing blips."""

DEFAULT_RADIAL_PADDING = 0.1
"""Fraction of a ring's width trimmed from each side when placing blips."""


def degrees_to_radians(deg: float) -> float:
    return deg * math.pi / 180.0


def polar_to_cartesian(cx: float, cy: float, radius: float, angle_deg: float) -> Point:
    """Convert ``(radius, angle_deg)`` around ``(cx, cy)`` to a screen :class:`Point`."""
    if radius == 0:
        return Point(cx, cy)
    rad = degrees_to_radians(angle_deg)
    return Point(cx + radius * math.cos(rad), cy - radius * math.sin(rad))


def quadrant_angles(position: int) -> tuple[float, float]:
    """Return ``(start_angle, end_angle)`` of the sector for quadrant *position*."""
    start = position * QUADRANT_SPAN_DEG
    return start, start + QUADRANT_SPAN_DEG


def ring_band(position: int, total_radius: float, ring_count: int) -> tuple[float, float]:
    """Return ``(inner_radius, outer_radius)`` for ring *position*.

    Raises:
        ValueError: If *ring_count* is less than 1.
    """
    if ring_count < 1:
        raise ValueError("ring_count must be >= 1")
    step = total_radius / ring_count
    return position * step, (position + 1) * step


def _fmt(value: float) -> str:
    return f"{value:.2f}"


def arc_segment_path(
    cx: float,
    cy: float,
    inner_radius: float,
    outer_radius: float,
    start_angle: float,
    end_angle: float,
) -> str:
    """Build SVG path data for the wedge between two radii and two angles.

    With ``inner_radius == 0`` the wedge is a pie slice drawn from the
    centre.  Otherwise the outer arc is traced in one direction and the
    inner arc back in the other, closing the annular segment.
    """
    large_arc = 1 if end_angle - start_angle > 180 else 0
    outer_start = polar_to_cartesian(cx, cy, outer_radius, start_angle)
    outer_end = polar_to_cartesian(cx, cy, outer_radius, end_angle)
    r_out = _fmt(outer_radius)

    if inner_radius == 0:
        return " ".join([
            f"M {_fmt(cx)} {_fmt(cy)}",
            f"L {_fmt(outer_start.x)} {_fmt(outer_start.y)}",
            f"A {r_out} {r_out} 0 {large_arc} 0 {_fmt(outer_end.x)} {_fmt(outer_end.y)}",
            "Z",
        ])

    inner_start = polar_to_cartesian(cx, cy, inner_radius, start_angle)
    inner_end = polar_to_cartesian(cx, cy, inner_radius, end_angle)
    r_in = _fmt(inner_radius)
    return " ".join([
        f"M {_fmt(outer_start.x)} {_fmt(outer_start.y)}",
        f"A {r_out} {r_out} 0 {large_arc} 0 {_fmt(outer_end.x)} {_fmt(outer_end.y)}",
        f"L {_fmt(inner_end.x)} {_fmt(inner_end.y)}",
        f"A {r_in} {r_in} 0 {large_arc} 1 {_fmt(inner_start.x)} {_fmt(inner_start.y)}",
        "Z",
    ])


def blip_position(
    cx: float,
    cy: float,
    total_radius: float,
    quadrant_position: int,
    ring_position: int,
    offset_x: float,
    offset_y: float,
    ring_count: int = 4,
    angle_padding: float = DEFAULT_ANGLE_PADDING,
    radial_padding: float = DEFAULT_RADIAL_PADDING,
) -> Point:
    """Map a blip's normalized offsets to a point inside its segment.

    Args:
        offset_x: Angular position in the sector, 0 = start, 1 = end.
        offset_y: Radial position in the ring, 0 = inner edge, 1 = outer edge.

    Both offsets are mapped onto the padded sector/band, so even 0 and 1
    keep the marker clear of the segment boundary.
    """
    start_angle, end_angle = quadrant_angles(quadrant_position)
    inner, outer = ring_band(ring_position, total_radius, ring_count)

    span = outer - inner
    padded_inner = inner + span * radial_padding
    padded_outer = outer - span * radial_padding
    radius = padded_inner + offset_y * (padded_outer - padded_inner)

    padded_start = start_angle + angle_padding
    padded_end = end_angle - angle_padding
    angle = padded_start + offset_x * (padded_end - padded_start)

    return polar_to_cartesian(cx, cy, radius, angle)


def quadrant_label_position(
    cx: float,
    cy: float,
    total_radius: float,
    quadrant_position: int,
    distance_factor: float = 1.3,
) -> Point:
    """Label point outside the outermost ring, at the sector's mid-angle."""
    start_angle, end_angle = quadrant_angles(quadrant_position)
    return polar_to_cartesian(
        cx, cy, total_radius * distance_factor, (start_angle + end_angle) / 2
    )


def ring_label_position(
    cx: float,
    cy: float,
    total_radius: float,
    ring_position: int,
    ring_count: int = 4,
    angle: float = 45.0,
) -> Point:
    """Label point at the ring's radial midpoint along a fixed diagonal."""
    inner, outer = ring_band(ring_position, total_radius, ring_count)
    return polar_to_cartesian(cx, cy, (inner + outer) / 2, angle)
