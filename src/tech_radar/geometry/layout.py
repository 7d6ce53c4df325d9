"""Radar layout assembly: segments, positioned blips and labels.

Composes :mod:`tech_radar.geometry.polar` and
:mod:`tech_radar.geometry.collision` into the render model consumed by the
SVG templates and the JSON layout endpoint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tech_radar.geometry.collision import RandomSource, resolve_collisions
from tech_radar.geometry.models import Label, Point, PositionedBlip, RadarLayout, Segment
from tech_radar.geometry.polar import (
    arc_segment_path,
    blip_position,
    quadrant_angles,
    quadrant_label_position,
    ring_band,
    ring_label_position,
)

if TYPE_CHECKING:
    from tech_radar.radar.models import Blip, Quadrant, Ring

_logger = logging.getLogger(__name__)


@dataclass
class LayoutConfig:
    """Presentation tuning values.

    The defaults suit markers of ~14 px on an 800 × 800 canvas.
    """

    canvas_size: float = 800.0
    radius_ratio: float = 0.8
    """Fraction of the half-canvas used by the rings; the rest holds labels."""

    min_distance: float = 20.0
    max_iterations: int = 50
    angle_padding: float = 5.0
    radial_padding: float = 0.1
    quadrant_label_factor: float = 1.3
    ring_label_angle: float = 45.0
    fallback_color: str = "#888888"


class RadarLayoutBuilder:
    """Build a :class:`RadarLayout` from quadrants, rings and blips.

    Args:
        config: Tuning values; defaults to :class:`LayoutConfig`.
        rng: Randomness for separating coincident blips.  Pass a seeded
            :class:`random.Random` for reproducible layouts.
    """

    def __init__(
        self,
        config: LayoutConfig | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        self.config = config or LayoutConfig()
        self._rng = rng

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(
        self,
        quadrants: list[Quadrant],
        rings: list[Ring],
        blips: list[Blip],
        canvas_size: float | None = None,
    ) -> RadarLayout:
        """Compute the full render model.

        Blips referencing an unknown quadrant or ring are drawn at position
        0 with the fallback colour instead of failing the render.
        """
        cfg = self.config
        size = float(canvas_size if canvas_size is not None else cfg.canvas_size)
        cx = cy = size / 2
        radius = size / 2 * cfg.radius_ratio
        ring_count = max(len(rings), 1)

        layout = RadarLayout(size=size, center=Point(cx, cy), radius=radius)
        layout.segments = self._segments(cx, cy, radius, quadrants, rings)
        layout.positioned_blips = self._blips(cx, cy, radius, ring_count, quadrants, rings, blips)

        resolve_collisions(
            [b.position for b in layout.positioned_blips],
            min_distance=cfg.min_distance,
            max_iterations=cfg.max_iterations,
            rng=self._rng,
        )

        layout.quadrant_labels = [
            Label(
                text=q.name,
                position=quadrant_label_position(
                    cx, cy, radius, q.position, cfg.quadrant_label_factor
                ),
            )
            for q in quadrants
        ]
        layout.ring_labels = [
            Label(
                text=r.name,
                position=ring_label_position(
                    cx, cy, radius, r.position, ring_count, cfg.ring_label_angle
                ),
            )
            for r in rings
        ]

        _logger.debug(
            "Built layout: %d segments, %d blips, size %.0f",
            len(layout.segments),
            len(layout.positioned_blips),
            size,
        )
        return layout

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _segments(
        self,
        cx: float,
        cy: float,
        radius: float,
        quadrants: list[Quadrant],
        rings: list[Ring],
    ) -> list[Segment]:
        segments: list[Segment] = []
        for q in quadrants:
            start_angle, end_angle = quadrant_angles(q.position)
            for r in rings:
                inner, outer = ring_band(r.position, radius, len(rings))
                segments.append(Segment(
                    quadrant_id=q.id,
                    ring_id=r.id,
                    quadrant_name=q.name,
                    ring_name=r.name,
                    path=arc_segment_path(cx, cy, inner, outer, start_angle, end_angle),
                    color=q.color,
                    opacity=r.opacity,
                ))
        return segments

    def _blips(
        self,
        cx: float,
        cy: float,
        radius: float,
        ring_count: int,
        quadrants: list[Quadrant],
        rings: list[Ring],
        blips: list[Blip],
    ) -> list[PositionedBlip]:
        cfg = self.config
        quadrant_map = {q.id: q for q in quadrants}
        ring_map = {r.id: r for r in rings}

        result: list[PositionedBlip] = []
        for idx, blip in enumerate(blips, start=1):
            quadrant = quadrant_map.get(blip.quadrant_id)
            ring = ring_map.get(blip.ring_id)
            if quadrant is None or ring is None:
                _logger.warning(
                    "Blip %s references unknown quadrant/ring (%s, %s); using defaults",
                    blip.id,
                    blip.quadrant_id,
                    blip.ring_id,
                )

            position = blip_position(
                cx,
                cy,
                radius,
                quadrant.position if quadrant else 0,
                ring.position if ring else 0,
                blip.offset_x,
                blip.offset_y,
                ring_count,
                angle_padding=cfg.angle_padding,
                radial_padding=cfg.radial_padding,
            )
            result.append(PositionedBlip(
                id=blip.id,
                name=blip.name,
                description=blip.description,
                is_new=blip.is_new,
                position=position,
                color=quadrant.color if quadrant else cfg.fallback_color,
                quadrant_name=quadrant.name if quadrant else "",
                ring_name=ring.name if ring else "",
                index=idx,
            ))
        return result


def build_layout(
    quadrants: list[Quadrant],
    rings: list[Ring],
    blips: list[Blip],
    canvas_size: float = 800.0,
    rng: RandomSource | None = None,
) -> RadarLayout:
    """Shortcut for ``RadarLayoutBuilder(rng=rng).build(...)`` with default tuning."""
    return RadarLayoutBuilder(rng=rng).build(quadrants, rings, blips, canvas_size)
