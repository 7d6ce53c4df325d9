"""Radar geometry, collision resolution and layout."""

from tech_radar.geometry.collision import has_collision, resolve_collisions
from tech_radar.geometry.layout import LayoutConfig, RadarLayoutBuilder, build_layout
from tech_radar.geometry.models import Label, Point, PositionedBlip, RadarLayout, Segment
from tech_radar.geometry.polar import (
    arc_segment_path,
    blip_position,
    degrees_to_radians,
    polar_to_cartesian,
    quadrant_angles,
    quadrant_label_position,
    ring_band,
    ring_label_position,
)

__all__ = [
    "Label",
    "LayoutConfig",
    "Point",
    "PositionedBlip",
    "RadarLayout",
    "RadarLayoutBuilder",
    "Segment",
    "arc_segment_path",
    "blip_position",
    "build_layout",
    "degrees_to_radians",
    "has_collision",
    "polar_to_cartesian",
    "quadrant_angles",
    "quadrant_label_position",
    "resolve_collisions",
    "ring_band",
    "ring_label_position",
]
