"""Render-model data structures produced by the layout builder."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field


@dataclass
class Point:
    """A pixel-space position.

    Mutable: the collision resolver moves points in place.
    """

    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        """Euclidean distance to *other*."""
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5


@dataclass
class Segment:
    """The background wedge for one quadrant × ring intersection."""

    quadrant_id: str
    ring_id: str
    quadrant_name: str
    ring_name: str
    path: str
    """SVG path data tracing the closed wedge."""

    color: str
    """Fill colour, taken from the quadrant."""

    opacity: float
    """Fill opacity, taken from the ring."""


@dataclass
class PositionedBlip:
    """A blip with its final on-chart position."""

    id: str
    name: str
    description: str | None
    is_new: bool
    position: Point
    color: str
    quadrant_name: str
    ring_name: str
    index: int
    """1-based display number, stable in input order."""


@dataclass
class Label:
    text: str
    position: Point


@dataclass
class RadarLayout:
    """Complete render model for one radar snapshot.

    Built from scratch on every call to
    :meth:`~tech_radar.geometry.layout.RadarLayoutBuilder.build`.
    """

    size: float
    center: Point
    radius: float
    segments: list[Segment] = field(default_factory=list)
    positioned_blips: list[PositionedBlip] = field(default_factory=list)
    quadrant_labels: list[Label] = field(default_factory=list)
    ring_labels: list[Label] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Return a JSON-serializable dict (recursive via :func:`dataclasses.asdict`)."""
        return dataclasses.asdict(self)
