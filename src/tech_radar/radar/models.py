"""Radar domain records.

Each record can be built directly in tests or converted from a
:class:`~tech_radar.radar.storage.RadarStorage` row via ``from_row``.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class User:
    id: str
    name: str
    email: str
    password_hash: str

    @classmethod
    def from_row(cls, d: dict) -> User:
        return cls(
            id=d["id"],
            name=d["name"],
            email=d["email"],
            password_hash=d["password_hash"],
        )


@dataclass
class Quadrant:
    """One of the four 90° categories of a radar."""

    id: str
    name: str
    position: int
    """Sector index 0..3; see :mod:`tech_radar.geometry.polar`."""

    color: str
    """Hex colour ``#rrggbb``."""

    radar_id: str = ""

    @classmethod
    def from_row(cls, d: dict) -> Quadrant:
        return cls(
            id=d["id"],
            radar_id=d["radar_id"],
            name=d["name"],
            position=int(d["position"]),
            color=d["color"],
        )


@dataclass
class Ring:
    """A concentric adoption band; position 0 is innermost."""

    id: str
    name: str
    position: int
    opacity: float
    """Segment fill opacity [0.0, 1.0]."""

    radar_id: str = ""

    @classmethod
    def from_row(cls, d: dict) -> Ring:
        return cls(
            id=d["id"],
            radar_id=d["radar_id"],
            name=d["name"],
            position=int(d["position"]),
            opacity=float(d["opacity"]),
        )


@dataclass
class Blip:
    """A plotted technology.

    ``offset_x``/``offset_y`` are assigned once at creation and never edited,
    so the blip keeps its place across renames and description edits.
    """

    id: str
    name: str
    quadrant_id: str
    ring_id: str
    offset_x: float
    """Angular position within the quadrant sector [0.0, 1.0]."""

    offset_y: float
    """Radial position within the ring band [0.0, 1.0]."""

    description: str | None = None
    is_new: bool = True
    radar_id: str = ""
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_row(cls, d: dict) -> Blip:
        return cls(
            id=d["id"],
            radar_id=d["radar_id"],
            quadrant_id=d["quadrant_id"],
            ring_id=d["ring_id"],
            name=d["name"],
            description=d["description"],
            is_new=bool(d["is_new"]),
            offset_x=float(d["offset_x"]),
            offset_y=float(d["offset_y"]),
            created_at=d["created_at"],
            updated_at=d["updated_at"],
        )


@dataclass
class Radar:
    """A named chart owned by one user.

    ``quadrants`` and ``rings`` are ordered by position; ``blips`` are in
    creation order.
    """

    id: str
    user_id: str
    name: str
    description: str | None = None
    created_at: str = ""
    updated_at: str = ""
    quadrants: list[Quadrant] = field(default_factory=list)
    rings: list[Ring] = field(default_factory=list)
    blips: list[Blip] = field(default_factory=list)

    @classmethod
    def from_row(cls, d: dict) -> Radar:
        return cls(
            id=d["id"],
            user_id=d["user_id"],
            name=d["name"],
            description=d["description"],
            created_at=d["created_at"],
            updated_at=d["updated_at"],
        )
