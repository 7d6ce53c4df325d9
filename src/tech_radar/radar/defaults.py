"""Default quadrants and rings for a new radar, and initial blip offsets."""

from __future__ import annotations

from tech_radar.geometry.collision import RandomSource

DEFAULT_QUADRANTS: tuple[dict, ...] = (
    {"name": "Techniques", "position": 0, "color": "#3b82f6"},
    {"name": "Platforms", "position": 1, "color": "#10b981"},
    {"name": "Tools", "position": 2, "color": "#f59e0b"},
    {"name": "Languages & Frameworks", "position": 3, "color": "#ef4444"},
)

DEFAULT_RINGS: tuple[dict, ...] = (
    {"name": "Adopt", "position": 0, "opacity": 1.0},
    {"name": "Trial", "position": 1, "opacity": 0.75},
    {"name": "Assess", "position": 2, "opacity": 0.5},
    {"name": "Hold", "position": 3, "opacity": 0.25},
)

OFFSET_MIN = 0.2
OFFSET_SPAN = 0.6

BLIP_NAME_MAX = 100
BLIP_DESCRIPTION_MAX = 1000


def random_offsets(rng: RandomSource) -> tuple[float, float]:
    """Return a fresh ``(offset_x, offset_y)`` pair in ``[0.2, 0.8]``."""
    return (
        OFFSET_MIN + rng.random() * OFFSET_SPAN,
        OFFSET_MIN + rng.random() * OFFSET_SPAN,
    )
