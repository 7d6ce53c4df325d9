"""Pairwise repulsion to keep blip markers from overlapping."""

from __future__ import annotations

import logging
import math
import random
from typing import Protocol

from tech_radar.geometry.models import Point

_logger = logging.getLogger(__name__)

_COINCIDENT_DISTANCE = 0.1


class RandomSource(Protocol):
    def random(self) -> float: ...


def has_collision(p1: Point, p2: Point, min_distance: float = 20.0) -> bool:
    """Return True if *p1* and *p2* are strictly closer than *min_distance*."""
    return math.hypot(p1.x - p2.x, p1.y - p2.y) < min_distance


def resolve_collisions(
    points: list[Point],
    min_distance: float = 20.0,
    max_iterations: int = 50,
    rng: RandomSource | None = None,
) -> int:
    """Push colliding points apart, mutating *points* in place.

    Each pass visits every pair once and moves both points of a colliding
    pair by half the overlap, in opposite directions along the line between
    them.  Coincident points have no such line, so a random direction is
    drawn from *rng* instead.

    This is a bounded-effort heuristic: dense clusters may still collide
    after *max_iterations* passes.

    Args:
        points: Positions to separate.  Must not be aliased elsewhere
            during the call.
        min_distance: Required separation in pixels.
        max_iterations: Upper bound on the number of passes.
        rng: Source of the random direction for coincident pairs; defaults
            to a fresh :class:`random.Random`.

    Returns:
        Number of passes performed.
    """
    if rng is None:
        rng = random.Random()

    passes = 0
    collided = False
    for _ in range(max_iterations):
        passes += 1
        collided = False

        for i in range(len(points)):
            for j in range(i + 1, len(points)):
                a, b = points[i], points[j]
                if not has_collision(a, b, min_distance):
                    continue
                collided = True

                dx = b.x - a.x
                dy = b.y - a.y
                distance = math.hypot(dx, dy)

                if distance < _COINCIDENT_DISTANCE:
                    angle = rng.random() * 2 * math.pi
                    push_x = math.cos(angle) * min_distance * 0.5
                    push_y = math.sin(angle) * min_distance * 0.5
                else:
                    overlap = min_distance - distance
                    push_x = dx / distance * overlap * 0.5
                    push_y = dy / distance * overlap * 0.5

                a.x -= push_x
                a.y -= push_y
                b.x += push_x
                b.y += push_y

        if not collided:
            break

    if collided:
        _logger.debug(
            "Collision budget exhausted after %d passes (%d points)", passes, len(points)
        )
    return passes
