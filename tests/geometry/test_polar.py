"""Tests for polar coordinate helpers and segment path data."""

from __future__ import annotations

import math

import pytest

from tech_radar.geometry.models import Point
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

CX = CY = 400.0
RADIUS = 320.0


def _polar_of(p: Point, cx: float = CX, cy: float = CY) -> tuple[float, float]:
    """Return ``(radius, angle_deg in [0, 360))`` of *p* around the centre."""
    dx = p.x - cx
    dy = cy - p.y
    return math.hypot(dx, dy), math.degrees(math.atan2(dy, dx)) % 360.0


# ---------------------------------------------------------------------------
# polar_to_cartesian
# ---------------------------------------------------------------------------

class TestPolarToCartesian:
    def test_zero_radius_returns_centre_for_any_angle(self):
        for angle in (0.0, 37.0, 180.0, 359.0):
            assert polar_to_cartesian(100.0, 50.0, 0.0, angle) == Point(100.0, 50.0)

    def test_zero_degrees_points_right(self):
        p = polar_to_cartesian(0.0, 0.0, 10.0, 0.0)
        assert p.x == pytest.approx(10.0)
        assert p.y == pytest.approx(0.0)

    def test_ninety_degrees_points_up_on_screen(self):
        p = polar_to_cartesian(0.0, 0.0, 10.0, 90.0)
        assert p.x == pytest.approx(0.0, abs=1e-9)
        assert p.y == pytest.approx(-10.0)

    def test_degrees_to_radians(self):
        assert degrees_to_radians(180.0) == pytest.approx(math.pi)


# ---------------------------------------------------------------------------
# Sectors and bands
# ---------------------------------------------------------------------------

class TestSectorsAndBands:
    @pytest.mark.parametrize(
        "position, expected",
        [(0, (0.0, 90.0)), (1, (90.0, 180.0)), (2, (180.0, 270.0)), (3, (270.0, 360.0))],
    )
    def test_quadrant_angles(self, position, expected):
        assert quadrant_angles(position) == expected

    def test_ring_band_splits_radius_evenly(self):
        assert ring_band(0, 100.0, 4) == (0.0, 25.0)
        assert ring_band(1, 100.0, 4) == (25.0, 50.0)
        assert ring_band(3, 100.0, 4) == (75.0, 100.0)

    def test_ring_band_rejects_zero_rings(self):
        with pytest.raises(ValueError):
            ring_band(0, 100.0, 0)


# ---------------------------------------------------------------------------
# arc_segment_path
# ---------------------------------------------------------------------------

class TestArcSegmentPath:
    def test_pie_slice_starts_at_centre(self):
        path = arc_segment_path(100.0, 100.0, 0.0, 50.0, 0.0, 90.0)
        assert path == "M 100.00 100.00 L 150.00 100.00 A 50.00 50.00 0 0 0 100.00 50.00 Z"

    def test_annulus_traces_outer_then_inner_arc(self):
        path = arc_segment_path(100.0, 100.0, 25.0, 50.0, 0.0, 90.0)
        assert path == (
            "M 150.00 100.00 "
            "A 50.00 50.00 0 0 0 100.00 50.00 "
            "L 100.00 75.00 "
            "A 25.00 25.00 0 0 1 125.00 100.00 Z"
        )

    def test_large_arc_flag_set_above_180_degrees(self):
        path = arc_segment_path(100.0, 100.0, 0.0, 50.0, 0.0, 270.0)
        assert " 0 1 0 " in path

    def test_quarter_sector_uses_small_arc(self):
        path = arc_segment_path(400.0, 400.0, 80.0, 160.0, 90.0, 180.0)
        assert path.count(" 0 0 0 ") == 1
        assert path.count(" 0 0 1 ") == 1
        assert path.endswith("Z")


# ---------------------------------------------------------------------------
# blip_position
# ---------------------------------------------------------------------------

class TestBlipPosition:
    def test_centre_offsets_land_mid_segment(self):
        p = blip_position(CX, CY, RADIUS, 0, 0, 0.5, 0.5, ring_count=4)
        expected = polar_to_cartesian(CX, CY, 40.0, 45.0)
        assert p.x == pytest.approx(expected.x)
        assert p.y == pytest.approx(expected.y)

    def test_extreme_offsets_stay_inside_padding(self):
        low = blip_position(CX, CY, RADIUS, 1, 2, 0.0, 0.0, ring_count=4)
        high = blip_position(CX, CY, RADIUS, 1, 2, 1.0, 1.0, ring_count=4)
        # ring 2 of 4 on R=320 is [160, 240]; padded to [168, 232]
        assert _polar_of(low) == pytest.approx((168.0, 95.0))
        assert _polar_of(high) == pytest.approx((232.0, 175.0))

    def test_every_position_falls_inside_its_segment(self):
        offsets = [0.0, 0.2, 0.5, 0.8, 1.0]
        for q in range(4):
            start, end = quadrant_angles(q)
            for r in range(4):
                inner, outer = ring_band(r, RADIUS, 4)
                for ox in offsets:
                    for oy in offsets:
                        p = blip_position(CX, CY, RADIUS, q, r, ox, oy, ring_count=4)
                        dist, angle = _polar_of(p)
                        assert inner < dist < outer
                        assert start < angle < end

    def test_custom_padding(self):
        p = blip_position(
            CX, CY, RADIUS, 0, 0, 0.0, 0.0, ring_count=4, angle_padding=0.0, radial_padding=0.0
        )
        assert p == Point(CX, CY)


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

class TestLabelPositions:
    def test_quadrant_label_outside_outer_ring_at_mid_angle(self):
        p = quadrant_label_position(CX, CY, RADIUS, 2)
        assert _polar_of(p) == pytest.approx((RADIUS * 1.3, 225.0))

    def test_quadrant_label_custom_distance(self):
        p = quadrant_label_position(CX, CY, RADIUS, 0, distance_factor=1.1)
        assert _polar_of(p)[0] == pytest.approx(RADIUS * 1.1)

    def test_ring_label_at_band_midpoint_on_diagonal(self):
        p = ring_label_position(CX, CY, RADIUS, 1, ring_count=4)
        assert _polar_of(p) == pytest.approx((120.0, 45.0))


# ---------------------------------------------------------------------------
# Partition properties
# ---------------------------------------------------------------------------

class TestPartitions:
    def test_quadrants_tile_the_circle(self):
        spans = [quadrant_angles(p) for p in range(4)]
        assert spans[0][0] == 0.0
        assert spans[-1][1] == 360.0
        for (_, end), (start, _) in zip(spans, spans[1:]):
            assert end == start

    @pytest.mark.parametrize("ring_count", [1, 3, 4, 7])
    def test_rings_tile_the_radius(self, ring_count):
        bands = [ring_band(p, RADIUS, ring_count) for p in range(ring_count)]
        assert bands[0][0] == 0.0
        assert bands[-1][1] == pytest.approx(RADIUS)
        for (_, outer), (inner, _) in zip(bands, bands[1:]):
            assert outer == pytest.approx(inner)

    def test_same_offsets_give_distinct_points_per_segment(self):
        points = {
            (round(p.x, 6), round(p.y, 6))
            for p in (
                blip_position(CX, CY, RADIUS, q, r, 0.5, 0.5, ring_count=4)
                for q in range(4)
                for r in range(4)
            )
        }
        assert len(points) == 16
