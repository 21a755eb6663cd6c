"""
Tests for polygon offsetting.
"""

import pytest
from shapely.geometry import Polygon as ShapelyPolygon

from layerweave.core.geometry import polygon_area_signed
from layerweave.slicing.contour_offset import copy_polygons, offset_polygons, orient_polygons


HOLE_CW = [(4, 4), (4, 6), (6, 6), (6, 4)]


def _bounds(rings):
    return ShapelyPolygon(rings[0]).bounds


@pytest.mark.unit
@pytest.mark.slicing
class TestOffsetPolygons:

    def test_zero_distance_copies(self, square):
        rings = [square]
        result = offset_polygons(rings, 0.0)
        assert result == [[(float(x), float(y)) for x, y in square]]
        assert result[0] is not square

    def test_outward_offset_grows_exterior(self, square):
        result = offset_polygons([square], 1.0)
        assert _bounds(result) == pytest.approx((-1.0, -1.0, 11.0, 11.0))

    def test_inward_offset_shrinks_exterior(self, square):
        result = offset_polygons([square], -2.0)
        assert _bounds(result) == pytest.approx((2.0, 2.0, 8.0, 8.0))

    def test_collapse_returns_empty(self, square):
        assert offset_polygons([square], -6.0) == []

    def test_degenerate_rings_dropped(self):
        assert offset_polygons([[(0, 0), (1, 1)]], 1.0) == []

    def test_input_untouched(self, square):
        rings = [list(square)]
        offset_polygons(rings, 1.0)
        assert rings == [square]

    @pytest.mark.parametrize("distance", [0.0, 0.001, 1.0])
    def test_clockwise_exterior_is_oriented_at_any_distance(self, square, distance):
        result = offset_polygons([square[::-1]], distance)

        assert len(result) == 1
        assert polygon_area_signed(result[0]) > 0


@pytest.mark.unit
@pytest.mark.slicing
class TestOrientPolygons:

    def test_counter_clockwise_kept(self, square):
        assert orient_polygons([square, HOLE_CW]) == copy_polygons([square, HOLE_CW])

    def test_clockwise_exterior_flips_every_ring(self, square):
        result = orient_polygons([square[::-1], HOLE_CW[::-1]])

        assert polygon_area_signed(result[0]) > 0
        assert polygon_area_signed(result[1]) < 0

    def test_hole_listed_first(self, square):
        result = orient_polygons([HOLE_CW[::-1], square[::-1]])

        assert polygon_area_signed(result[0]) < 0
        assert polygon_area_signed(result[1]) > 0


def test_copy_polygons_is_deep(square):
    rings = [square]
    copied = copy_polygons(rings)
    copied[0].append((99.0, 99.0))
    assert len(square) == 4
