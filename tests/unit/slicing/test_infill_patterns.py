"""
Tests for infill pattern generators.
"""

import math

import pytest
from shapely.geometry import Point

from layerweave.core.config import InfillPatternKind
from layerweave.core.exceptions import ConfigurationError, SlicingError
from layerweave.core.geometry import Polyline, polygons_to_area
from layerweave.slicing.infill_patterns import (
    ConcentricPattern,
    GridPattern,
    HexagonsAndTrianglesPattern,
    HoneycombPattern,
    LinesPattern,
    RadialHatchPattern,
    TrianglesPattern,
    generate_pattern,
    pattern_from_settings,
)


def _inside(lines, polygons, tolerance=1e-6):
    area = polygons_to_area(polygons).buffer(tolerance)
    return all(area.covers(Point(p)) for line in lines for p in line)


def _direction(line):
    (x0, y0), (x1, y1) = line.first, line.last
    return math.degrees(math.atan2(y1 - y0, x1 - x0)) % 180


@pytest.mark.unit
@pytest.mark.slicing
class TestLinePatterns:
    """Tests for the line-family patterns."""

    def test_horizontal_lines(self, square):
        lines = generate_pattern([square], LinesPattern(spacing=2.0))

        assert all(isinstance(line, Polyline) for line in lines)
        assert sorted(line.first[1] for line in lines) == pytest.approx([1, 3, 5, 7, 9])
        assert all(line.length() == pytest.approx(10.0) for line in lines)

    def test_angle_rotates_lines(self, square):
        lines = generate_pattern([square], LinesPattern(spacing=2.0, angle=90.0))

        assert len(lines) == 5
        assert all(_direction(line) == pytest.approx(90.0) for line in lines)

    def test_grid_has_two_families(self, square):
        lines = generate_pattern([square], GridPattern(spacing=2.0))

        directions = sorted({round(_direction(line)) for line in lines})
        assert directions == [0, 90]
        assert len(lines) == 10

    def test_triangles_have_three_families(self, square):
        lines = generate_pattern([square], TrianglesPattern(spacing=2.0, angle=0.0))

        directions = {round(_direction(line)) for line in lines}
        assert directions == {0, 60, 120}
        assert _inside(lines, [square])

    def test_hexagons_and_triangles_shift_third_family(self, square):
        triangles = generate_pattern([square], TrianglesPattern(spacing=2.0))
        trihex = generate_pattern([square], HexagonsAndTrianglesPattern(spacing=2.0))

        def family(lines, angle):
            return sorted(
                (round(l.first[0], 6), round(l.first[1], 6))
                for l in lines if round(_direction(l)) == angle
            )

        assert family(triangles, 0) == family(trihex, 0)
        assert family(triangles, 120) != family(trihex, 120)

    def test_hole_splits_lines(self, square):
        hole = [(4, 0.5), (4, 9.5), (6, 9.5), (6, 0.5)]
        lines = generate_pattern([square, hole], LinesPattern(spacing=2.0))

        assert len(lines) == 10
        assert _inside(lines, [square, hole])

    def test_printer_bounds_anchor_lattice(self):
        """Neighbouring regions share one lattice when bounds are given."""
        right = [(10, 0), (20, 0), (20, 10), (10, 10)]
        bounded = generate_pattern([right], LinesPattern(2.0, 90.0, bounds=(0, 0, 20, 10)))
        free = generate_pattern([right], LinesPattern(2.0, 90.0))

        assert all(round(line.first[0]) % 2 == 0 for line in bounded)
        assert all(round(line.first[0]) % 2 == 1 for line in free)


@pytest.mark.unit
@pytest.mark.slicing
class TestConcentric:

    def test_closed_loops_until_collapse(self, square):
        loops = generate_pattern([square], ConcentricPattern(bead_width=1.0, spacing=2.0))

        assert len(loops) == 3
        assert all(loop.first == loop.last for loop in loops)
        xs = sorted(min(p[0] for p in loop) for loop in loops)
        assert xs == pytest.approx([0.5, 2.5, 4.5])

    def test_region_thinner_than_bead(self):
        sliver = [(0, 0), (10, 0), (10, 0.4), (0, 0.4)]
        assert generate_pattern([sliver], ConcentricPattern(bead_width=1.0, spacing=1.0)) == []


@pytest.mark.unit
@pytest.mark.slicing
class TestHoneycomb:

    def test_cells_clipped_to_region(self, square):
        lines = generate_pattern([square], HoneycombPattern(bead_width=0.5, spacing=3.0))

        assert lines
        assert _inside(lines, [square])

    def test_spacing_not_above_bead_width(self, square):
        assert generate_pattern([square], HoneycombPattern(bead_width=0.5, spacing=0.4)) == []


@pytest.mark.unit
@pytest.mark.slicing
class TestRadialHatch:

    def test_rays_point_outward(self, square):
        center = (5.0, 5.0)
        lines = generate_pattern([square], RadialHatchPattern(center=center, spacing=1.0))

        assert len(lines) > 8
        for line in lines:
            assert math.dist(center, line.first) < math.dist(center, line.last)

    def test_sector_limits_ray_angles(self, square):
        center = (5.0, 5.0)
        lines = generate_pattern(
            [square], RadialHatchPattern(center=center, spacing=1.0, sector_angle=90.0),
        )

        for line in lines:
            x, y = line.last
            theta = math.degrees(math.atan2(y - center[1], x - center[0]))
            assert -1e-6 <= theta <= 90.0 + 1e-6


@pytest.mark.unit
@pytest.mark.slicing
class TestGeneratePattern:

    @pytest.mark.parametrize(
        "pattern",
        [
            LinesPattern(2.0),
            GridPattern(2.0),
            TrianglesPattern(2.0),
            HexagonsAndTrianglesPattern(2.0),
            ConcentricPattern(0.5, 2.0),
            HoneycombPattern(0.5, 3.0),
            RadialHatchPattern((0.0, 0.0), 1.0),
        ],
    )
    def test_empty_geometry_yields_nothing(self, pattern):
        assert generate_pattern([], pattern) == []

    def test_unknown_pattern_type(self, square):
        with pytest.raises(SlicingError):
            generate_pattern([square], object())

    def test_input_untouched(self, square):
        rings = [list(square)]
        generate_pattern(rings, GridPattern(2.0))
        assert rings == [square]


class TestPatternFromSettings:

    @pytest.mark.parametrize(
        "kind, expected",
        [
            (InfillPatternKind.LINES, LinesPattern),
            (InfillPatternKind.GRID, GridPattern),
            (InfillPatternKind.TRIANGLES, TrianglesPattern),
            (InfillPatternKind.HEXAGONS_AND_TRIANGLES, HexagonsAndTrianglesPattern),
            (InfillPatternKind.CONCENTRIC, ConcentricPattern),
            (InfillPatternKind.HONEYCOMB, HoneycombPattern),
            (InfillPatternKind.RADIAL_HATCH, RadialHatchPattern),
        ],
    )
    def test_kind_maps_to_variant(self, kind, expected):
        assert isinstance(pattern_from_settings(kind, spacing=2.0, bead_width=0.5), expected)

    def test_parameters_carried(self):
        pattern = pattern_from_settings(
            "radial_hatch", spacing=1.5, bead_width=0.5, angle=30.0,
            center=(2.0, 3.0), sector_angle=120.0,
        )
        assert pattern == RadialHatchPattern((2.0, 3.0), 1.5, 120.0, 30.0)

    def test_unknown_kind(self):
        with pytest.raises(ConfigurationError) as exc_info:
            pattern_from_settings("zigzag", spacing=2.0, bead_width=0.5)
        assert "lines" in exc_info.value.details["available"]
