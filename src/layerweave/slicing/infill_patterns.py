"""
Infill Pattern Generators - fill a region with raw, disjoint polylines.

Each pattern is a small frozen dataclass carrying only the parameters it
needs; ``generate_pattern`` dispatches on the variant type:

1. LinesPattern                - parallel lines at one angle
2. GridPattern                 - lines at angle and angle + 90
3. TrianglesPattern            - three line families at 60 degree steps,
                                 meeting in common points
4. HexagonsAndTrianglesPattern - the same three families with the third
                                 shifted half a spacing (trihexagonal tiling)
5. ConcentricPattern           - inward contour offsets via pyclipper
6. HoneycombPattern            - hexagonal cells inset by half a bead width
7. RadialHatchPattern          - rays from a pivot across a sector

Line patterns take an optional bounding box; when given (printer-bounded
infill) the line lattice is anchored to that box instead of the region so
neighbouring regions share one lattice.

Line-polygon clipping uses **shapely** for robust intersection handling.
Concentric offset uses **pyclipper** for correct concave-polygon support.

References:
- shapely: https://shapely.readthedocs.io/
- pyclipper: https://github.com/fonttools/pyclipper
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from shapely import affinity
from shapely.geometry import LineString

from layerweave.core.config import InfillPatternKind
from layerweave.core.exceptions import ConfigurationError, SlicingError
from layerweave.core.geometry import (
    Bounds,
    Point2D,
    PolygonList,
    Polyline,
    polygons_to_area,
)
from layerweave.slicing.contour_offset import offset_polygons

logger = logging.getLogger(__name__)

# Upper bound on concentric loops for a single region
_MAX_CONCENTRIC_LOOPS = 1000


# ---------------------------------------------------------------------------
# Pattern variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LinesPattern:
    spacing: float
    angle: float = 0.0
    bounds: Optional[Bounds] = None


@dataclass(frozen=True)
class GridPattern:
    spacing: float
    angle: float = 0.0
    bounds: Optional[Bounds] = None


@dataclass(frozen=True)
class TrianglesPattern:
    spacing: float
    angle: float = 0.0
    bounds: Optional[Bounds] = None


@dataclass(frozen=True)
class HexagonsAndTrianglesPattern:
    spacing: float
    angle: float = 0.0
    bounds: Optional[Bounds] = None


@dataclass(frozen=True)
class ConcentricPattern:
    bead_width: float
    spacing: float


@dataclass(frozen=True)
class HoneycombPattern:
    bead_width: float
    spacing: float
    angle: float = 0.0
    bounds: Optional[Bounds] = None


@dataclass(frozen=True)
class RadialHatchPattern:
    """Rays from ``center`` every ``spacing`` mm of arc at the outer radius,
    covering ``sector_angle`` degrees starting at ``angle``."""

    center: Point2D
    spacing: float
    sector_angle: float = 360.0
    angle: float = 0.0


InfillPatternSpec = Union[
    LinesPattern,
    GridPattern,
    TrianglesPattern,
    HexagonsAndTrianglesPattern,
    ConcentricPattern,
    HoneycombPattern,
    RadialHatchPattern,
]


# ---------------------------------------------------------------------------
# Core helpers (library-backed)
# ---------------------------------------------------------------------------


def _extract_lines(geometry) -> List[List[Point2D]]:
    """Extract line coordinate lists from a shapely intersection result."""
    if geometry.is_empty:
        return []

    geom_type = geometry.geom_type
    if geom_type == "LineString":
        parts = [geometry]
    elif geom_type in ("MultiLineString", "GeometryCollection"):
        parts = [g for g in geometry.geoms if g.geom_type == "LineString"]
    else:
        parts = []

    lines: List[List[Point2D]] = []
    for part in parts:
        coords = [(float(c[0]), float(c[1])) for c in part.coords]
        if len(coords) >= 2:
            lines.append(coords)
    return lines


def _parallel_lines(
    area,
    bounds: Bounds,
    angle_deg: float,
    spacing: float,
    phase: float = 0.0,
) -> List[List[Point2D]]:
    """
    Parallel scan lines at ``angle_deg`` through the centre of ``bounds``,
    offset by multiples of ``spacing`` plus ``phase``, clipped to ``area``.
    """
    min_x, min_y, max_x, max_y = bounds
    diagonal = math.hypot(max_x - min_x, max_y - min_y)
    cx, cy = (min_x + max_x) / 2, (min_y + max_y) / 2

    angle_rad = math.radians(angle_deg)
    cos_a = math.cos(angle_rad)
    sin_a = math.sin(angle_rad)
    # Direction perpendicular to scan lines
    perp_x, perp_y = -sin_a, cos_a
    # Endpoints reach past the bounds even when the diagonal is zero
    half = diagonal + spacing

    lines: List[List[Point2D]] = []
    n_lines = int(diagonal / spacing) + 2
    for i in range(-n_lines, n_lines + 1):
        offset = i * spacing + phase
        lx = cx + offset * perp_x
        ly = cy + offset * perp_y
        scan = LineString([
            (lx - half * cos_a, ly - half * sin_a),
            (lx + half * cos_a, ly + half * sin_a),
        ])
        lines.extend(_extract_lines(scan.intersection(area)))
    return lines


def _line_family_pattern(area, pattern, angles: List[float], phases: List[float]) -> List[List[Point2D]]:
    if pattern.spacing <= 0:
        return []
    bounds = pattern.bounds or area.bounds
    lines: List[List[Point2D]] = []
    for offset_angle, phase in zip(angles, phases):
        lines.extend(
            _parallel_lines(area, bounds, pattern.angle + offset_angle, pattern.spacing, phase)
        )
    return lines


# ---------------------------------------------------------------------------
# Pattern generators
# ---------------------------------------------------------------------------


def generate_lines(polygons: PolygonList, pattern: LinesPattern) -> List[List[Point2D]]:
    """Parallel lines at a single angle."""
    area = polygons_to_area(polygons)
    if area.is_empty:
        return []
    return _line_family_pattern(area, pattern, [0.0], [0.0])


def generate_grid(polygons: PolygonList, pattern: GridPattern) -> List[List[Point2D]]:
    """Two orthogonal line families."""
    area = polygons_to_area(polygons)
    if area.is_empty:
        return []
    return _line_family_pattern(area, pattern, [0.0, 90.0], [0.0, 0.0])


def generate_triangles(polygons: PolygonList, pattern: TrianglesPattern) -> List[List[Point2D]]:
    """Three line families (0/60/120 relative to the angle) meeting in common points."""
    area = polygons_to_area(polygons)
    if area.is_empty:
        return []
    return _line_family_pattern(area, pattern, [0.0, 60.0, 120.0], [0.0, 0.0, 0.0])


def generate_hexagons_and_triangles(
    polygons: PolygonList, pattern: HexagonsAndTrianglesPattern,
) -> List[List[Point2D]]:
    """Trihexagonal tiling: the third family is shifted half a spacing."""
    area = polygons_to_area(polygons)
    if area.is_empty:
        return []
    return _line_family_pattern(
        area, pattern, [0.0, 60.0, 120.0], [0.0, 0.0, pattern.spacing / 2],
    )


def generate_concentric(polygons: PolygonList, pattern: ConcentricPattern) -> List[List[Point2D]]:
    """
    Concentric loops: first loop half a bead inside the boundary, then one
    loop every ``spacing`` until the region collapses. Loops are closed.
    """
    if pattern.spacing <= 0:
        return []

    loops: List[List[Point2D]] = []
    current = offset_polygons(polygons, -pattern.bead_width / 2)
    for _ in range(_MAX_CONCENTRIC_LOOPS):
        if not current:
            break
        for ring in current:
            loops.append(list(ring) + [ring[0]])
        current = offset_polygons(current, -pattern.spacing)
    else:
        logger.warning("Concentric fill stopped after %d loops", _MAX_CONCENTRIC_LOOPS)
    return loops


def generate_honeycomb(polygons: PolygonList, pattern: HoneycombPattern) -> List[List[Point2D]]:
    """
    Honeycomb: pointy-top hexagonal cells ``spacing`` wide flat-to-flat,
    each inset by half a bead so neighbouring walls sit side by side.
    """
    if pattern.spacing <= 0:
        return []
    area = polygons_to_area(polygons)
    if area.is_empty:
        return []

    inset_radius = (pattern.spacing - pattern.bead_width) / math.sqrt(3)
    if inset_radius <= 0:
        logger.warning(
            "Honeycomb spacing %.3f does not exceed bead width %.3f",
            pattern.spacing, pattern.bead_width,
        )
        return []

    min_x, min_y, max_x, max_y = pattern.bounds or area.bounds
    cx, cy = (min_x + max_x) / 2, (min_y + max_y) / 2
    # Cover the rotated bounds with a square around the centre
    reach = math.hypot(max_x - min_x, max_y - min_y) / 2 + pattern.spacing

    cell_radius = pattern.spacing / math.sqrt(3)
    row_height = 1.5 * cell_radius
    n_rows = int(reach / row_height) + 1
    n_cols = int(reach / pattern.spacing) + 1

    lines: List[List[Point2D]] = []
    for row in range(-n_rows, n_rows + 1):
        y = cy + row * row_height
        shift = pattern.spacing / 2 if row % 2 else 0.0
        for col in range(-n_cols, n_cols + 1):
            x = cx + col * pattern.spacing + shift
            cell = [
                (x + inset_radius * math.cos(math.radians(60 * i + 30)),
                 y + inset_radius * math.sin(math.radians(60 * i + 30)))
                for i in range(7)
            ]
            ring = LineString(cell)
            if pattern.angle:
                ring = affinity.rotate(ring, pattern.angle, origin=(cx, cy))
            if not ring.intersects(area):
                continue
            lines.extend(_extract_lines(ring.intersection(area)))
    return lines


def generate_radial_hatch(polygons: PolygonList, pattern: RadialHatchPattern) -> List[List[Point2D]]:
    """Rays from the pivot outward, clipped to the region, covering a sector."""
    if pattern.spacing <= 0 or pattern.sector_angle <= 0:
        return []
    area = polygons_to_area(polygons)
    if area.is_empty:
        return []

    cx, cy = pattern.center
    radius = max(
        math.hypot(x - cx, y - cy) for ring in polygons for x, y in ring
    ) + pattern.spacing
    step = pattern.spacing / radius
    sector = math.radians(min(pattern.sector_angle, 360.0))
    full_circle = math.isclose(sector, 2 * math.pi)
    n_rays = int(sector / step) + (0 if full_circle else 1)

    start = math.radians(pattern.angle)
    lines: List[List[Point2D]] = []
    for k in range(n_rays):
        theta = start + k * step
        ray = LineString([(cx, cy), (cx + radius * math.cos(theta), cy + radius * math.sin(theta))])
        for piece in _extract_lines(ray.intersection(area)):
            first, last = piece[0], piece[-1]
            if math.hypot(first[0] - cx, first[1] - cy) > math.hypot(last[0] - cx, last[1] - cy):
                piece.reverse()
            lines.append(piece)
    return lines


# --- Pattern Registry ---

PATTERN_GENERATORS: Dict[type, Callable[[PolygonList, InfillPatternSpec], List[List[Point2D]]]] = {
    LinesPattern: generate_lines,
    GridPattern: generate_grid,
    TrianglesPattern: generate_triangles,
    HexagonsAndTrianglesPattern: generate_hexagons_and_triangles,
    ConcentricPattern: generate_concentric,
    HoneycombPattern: generate_honeycomb,
    RadialHatchPattern: generate_radial_hatch,
}


def generate_pattern(polygons: PolygonList, pattern: InfillPatternSpec) -> List[Polyline]:
    """
    Fill a polygon list with the given pattern.

    Parameters:
        polygons: Region rings (exterior CCW, holes CW).
        pattern: A pattern variant carrying its own parameters.

    Returns:
        Raw polylines in generator emission order. Empty geometry yields [].

    Raises:
        SlicingError: If the pattern type has no registered generator.
    """
    generator = PATTERN_GENERATORS.get(type(pattern))
    if generator is None:
        raise SlicingError(
            f"No generator registered for pattern {type(pattern).__name__}",
            details={"available": [cls.__name__ for cls in PATTERN_GENERATORS]},
        )
    if not any(len(ring) >= 3 for ring in polygons):
        return []
    return [Polyline(tuple(line)) for line in generator(polygons, pattern) if len(line) >= 2]


def pattern_from_settings(
    kind: InfillPatternKind,
    spacing: float,
    bead_width: float,
    angle: float = 0.0,
    bounds: Optional[Bounds] = None,
    center: Point2D = (0.0, 0.0),
    sector_angle: float = 360.0,
) -> InfillPatternSpec:
    """
    Build the pattern variant for a configured pattern kind.

    Raises:
        ConfigurationError: If the kind is not a known InfillPatternKind.
    """
    try:
        kind = InfillPatternKind(kind)
    except ValueError:
        raise ConfigurationError(
            f"Unknown infill pattern: {kind!r}",
            details={"available": [k.value for k in InfillPatternKind]},
        )

    if kind == InfillPatternKind.LINES:
        return LinesPattern(spacing, angle, bounds)
    if kind == InfillPatternKind.GRID:
        return GridPattern(spacing, angle, bounds)
    if kind == InfillPatternKind.TRIANGLES:
        return TrianglesPattern(spacing, angle, bounds)
    if kind == InfillPatternKind.HEXAGONS_AND_TRIANGLES:
        return HexagonsAndTrianglesPattern(spacing, angle, bounds)
    if kind == InfillPatternKind.CONCENTRIC:
        return ConcentricPattern(bead_width, spacing)
    if kind == InfillPatternKind.HONEYCOMB:
        return HoneycombPattern(bead_width, spacing, angle, bounds)
    return RadialHatchPattern(center, spacing, sector_angle, angle)
