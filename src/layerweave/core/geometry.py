"""
Geometry primitives shared by the scheduler and the region synthesizer.

Planes and the stacking direction are 3D and use COMPAS points/vectors.
Region geometry is 2D: polygons are lists of (x, y) tuples, exterior rings
counter-clockwise and holes clockwise, and fill output is a list of
immutable Polylines.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

from compas.geometry import Point, Rotation, Vector
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.ops import unary_union

from layerweave.core.exceptions import GeometryError

Point2D = Tuple[float, float]
Polygon = List[Point2D]
PolygonList = List[Polygon]
Bounds = Tuple[float, float, float, float]

# Below this |n . d| a stacking line is treated as parallel to a plane.
_PARALLEL_EPSILON = 1e-9


@dataclass(frozen=True, eq=False)
class Plane:
    """
    A plane given by an origin point and a unit normal.

    Attributes:
        origin: Any point on the plane
        normal: Plane normal, unitized on construction
    """

    origin: Point
    normal: Vector

    def __post_init__(self) -> None:
        normal = Vector(*self.normal)
        if normal.length == 0:
            raise GeometryError("Plane normal must be non-zero")
        object.__setattr__(self, "origin", Point(*self.origin))
        object.__setattr__(self, "normal", normal.unitized())

    @classmethod
    def from_height(cls, height: float, normal: Sequence[float] = (0.0, 0.0, 1.0)) -> "Plane":
        """Plane whose origin sits ``height`` along ``normal`` from the world origin."""
        unit = Vector(*normal).unitized()
        return cls(Point(0, 0, 0) + unit.scaled(height), unit)

    def shift_along_normal(self, distance: float) -> "Plane":
        """Return a copy moved by a signed distance along the normal."""
        return Plane(self.origin + self.normal.scaled(distance), self.normal)

    def distance_to_point(self, point: Sequence[float]) -> float:
        """Signed distance from the plane to a point, positive on the normal side."""
        return self.normal.dot(Point(*point) - self.origin)

    def distance_along(self, direction: Vector) -> float:
        """
        Signed distance from the world origin to this plane, measured along
        a line through the origin in ``direction``.

        Raises:
            GeometryError: If the line is parallel to the plane
        """
        unit = Vector(*direction).unitized()
        denom = self.normal.dot(unit)
        if abs(denom) < _PARALLEL_EPSILON:
            raise GeometryError(
                "Stacking direction is parallel to slicing plane",
                details={"normal": list(self.normal), "direction": list(unit)},
            )
        return self.normal.dot(Vector(*self.origin)) / denom

    def is_equal(self, other: "Plane", tolerance: float) -> bool:
        """True when ``other`` lies within ``tolerance`` of this plane along its normal."""
        return abs(self.distance_to_point(other.origin)) <= tolerance


def stacking_normal(pitch: float = 0.0, yaw: float = 0.0, roll: float = 0.0) -> Vector:
    """
    Rotate the canonical +Z stacking direction by pitch/yaw/roll (degrees).

    Rotations are applied roll about Z, then pitch about X, then yaw about Y.
    """
    direction = Vector(0, 0, 1)
    for axis, angle in (
        (Vector(0, 0, 1), roll),
        (Vector(1, 0, 0), pitch),
        (Vector(0, 1, 0), yaw),
    ):
        if angle:
            direction = direction.transformed(
                Rotation.from_axis_and_angle(axis, math.radians(angle))
            )
    return direction.unitized()


@dataclass(frozen=True)
class Polyline:
    """An ordered, non-empty sequence of 2D points."""

    points: Tuple[Point2D, ...]

    def __post_init__(self) -> None:
        points = tuple((float(x), float(y)) for x, y in self.points)
        if not points:
            raise GeometryError("Polyline must contain at least one point")
        object.__setattr__(self, "points", points)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point2D]:
        return iter(self.points)

    def __getitem__(self, index: int) -> Point2D:
        return self.points[index]

    @property
    def first(self) -> Point2D:
        return self.points[0]

    @property
    def last(self) -> Point2D:
        return self.points[-1]

    def reversed(self) -> "Polyline":
        """Return a new polyline with the point order flipped."""
        return Polyline(self.points[::-1])

    def length(self) -> float:
        return sum(
            math.dist(a, b) for a, b in zip(self.points, self.points[1:])
        )


def angle_about(point: Point2D, center: Point2D, start_vector: Point2D) -> float:
    """
    Counter-clockwise angle of ``point`` about ``center``, measured from
    ``start_vector``, in [0, 2*pi).
    """
    vx, vy = point[0] - center[0], point[1] - center[1]
    sx, sy = start_vector
    angle = math.atan2(sx * vy - sy * vx, sx * vx + sy * vy)
    if angle < 0:
        angle += 2 * math.pi
    return angle


def polygon_area_signed(polygon: Polygon) -> float:
    """Compute signed area (positive = CCW, negative = CW)."""
    area = 0.0
    n = len(polygon)
    for i in range(n):
        j = (i + 1) % n
        area += polygon[i][0] * polygon[j][1]
        area -= polygon[j][0] * polygon[i][1]
    return area / 2.0


def polygons_to_area(polygons: PolygonList):
    """
    Build a shapely area from a polygon list.

    Counter-clockwise rings add material and clockwise rings cut holes.
    Rings with fewer than three points are ignored.
    """
    solids = []
    holes = []
    for ring in polygons:
        if len(ring) < 3:
            continue
        shape = ShapelyPolygon(ring)
        if not shape.is_valid:
            shape = shape.buffer(0)
        if polygon_area_signed(ring) >= 0:
            solids.append(shape)
        else:
            holes.append(shape)

    area = unary_union(solids) if solids else ShapelyPolygon()
    if holes and not area.is_empty:
        area = area.difference(unary_union(holes))
    return area
