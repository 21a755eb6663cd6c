"""
Infill sector - turn a region's geometry into ordered infill paths.

compute() runs the whole synthesis for one layer:

1. resolve pivot, spacing, angle and bounds from the settings snapshot
2. grow a private copy of the geometry by the configured overlap
3. generate raw polylines with the configured pattern
4. orient every polyline so its angle about the pivot does not decrease
5. record each polyline's pivot distance (emission order is kept)
6. reverse the list and flip every second polyline (``uniform``)
7. turn each polyline into a Path of attribute-stamped segments

The region is either uncomputed (no paths) or reflects its latest compute()
call; every call replaces the previous output.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, List, Optional, Tuple

from layerweave.core.config import ProfileSettings
from layerweave.core.exceptions import GeometryError
from layerweave.core.geometry import Point2D, PolygonList, Polyline, angle_about
from layerweave.core.logging import get_logger
from layerweave.slicing.contour_offset import copy_polygons, offset_polygons
from layerweave.slicing.infill_patterns import generate_pattern, pattern_from_settings
from layerweave.slicing.toolpath import LineSegment, Path, RegionType

if TYPE_CHECKING:
    from layerweave.postprocessor.base import WriterBase

logger = get_logger(__name__)


class InfillSector:
    """
    Infill region filled around a pivot point.

    The pivot is the printer's (x_offset, y_offset). Angles about the pivot
    are measured counter-clockwise from the start vector, which defaults
    to +X.

    Example:
        >>> sector = InfillSector(profile, index=0, geometry=[square])
        >>> paths = sector.compute(layer_num=3)
        >>> program = sector.write_gcode(GCodeWriter())
    """

    region_type = RegionType.INFILL

    def __init__(
        self,
        settings: ProfileSettings,
        index: int = 0,
        geometry: Optional[PolygonList] = None,
    ) -> None:
        self.settings = settings
        self.index = index
        self._geometry = copy_polygons(geometry or [])
        self._sector_angle = 360.0
        self._start_vector: Point2D = (1.0, 0.0)
        self._computed = False

        self.paths: List[Path] = []
        self.computed_geometry: List[Polyline] = []
        self.circular_order: List[Tuple[float, Polyline]] = []

    @property
    def geometry(self) -> PolygonList:
        return copy_polygons(self._geometry)

    @property
    def center(self) -> Point2D:
        printer = self.settings.printer
        return (printer.x_offset, printer.y_offset)

    @property
    def start_vector(self) -> Point2D:
        return self._start_vector

    @property
    def sector_angle(self) -> float:
        return self._sector_angle

    @property
    def is_computed(self) -> bool:
        return self._computed

    def set_sector_angle(self, angle: float) -> None:
        """Set the sector width in degrees (used by radial hatch)."""
        self._sector_angle = angle

    def set_start_vector(self, vector: Point2D) -> None:
        """
        Set the reference direction for angular ordering about the pivot.

        Raises:
            GeometryError: If the vector has zero length
        """
        if math.hypot(vector[0], vector[1]) == 0:
            raise GeometryError("Start vector must be non-zero")
        self._start_vector = (float(vector[0]), float(vector[1]))

    # ── Synthesis ─────────────────────────────────────────────────────

    def compute(
        self,
        layer_num: int,
        geometry: Optional[PolygonList] = None,
        settings: Optional[ProfileSettings] = None,
    ) -> List[Path]:
        """
        Replace this region's paths with a fresh infill for ``layer_num``.

        Parameters:
            layer_num: Layer index; advances the fill angle by
                ``angle_rotation`` per layer.
            geometry: Optional new geometry snapshot (copied).
            settings: Optional new settings snapshot.

        Returns:
            The new path list (also stored on ``self.paths``).
        """
        self.paths = []
        self._computed = False
        if geometry is not None:
            self._geometry = copy_polygons(geometry)
        if settings is not None:
            self.settings = settings

        infill = self.settings.infill
        center = self.center
        angle = infill.angle + layer_num * infill.angle_rotation
        bounds = self.settings.printer.bounds if infill.based_on_printer else None

        geometry_copy = offset_polygons(self._geometry, infill.overlap)

        pattern = pattern_from_settings(
            infill.pattern,
            spacing=infill.line_spacing,
            bead_width=infill.bead_width,
            angle=angle,
            bounds=bounds,
            center=center,
            sector_angle=self._sector_angle,
        )
        lines = [
            self.normalize_direction(line, center, self._start_vector)
            for line in generate_pattern(geometry_copy, pattern)
        ]

        self.circular_order = [(math.dist(center, line.first), line) for line in lines]

        lines.reverse()
        self.uniform(lines)

        self.computed_geometry = lines
        self.paths = [self.create_path(line) for line in lines]
        self._computed = True

        logger.debug(
            "infill_sector_computed",
            region=self.index,
            layer=layer_num,
            pattern=infill.pattern.value,
            paths=len(self.paths),
        )
        return self.paths

    @staticmethod
    def normalize_direction(
        line: Polyline, center: Point2D, start_vector: Point2D,
    ) -> Polyline:
        """Reverse ``line`` if its last point's angle about ``center`` is below its first's."""
        first = angle_about(line.first, center, start_vector)
        last = angle_about(line.last, center, start_vector)
        if last < first:
            return line.reversed()
        return line

    @staticmethod
    def uniform(sector: List[Polyline]) -> List[Polyline]:
        """Reverse every odd-indexed polyline in place; returns ``sector``."""
        for i in range(1, len(sector), 2):
            sector[i] = sector[i].reversed()
        return sector

    def create_path(self, line: Polyline) -> Path:
        """Build a Path with one segment per consecutive point pair of ``line``."""
        infill = self.settings.infill
        width = infill.bead_width
        height = self.settings.layer_height
        speed = infill.speed
        acceleration = self.settings.printer.infill_acceleration
        extruder_speed = infill.extruder_speed

        path = Path()
        for start, end in zip(line.points, line.points[1:]):
            path.append(LineSegment(
                start=start,
                end=end,
                width=width,
                height=height,
                speed=speed,
                acceleration=acceleration,
                extruder_speed=extruder_speed,
                region_type=RegionType.INFILL,
            ))
        return path

    # ── Output ────────────────────────────────────────────────────────

    def write_gcode(self, writer: WriterBase) -> str:
        """Serialize the paths, or the writer's empty-step marker if there are none."""
        if not self.paths:
            return writer.write_empty_step()

        out = writer.write_before_region(self.region_type, len(self.paths))
        for path in self.paths:
            for segment in path:
                out += writer.write_segment(segment)
        out += writer.write_after_path(self.region_type)
        return out
