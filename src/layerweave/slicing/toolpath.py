"""
Toolpath data structures for region output.

A region's output is an ordered list of Paths; each Path is an ordered list
of line segments stamped with the motion attributes the writer needs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List

import numpy as np

from layerweave.core.geometry import Point2D


class RegionType(Enum):
    """Region type tag carried by every segment."""

    INFILL = "infill"  # Interior fill patterns


@dataclass(frozen=True)
class LineSegment:
    """
    A single straight motion between two points.

    Attributes:
        start: Start point (x, y)
        end: End point (x, y)
        width: Bead width (mm)
        height: Layer height (mm)
        speed: Movement speed (mm/s)
        acceleration: Acceleration (mm/s^2)
        extruder_speed: Extruder angular speed (rpm)
        region_type: Region the segment was generated for
    """

    start: Point2D
    end: Point2D
    width: float
    height: float
    speed: float
    acceleration: float
    extruder_speed: float
    region_type: RegionType = RegionType.INFILL

    def get_length(self) -> float:
        return float(np.hypot(self.end[0] - self.start[0], self.end[1] - self.start[1]))


@dataclass
class Path:
    """An ordered, connected sequence of segments."""

    segments: List[LineSegment] = field(default_factory=list)

    def append(self, segment: LineSegment) -> None:
        self.segments.append(segment)

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[LineSegment]:
        return iter(self.segments)

    def get_length(self) -> float:
        """Calculate total length of the path."""
        return sum(seg.get_length() for seg in self.segments)

