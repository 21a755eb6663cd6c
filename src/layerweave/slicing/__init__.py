"""
Slicing module - Region path synthesis for layer steps.

This module turns a step's region geometry into ordered motion paths:

- InfillSector: pattern fill, direction normalization and continuity pass
- infill_patterns: pattern generator service (shapely + pyclipper)
- contour_offset: overlap offset of region geometry (pyclipper)
- toolpath: Path / LineSegment / RegionType output types
"""

from layerweave.slicing.toolpath import LineSegment, Path, RegionType
from layerweave.slicing.contour_offset import copy_polygons, offset_polygons
from layerweave.slicing.infill_patterns import (
    ConcentricPattern,
    GridPattern,
    HexagonsAndTrianglesPattern,
    HoneycombPattern,
    InfillPatternSpec,
    LinesPattern,
    PATTERN_GENERATORS,
    RadialHatchPattern,
    TrianglesPattern,
    generate_pattern,
    pattern_from_settings,
)
from layerweave.slicing.infill_sector import InfillSector

__all__ = [
    "InfillSector",
    "LineSegment",
    "Path",
    "RegionType",
    "copy_polygons",
    "offset_polygons",
    "InfillPatternSpec",
    "LinesPattern",
    "GridPattern",
    "TrianglesPattern",
    "HexagonsAndTrianglesPattern",
    "ConcentricPattern",
    "HoneycombPattern",
    "RadialHatchPattern",
    "PATTERN_GENERATORS",
    "generate_pattern",
    "pattern_from_settings",
]
