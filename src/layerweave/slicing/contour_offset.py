"""
Contour Offset - Polygon list offset for region geometry.

Used to grow infill regions by the configured overlap (so infill bonds to
the surrounding walls) and to shrink them for concentric loops.

Uses **pyclipper** (Python bindings for Angus Johnson's Clipper library)
for robust polygon offsetting that correctly handles concave polygons,
holes and collapsing regions.

References:
- pyclipper: https://github.com/fonttools/pyclipper
"""

from __future__ import annotations

import logging
from typing import List, Tuple

import pyclipper

from layerweave.core.geometry import Polygon, PolygonList

logger = logging.getLogger(__name__)

# pyclipper uses integer coordinates for precision.
_CLIPPER_SCALE = 1000  # 1 mm -> 1000 clipper units -> 0.001 mm resolution


def _to_clipper(polygon: Polygon) -> List[Tuple[int, int]]:
    """Scale floating-point polygon to pyclipper integer coordinates."""
    return [(int(round(x * _CLIPPER_SCALE)), int(round(y * _CLIPPER_SCALE)))
            for x, y in polygon]


def _from_clipper(path: list) -> Polygon:
    """Scale pyclipper integer coordinates back to floating-point mm."""
    return [(x / _CLIPPER_SCALE, y / _CLIPPER_SCALE) for x, y in path]


def copy_polygons(polygons: PolygonList) -> PolygonList:
    """Deep copy of a polygon list as float tuples."""
    return [[(float(x), float(y)) for x, y in ring] for ring in polygons]


def orient_polygons(polygons: PolygonList) -> PolygonList:
    """
    Copy of ``polygons`` with the ring holding the lowest point wound
    counter-clockwise.

    If that ring is clockwise every ring is reversed, so holes keep the
    opposite winding of their exterior. Rings with fewer than three points
    are dropped.
    """
    rings = [ring for ring in polygons if len(ring) >= 3]
    if not rings:
        return []
    lowest = min(rings, key=lambda ring: min((y, x) for x, y in ring))
    if not pyclipper.Orientation(_to_clipper(lowest)):
        rings = [ring[::-1] for ring in rings]
    return copy_polygons(rings)


def offset_polygons(polygons: PolygonList, distance: float) -> PolygonList:
    """
    Offset a polygon list by a signed distance using pyclipper.

    Rings are oriented first (see ``orient_polygons``): the outermost ring is
    an exterior and rings wound against it are holes. Clipper grows exteriors
    and shrinks holes for a positive distance.

    Parameters:
        polygons: Rings as lists of (x, y) points.
        distance: Offset in mm (positive = outward, negative = inward).

    Returns:
        A new, oriented polygon list. Rings that collapse are dropped; a zero
        distance returns the oriented copy.
    """
    rings = orient_polygons(polygons)
    if not rings or distance == 0:
        return rings

    pco = pyclipper.PyclipperOffset()
    for ring in rings:
        pco.AddPath(_to_clipper(ring), pyclipper.JT_MITER, pyclipper.ET_CLOSEDPOLYGON)

    result = pco.Execute(int(round(distance * _CLIPPER_SCALE)))
    out = [_from_clipper(path) for path in result if len(path) >= 3]

    if not out:
        logger.debug("Offset by %.3f mm collapsed %d rings", distance, len(rings))
    return out
