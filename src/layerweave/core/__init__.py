"""
Core module - Shared configuration, geometry, logging and exceptions.
"""

from layerweave.core.config import (
    BuildSettings,
    ConfigManager,
    InfillPatternKind,
    InfillSettings,
    LayerOrdering,
    PrinterSettings,
    ProfileSettings,
    SchedulerSettings,
)
from layerweave.core.exceptions import (
    LayerWeaveError,
    ConfigurationError,
    GeometryError,
    SchedulingError,
    SlicingError,
)
from layerweave.core.geometry import Plane, Polyline, angle_about, stacking_normal

__all__ = [
    # Config
    "BuildSettings",
    "ConfigManager",
    "InfillPatternKind",
    "InfillSettings",
    "LayerOrdering",
    "PrinterSettings",
    "ProfileSettings",
    "SchedulerSettings",
    # Exceptions
    "LayerWeaveError",
    "ConfigurationError",
    "GeometryError",
    "SchedulingError",
    "SlicingError",
    # Geometry
    "Plane",
    "Polyline",
    "angle_about",
    "stacking_normal",
]
