"""
Build module - Parts, their layer steps, and build-file loading.
"""

from layerweave.build.part import Part, Step, StepPair
from layerweave.build.loader import load_build

__all__ = [
    "Part",
    "Step",
    "StepPair",
    "load_build",
]
