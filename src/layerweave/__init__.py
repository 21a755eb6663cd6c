"""
layerweave - Multi-part layer scheduling and infill toolpath synthesis.

Interleaves the layer steps of independently sliced build parts into
global print layers, and turns each step's region geometry into ordered,
direction-normalized infill paths.
"""

__version__ = "0.1.0"
__author__ = "layerweave Contributors"

from layerweave.core.config import BuildSettings, ConfigManager
from layerweave.pipeline import BuildPipeline

__all__ = [
    "__version__",
    "BuildSettings",
    "ConfigManager",
    "BuildPipeline",
]
