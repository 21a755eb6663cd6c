"""
layerweave Writer Module

Serializes region paths to machine instructions. Regions bracket their
motion with the writer's before-region / after-path hooks, or emit the
empty-step marker when they have nothing to print.
"""

from .base import WriterBase, WriterConfig, WriterHooks
from .gcode import GCodeWriter

__all__ = [
    'WriterBase',
    'WriterConfig',
    'WriterHooks',
    'GCodeWriter',
]
