"""
Scheduling module - Interleave per-part layer steps into global layers.
"""

from layerweave.core.config import LayerOrdering
from layerweave.scheduling.global_layer import GlobalLayer
from layerweave.scheduling.layer_order import (
    DEFAULT_LAYER_LOG,
    ORDERING_POLICIES,
    log_global_layers,
    populate_step,
    schedule,
)

__all__ = [
    "GlobalLayer",
    "LayerOrdering",
    "ORDERING_POLICIES",
    "DEFAULT_LAYER_LOG",
    "schedule",
    "populate_step",
    "log_global_layers",
]
