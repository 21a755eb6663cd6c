"""
Layer ordering - interleave per-part steps into global layers.

Three ordering policies are supported:
1. by_height       - steps whose mid-planes coincide (within the grouping
                     tolerance) along the shared stacking direction print
                     together; the lowest remaining step leads each pass
2. by_layer_number - global layer i holds step i of every part
3. by_part         - parts print one after another, one step per layer

``populate_step`` builds a single layer from dirty steps for real-time
slicing, bypassing the policy.

All parts are assumed to share one stacking direction. Scheduling reads a
snapshot of the parts and never mutates them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Hashable, List, Optional, Sequence

from layerweave.build.part import Part
from layerweave.core.config import LayerOrdering, SchedulerSettings
from layerweave.core.exceptions import ConfigurationError
from layerweave.core.geometry import Plane, stacking_normal
from layerweave.core.logging import get_logger
from layerweave.scheduling.global_layer import GlobalLayer

logger = get_logger(__name__)

DEFAULT_LAYER_LOG = Path("global_layers_log.txt")


def _mid_plane(part: Part, index: int) -> Plane:
    return part.get_step_pair(index).printing_layer.mid_plane()


def _schedule_by_height(
    parts: Sequence[Part], settings: SchedulerSettings,
) -> List[GlobalLayer]:
    direction = stacking_normal(
        settings.stacking_pitch, settings.stacking_yaw, settings.stacking_roll,
    )
    tolerance = settings.layer_grouping_tolerance

    current: Dict[Hashable, int] = {part.get_id(): 0 for part in parts}

    def remaining() -> List[Part]:
        return [p for p in parts if current[p.get_id()] < p.count_step_pairs()]

    global_layers: List[GlobalLayer] = []
    active = remaining()
    while active:
        # Lowest mid-plane along the stacking direction; first part wins ties
        min_plane: Optional[Plane] = None
        min_dist = 0.0
        for part in active:
            plane = _mid_plane(part, current[part.get_id()])
            dist = plane.distance_along(direction)
            if min_plane is None or dist < min_dist:
                min_plane = plane
                min_dist = dist

        layer = GlobalLayer(len(global_layers))
        for part in active:
            part_id = part.get_id()
            index = current[part_id]
            if _mid_plane(part, index).is_equal(min_plane, tolerance):
                layer.add_step_pair(part_id, part.get_step_pair(index))
                current[part_id] = index + 1

        global_layers.append(layer)
        active = remaining()

    return global_layers


def _schedule_by_layer_number(
    parts: Sequence[Part], settings: SchedulerSettings,
) -> List[GlobalLayer]:
    max_steps = max((p.count_step_pairs() for p in parts), default=0)

    global_layers: List[GlobalLayer] = []
    for step in range(max_steps):
        layer = GlobalLayer(step)
        for part in parts:
            if step < part.count_step_pairs():
                layer.add_step_pair(part.get_id(), part.get_step_pair(step))
        global_layers.append(layer)
    return global_layers


def _schedule_by_part(
    parts: Sequence[Part], settings: SchedulerSettings,
) -> List[GlobalLayer]:
    global_layers: List[GlobalLayer] = []
    for part in parts:
        for step in range(part.count_step_pairs()):
            layer = GlobalLayer(len(global_layers))
            layer.add_step_pair(part.get_id(), part.get_step_pair(step))
            global_layers.append(layer)
    return global_layers


# --- Policy Registry ---

ORDERING_POLICIES: Dict[LayerOrdering, Callable[[Sequence[Part], SchedulerSettings], List[GlobalLayer]]] = {
    LayerOrdering.BY_HEIGHT: _schedule_by_height,
    LayerOrdering.BY_LAYER_NUMBER: _schedule_by_layer_number,
    LayerOrdering.BY_PART: _schedule_by_part,
}


def _resolve_policy(policy: LayerOrdering | str) -> LayerOrdering:
    try:
        resolved = LayerOrdering(policy)
    except ValueError:
        raise ConfigurationError(
            f"Unknown layer ordering policy: {policy!r}",
            details={"available": [p.value for p in LayerOrdering]},
        )
    if resolved not in ORDERING_POLICIES:
        raise ConfigurationError(f"No scheduler registered for {resolved.value}")
    return resolved


def schedule(
    parts: Sequence[Part],
    policy: LayerOrdering | str | None = None,
    settings: Optional[SchedulerSettings] = None,
) -> List[GlobalLayer]:
    """
    Merge every part's step sequence into an ordered list of global layers.

    Parameters:
        parts: Build parts in a stable order (ties resolve to the earlier part).
        policy: Ordering policy; defaults to ``settings.layer_ordering``.
        settings: Scheduler settings (tolerance and stacking angles).

    Returns:
        Global layers indexed 0..n-1. Every step of every part appears in
        exactly one layer, in its original order.

    Raises:
        ConfigurationError: If the policy is not a known LayerOrdering.
    """
    settings = settings or SchedulerSettings()
    resolved = _resolve_policy(policy if policy is not None else settings.layer_ordering)

    global_layers = ORDERING_POLICIES[resolved](list(parts), settings)

    logger.info(
        "global_layers_scheduled",
        policy=resolved.value,
        parts=len(parts),
        layers=len(global_layers),
    )
    return global_layers


def populate_step(parts: Sequence[Part]) -> GlobalLayer:
    """
    Build one global layer (index 0) from each part's dirty step pairs.

    Used by real-time slicing, where only the latest changes are printed.
    A part with several dirty pairs contributes its latest one.
    """
    layer = GlobalLayer(0)
    for part in parts:
        dirty = part.get_dirty_step_pairs()
        if not dirty:
            continue
        if len(dirty) > 1:
            logger.warning(
                "dirty_step_pairs_superseded",
                part_id=str(part.get_id()),
                dirty=len(dirty),
                kept_index=part.get_dirty_indices()[-1],
            )
        layer.add_step_pair(part.get_id(), dirty[-1])
    return layer


def log_global_layers(
    global_layers: Sequence[GlobalLayer],
    path: str | Path = DEFAULT_LAYER_LOG,
) -> None:
    """
    Append a plain-text dump of global layer contents to ``path``.

    Debugging aid only: write failures are logged and swallowed so that
    they never affect scheduling results.
    """
    lines = ["Logging global_layers content:"]
    for i, layer in enumerate(global_layers):
        lines.append(f"Global Layer {i}:")
        for part_id, step_pair in layer.get_step_pairs().items():
            if step_pair is None:
                logger.warning("null_step_pair", layer=i, part_id=str(part_id))
                lines.append(f"  StepPair is null for Part ID: {part_id}")
                continue
            has_printing = step_pair.printing_layer is not None
            lines.append(f"  Part ID: {part_id}")
            lines.append(f"    Printing Layer: {'present' if has_printing else 'absent'}")
    lines.append("End of global_layers log")

    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n\n")
    except OSError as e:
        logger.warning("global_layer_log_failed", path=str(path), error=str(e))
