"""
Global layer: one synchronized print pass across build parts.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Hashable, Iterator, List, Mapping, Optional, Tuple

from layerweave.build.part import StepPair
from layerweave.core.exceptions import SchedulingError


class GlobalLayer:
    """
    Maps part ids to the single StepPair each part prints in this pass.

    A part appears at most once per global layer; the layer holds references
    to step pairs owned by the parts, never copies.
    """

    def __init__(self, index: int) -> None:
        self.index = index
        self._step_pairs: Dict[Hashable, Optional[StepPair]] = {}

    def add_step_pair(self, part_id: Hashable, step_pair: Optional[StepPair]) -> None:
        """
        Add a part's step pair to this layer.

        Raises:
            SchedulingError: If the part already has a step pair in this layer
        """
        if part_id in self._step_pairs:
            raise SchedulingError(
                f"Part {part_id} already has a step pair in global layer {self.index}",
                layer_index=self.index,
                details={"part_id": str(part_id)},
            )
        self._step_pairs[part_id] = step_pair

    def get_step_pairs(self) -> Mapping[Hashable, Optional[StepPair]]:
        """Read-only view of part id -> step pair, in insertion order."""
        return MappingProxyType(self._step_pairs)

    @property
    def part_ids(self) -> List[Hashable]:
        return list(self._step_pairs)

    def __len__(self) -> int:
        return len(self._step_pairs)

    def __contains__(self, part_id: object) -> bool:
        return part_id in self._step_pairs

    def __iter__(self) -> Iterator[Tuple[Hashable, Optional[StepPair]]]:
        return iter(self._step_pairs.items())

    def __repr__(self) -> str:
        return f"GlobalLayer(index={self.index}, parts={len(self._step_pairs)})"
