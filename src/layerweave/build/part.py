"""
Build part data model.

Parts are sliced upstream; the scheduler and the region synthesizer only
read them. Each part owns an ordered, append-only sequence of StepPairs.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional

from layerweave.core.config import ProfileSettings
from layerweave.core.geometry import Plane, PolygonList


@dataclass(frozen=True, eq=False)
class Step:
    """
    One layer of printable work for a part.

    Attributes:
        plane: Slicing plane the step was sectioned on
        settings: Settings scope for this step and its regions
        regions: Region name -> polygon list (exterior CCW, holes CW)
    """

    plane: Plane
    settings: ProfileSettings = field(default_factory=ProfileSettings)
    regions: Dict[str, PolygonList] = field(default_factory=dict)

    @property
    def layer_height(self) -> float:
        return self.settings.layer_height

    def mid_plane(self) -> Plane:
        """Slicing plane shifted half a layer height along its normal."""
        return self.plane.shift_along_normal(self.layer_height / 2.0)


@dataclass(frozen=True, eq=False)
class StepPair:
    """A part's unit of work at one layer index: printing step plus optional scan."""

    printing_layer: Optional[Step]
    scan_layer: Optional[Step] = None


@dataclass(eq=False)
class Part:
    """
    An independently sliced build part.

    Example:
        >>> part = Part(name="bracket")
        >>> index = part.append_step_pair(StepPair(step))
        >>> part.count_step_pairs()
        1
    """

    name: str = ""
    id: Hashable = field(default_factory=uuid.uuid4)
    step_pairs: List[StepPair] = field(default_factory=list, repr=False)
    _dirty: set[int] = field(default_factory=set, init=False, repr=False)

    def get_id(self) -> Hashable:
        return self.id

    def count_step_pairs(self) -> int:
        return len(self.step_pairs)

    def get_step_pair(self, index: int) -> StepPair:
        """
        Get the step pair at ``index``.

        Raises:
            IndexError: If index is outside 0..count_step_pairs()-1
        """
        if not 0 <= index < len(self.step_pairs):
            raise IndexError(
                f"Step pair {index} out of range for part {self.name or self.id} "
                f"({len(self.step_pairs)} steps)"
            )
        return self.step_pairs[index]

    def append_step_pair(self, step_pair: StepPair, dirty: bool = True) -> int:
        """Append a step pair and return its index."""
        self.step_pairs.append(step_pair)
        index = len(self.step_pairs) - 1
        if dirty:
            self._dirty.add(index)
        return index

    def mark_dirty(self, index: int) -> None:
        self.get_step_pair(index)
        self._dirty.add(index)

    def clear_dirty(self) -> None:
        self._dirty.clear()

    def get_dirty_step_pairs(self) -> List[StepPair]:
        """Step pairs changed since the last pass, in sequence order."""
        return [self.step_pairs[i] for i in sorted(self._dirty)]

    def get_dirty_indices(self) -> List[int]:
        return sorted(self._dirty)
