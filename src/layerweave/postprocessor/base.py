"""
WriterBase - Abstract base class for machine-instruction writers.

Regions call the writer's hooks to bracket their motion:

  write_before_region(region_type, path_count)  - before the first path
  write_segment(segment)                        - once per segment
  write_after_path(region_type)                 - after the last path
  write_empty_step()                            - instead of all of the above
                                                  when a region has no paths

Hook templates in ``WriterHooks`` may use ``{regionType}``, ``{pathCount}``
and ``{layerIndex}``; they are appended after the writer's own output.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any, Dict

from layerweave.slicing.toolpath import LineSegment, RegionType


@dataclass
class WriterHooks:
    """
    Customizable code snippets injected at region and layer events.
    """
    before_region: str = ""
    after_path: str = ""
    empty_step: str = ""
    layer_change: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'WriterHooks':
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in d.items() if k in valid_fields})


@dataclass
class WriterConfig:
    """Configuration for a writer instance."""
    format_name: str = "gcode"
    line_ending: str = "\n"
    comment_prefix: str = "; "

    # Speeds are given in mm/s on segments; G-code feed rates are mm/min
    speed_units: str = "mm/min"
    decimals: int = 3

    hooks: WriterHooks = field(default_factory=WriterHooks)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'WriterConfig':
        d = dict(d)
        hooks_data = d.pop('hooks', {})
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        config = cls(**{k: v for k, v in d.items() if k in valid_fields})
        if hooks_data:
            config.hooks = WriterHooks.from_dict(hooks_data)
        return config


class WriterBase(ABC):
    """
    Abstract base class for writers.

    Subclasses implement format-specific methods:
    - comment()
    - linear_move()
    - region_start() / region_end() / empty_step()
    """

    def __init__(self, config: WriterConfig | None = None):
        self.config = config or WriterConfig()
        self._current_layer: int = -1

    @property
    def format_name(self) -> str:
        return self.config.format_name

    # ── Abstract methods (must be implemented by subclasses) ───────────

    @abstractmethod
    def comment(self, text: str) -> str:
        """Format a comment line."""
        ...

    @abstractmethod
    def linear_move(self, segment: LineSegment) -> str:
        """Format the printing move for one segment."""
        ...

    @abstractmethod
    def region_start(self, region_type: RegionType, path_count: int) -> str:
        ...

    @abstractmethod
    def region_end(self, region_type: RegionType) -> str:
        ...

    @abstractmethod
    def empty_step(self) -> str:
        ...

    # ── Region hooks ──────────────────────────────────────────────────

    def write_before_region(self, region_type: RegionType, path_count: int) -> str:
        return self.region_start(region_type, path_count) + self._expand(
            self.config.hooks.before_region,
            regionType=region_type.value,
            pathCount=path_count,
        )

    def write_segment(self, segment: LineSegment) -> str:
        return self.linear_move(segment)

    def write_after_path(self, region_type: RegionType) -> str:
        return self.region_end(region_type) + self._expand(
            self.config.hooks.after_path, regionType=region_type.value,
        )

    def write_empty_step(self) -> str:
        return self.empty_step() + self._expand(self.config.hooks.empty_step)

    def write_layer_change(self, layer_index: int) -> str:
        self._current_layer = layer_index
        return self.comment(f"Layer {layer_index}") + self.config.line_ending + self._expand(
            self.config.hooks.layer_change, layerIndex=layer_index,
        )

    # ── Hook expansion ────────────────────────────────────────────────

    def _expand(self, template: str, **values: Any) -> str:
        if not template:
            return ""
        values.setdefault("layerIndex", self._current_layer)
        lines = template.format(**values).splitlines()
        return "".join(line + self.config.line_ending for line in lines)
