"""
Minimal G-code writer - one ``G1`` per segment, regions bracketed by comments.

Travel planning and extrusion amounts are not computed here.
"""

from typing import Optional

from .base import WriterBase, WriterConfig
from layerweave.slicing.toolpath import LineSegment, RegionType


class GCodeWriter(WriterBase):
    """Plain G-code writer."""

    def __init__(self, config: Optional[WriterConfig] = None):
        super().__init__(config or WriterConfig())
        self._position = None

    def comment(self, text: str) -> str:
        return f"{self.config.comment_prefix}{text}"

    def _line(self, text: str) -> str:
        return text + self.config.line_ending

    def _fmt(self, value: float) -> str:
        return f"{value:.{self.config.decimals}f}"

    def _feed(self, speed: float) -> str:
        if self.config.speed_units == "mm/min":
            return f"{speed * 60:.0f}"
        return f"{speed:.1f}"

    def linear_move(self, segment: LineSegment) -> str:
        out = ""
        if self._position != segment.start:
            out += self._line(
                f"G0 X{self._fmt(segment.start[0])} Y{self._fmt(segment.start[1])}"
            )
        out += self._line(
            f"G1 X{self._fmt(segment.end[0])} Y{self._fmt(segment.end[1])} "
            f"F{self._feed(segment.speed)} "
            f"{self.comment(f'W{segment.width:g} H{segment.height:g}')}"
        )
        self._position = segment.end
        return out

    def region_start(self, region_type: RegionType, path_count: int) -> str:
        return self._line(self.comment(f"BEGIN {region_type.value.upper()} ({path_count} paths)"))

    def region_end(self, region_type: RegionType) -> str:
        return self._line(self.comment(f"END {region_type.value.upper()}"))

    def empty_step(self) -> str:
        return self._line(self.comment("EMPTY STEP"))
