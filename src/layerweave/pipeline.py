"""
Pipeline orchestrator for a multi-part build.

Chains: parts -> global layer scheduling -> per-region infill synthesis -> writer

Each stage is timed and reported through an optional progress callback.
Data errors in a stage are recorded on the result; configuration errors
are fatal and propagate to the caller.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from layerweave.build.part import Part
from layerweave.core.config import BuildSettings
from layerweave.core.exceptions import ConfigurationError, LayerWeaveError
from layerweave.core.logging import get_logger, layer_context
from layerweave.postprocessor.base import WriterBase
from layerweave.postprocessor.gcode import GCodeWriter
from layerweave.scheduling.global_layer import GlobalLayer
from layerweave.scheduling.layer_order import populate_step, schedule
from layerweave.slicing.infill_sector import InfillSector

logger = get_logger(__name__)


@dataclass
class StageResult:
    """Result of a single pipeline stage."""

    name: str
    success: bool
    data: Any = None
    error: Optional[str] = None
    duration_s: float = 0.0


@dataclass
class PipelineResult:
    """Result of a complete pipeline run."""

    success: bool
    global_layers: List[GlobalLayer] = field(default_factory=list)
    path_counts: Dict[int, int] = field(default_factory=dict)  # layer index -> paths
    path_lengths: Dict[int, float] = field(default_factory=dict)  # layer index -> mm of infill
    program: str = ""
    stages: List[StageResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    timings: Dict[str, float] = field(default_factory=dict)
    stage_completed: str = ""  # Last stage that completed successfully


# Type alias for progress callback: (stage_name, fraction 0.0-1.0)
ProgressCallback = Callable[[str, float], None]


def _noop_callback(stage: str, pct: float) -> None:
    pass


class BuildPipeline:
    """End-to-end build orchestrator.

    Usage:
        pipeline = BuildPipeline(writer=GCodeWriter())
        result = pipeline.execute(parts, settings)
        Path("build.gcode").write_text(result.program)
    """

    def __init__(
        self,
        writer: Optional[WriterBase] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self._writer = writer or GCodeWriter()
        self._progress = progress_callback or _noop_callback

    def execute(
        self,
        parts: Sequence[Part],
        settings: BuildSettings,
        incremental: bool = False,
    ) -> PipelineResult:
        """Schedule ``parts`` and write every region of every global layer.

        With ``incremental`` only the parts' dirty steps are written, as a
        single global layer.
        """
        result = PipelineResult(success=False)

        if incremental:
            stage = self._run_stage("scheduling", lambda: [populate_step(parts)])
        else:
            stage = self._run_stage(
                "scheduling",
                lambda: schedule(parts, settings=settings.scheduler),
            )
        result.stages.append(stage)
        if not stage.success:
            result.errors.append(f"Scheduling failed: {stage.error}")
            return result
        result.global_layers = stage.data
        result.stage_completed = "scheduling"
        result.timings["scheduling"] = stage.duration_s

        stage = self._run_stage("toolpaths", lambda: self._write_layers(result, parts))
        result.stages.append(stage)
        if not stage.success:
            result.errors.append(f"Toolpath generation failed: {stage.error}")
            return result
        result.program = stage.data
        result.stage_completed = "toolpaths"
        result.timings["toolpaths"] = stage.duration_s

        result.success = True
        return result

    def _write_layers(self, result: PipelineResult, parts: Sequence[Part]) -> str:
        writer = self._writer
        # part id -> step pair identity -> layer number within the part
        layer_numbers: Dict[Any, Dict[int, int]] = {
            part.get_id(): {id(pair): i for i, pair in enumerate(part.step_pairs)}
            for part in parts
        }
        total = max(len(result.global_layers), 1)
        program = ""

        for n, layer in enumerate(result.global_layers):
            program += writer.write_layer_change(layer.index)
            path_count = 0
            path_length = 0.0
            for part_id, step_pair in layer.get_step_pairs().items():
                if step_pair is None or step_pair.printing_layer is None:
                    logger.warning("missing_step_pair", layer=layer.index, part_id=str(part_id))
                    continue
                step = step_pair.printing_layer
                layer_num = layer_numbers[part_id][id(step_pair)]
                for region_index, (name, polygons) in enumerate(step.regions.items()):
                    with layer_context(
                        global_layer=layer.index, part_id=str(part_id), part_layer=layer_num, region=name,
                    ):
                        sector = InfillSector(step.settings, region_index, polygons)
                        sector.compute(layer_num)
                        program += sector.write_gcode(writer)
                    path_count += len(sector.paths)
                    path_length += sum(path.get_length() for path in sector.paths)
            result.path_counts[layer.index] = path_count
            result.path_lengths[layer.index] = path_length
            self._progress("toolpaths", (n + 1) / total)

        return program

    def _run_stage(self, name: str, fn: Callable) -> StageResult:
        """Execute a single pipeline stage with timing and error handling."""
        self._progress(name, 0.0)
        t0 = time.perf_counter()
        try:
            data = fn()
        except ConfigurationError:
            raise
        except LayerWeaveError as e:
            duration = time.perf_counter() - t0
            logger.error("pipeline_stage_failed", stage=name, duration_s=round(duration, 2), error=str(e))
            return StageResult(name=name, success=False, error=str(e), duration_s=duration)
        duration = time.perf_counter() - t0
        self._progress(name, 1.0)
        logger.info("pipeline_stage_complete", stage=name, duration_s=round(duration, 2))
        return StageResult(name=name, success=True, data=data, duration_s=duration)
