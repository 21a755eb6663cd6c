"""
Build file loading.

A build file is YAML with a ``settings`` section (BuildSettings fields) and a
``parts`` list::

    settings:
      scheduler: {layer_ordering: by_height, layer_grouping_tolerance: 0.01}
      profile: {layer_height: 0.2, infill: {pattern: grid, line_spacing: 2.0}}
    parts:
      - name: bracket
        layer_height: 0.3            # optional, overrides the profile
        steps:
          - height: 0.0              # optional, defaults to the running stack
            regions:
              infill: [[[0, 0], [10, 0], [10, 10], [0, 10]]]

Step planes are placed ``height`` along the configured stacking direction.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError

from layerweave.build.part import Part, Step, StepPair
from layerweave.core.config import BuildSettings, parse_settings
from layerweave.core.exceptions import ConfigurationError
from layerweave.core.geometry import Plane, stacking_normal
from layerweave.core.logging import get_logger

logger = get_logger(__name__)


class StepSpec(BaseModel):
    height: Optional[float] = None
    layer_height: Optional[float] = Field(default=None, gt=0.0)
    regions: Dict[str, List[List[Tuple[float, float]]]] = Field(default_factory=dict)


class PartSpec(BaseModel):
    name: str
    id: Optional[str] = None
    layer_height: Optional[float] = Field(default=None, gt=0.0)
    steps: List[StepSpec] = Field(default_factory=list)


class BuildFile(BaseModel):
    settings: Dict[str, Any] = Field(default_factory=dict)
    parts: List[PartSpec] = Field(default_factory=list)


def build_parts(specs: List[PartSpec], settings: BuildSettings) -> List[Part]:
    """Create Parts with planes along the configured stacking direction."""
    scheduler = settings.scheduler
    normal = stacking_normal(
        scheduler.stacking_pitch, scheduler.stacking_yaw, scheduler.stacking_roll,
    )

    parts: List[Part] = []
    for spec in specs:
        part = Part(name=spec.name, id=spec.id) if spec.id else Part(name=spec.name)
        stack = 0.0
        for step_spec in spec.steps:
            layer_height = step_spec.layer_height or spec.layer_height
            profile = settings.profile
            if layer_height is not None:
                profile = profile.model_copy(update={"layer_height": layer_height})

            height = step_spec.height if step_spec.height is not None else stack
            step = Step(
                plane=Plane.from_height(height, normal),
                settings=profile,
                regions={
                    name: [list(ring) for ring in rings]
                    for name, rings in step_spec.regions.items()
                },
            )
            part.append_step_pair(StepPair(step))
            stack = height + profile.layer_height
        parts.append(part)
    return parts


def load_build(
    path: str | Path,
    settings: Optional[BuildSettings] = None,
) -> Tuple[BuildSettings, List[Part]]:
    """
    Load settings and parts from a YAML build file.

    Parameters:
        path: Build file path.
        settings: Settings to use instead of the file's ``settings`` section.

    Raises:
        ConfigurationError: If the file is missing or does not validate.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Build file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        build = BuildFile(**data)
    except (yaml.YAMLError, ValidationError, TypeError) as e:
        raise ConfigurationError(
            f"Failed to load build file: {path}",
            details={"error": str(e)},
        )

    if settings is None:
        settings = parse_settings(build.settings, source=str(path))
    parts = build_parts(build.parts, settings)

    logger.info(
        "build_loaded",
        path=str(path),
        parts=len(parts),
        steps=sum(p.count_step_pairs() for p in parts),
    )
    return settings, parts
