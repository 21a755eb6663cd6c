"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from layerweave.build.part import Part, Step, StepPair
from layerweave.core.config import InfillSettings, PrinterSettings, ProfileSettings
from layerweave.core.geometry import Plane


SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def square():
    """10 mm counter-clockwise square."""
    return list(SQUARE)


@pytest.fixture
def profile():
    """Profile with distinct values for every segment attribute."""
    return ProfileSettings(
        layer_height=0.25,
        infill=InfillSettings(
            pattern="lines",
            line_spacing=2.0,
            bead_width=0.6,
            speed=40.0,
            extruder_speed=120.0,
        ),
        printer=PrinterSettings(x_offset=5.0, y_offset=5.0, infill_acceleration=800.0),
    )


def make_part(name, mid_heights, layer_height=0.2, regions=None, settings=None):
    """Build a part whose steps have mid-planes at ``mid_heights`` along +Z."""
    settings = settings or ProfileSettings(layer_height=layer_height)
    layer_height = settings.layer_height
    part = Part(name=name)
    for mid in mid_heights:
        step = Step(
            plane=Plane.from_height(mid - layer_height / 2),
            settings=settings,
            regions=regions or {},
        )
        part.append_step_pair(StepPair(step), dirty=False)
    return part


def step_index(part, step_pair):
    """Index of ``step_pair`` within ``part`` (identity match)."""
    for i, pair in enumerate(part.step_pairs):
        if pair is step_pair:
            return i
    raise AssertionError(f"step pair not found in part {part.name}")


@pytest.fixture
def sample_config_dir(temp_dir):
    """Create a sample configuration directory with two profiles."""
    config_dir = temp_dir / "config"
    (config_dir / "profiles").mkdir(parents=True)

    (config_dir / "profiles" / "pla_fine.yaml").write_text("""
profile:
  layer_height: 0.1
  infill:
    pattern: grid
    line_spacing: 1.5
    bead_width: 0.4
    angle: 45

scheduler:
  layer_ordering: by_layer_number
  layer_grouping_tolerance: 0.05
""")

    (config_dir / "profiles" / "waam_coarse.yaml").write_text("""
profile:
  name: WAAM Coarse
  layer_height: 2.5
  infill:
    pattern: concentric
    line_spacing: 6.0
    bead_width: 6.0
""")

    return config_dir


@pytest.fixture
def part_factory():
    """Factory for parts with steps at given mid-plane heights."""
    return make_part


@pytest.fixture
def step_indexer():
    """Resolve a step pair back to its index within a part."""
    return step_index
