"""
Tests for build file loading.
"""

import pytest

from layerweave.build.loader import PartSpec, StepSpec, build_parts, load_build
from layerweave.build.part import Part
from layerweave.core.config import BuildSettings, LayerOrdering, SchedulerSettings
from layerweave.core.exceptions import ConfigurationError


BUILD_YAML = """
settings:
  scheduler:
    layer_ordering: by_layer_number
  profile:
    layer_height: 0.5
    infill:
      pattern: grid
parts:
  - name: bracket
    id: bracket-1
    steps:
      - regions:
          infill: [[[0, 0], [10, 0], [10, 10], [0, 10]]]
      - {}
  - name: pin
    layer_height: 1.0
    steps:
      - height: 2.0
      - layer_height: 0.25
"""


@pytest.fixture
def build_file(temp_dir):
    path = temp_dir / "build.yaml"
    path.write_text(BUILD_YAML)
    return path


class TestLoadBuild:

    def test_settings_section(self, build_file):
        settings, _ = load_build(build_file)
        assert settings.scheduler.layer_ordering is LayerOrdering.BY_LAYER_NUMBER
        assert settings.profile.layer_height == 0.5

    def test_parts_and_steps(self, build_file):
        _, parts = load_build(build_file)

        assert [p.name for p in parts] == ["bracket", "pin"]
        assert parts[0].get_id() == "bracket-1"
        assert [p.count_step_pairs() for p in parts] == [2, 2]

    def test_regions_loaded(self, build_file):
        _, parts = load_build(build_file)

        step = parts[0].get_step_pair(0).printing_layer
        assert step.regions["infill"] == [[(0, 0), (10, 0), (10, 10), (0, 10)]]
        assert parts[0].get_step_pair(1).printing_layer.regions == {}

    def test_heights_stack_by_layer_height(self, build_file):
        _, parts = load_build(build_file)
        bracket, pin = parts

        assert bracket.get_step_pair(1).printing_layer.plane.origin[2] == pytest.approx(0.5)
        assert pin.get_step_pair(0).printing_layer.plane.origin[2] == pytest.approx(2.0)
        assert pin.get_step_pair(1).printing_layer.plane.origin[2] == pytest.approx(3.0)

    def test_layer_height_overrides(self, build_file):
        _, parts = load_build(build_file)
        pin = parts[1]

        assert pin.get_step_pair(0).printing_layer.layer_height == 1.0
        assert pin.get_step_pair(1).printing_layer.layer_height == 0.25
        assert pin.get_step_pair(1).printing_layer.settings.infill.pattern.value == "grid"

    def test_loaded_steps_are_dirty(self, build_file):
        _, parts = load_build(build_file)
        assert parts[0].get_dirty_indices() == [0, 1]

    def test_explicit_settings_win(self, build_file):
        settings = BuildSettings(scheduler=SchedulerSettings(layer_ordering="by_part"))

        loaded, parts = load_build(build_file, settings=settings)

        assert loaded is settings
        assert parts[0].get_step_pair(0).printing_layer.layer_height == 0.2

    def test_missing_file(self, temp_dir):
        with pytest.raises(ConfigurationError):
            load_build(temp_dir / "missing.yaml")

    def test_invalid_parts(self, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text("parts:\n  - steps: []\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_build(path)

        assert "error" in exc_info.value.details

    def test_invalid_settings(self, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text("settings:\n  scheduler:\n    layer_ordering: spiral\n")

        with pytest.raises(ConfigurationError):
            load_build(path)


class TestBuildParts:

    def test_planes_follow_stacking_direction(self):
        settings = BuildSettings(scheduler=SchedulerSettings(stacking_yaw=90.0))
        specs = [PartSpec(name="tilted", steps=[StepSpec(height=1.0)])]

        part = build_parts(specs, settings)[0]

        plane = part.get_step_pair(0).printing_layer.plane
        assert list(plane.normal) == pytest.approx([1, 0, 0], abs=1e-9)
        assert list(plane.origin) == pytest.approx([1, 0, 0], abs=1e-9)

    def test_generated_ids_are_unique(self):
        specs = [PartSpec(name="a"), PartSpec(name="b")]

        parts = build_parts(specs, BuildSettings())

        assert all(isinstance(p, Part) for p in parts)
        assert parts[0].get_id() != parts[1].get_id()
