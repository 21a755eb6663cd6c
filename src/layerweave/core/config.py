"""
Configuration management for layerweave.

Settings are immutable pydantic models passed explicitly into the scheduler
and the region synthesizer. ConfigManager loads named profiles from YAML.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from layerweave.core.exceptions import ConfigurationError


class LayerOrdering(str, Enum):
    """Policy used to interleave per-part steps into global layers."""

    BY_HEIGHT = "by_height"  # Group steps whose mid-planes coincide
    BY_LAYER_NUMBER = "by_layer_number"  # Group the i-th step of every part
    BY_PART = "by_part"  # Print parts one after another


class InfillPatternKind(str, Enum):
    """Infill pattern types."""

    LINES = "lines"
    GRID = "grid"
    CONCENTRIC = "concentric"
    TRIANGLES = "triangles"
    HEXAGONS_AND_TRIANGLES = "hexagons_and_triangles"
    HONEYCOMB = "honeycomb"
    RADIAL_HATCH = "radial_hatch"


class _Settings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class SchedulerSettings(_Settings):
    """Global layer scheduling settings.

    Stacking angles are in degrees and rotate the canonical +Z stacking
    direction shared by every part.
    """

    layer_ordering: LayerOrdering = LayerOrdering.BY_HEIGHT
    layer_grouping_tolerance: float = Field(default=0.01, ge=0.0)
    stacking_pitch: float = 0.0
    stacking_yaw: float = 0.0
    stacking_roll: float = 0.0


class PrinterSettings(_Settings):
    """Machine envelope, infill pivot and motion limits."""

    x_min: float = 0.0
    x_max: float = 300.0
    y_min: float = 0.0
    y_max: float = 300.0
    x_offset: float = 0.0
    y_offset: float = 0.0
    infill_acceleration: float = Field(default=1000.0, ge=0.0)

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """Bed bounding box as (min_x, min_y, max_x, max_y)."""
        return (self.x_min, self.y_min, self.x_max, self.y_max)


class InfillSettings(_Settings):
    """Infill region settings. Angles in degrees, distances in mm."""

    pattern: InfillPatternKind = InfillPatternKind.LINES
    line_spacing: float = Field(default=2.0, gt=0.0)
    bead_width: float = Field(default=0.5, gt=0.0)
    angle: float = 0.0
    angle_rotation: float = 0.0
    based_on_printer: bool = False
    overlap: float = Field(default=0.0, ge=0.0)
    speed: float = Field(default=50.0, gt=0.0)
    extruder_speed: float = Field(default=0.0, ge=0.0)


class ProfileSettings(_Settings):
    """Settings scope attached to a step and its regions."""

    name: str = "default"
    layer_height: float = Field(default=0.2, gt=0.0)
    infill: InfillSettings = Field(default_factory=InfillSettings)
    printer: PrinterSettings = Field(default_factory=PrinterSettings)


class BuildSettings(_Settings):
    """Top-level settings for a scheduling and toolpath pass."""

    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    profile: ProfileSettings = Field(default_factory=ProfileSettings)


def parse_settings(data: dict[str, Any] | None, source: str = "<dict>") -> BuildSettings:
    """
    Validate a raw mapping into BuildSettings.

    Raises:
        ConfigurationError: If the mapping does not validate
    """
    try:
        return BuildSettings(**(data or {}))
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid build settings: {source}",
            details={"error": str(e)},
        )


@dataclass
class ConfigManager:
    """
    Loads named slicing profiles from a configuration directory.

    Profiles live in ``<config_dir>/profiles/*.yaml`` under a ``profile:``
    section; an optional ``scheduler:`` section provides the scheduling
    settings used together with that profile.

    Example:
        >>> config = ConfigManager(config_dir=Path("config"))
        >>> profile = config.get_profile("pla_fine")
        >>> settings = config.get_build_settings("pla_fine")
    """

    config_dir: Path
    _profiles: dict[str, ProfileSettings] = field(default_factory=dict, init=False)
    _schedulers: dict[str, SchedulerSettings] = field(default_factory=dict, init=False)
    _loaded: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.config_dir = Path(self.config_dir)
        if not self.config_dir.exists():
            raise ConfigurationError(
                f"Configuration directory not found: {self.config_dir}"
            )

    def load(self) -> None:
        """Load all profiles from disk."""
        profiles_dir = self.config_dir / "profiles"
        if profiles_dir.exists():
            for config_file in sorted(profiles_dir.glob("*.yaml")):
                self._load_profile(config_file)
        self._loaded = True

    def _load_profile(self, config_file: Path) -> None:
        try:
            with open(config_file) as f:
                data = yaml.safe_load(f)

            if data and "profile" in data:
                profile_data = dict(data["profile"])
                profile_data.setdefault("name", config_file.stem)
                self._profiles[config_file.stem] = ProfileSettings(**profile_data)
                self._schedulers[config_file.stem] = SchedulerSettings(
                    **(data.get("scheduler") or {})
                )
        except (yaml.YAMLError, ValidationError) as e:
            raise ConfigurationError(
                f"Failed to load profile config: {config_file}",
                details={"error": str(e)},
            )

    def get_profile(self, name: str) -> ProfileSettings:
        """
        Get profile settings by name.

        Args:
            name: Profile name (without .yaml extension)

        Raises:
            ConfigurationError: If profile not found
        """
        if not self._loaded:
            self.load()

        if name not in self._profiles:
            raise ConfigurationError(
                f"Profile configuration not found: {name}",
                details={"available": list(self._profiles.keys())},
            )
        return self._profiles[name]

    def get_build_settings(self, name: str) -> BuildSettings:
        """Combine a profile with its scheduler section."""
        profile = self.get_profile(name)
        return BuildSettings(scheduler=self._schedulers[name], profile=profile)

    def list_profiles(self) -> list[str]:
        """List available profile names."""
        if not self._loaded:
            self.load()
        return list(self._profiles.keys())

    @staticmethod
    def load_settings(path: str | Path) -> BuildSettings:
        """Load BuildSettings from a standalone YAML file."""
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Settings file not found: {path}")
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse settings file: {path}",
                details={"error": str(e)},
            )
        return parse_settings(data, source=str(path))
