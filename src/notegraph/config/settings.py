"""Validated settings for the graph engine.

Every knob exposed by a settings surface (sliders, checkboxes) maps onto a
field here.  Models validate on assignment so a host can mutate them live
between animation frames without ever handing the engine an out-of-range
value.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.exceptions import ConfigError
from .defaults import (
    DEFAULT_CENTER_PULL,
    DEFAULT_DT,
    DEFAULT_FRAME_RATE,
    DEFAULT_FRICTION,
    DEFAULT_NODE_SIZE,
    DEFAULT_REPULSION,
    DEFAULT_SPRING_LENGTH,
    DEFAULT_SPRING_STRENGTH,
    MAX_NODE_SIZE,
    MIN_NODE_SIZE,
)

BoundaryKind = Literal["circular", "rectangular"]


class PhysicsParams(BaseModel):
    """Force-simulation parameters."""

    model_config = ConfigDict(validate_assignment=True)

    repulsion: float = Field(
        default=DEFAULT_REPULSION, ge=0, le=10000, description="Pairwise repulsion"
    )
    spring_length: float = Field(
        default=DEFAULT_SPRING_LENGTH, ge=30, le=300, description="Edge rest length"
    )
    spring_strength: float = Field(default=DEFAULT_SPRING_STRENGTH, gt=0, le=1)
    center_pull: float = Field(default=DEFAULT_CENTER_PULL, ge=0, le=0.05)
    friction: float = Field(
        default=DEFAULT_FRICTION, gt=0, lt=1, description="Velocity kept per frame"
    )
    dt: float = Field(default=DEFAULT_DT, gt=0, le=1, description="Time increment")


class DisplayOptions(BaseModel):
    """Visual options consumed by the render pipeline and hit-testing."""

    model_config = ConfigDict(validate_assignment=True)

    node_size: float = Field(
        default=DEFAULT_NODE_SIZE, ge=MIN_NODE_SIZE, le=MAX_NODE_SIZE
    )
    show_labels: bool = True
    device_pixel_ratio: float = Field(default=1.0, gt=0)


class GraphSettings(BaseModel):
    """Complete engine configuration."""

    model_config = ConfigDict(validate_assignment=True)

    physics: PhysicsParams = Field(default_factory=PhysicsParams)
    display: DisplayOptions = Field(default_factory=DisplayOptions)
    boundary: BoundaryKind = "circular"
    include_hierarchy: bool = False
    preserve_positions: bool = False
    frame_rate: int = Field(default=DEFAULT_FRAME_RATE, ge=1, le=240)

    @property
    def frame_interval(self) -> float:
        """Seconds between animation frames."""
        return 1.0 / self.frame_rate

    @classmethod
    def load(cls, path: Path) -> GraphSettings:
        """Load settings from a YAML file.

        Args:
            path: Path to YAML settings file

        Returns:
            GraphSettings instance (defaults when the file does not exist)

        Raises:
            ConfigError: If the file is not valid YAML or fails validation
        """
        if not path.exists():
            return cls()

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML in {path}: {e}", context={"path": str(path)}
            ) from e

        return cls.from_dict(data, source=str(path))

    @classmethod
    def from_dict(cls, data: Any, source: str = "<dict>") -> GraphSettings:
        """Create settings from a plain mapping.

        Raises:
            ConfigError: If the mapping fails validation
        """
        if not isinstance(data, dict):
            raise ConfigError(
                f"Settings in {source} must be a mapping", context={"path": source}
            )
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(
                f"Invalid settings in {source}: {e.error_count()} error(s)",
                context={"path": source, "errors": e.errors()},
            ) from e
