"""Startup configuration models and I/O.

Pydantic models for the published transform, its frames, the repeat period and
an optional list of scripted edits, with YAML/JSON I/O. The positional command
line forms accepted by ``from_argv`` are:

    x y z yaw pitch roll frame_id child_frame_id period_ms
    x y z qx qy qz qw frame_id child_frame_id period_ms
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .errors import ConfigError
from .state import TransformState
from .types import (
    AngleUnits,
    ChangeAngleUnits,
    ChangeEuler,
    ChangeKind,
    ChangeQuaternion,
    ChangeTranslation,
    EditRequest,
    Initialize,
)
from .units import rpy_to_radians

USAGE = """\
A command line utility for manually sending a transform.
It will periodically republish the given transform.
Usage: tfpublisher run x y z yaw pitch roll frame_id child_frame_id period_ms
OR
Usage: tfpublisher run x y z qx qy qz qw frame_id child_frame_id period_ms

This transform is the transform of the coordinate frame from frame_id into the
coordinate frame of the child_frame_id.
"""

EULER_ARGC = 9
QUATERNION_ARGC = 10


def _parse_units(v: object) -> object:
    """Accept unit names as well as the channel's integer encoding."""
    if isinstance(v, str):
        try:
            return AngleUnits[v.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown angle units: {v}") from None
    return v


class EulerRotation(BaseModel):
    """Rotation as yaw, pitch and roll in the configured angle units."""

    form: Literal["euler"] = "euler"
    yaw: float = Field(default=0.0, description="Rotation about Z")
    pitch: float = Field(default=0.0, description="Rotation about Y")
    roll: float = Field(default=0.0, description="Rotation about X")


class QuaternionRotation(BaseModel):
    """Rotation as an (x, y, z, w) quaternion."""

    form: Literal["quaternion"] = "quaternion"
    qx: float = 0.0
    qy: float = 0.0
    qz: float = 0.0
    qw: float = 1.0

    @model_validator(mode="after")
    def validate_length(self) -> QuaternionRotation:
        """Reject quaternions that cannot describe a rotation."""
        if self.qx == self.qy == self.qz == self.qw == 0.0:
            raise ValueError("Quaternion length cannot be 0.0")
        return self


Rotation = Union[EulerRotation, QuaternionRotation]


class EditEntry(BaseModel):
    """A scripted reconfiguration edit."""

    kind: ChangeKind = Field(description="Field category the edit changes")
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    roll: Optional[float] = None
    pitch: Optional[float] = None
    yaw: Optional[float] = None
    qx: Optional[float] = None
    qy: Optional[float] = None
    qz: Optional[float] = None
    qw: Optional[float] = None
    angle_units: Optional[AngleUnits] = None

    @field_validator("angle_units", mode="before")
    @classmethod
    def parse_units(cls, v: object) -> object:
        return _parse_units(v)

    def _require(self, *names: str) -> list[float]:
        missing = [name for name in names if getattr(self, name) is None]
        if missing:
            raise ConfigError(f"{self.kind.value} edit is missing {', '.join(missing)}")
        return [getattr(self, name) for name in names]

    def to_request(self) -> EditRequest:
        """Build the edit request for this entry."""
        if self.kind == ChangeKind.ALL:
            return Initialize()
        if self.kind == ChangeKind.TRANSLATION:
            return ChangeTranslation(*self._require("x", "y", "z"))
        if self.kind == ChangeKind.EULER:
            return ChangeEuler(*self._require("roll", "pitch", "yaw"))
        if self.kind == ChangeKind.QUATERNION:
            return ChangeQuaternion(*self._require("qx", "qy", "qz", "qw"))
        self._require("angle_units")
        return ChangeAngleUnits(self.angle_units)


class SenderConfig(BaseModel):
    """Complete startup configuration of the transform sender."""

    translation: tuple[float, float, float] = Field(
        default=(0.0, 0.0, 0.0), description="Translation (x, y, z)"
    )
    rotation: Rotation = Field(
        default_factory=EulerRotation, discriminator="form", description="Initial rotation"
    )
    frame_id: str = Field(description="Parent frame")
    child_frame_id: str = Field(description="Child frame")
    period_ms: float = Field(description="Repeat period in milliseconds")
    angle_units: AngleUnits = Field(
        default=AngleUnits.RADIANS, description="Units of Euler angles in this config"
    )
    edits: list[EditEntry] = Field(default_factory=list, description="Scripted edits")

    @field_validator("angle_units", mode="before")
    @classmethod
    def parse_units(cls, v: object) -> object:
        return _parse_units(v)

    @field_validator("frame_id", "child_frame_id")
    @classmethod
    def validate_frame(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Frame ids must not be empty")
        return v

    @field_validator("period_ms")
    @classmethod
    def validate_period(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Period must be positive, got {v}")
        return v

    @model_validator(mode="after")
    def validate_frames(self) -> SenderConfig:
        """A transform from a frame onto itself cannot work."""
        if self.frame_id == self.child_frame_id:
            raise ValueError(
                f"target_frame and source frame are the same "
                f"({self.frame_id}, {self.child_frame_id}) this cannot work"
            )
        return self

    @property
    def period_s(self) -> float:
        return self.period_ms / 1000.0

    def build_state(self) -> TransformState:
        """Create the TransformState, stamped one period past the epoch."""
        if isinstance(self.rotation, EulerRotation):
            roll, pitch, yaw = rpy_to_radians(
                (self.rotation.roll, self.rotation.pitch, self.rotation.yaw), self.angle_units
            )
            return TransformState.from_euler(
                self.translation,
                yaw,
                pitch,
                roll,
                self.period_s,
                self.frame_id,
                self.child_frame_id,
            )
        r = self.rotation
        return TransformState.from_quaternion(
            self.translation,
            (r.qx, r.qy, r.qz, r.qw),
            self.period_s,
            self.frame_id,
            self.child_frame_id,
        )

    def edit_requests(self) -> list[EditRequest]:
        return [entry.to_request() for entry in self.edits]


def _validate(data: dict) -> SenderConfig:
    try:
        return SenderConfig(**data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e


def from_argv(args: Sequence[str]) -> SenderConfig:
    """Build a config from the positional command line forms.

    Raises:
        ConfigError: On a wrong argument count, non-numeric values or
            identical frame ids
    """
    args = list(args)
    if len(args) not in (EULER_ARGC, QUATERNION_ARGC):
        raise ConfigError(
            f"Expected {EULER_ARGC} or {QUATERNION_ARGC} arguments, got {len(args)}"
        )

    n_rot = 3 if len(args) == EULER_ARGC else 4
    try:
        numbers = [float(a) for a in args[: 3 + n_rot]]
        period_ms = float(args[-1])
    except ValueError as e:
        raise ConfigError(f"Invalid numeric argument: {e}") from e
    frame_id, child_frame_id = args[3 + n_rot], args[4 + n_rot]

    if n_rot == 3:
        yaw, pitch, roll = numbers[3:6]
        rotation: dict = {"form": "euler", "yaw": yaw, "pitch": pitch, "roll": roll}
    else:
        qx, qy, qz, qw = numbers[3:7]
        rotation = {"form": "quaternion", "qx": qx, "qy": qy, "qz": qz, "qw": qw}

    return _validate(
        {
            "translation": tuple(numbers[:3]),
            "rotation": rotation,
            "frame_id": frame_id,
            "child_frame_id": child_frame_id,
            "period_ms": period_ms,
        }
    )


def load_config(path: str | Path) -> SenderConfig:
    """Load configuration from YAML or JSON file.

    Args:
        path: Path to configuration file

    Returns:
        Validated SenderConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If config is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")

    return _validate(data)


def save_config(config: SenderConfig, path: str | Path) -> None:
    """Save configuration to YAML or JSON file.

    Args:
        config: Configuration to save
        path: Output file path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", exclude_none=True)

    with open(path, "w", encoding="utf-8") as f:
        if path.suffix.lower() in [".yaml", ".yml"]:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)


__all__ = [
    "USAGE",
    "EulerRotation",
    "QuaternionRotation",
    "EditEntry",
    "SenderConfig",
    "from_argv",
    "load_config",
    "save_config",
]
