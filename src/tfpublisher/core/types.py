"""Type definitions for the transform publisher.

Quaternions are stored in (x, y, z, w) order throughout.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import ClassVar, Union

# Common type aliases
Vector3 = tuple[float, float, float]
Quaternion = tuple[float, float, float, float]
RPY = tuple[float, float, float]


class AngleUnits(IntEnum):
    """Unit used to interpret and display roll/pitch/yaw."""

    RADIANS = 0
    DEGREES = 1


class ChangeKind(str, Enum):
    """Which field category a reconfiguration edit affects."""

    ALL = "all"
    TRANSLATION = "translation"
    EULER = "euler"
    QUATERNION = "quaternion"
    UNITS = "units"


@dataclass(frozen=True)
class Transform:
    """Rigid-body pose of ``child_frame_id`` relative to ``frame_id``."""

    translation: Vector3
    rotation: Quaternion
    stamp: float
    frame_id: str
    child_frame_id: str


@dataclass(frozen=True)
class ConfigSnapshot:
    """Values exchanged with the reconfiguration channel.

    Roll, pitch and yaw are expressed in ``angle_units``.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0
    qx: float = 0.0
    qy: float = 0.0
    qz: float = 0.0
    qw: float = 1.0
    angle_units: AngleUnits = AngleUnits.RADIANS
    use_quaternion: bool = False


@dataclass(frozen=True)
class RPYLimits:
    """Permitted editing range for roll, pitch and yaw."""

    minimum: float
    maximum: float


@dataclass(frozen=True)
class Diagnostic:
    """A message for the caller to log at ``level``."""

    level: int
    message: str


@dataclass(frozen=True)
class Initialize:
    """Mirror the current transform into a fresh snapshot."""

    kind: ClassVar[ChangeKind] = ChangeKind.ALL


@dataclass(frozen=True)
class ChangeTranslation:
    x: float
    y: float
    z: float

    kind: ClassVar[ChangeKind] = ChangeKind.TRANSLATION


@dataclass(frozen=True)
class ChangeEuler:
    """New orientation as roll/pitch/yaw in the active angle units."""

    roll: float
    pitch: float
    yaw: float

    kind: ClassVar[ChangeKind] = ChangeKind.EULER


@dataclass(frozen=True)
class ChangeQuaternion:
    qx: float
    qy: float
    qz: float
    qw: float

    kind: ClassVar[ChangeKind] = ChangeKind.QUATERNION


@dataclass(frozen=True)
class ChangeAngleUnits:
    units: AngleUnits

    kind: ClassVar[ChangeKind] = ChangeKind.UNITS


EditRequest = Union[Initialize, ChangeTranslation, ChangeEuler, ChangeQuaternion, ChangeAngleUnits]


@dataclass(frozen=True)
class EditResult:
    """Outcome of a single reconfiguration call."""

    snapshot: ConfigSnapshot
    diagnostics: tuple[Diagnostic, ...] = ()
    limits: RPYLimits | None = None


__all__ = [
    "Vector3",
    "Quaternion",
    "RPY",
    "AngleUnits",
    "ChangeKind",
    "Transform",
    "ConfigSnapshot",
    "RPYLimits",
    "Diagnostic",
    "Initialize",
    "ChangeTranslation",
    "ChangeEuler",
    "ChangeQuaternion",
    "ChangeAngleUnits",
    "EditRequest",
    "EditResult",
]
