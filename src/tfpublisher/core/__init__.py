"""Core module with the live transform, its reconfiguration, and utilities."""

from .reconfigure import ReconfigurationEngine
from .state import TransformState
from .types import AngleUnits, ChangeKind, ConfigSnapshot, Transform

__all__ = [
    "AngleUnits",
    "ChangeKind",
    "ConfigSnapshot",
    "ReconfigurationEngine",
    "Transform",
    "TransformState",
]
