"""Reconfiguration of the live transform.

Each edit names the field category it changes. The engine applies the
matching policy to the shared TransformState and returns a snapshot in which
translation, roll/pitch/yaw, quaternion and angle units agree with each other.
Anomalies in the input are reported as diagnostics and never raised.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from .errors import ReconfigureError
from .frames import (
    DBL_EPSILON,
    normalize_quaternion,
    quaternion_from_rpy,
    quaternion_length2,
    quaternion_to_rpy,
)
from .state import TransformState
from .types import (
    AngleUnits,
    ChangeAngleUnits,
    ChangeEuler,
    ChangeKind,
    ChangeQuaternion,
    ChangeTranslation,
    ConfigSnapshot,
    Diagnostic,
    EditRequest,
    EditResult,
    Initialize,
    RPYLimits,
    Transform,
)
from .units import rpy_from_radians, rpy_limits, rpy_to_radians

ZERO_QUATERNION_MESSAGE = "Reconfigure: zero-length quaternion rejected, using previous value"
NON_UNIT_QUATERNION_MESSAGE = "Reconfigure: non-normalized quaternion corrected"


class ReconfigurationEngine:
    """Applies edit requests to a TransformState.

    The only state owned here is the active angle unit; it is guarded by the
    state's lock together with the transform.
    """

    def __init__(self, state: TransformState, angle_units: AngleUnits = AngleUnits.RADIANS):
        self.state = state
        self._angle_units = AngleUnits(angle_units)
        self._limits = rpy_limits(self._angle_units)

    @property
    def angle_units(self) -> AngleUnits:
        with self.state.lock:
            return self._angle_units

    @property
    def rpy_limits(self) -> RPYLimits:
        with self.state.lock:
            return self._limits

    def apply(self, edit: EditRequest, config: ConfigSnapshot | None = None) -> EditResult:
        """Apply one edit atomically.

        Args:
            edit: The requested change
            config: The channel's previous snapshot. Derived from the current
                transform when omitted.

        Returns:
            The updated snapshot, any diagnostics, and new RPY limits when the
            angle units changed
        """
        handler = self._handlers.get(getattr(edit, "kind", None))
        if handler is None or not isinstance(edit, _REQUEST_TYPES[edit.kind]):
            raise ReconfigureError(f"Unsupported edit request: {edit!r}")

        with self.state.lock:
            if config is None:
                config = self._mirror(self.state.transform)
            return handler(self, edit, config)

    def initialize(self) -> EditResult:
        return self.apply(Initialize())

    def _mirror(self, transform: Transform) -> ConfigSnapshot:
        x, y, z = transform.translation
        qx, qy, qz, qw = transform.rotation
        roll, pitch, yaw = self._display_rpy(transform)
        return ConfigSnapshot(
            x=x,
            y=y,
            z=z,
            roll=roll,
            pitch=pitch,
            yaw=yaw,
            qx=qx,
            qy=qy,
            qz=qz,
            qw=qw,
            angle_units=self._angle_units,
        )

    def _display_rpy(self, transform: Transform) -> tuple[float, float, float]:
        return rpy_from_radians(quaternion_to_rpy(transform.rotation), self._angle_units)

    def _apply_initialize(self, edit: Initialize, config: ConfigSnapshot) -> EditResult:
        snapshot = replace(self._mirror(self.state.transform), use_quaternion=config.use_quaternion)
        return EditResult(snapshot=snapshot)

    def _apply_translation(self, edit: ChangeTranslation, config: ConfigSnapshot) -> EditResult:
        transform = self.state.set_translation(edit.x, edit.y, edit.z)
        x, y, z = transform.translation
        return EditResult(snapshot=replace(config, x=x, y=y, z=z))

    def _apply_euler(self, edit: ChangeEuler, config: ConfigSnapshot) -> EditResult:
        roll, pitch, yaw = rpy_to_radians((edit.roll, edit.pitch, edit.yaw), self._angle_units)
        transform = self.state.set_rotation(quaternion_from_rpy(roll, pitch, yaw))
        qx, qy, qz, qw = transform.rotation
        snapshot = replace(
            config,
            roll=float(edit.roll),
            pitch=float(edit.pitch),
            yaw=float(edit.yaw),
            qx=qx,
            qy=qy,
            qz=qz,
            qw=qw,
        )
        return EditResult(snapshot=snapshot)

    def _apply_quaternion(self, edit: ChangeQuaternion, config: ConfigSnapshot) -> EditResult:
        q = (float(edit.qx), float(edit.qy), float(edit.qz), float(edit.qw))
        diagnostics = []

        length2 = quaternion_length2(q)
        if length2 == 0.0:
            q = self.state.transform.rotation
            diagnostics.append(Diagnostic(logging.WARNING, ZERO_QUATERNION_MESSAGE))
        elif abs(length2 - 1.0) > DBL_EPSILON:
            q = normalize_quaternion(q)
            diagnostics.append(Diagnostic(logging.WARNING, NON_UNIT_QUATERNION_MESSAGE))

        transform = self.state.set_rotation(q)
        qx, qy, qz, qw = transform.rotation
        roll, pitch, yaw = self._display_rpy(transform)
        snapshot = replace(
            config,
            roll=roll,
            pitch=pitch,
            yaw=yaw,
            qx=qx,
            qy=qy,
            qz=qz,
            qw=qw,
            use_quaternion=False,
        )
        return EditResult(snapshot=snapshot, diagnostics=tuple(diagnostics))

    def _apply_units(self, edit: ChangeAngleUnits, config: ConfigSnapshot) -> EditResult:
        try:
            units = AngleUnits(edit.units)
        except ValueError as e:
            raise ReconfigureError(f"Unsupported angle units: {edit.units!r}") from e
        if units == self._angle_units:
            note = Diagnostic(logging.INFO, f"Angle units unchanged ({units.name.lower()})")
            return EditResult(snapshot=config, diagnostics=(note,))

        self._angle_units = units
        self._limits = rpy_limits(units)

        roll, pitch, yaw = self._display_rpy(self.state.transform)
        snapshot = replace(config, roll=roll, pitch=pitch, yaw=yaw, angle_units=units)
        note = Diagnostic(logging.INFO, f"Angle units set to {units.name.lower()}")
        return EditResult(snapshot=snapshot, diagnostics=(note,), limits=self._limits)

    _handlers = {
        ChangeKind.ALL: _apply_initialize,
        ChangeKind.TRANSLATION: _apply_translation,
        ChangeKind.EULER: _apply_euler,
        ChangeKind.QUATERNION: _apply_quaternion,
        ChangeKind.UNITS: _apply_units,
    }


_REQUEST_TYPES = {
    ChangeKind.ALL: Initialize,
    ChangeKind.TRANSLATION: ChangeTranslation,
    ChangeKind.EULER: ChangeEuler,
    ChangeKind.QUATERNION: ChangeQuaternion,
    ChangeKind.UNITS: ChangeAngleUnits,
}


__all__ = [
    "ReconfigurationEngine",
    "ZERO_QUATERNION_MESSAGE",
    "NON_UNIT_QUATERNION_MESSAGE",
]
