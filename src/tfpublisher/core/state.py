"""The single live transform republished by the sender."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import replace

from .frames import is_normalized, normalize_quaternion, quaternion_from_rpy
from .types import Quaternion, Transform, Vector3


class TransformState:
    """Owns the current transform and the lock that guards it.

    The lock is shared with the reconfiguration engine so that a publish read
    never observes a half-applied edit.
    """

    def __init__(self, transform: Transform, clock: Callable[[], float] = time.time):
        self._transform = transform
        self._clock = clock
        self.lock = threading.RLock()

    @classmethod
    def from_euler(
        cls,
        translation: Vector3,
        yaw: float,
        pitch: float,
        roll: float,
        stamp: float,
        frame_id: str,
        child_frame_id: str,
        clock: Callable[[], float] = time.time,
    ) -> TransformState:
        """Create the state from a translation and yaw/pitch/roll in radians."""
        rotation = quaternion_from_rpy(roll, pitch, yaw)
        return cls(_make_transform(translation, rotation, stamp, frame_id, child_frame_id), clock)

    @classmethod
    def from_quaternion(
        cls,
        translation: Vector3,
        rotation: Quaternion,
        stamp: float,
        frame_id: str,
        child_frame_id: str,
        clock: Callable[[], float] = time.time,
    ) -> TransformState:
        """Create the state from a translation and an (x, y, z, w) quaternion.

        Non-unit quaternions are normalized; a zero-length one raises ValueError.
        """
        if not is_normalized(rotation):
            rotation = normalize_quaternion(rotation)
        return cls(_make_transform(translation, rotation, stamp, frame_id, child_frame_id), clock)

    @property
    def transform(self) -> Transform:
        with self.lock:
            return self._transform

    def now(self) -> float:
        return self._clock()

    def current(self, publish_time: float) -> Transform:
        """Return the transform stamped with ``publish_time``."""
        with self.lock:
            self._transform = replace(self._transform, stamp=float(publish_time))
            return self._transform

    def set_translation(self, x: float, y: float, z: float) -> Transform:
        with self.lock:
            self._transform = replace(
                self._transform,
                translation=(float(x), float(y), float(z)),
                stamp=self.now(),
            )
            return self._transform

    def set_rotation(self, rotation: Quaternion) -> Transform:
        with self.lock:
            self._transform = replace(
                self._transform,
                rotation=_as_quaternion(rotation),
                stamp=self.now(),
            )
            return self._transform


def _as_quaternion(q: Quaternion) -> Quaternion:
    return (float(q[0]), float(q[1]), float(q[2]), float(q[3]))


def _make_transform(
    translation: Vector3,
    rotation: Quaternion,
    stamp: float,
    frame_id: str,
    child_frame_id: str,
) -> Transform:
    x, y, z = translation
    return Transform(
        translation=(float(x), float(y), float(z)),
        rotation=_as_quaternion(rotation),
        stamp=float(stamp),
        frame_id=frame_id,
        child_frame_id=child_frame_id,
    )


__all__ = ["TransformState"]
