"""Rotation representations for published transforms.

Right-handed frames. Roll is applied about X, pitch about Y and yaw about Z,
composed as R = Rz(yaw) @ Ry(pitch) @ Rx(roll). Quaternions are (x, y, z, w).
"""

from __future__ import annotations

import numpy as np

from .types import RPY, Quaternion

# Tolerance used to decide whether a quaternion needs normalizing
DBL_EPSILON = float(np.finfo(np.float64).eps)

# Below this distance of sin(pitch) from +-1 roll and yaw are not separable
GIMBAL_LOCK_TOLERANCE = 1e-12


def quaternion_from_rpy(roll: float, pitch: float, yaw: float) -> Quaternion:
    """Build the quaternion for a roll-pitch-yaw rotation (radians)."""
    half = np.array([roll, pitch, yaw], dtype=np.float64) / 2.0
    cr, cp, cy = np.cos(half)
    sr, sp, sy = np.sin(half)

    x = sr * cp * cy - cr * sp * sy
    y = cr * sp * cy + sr * cp * sy
    z = cr * cp * sy - sr * sp * cy
    w = cr * cp * cy + sr * sp * sy

    return (float(x), float(y), float(z), float(w))


def quaternion_to_matrix(q: Quaternion) -> np.ndarray:
    """Convert a quaternion to a 3x3 rotation matrix.

    Non-unit quaternions are implicitly normalized.
    """
    x, y, z, w = (float(c) for c in q)
    d = x * x + y * y + z * z + w * w
    if d == 0.0:
        raise ValueError("Cannot build a rotation matrix from a zero-length quaternion")
    s = 2.0 / d

    xs, ys, zs = x * s, y * s, z * s
    wx, wy, wz = w * xs, w * ys, w * zs
    xx, xy, xz = x * xs, x * ys, x * zs
    yy, yz, zz = y * ys, y * zs, z * zs

    return np.array(
        [
            [1.0 - (yy + zz), xy - wz, xz + wy],
            [xy + wz, 1.0 - (xx + zz), yz - wx],
            [xz - wy, yz + wx, 1.0 - (xx + yy)],
        ],
        dtype=np.float64,
    )


def matrix_to_rpy(R: np.ndarray) -> RPY:
    """Decompose a rotation matrix into (roll, pitch, yaw) in radians.

    At gimbal lock (pitch = +-pi/2) yaw is reported as 0 and the whole
    rotation about the vertical axis is folded into roll.
    """
    if abs(R[2, 0]) >= 1.0 - GIMBAL_LOCK_TOLERANCE:
        yaw = 0.0
        if R[2, 0] < 0:
            pitch = np.pi / 2.0
            roll = np.arctan2(R[0, 1], R[0, 2])
        else:
            pitch = -np.pi / 2.0
            roll = np.arctan2(-R[0, 1], -R[0, 2])
    else:
        pitch = -np.arcsin(R[2, 0])
        cos_pitch = np.cos(pitch)
        roll = np.arctan2(R[2, 1] / cos_pitch, R[2, 2] / cos_pitch)
        yaw = np.arctan2(R[1, 0] / cos_pitch, R[0, 0] / cos_pitch)

    return (float(roll), float(pitch), float(yaw))


def quaternion_to_rpy(q: Quaternion) -> RPY:
    """Roll, pitch and yaw (radians) of a quaternion rotation."""
    return matrix_to_rpy(quaternion_to_matrix(q))


def quaternion_length2(q: Quaternion) -> float:
    """Squared norm of a quaternion."""
    v = np.asarray(q, dtype=np.float64)
    return float(np.dot(v, v))


def normalize_quaternion(q: Quaternion) -> Quaternion:
    """Scale a quaternion to unit length."""
    v = np.asarray(q, dtype=np.float64)
    norm = np.linalg.norm(v)
    if norm == 0.0:
        raise ValueError("Cannot normalize a zero-length quaternion")
    v = v / norm
    return (float(v[0]), float(v[1]), float(v[2]), float(v[3]))


def is_normalized(q: Quaternion, tolerance: float = DBL_EPSILON) -> bool:
    """Whether the squared norm of ``q`` lies within ``tolerance`` of one."""
    return abs(quaternion_length2(q) - 1.0) <= tolerance


__all__ = [
    "DBL_EPSILON",
    "quaternion_from_rpy",
    "quaternion_to_matrix",
    "matrix_to_rpy",
    "quaternion_to_rpy",
    "quaternion_length2",
    "normalize_quaternion",
    "is_normalized",
]
