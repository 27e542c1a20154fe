"""Angle unit conversion utilities.

Rotations are always stored as quaternions; degrees only appear in the
values shown to and received from the reconfiguration channel.
"""

import math

from .types import RPY, AngleUnits, RPYLimits


def deg_to_rad(value: float | int) -> float:
    """Convert degrees to radians."""
    return float(value) / 180.0 * math.pi


def rad_to_deg(value: float | int) -> float:
    """Convert radians to degrees."""
    return float(value) * 180.0 / math.pi


def rpy_to_radians(rpy: RPY, units: AngleUnits) -> RPY:
    """Express a roll/pitch/yaw triple given in ``units`` in radians."""
    if units == AngleUnits.DEGREES:
        return (deg_to_rad(rpy[0]), deg_to_rad(rpy[1]), deg_to_rad(rpy[2]))
    return (float(rpy[0]), float(rpy[1]), float(rpy[2]))


def rpy_from_radians(rpy: RPY, units: AngleUnits) -> RPY:
    """Express a roll/pitch/yaw triple given in radians in ``units``."""
    if units == AngleUnits.DEGREES:
        return (rad_to_deg(rpy[0]), rad_to_deg(rpy[1]), rad_to_deg(rpy[2]))
    return (float(rpy[0]), float(rpy[1]), float(rpy[2]))


def rpy_limits(units: AngleUnits) -> RPYLimits:
    """Editing bounds for roll/pitch/yaw in ``units``."""
    if units == AngleUnits.DEGREES:
        return RPYLimits(minimum=-180.0, maximum=180.0)
    return RPYLimits(minimum=-math.pi, maximum=math.pi)


__all__ = [
    "deg_to_rad",
    "rad_to_deg",
    "rpy_to_radians",
    "rpy_from_radians",
    "rpy_limits",
]
