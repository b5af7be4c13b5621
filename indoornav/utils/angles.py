"""
Angle wrapping utilities.

Two canonical ranges are used in this package:
- Headings are stored in radians in [0, 2π).
- Steering errors are reported in degrees in (-180, 180].

All functions are pure and pass NaN through unchanged (NaN in, NaN out),
so a corrupt sensor value shows up downstream instead of being hidden.
"""

import math

import numpy as np

TWO_PI = 2.0 * math.pi


def wrap_to_2pi(angle: float) -> float:
    """
    Wrap an angle in radians to [0, 2π).

    Args:
        angle: Angle in radians (any value, NaN allowed)

    Returns:
        Equivalent angle in [0, 2π), or NaN

    Example:
        >>> wrap_to_2pi(-np.pi / 2)
        4.71238898038469
        >>> wrap_to_2pi(2 * np.pi)
        0.0
    """
    wrapped = math.fmod(angle, TWO_PI) if math.isfinite(angle) else float("nan")
    if wrapped < 0.0:
        wrapped += TWO_PI
    # -1e-17 + 2π rounds to exactly 2π in float arithmetic
    if wrapped >= TWO_PI:
        wrapped = 0.0
    return wrapped


def wrap_to_360(angle_deg: float) -> float:
    """Wrap an angle in degrees to [0, 360)."""
    wrapped = math.fmod(angle_deg, 360.0) if math.isfinite(angle_deg) else float("nan")
    if wrapped < 0.0:
        wrapped += 360.0
    if wrapped >= 360.0:
        wrapped = 0.0
    return wrapped


def wrap_to_180(angle_deg: float) -> float:
    """
    Wrap an angle in degrees to (-180, 180].

    Example:
        >>> wrap_to_180(270.0)
        -90.0
        >>> wrap_to_180(-180.0)
        180.0
    """
    wrapped = wrap_to_360(angle_deg)
    if wrapped > 180.0:
        wrapped -= 360.0
    return wrapped


def wrap_to_2pi_array(angles: np.ndarray) -> np.ndarray:
    """Vectorized wrap_to_2pi() for arrays of radians."""
    wrapped = np.mod(np.asarray(angles, dtype=float), TWO_PI)
    return np.where(wrapped >= TWO_PI, 0.0, wrapped)
