"""
Planar geometry for guidance.

Pure, stateless helpers used by the navigation state machine. Positions are
(x, y) pairs in the tracker frame; angles follow the compass convention
(0° = +y / forward, 90° = +x / right, increasing clockwise).
"""

import math
from typing import Sequence

import numpy as np

from indoornav.utils.angles import wrap_to_180, wrap_to_360

PointLike = Sequence[float]


def bearing_deg(origin: PointLike, target: PointLike) -> float:
    """
    Compass bearing from origin to target.

    Uses atan2(Δx, Δy) rather than atan2(Δy, Δx) so that 0° points along +y
    and 90° along +x.

    Args:
        origin: (x, y) of the observer. Units: m.
        target: (x, y) of the point of interest. Units: m.

    Returns:
        Bearing in degrees, in [0, 360). Coincident points give 0.

    Example:
        >>> bearing_deg((0, 0), (0, 5))
        0.0
        >>> bearing_deg((0, 0), (-1, 0))
        270.0
    """
    dx = target[0] - origin[0]
    dy = target[1] - origin[1]
    return wrap_to_360(math.degrees(math.atan2(dx, dy)))


def angle_diff_deg(heading: float, bearing: float) -> float:
    """
    Signed shortest turn from a heading to a bearing.

    Args:
        heading: Current heading in degrees (compass convention).
        bearing: Desired bearing in degrees (compass convention).

    Returns:
        bearing - heading wrapped to (-180, 180]. Positive means turn right,
        negative means turn left.

    Notes:
        angle_diff_deg(h, b) == -angle_diff_deg(b, h) holds except when the
        two directions are exactly opposite: both orders then return +180.

    Example:
        >>> angle_diff_deg(90.0, 0.0)   # facing right, target straight ahead
        -90.0
        >>> angle_diff_deg(350.0, 10.0)
        20.0
    """
    return wrap_to_180(bearing - heading)


def distance(a: PointLike, b: PointLike) -> float:
    """Euclidean distance between two (x, y) points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def path_length(points: np.ndarray) -> float:
    """
    Total length of a polyline.

    Args:
        points: Vertices, shape (N, 2).

    Returns:
        Sum of segment lengths; 0 for fewer than two points.
    """
    points = np.asarray(points, dtype=float)
    if points.ndim != 2 or points.shape[1] != 2:
        raise ValueError(f"points must have shape (N, 2), got {points.shape}")
    if len(points) < 2:
        return 0.0
    return float(np.sum(np.linalg.norm(np.diff(points, axis=0), axis=1)))
