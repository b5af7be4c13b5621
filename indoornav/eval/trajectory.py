"""
Path recording for display and evaluation.
"""

from typing import List, Optional, Tuple

import numpy as np

from indoornav.tracking.pose import Pose
from indoornav.utils.geometry import path_length


class TrajectoryRecorder:
    """
    Keeps a thinned copy of the positions the user has walked through.

    A position is stored only if it lies more than min_spacing_m from the
    last stored one, so a user standing still does not grow the path.

    Attributes:
        min_spacing_m: Minimum distance between stored points. Units: m.
    """

    def __init__(self, min_spacing_m: float = 0.1):
        if min_spacing_m < 0:
            raise ValueError(f"min_spacing_m must be non-negative, got {min_spacing_m}")
        self.min_spacing_m = min_spacing_m
        self._points: List[Tuple[float, float]] = []
        self._times: List[float] = []

    def __len__(self) -> int:
        return len(self._points)

    def record(self, pose: Pose, t: Optional[float] = None) -> bool:
        """Store the pose position if it moved far enough. Returns True if stored."""
        if self._points:
            last_x, last_y = self._points[-1]
            if np.hypot(pose.x - last_x, pose.y - last_y) <= self.min_spacing_m:
                return False
        self._points.append((pose.x, pose.y))
        self._times.append(float("nan") if t is None else float(t))
        return True

    def as_array(self) -> np.ndarray:
        """Stored positions, shape (N, 2)."""
        if not self._points:
            return np.zeros((0, 2))
        return np.array(self._points, dtype=float)

    def times(self) -> np.ndarray:
        """Record times (NaN where none was given), shape (N,)."""
        return np.array(self._times, dtype=float)

    def path_length(self) -> float:
        return path_length(self.as_array())

    def clear(self) -> None:
        self._points.clear()
        self._times.clear()
