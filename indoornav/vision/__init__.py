"""
Camera-derived signals.

Modules:
    motion_gate: Frame-difference "is the scene changing" score used to
                 confirm inertial steps
    obstacles: Depth and proximity heuristics over external object detections
"""

from indoornav.vision.motion_gate import (
    MotionConfidenceGate,
    downsample_nearest,
    to_luminance,
)
from indoornav.vision.obstacles import (
    Detection,
    ObstacleAlert,
    ObstacleMonitor,
    estimate_depth,
    filter_detections,
    find_obstacle_ahead,
    is_central,
)

__all__ = [
    "MotionConfidenceGate",
    "downsample_nearest",
    "to_luminance",
    "Detection",
    "ObstacleAlert",
    "ObstacleMonitor",
    "estimate_depth",
    "filter_detections",
    "find_obstacle_ahead",
    "is_central",
]
