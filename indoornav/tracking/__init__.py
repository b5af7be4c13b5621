"""
Position tracking (step-and-heading dead reckoning with visual gating).
"""

from indoornav.tracking.pose import Pose
from indoornav.tracking.position_tracker import PositionTracker

__all__ = [
    "Pose",
    "PositionTracker",
]
