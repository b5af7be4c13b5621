"""
2D pose in the tracker frame.
"""

import math
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Pose:
    """
    Position and heading of the user.

    Attributes:
        x: Metres to the right of the start position.
        y: Metres ahead of the start position (initial facing direction).
        heading: Radians in [0, 2π), 0 = +y, increasing clockwise.
    """

    x: float = 0.0
    y: float = 0.0
    heading: float = 0.0

    @property
    def heading_deg(self) -> float:
        """Heading in degrees, in [0, 360)."""
        return math.degrees(self.heading)

    @property
    def xy(self) -> Tuple[float, float]:
        return (self.x, self.y)
