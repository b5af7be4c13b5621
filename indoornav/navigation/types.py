"""
Data types shared by the guidance state machine and its consumers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NavState(str, Enum):
    """Guidance state. IDLE exactly when no target is set."""

    IDLE = "IDLE"
    ROTATING = "ROTATING"
    MOVING = "MOVING"
    ARRIVED = "ARRIVED"


class HapticEvent(str, Enum):
    """Categorical feedback code; the consumer picks the vibration pattern."""

    LEFT = "left"
    RIGHT = "right"
    STRAIGHT = "straight"
    STOP = "stop"
    ARRIVED = "arrived"
    INFO = "info"


@dataclass(frozen=True)
class Target:
    """Goal position (x, y) in the tracker frame. Units: m."""

    x: float
    y: float


@dataclass(frozen=True)
class GuidanceOutput:
    """
    Result of one navigation update.

    Attributes:
        instruction: Text to speak, or None when nothing needs saying.
        event: Haptic code to play, or None.
        distance: Distance from pose to target. Units: m.
        angle_diff: Signed turn to face the target, in (-180, 180].
                    Positive = turn right. Units: degrees.
        bearing: Compass bearing from pose to target. Units: degrees.
        state: State after the update.
    """

    instruction: Optional[str]
    event: Optional[HapticEvent]
    distance: float
    angle_diff: float
    bearing: float
    state: NavState

    @property
    def is_silent(self) -> bool:
        """True if there is neither an instruction nor a haptic event."""
        return self.instruction is None and self.event is None
