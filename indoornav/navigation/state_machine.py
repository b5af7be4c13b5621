"""
Deterministic guidance state machine for homing on a target.

States and transitions (evaluated on every update(pose) with a target set):

    any state   --dist < R, not ARRIVED-->   ARRIVED   "You have arrived." / arrived
    ARRIVED     --dist > 2R-->               ROTATING  (silent)
    ROTATING    --|Δψ| < move deadband-->    MOVING    "Walk forward." / straight
    ROTATING    --otherwise-->               ROTATING  "Turn <side> <n> degrees."
                                                       (+ left/right if |Δψ| > 45°)
    MOVING      --|Δψ| > rotation deadband-> ROTATING  "Stop. Turn to correct heading." / stop
    MOVING      --otherwise-->               MOVING    (silent)

with R the arrival radius and Δψ the signed turn from the user's heading to
the target bearing. The enter-MOVING band (10°) is narrower than the
leave-MOVING band (20°), and the arrival radius is re-armed only at 2R; both
are hysteresis against flapping near a threshold.

set_target() always moves to ROTATING; with no target the machine is IDLE
and update() returns None. There is no other hidden state: the output is a
function of (pose, target, current state).
"""

import logging
import math
from typing import Optional

import numpy as np

from indoornav.config import NavigationConfig
from indoornav.navigation.types import GuidanceOutput, HapticEvent, NavState, Target
from indoornav.tracking.pose import Pose
from indoornav.utils.geometry import angle_diff_deg, bearing_deg, distance

logger = logging.getLogger(__name__)

DESTINATION_SET = "New destination set. Turn to face target."
ARRIVED_TEXT = "You have arrived."
WALK_FORWARD = "Walk forward."
STOP_AND_TURN = "Stop. Turn to correct heading."


def turn_instruction(angle_diff: float) -> str:
    """
    Spoken turn instruction for a signed heading error.

    Rounds half away from zero; NaN is rendered as 'nan' rather than raising.

    Example:
        >>> turn_instruction(-90.4)
        'Turn left 90 degrees.'
    """
    side = "right" if angle_diff > 0 else "left"
    magnitude = np.floor(abs(angle_diff) + 0.5)
    return f"Turn {side} {magnitude:.0f} degrees."


class NavigationStateMachine:
    """
    Turn-then-walk guidance toward a single target.

    Usage:
        >>> nav = NavigationStateMachine()
        >>> nav.set_target(0.0, 5.0)
        'New destination set. Turn to face target.'
        >>> out = nav.update(tracker.current_pose())
        >>> out.state, out.instruction
        (<NavState.MOVING: 'MOVING'>, 'Walk forward.')
    """

    def __init__(self, config: Optional[NavigationConfig] = None):
        self.config = config if config is not None else NavigationConfig()
        self._target: Optional[Target] = None
        self._state = NavState.IDLE

    @property
    def state(self) -> NavState:
        return self._state

    @property
    def target(self) -> Optional[Target]:
        return self._target

    def set_target(self, x: float, y: float) -> str:
        """
        Set or replace the target and restart guidance.

        Returns:
            The one-time "destination set" instruction.
        """
        self._target = Target(float(x), float(y))
        self._transition(NavState.ROTATING)
        logger.info("target set to (%.2f, %.2f)", x, y)
        return DESTINATION_SET

    def clear_target(self) -> None:
        """Drop the target; the machine returns to IDLE."""
        self._target = None
        self._transition(NavState.IDLE)

    def _transition(self, new_state: NavState) -> None:
        if new_state != self._state:
            logger.debug("%s -> %s", self._state.value, new_state.value)
        self._state = new_state

    def update(self, pose: Pose) -> Optional[GuidanceOutput]:
        """
        Evaluate one guidance cycle.

        Args:
            pose: Current user pose (heading in radians, compass convention).

        Returns:
            GuidanceOutput with the new state and any instruction/event, or
            None when no target is set.
        """
        if self._target is None:
            self._state = NavState.IDLE
            return None

        cfg = self.config
        target_xy = (self._target.x, self._target.y)
        dist = distance(pose.xy, target_xy)
        bearing = bearing_deg(pose.xy, target_xy)
        diff = angle_diff_deg(math.degrees(pose.heading), bearing)

        instruction: Optional[str] = None
        event: Optional[HapticEvent] = None

        if dist < cfg.arrival_radius_m:
            if self._state != NavState.ARRIVED:
                self._transition(NavState.ARRIVED)
                instruction = ARRIVED_TEXT
                event = HapticEvent.ARRIVED
        elif self._state == NavState.ARRIVED:
            if dist > cfg.rearm_factor * cfg.arrival_radius_m:
                self._transition(NavState.ROTATING)
        elif self._state == NavState.MOVING:
            if abs(diff) > cfg.rotation_deadband_deg:
                self._transition(NavState.ROTATING)
                instruction = STOP_AND_TURN
                event = HapticEvent.STOP
        else:
            # ROTATING (IDLE cannot hold a target)
            self._state = NavState.ROTATING
            if abs(diff) < cfg.move_deadband_deg:
                self._transition(NavState.MOVING)
                instruction = WALK_FORWARD
                event = HapticEvent.STRAIGHT
            else:
                instruction = turn_instruction(diff)
                if abs(diff) > cfg.haptic_turn_threshold_deg:
                    event = HapticEvent.RIGHT if diff > 0 else HapticEvent.LEFT

        return GuidanceOutput(
            instruction=instruction,
            event=event,
            distance=dist,
            angle_diff=diff,
            bearing=bearing,
            state=self._state,
        )
