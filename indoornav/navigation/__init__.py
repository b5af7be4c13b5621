"""
Target guidance.

Modules:
    types: NavState, HapticEvent, Target and GuidanceOutput
    state_machine: Turn-then-walk guidance with hysteresis
    feedback: Priority/throttling policy for speech and haptic output

Example:
    >>> from indoornav.navigation import NavigationStateMachine
    >>> from indoornav.tracking import Pose
    >>> nav = NavigationStateMachine()
    >>> nav.set_target(0.0, 5.0)
    'New destination set. Turn to face target.'
    >>> nav.update(Pose(0.0, 0.0, 0.0)).instruction
    'Walk forward.'
"""

# types first: vision.obstacles imports it while this package initializes
from indoornav.navigation.types import (
    GuidanceOutput,
    HapticEvent,
    NavState,
    Target,
)

from indoornav.navigation.state_machine import (
    NavigationStateMachine,
    turn_instruction,
)

from indoornav.navigation.feedback import (
    HAPTIC_PATTERNS,
    FeedbackManager,
    HapticOutput,
    Priority,
    SpeechOutput,
    haptic_pattern,
    priority_for_event,
)

__all__ = [
    # Types
    "GuidanceOutput",
    "HapticEvent",
    "NavState",
    "Target",
    # State machine
    "NavigationStateMachine",
    "turn_instruction",
    # Feedback
    "HAPTIC_PATTERNS",
    "FeedbackManager",
    "HapticOutput",
    "Priority",
    "SpeechOutput",
    "haptic_pattern",
    "priority_for_event",
]
