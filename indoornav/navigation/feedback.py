"""
Speech and haptic feedback policy.

The state machine only classifies what should be said or felt. This module
decides whether it actually reaches the user:
    - CRITICAL messages (stop, arrived, new destination, obstacles) cancel
      whatever is being spoken and are always delivered.
    - INFO messages are dropped while speech is in progress.
    - INFO and NORMAL messages are throttled to one per min_speech_interval_s.

Output devices are injected as small duck-typed objects. A device that is
not available is passed as None; the policy then skips that channel.
"""

import logging
from enum import IntEnum
from typing import Dict, List, Optional, Protocol

from indoornav.config import FeedbackConfig
from indoornav.navigation.types import GuidanceOutput, HapticEvent

logger = logging.getLogger(__name__)


class Priority(IntEnum):
    INFO = 0
    NORMAL = 1
    CRITICAL = 2


# Vibration patterns in milliseconds, alternating on/off
HAPTIC_PATTERNS: Dict[HapticEvent, List[int]] = {
    HapticEvent.LEFT: [100, 50, 100],
    HapticEvent.RIGHT: [300],
    HapticEvent.STRAIGHT: [50, 50, 50],
    HapticEvent.STOP: [50, 50, 50, 50, 50, 50],
    HapticEvent.ARRIVED: [500, 100, 500],
    HapticEvent.INFO: [50],
}


def haptic_pattern(event) -> List[int]:
    """Pattern for an event code; unknown codes get the info pattern."""
    try:
        return list(HAPTIC_PATTERNS[HapticEvent(event)])
    except ValueError:
        return list(HAPTIC_PATTERNS[HapticEvent.INFO])


def priority_for_event(event: Optional[HapticEvent]) -> Priority:
    """stop and arrived are CRITICAL; everything else is NORMAL."""
    if event in (HapticEvent.STOP, HapticEvent.ARRIVED):
        return Priority.CRITICAL
    return Priority.NORMAL


class SpeechOutput(Protocol):
    def speak(self, text: str) -> None: ...

    def cancel(self) -> None: ...

    @property
    def is_speaking(self) -> bool: ...


class HapticOutput(Protocol):
    def vibrate(self, pattern: List[int]) -> None: ...


class FeedbackManager:
    """
    Applies priority and throttling before driving speech and haptics.

    Args:
        speech: Text-to-speech device, or None if unavailable.
        haptics: Vibration device, or None if unavailable.
        config: Throttling parameters.

    Attributes:
        spoken: Texts actually passed to the speech device, in order.
        dropped: Number of announcements suppressed by the policy.
    """

    def __init__(
        self,
        speech: Optional[SpeechOutput] = None,
        haptics: Optional[HapticOutput] = None,
        config: Optional[FeedbackConfig] = None,
    ):
        self.speech = speech
        self.haptics = haptics
        self.config = config if config is not None else FeedbackConfig()
        self._last_speech_time: Optional[float] = None
        self.spoken: List[str] = []
        self.dropped = 0

    def _is_speaking(self) -> bool:
        return self.speech is not None and bool(self.speech.is_speaking)

    def announce(self, text: str, priority: Priority = Priority.NORMAL,
                 now: float = 0.0) -> bool:
        """
        Speak text subject to the priority policy.

        Args:
            text: Message to speak.
            priority: Message priority.
            now: Current time in seconds (monotonic).

        Returns:
            True if the text was handed to the speech device.
        """
        if self.speech is None:
            return False

        if priority >= Priority.CRITICAL:
            if self._is_speaking():
                self.speech.cancel()
        else:
            if priority <= Priority.INFO and self._is_speaking():
                self.dropped += 1
                logger.debug("info dropped while speaking: %r", text)
                return False
            if (self._last_speech_time is not None
                    and now - self._last_speech_time < self.config.min_speech_interval_s):
                self.dropped += 1
                logger.debug("throttled: %r", text)
                return False

        self.speech.speak(text)
        self._last_speech_time = now
        self.spoken.append(text)
        return True

    def vibrate(self, event: Optional[HapticEvent]) -> bool:
        """Play the pattern for event. Returns True if a device was driven."""
        if self.haptics is None or event is None:
            return False
        self.haptics.vibrate(haptic_pattern(event))
        return True

    def notify(self, output: Optional[GuidanceOutput], now: float = 0.0) -> None:
        """
        Deliver the instruction and haptic event of one update.

        Accepts a GuidanceOutput or anything with the same instruction and
        event attributes, such as an ObstacleAlert (announced as CRITICAL).
        """
        if output is None:
            return
        if output.event is not None:
            self.vibrate(output.event)
        if output.instruction is not None:
            self.announce(output.instruction, priority_for_event(output.event), now)
