"""
Unit tests for indoornav/navigation/feedback.py.

Tests cover:
    - Haptic pattern lookup and event priorities
    - CRITICAL interruption, INFO dropping, INFO/NORMAL throttling
    - Missing output devices
    - Delivery of navigation updates and obstacle alerts

Run with: pytest tests/navigation/test_feedback.py -v
"""

import unittest

from indoornav.config import FeedbackConfig
from indoornav.navigation.feedback import (
    HAPTIC_PATTERNS,
    FeedbackManager,
    Priority,
    haptic_pattern,
    priority_for_event,
)
from indoornav.navigation.types import GuidanceOutput, HapticEvent, NavState
from indoornav.vision.obstacles import Detection, ObstacleMonitor


class FakeSpeech:
    """Records calls; is_speaking is set by the test."""

    def __init__(self):
        self.said = []
        self.cancelled = 0
        self.is_speaking = False

    def speak(self, text):
        self.said.append(text)

    def cancel(self):
        self.cancelled += 1
        self.is_speaking = False


class FakeHaptics:
    def __init__(self):
        self.patterns = []

    def vibrate(self, pattern):
        self.patterns.append(pattern)


def guidance(instruction, event, state=NavState.ROTATING):
    return GuidanceOutput(instruction, event, 3.0, 30.0, 0.0, state)


class TestPatternsAndPriorities(unittest.TestCase):

    def test_known_patterns(self):
        self.assertEqual(haptic_pattern(HapticEvent.LEFT), [100, 50, 100])
        self.assertEqual(haptic_pattern(HapticEvent.RIGHT), [300])
        self.assertEqual(haptic_pattern("arrived"), [500, 100, 500])
        self.assertEqual(len(haptic_pattern(HapticEvent.STOP)), 6)

    def test_unknown_code_falls_back_to_info(self):
        self.assertEqual(haptic_pattern("wobble"), [50])

    def test_pattern_is_a_copy(self):
        pattern = haptic_pattern(HapticEvent.RIGHT)
        pattern.append(999)
        self.assertEqual(HAPTIC_PATTERNS[HapticEvent.RIGHT], [300])

    def test_priorities(self):
        self.assertEqual(priority_for_event(HapticEvent.STOP), Priority.CRITICAL)
        self.assertEqual(priority_for_event(HapticEvent.ARRIVED), Priority.CRITICAL)
        self.assertEqual(priority_for_event(HapticEvent.LEFT), Priority.NORMAL)
        self.assertEqual(priority_for_event(None), Priority.NORMAL)


class TestAnnounce(unittest.TestCase):

    def setUp(self):
        self.speech = FakeSpeech()
        self.manager = FeedbackManager(self.speech, FakeHaptics(), FeedbackConfig())

    def test_normal_is_throttled(self):
        self.assertTrue(self.manager.announce("Turn left 90 degrees.", now=0.0))
        self.assertFalse(self.manager.announce("Turn left 85 degrees.", now=1.0))
        self.assertTrue(self.manager.announce("Turn left 80 degrees.", now=2.0))

        self.assertEqual(self.speech.said, ["Turn left 90 degrees.", "Turn left 80 degrees."])
        self.assertEqual(self.manager.dropped, 1)

    def test_first_normal_message_is_spoken(self):
        self.assertTrue(self.manager.announce("Walk forward.", now=100.0))

    def test_critical_interrupts_and_ignores_throttle(self):
        self.manager.announce("Turn left 90 degrees.", now=0.0)
        self.speech.is_speaking = True

        self.assertTrue(self.manager.announce("You have arrived.", Priority.CRITICAL, now=0.1))
        self.assertEqual(self.speech.cancelled, 1)
        self.assertEqual(self.speech.said[-1], "You have arrived.")

    def test_critical_without_speech_in_progress_does_not_cancel(self):
        self.manager.announce("Stop. Turn to correct heading.", Priority.CRITICAL)
        self.assertEqual(self.speech.cancelled, 0)

    def test_info_dropped_while_speaking(self):
        self.speech.is_speaking = True
        self.assertFalse(self.manager.announce("Path recorded.", Priority.INFO, now=10.0))
        self.assertEqual(self.manager.dropped, 1)

        self.speech.is_speaking = False
        self.assertTrue(self.manager.announce("Path recorded.", Priority.INFO, now=10.1))

    def test_info_is_throttled_when_idle(self):
        self.manager.announce("Turn left 90 degrees.", Priority.NORMAL, now=0.0)
        self.assertFalse(self.manager.announce("Path recorded.", Priority.INFO, now=0.5))
        self.assertEqual(self.speech.said, ["Turn left 90 degrees."])

        self.assertTrue(self.manager.announce("Path recorded.", Priority.INFO, now=2.5))

    def test_critical_restarts_throttle_window(self):
        self.manager.announce("You have arrived.", Priority.CRITICAL, now=5.0)
        self.assertFalse(self.manager.announce("Walk forward.", now=6.0))

    def test_no_speech_device(self):
        manager = FeedbackManager(speech=None)
        self.assertFalse(manager.announce("Walk forward.", Priority.CRITICAL))
        self.assertEqual(manager.spoken, [])


class TestVibrateAndNotify(unittest.TestCase):

    def setUp(self):
        self.speech = FakeSpeech()
        self.haptics = FakeHaptics()
        self.manager = FeedbackManager(self.speech, self.haptics)

    def test_vibrate(self):
        self.assertTrue(self.manager.vibrate(HapticEvent.STRAIGHT))
        self.assertFalse(self.manager.vibrate(None))
        self.assertEqual(self.haptics.patterns, [[50, 50, 50]])

    def test_no_haptic_device(self):
        manager = FeedbackManager(speech=self.speech, haptics=None)
        self.assertFalse(manager.vibrate(HapticEvent.STOP))

    def test_notify_delivers_both_channels(self):
        self.manager.notify(guidance("Turn right 90 degrees.", HapticEvent.RIGHT), now=0.0)

        self.assertEqual(self.speech.said, ["Turn right 90 degrees."])
        self.assertEqual(self.haptics.patterns, [[300]])

    def test_notify_haptic_is_never_throttled(self):
        self.manager.notify(guidance("Turn right 90 degrees.", HapticEvent.RIGHT), now=0.0)
        self.manager.notify(guidance("Turn right 88 degrees.", HapticEvent.RIGHT), now=0.2)

        self.assertEqual(len(self.speech.said), 1)
        self.assertEqual(len(self.haptics.patterns), 2)

    def test_notify_stop_is_critical(self):
        self.manager.notify(guidance("Turn right 30 degrees.", None), now=0.0)
        self.speech.is_speaking = True
        self.manager.notify(
            guidance("Stop. Turn to correct heading.", HapticEvent.STOP), now=0.5
        )

        self.assertEqual(self.speech.cancelled, 1)
        self.assertEqual(self.speech.said[-1], "Stop. Turn to correct heading.")

    def test_notify_ignores_silent_and_missing_updates(self):
        self.manager.notify(None)
        self.manager.notify(guidance(None, None, NavState.MOVING))

        self.assertEqual(self.speech.said, [])
        self.assertEqual(self.haptics.patterns, [])

    def test_obstacle_alert_interrupts_speech(self):
        monitor = ObstacleMonitor()
        chair = Detection("chair", 0.8, (250, 40, 200, 400))

        self.manager.notify(guidance("Turn right 30 degrees.", None), now=0.0)
        self.speech.is_speaking = True
        self.manager.notify(monitor.check([chair], 640, 480, now=0.5), now=0.5)

        self.assertEqual(self.speech.cancelled, 1)
        self.assertEqual(self.speech.said[-1], "Obstacle: chair ahead!")
        self.assertEqual(self.haptics.patterns[-1], [50, 50, 50, 50, 50, 50])


if __name__ == "__main__":
    unittest.main()
