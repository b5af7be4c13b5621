"""
Unit tests for indoornav/navigation/state_machine.py.

Tests cover:
    - IDLE behaviour without a target
    - ROTATING -> MOVING on alignment, turn instructions and haptic emphasis
    - MOVING -> ROTATING beyond the wider deadband
    - Edge-triggered arrival and the re-arm distance
    - Target replacement/clearing and NaN inputs

Run with: pytest tests/navigation/test_state_machine.py -v
"""

import math
import unittest

from indoornav.config import NavigationConfig
from indoornav.navigation.state_machine import NavigationStateMachine, turn_instruction
from indoornav.navigation.types import HapticEvent, NavState
from indoornav.tracking.pose import Pose


def facing(heading_deg: float, x: float = 0.0, y: float = 0.0) -> Pose:
    return Pose(x=x, y=y, heading=math.radians(heading_deg % 360.0))


class TestIdle(unittest.TestCase):

    def test_no_target_returns_nothing(self):
        nav = NavigationStateMachine()
        self.assertIsNone(nav.update(facing(0.0)))
        self.assertEqual(nav.state, NavState.IDLE)
        self.assertIsNone(nav.target)

    def test_clear_target_returns_to_idle(self):
        nav = NavigationStateMachine()
        nav.set_target(0.0, 5.0)
        nav.clear_target()

        self.assertEqual(nav.state, NavState.IDLE)
        self.assertIsNone(nav.update(facing(0.0)))


class TestRotatingAndMoving(unittest.TestCase):

    def setUp(self):
        self.nav = NavigationStateMachine(NavigationConfig())
        self.text = self.nav.set_target(0.0, 5.0)

    def test_set_target_enters_rotating(self):
        self.assertEqual(self.text, "New destination set. Turn to face target.")
        self.assertEqual(self.nav.state, NavState.ROTATING)

    def test_aligned_user_starts_walking_on_next_update(self):
        out = self.nav.update(facing(0.0))

        self.assertEqual(out.state, NavState.MOVING)
        self.assertEqual(out.instruction, "Walk forward.")
        self.assertEqual(out.event, HapticEvent.STRAIGHT)
        self.assertAlmostEqual(out.bearing, 0.0)
        self.assertAlmostEqual(out.angle_diff, 0.0)
        self.assertAlmostEqual(out.distance, 5.0)

    def test_walk_forward_is_announced_once(self):
        self.nav.update(facing(0.0))
        out = self.nav.update(facing(0.0, y=0.7))

        self.assertEqual(out.state, NavState.MOVING)
        self.assertTrue(out.is_silent)

    def test_large_left_turn_has_haptic(self):
        out = self.nav.update(facing(90.0))

        self.assertEqual(out.state, NavState.ROTATING)
        self.assertAlmostEqual(out.angle_diff, -90.0)
        self.assertEqual(out.instruction, "Turn left 90 degrees.")
        self.assertEqual(out.event, HapticEvent.LEFT)

    def test_large_right_turn_has_haptic(self):
        out = self.nav.update(facing(200.0))

        self.assertAlmostEqual(out.angle_diff, 160.0)
        self.assertEqual(out.instruction, "Turn right 160 degrees.")
        self.assertEqual(out.event, HapticEvent.RIGHT)

    def test_small_turn_is_voice_only(self):
        out = self.nav.update(facing(-30.0))

        self.assertAlmostEqual(out.angle_diff, 30.0)
        self.assertEqual(out.instruction, "Turn right 30 degrees.")
        self.assertIsNone(out.event)

    def test_turn_instruction_repeats_every_update(self):
        first = self.nav.update(facing(90.0))
        second = self.nav.update(facing(90.0))
        self.assertEqual(first.instruction, second.instruction)

    def test_move_deadband(self):
        out = self.nav.update(facing(11.0))
        self.assertEqual(out.state, NavState.ROTATING)

        out = self.nav.update(facing(9.0))
        self.assertEqual(out.state, NavState.MOVING)

    def test_hysteresis_keeps_moving_inside_wide_band(self):
        self.nav.update(facing(0.0))
        out = self.nav.update(facing(15.0))

        self.assertEqual(out.state, NavState.MOVING)
        self.assertTrue(out.is_silent)

    def test_drifting_off_course_stops_user(self):
        self.nav.update(facing(0.0))
        out = self.nav.update(facing(25.0))

        self.assertEqual(out.state, NavState.ROTATING)
        self.assertEqual(out.instruction, "Stop. Turn to correct heading.")
        self.assertEqual(out.event, HapticEvent.STOP)

        # Next update gives the turn itself
        out = self.nav.update(facing(25.0))
        self.assertEqual(out.instruction, "Turn left 25 degrees.")


class TestArrival(unittest.TestCase):

    def setUp(self):
        self.nav = NavigationStateMachine()
        self.nav.set_target(0.0, 5.0)

    def test_arrival_is_edge_triggered(self):
        out = self.nav.update(facing(0.0, y=4.0))
        self.assertEqual(out.state, NavState.ARRIVED)
        self.assertEqual(out.instruction, "You have arrived.")
        self.assertEqual(out.event, HapticEvent.ARRIVED)

        out = self.nav.update(facing(0.0, y=4.0))
        self.assertEqual(out.state, NavState.ARRIVED)
        self.assertTrue(out.is_silent)

    def test_arrival_from_moving(self):
        self.nav.update(facing(0.0))
        self.assertEqual(self.nav.state, NavState.MOVING)
        out = self.nav.update(facing(0.0, y=3.6))
        self.assertEqual(out.event, HapticEvent.ARRIVED)

    def test_arrival_regardless_of_heading(self):
        out = self.nav.update(facing(180.0, y=4.5))
        self.assertEqual(out.state, NavState.ARRIVED)

    def test_stays_arrived_inside_rearm_band(self):
        self.nav.update(facing(0.0, y=4.0))
        out = self.nav.update(facing(0.0, y=2.5))  # 2.5 m: between R and 2R

        self.assertEqual(out.state, NavState.ARRIVED)
        self.assertTrue(out.is_silent)

    def test_rearms_beyond_twice_radius(self):
        self.nav.update(facing(0.0, y=4.0))
        out = self.nav.update(facing(0.0, y=1.5))  # 3.5 m

        self.assertEqual(out.state, NavState.ROTATING)
        self.assertTrue(out.is_silent)

        out = self.nav.update(facing(0.0, y=1.5))
        self.assertEqual(out.instruction, "Walk forward.")

        out = self.nav.update(facing(0.0, y=4.0))
        self.assertEqual(out.instruction, "You have arrived.")

    def test_new_target_restarts_from_arrived(self):
        self.nav.update(facing(0.0, y=4.0))
        self.nav.set_target(10.0, 4.0)

        self.assertEqual(self.nav.state, NavState.ROTATING)
        self.assertEqual(self.nav.target.x, 10.0)
        out = self.nav.update(facing(0.0, y=4.0))
        self.assertEqual(out.instruction, "Turn right 90 degrees.")


class TestTurnInstruction(unittest.TestCase):

    def test_rounds_half_up(self):
        self.assertEqual(turn_instruction(90.5), "Turn right 91 degrees.")
        self.assertEqual(turn_instruction(-90.4), "Turn left 90 degrees.")

    def test_nan_heading_does_not_raise(self):
        nav = NavigationStateMachine()
        nav.set_target(0.0, 5.0)
        out = nav.update(Pose(0.0, 0.0, float("nan")))

        self.assertEqual(out.state, NavState.ROTATING)
        self.assertTrue(math.isnan(out.angle_diff))
        self.assertIsNone(out.event)


if __name__ == "__main__":
    unittest.main()
