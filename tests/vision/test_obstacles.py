"""
Unit tests for indoornav/vision/obstacles.py.

Tests cover:
    - Pinhole depth shortcut and label heights
    - Score filtering and the centre-line test
    - Obstacle-ahead selection and alert throttling

Run with: pytest tests/vision/test_obstacles.py -v
"""

import math
import unittest

import pytest

from indoornav.config import ObstacleConfig
from indoornav.navigation.types import HapticEvent
from indoornav.vision.obstacles import (
    Detection,
    ObstacleMonitor,
    estimate_depth,
    filter_detections,
    find_obstacle_ahead,
    is_central,
)

FRAME_W, FRAME_H = 640, 480


class TestDepthAndFiltering(unittest.TestCase):

    def test_depth_from_known_height(self):
        person = Detection("person", 0.9, (300, 100, 80, 170))
        self.assertAlmostEqual(estimate_depth(person, FRAME_H), 1.7 / (170 / 480))

    def test_unknown_label_uses_default_height(self):
        thing = Detection("umbrella", 0.9, (0, 0, 10, 240))
        self.assertAlmostEqual(estimate_depth(thing, FRAME_H), 2.0)

    def test_zero_height_box_is_infinitely_far(self):
        self.assertTrue(math.isinf(estimate_depth(Detection("chair", 0.9, (0, 0, 5, 0)), FRAME_H)))

    def test_invalid_frame_height(self):
        with pytest.raises(ValueError, match="frame_height"):
            estimate_depth(Detection("chair", 0.9, (0, 0, 5, 5)), 0)

    def test_score_filter_is_strict(self):
        dets = [
            Detection("chair", 0.6, (0, 0, 1, 1)),
            Detection("chair", 0.61, (0, 0, 1, 1)),
        ]
        kept = filter_detections(dets)
        self.assertEqual([d.score for d in kept], [0.61])

    def test_is_central(self):
        self.assertTrue(is_central(Detection("chair", 1.0, (250, 0, 200, 10)), FRAME_W))
        self.assertFalse(is_central(Detection("chair", 1.0, (100, 0, 200, 10)), FRAME_W))
        self.assertFalse(is_central(Detection("chair", 1.0, (320, 0, 200, 10)), FRAME_W))


class TestObstacleAhead(unittest.TestCase):

    def test_close_central_obstacle_alerts(self):
        chair = Detection("chair", 0.8, (250, 40, 200, 400))  # depth 1.2 m
        alert = find_obstacle_ahead([chair], FRAME_W, FRAME_H)

        self.assertIsNotNone(alert)
        self.assertEqual(alert.label, "chair")
        self.assertEqual(alert.instruction, "Obstacle: chair ahead!")
        self.assertEqual(alert.event, HapticEvent.STOP)
        self.assertAlmostEqual(alert.depth_m, 1.2)

    def test_far_or_side_obstacles_ignored(self):
        far = Detection("person", 0.9, (280, 100, 80, 170))      # 4.8 m
        side = Detection("chair", 0.9, (0, 40, 200, 400))         # left edge
        weak = Detection("chair", 0.5, (250, 40, 200, 400))       # low score
        self.assertIsNone(find_obstacle_ahead([far, side, weak], FRAME_W, FRAME_H))

    def test_first_qualifying_detection_wins(self):
        table = Detection("table", 0.9, (200, 0, 300, 400))
        chair = Detection("chair", 0.9, (250, 40, 200, 400))
        alert = find_obstacle_ahead([table, chair], FRAME_W, FRAME_H)
        self.assertEqual(alert.label, "table")

    def test_custom_alert_distance(self):
        config = ObstacleConfig(alert_distance_m=5.0)
        person = Detection("person", 0.9, (280, 100, 80, 170))
        self.assertIsNotNone(find_obstacle_ahead([person], FRAME_W, FRAME_H, config))


class TestObstacleMonitor(unittest.TestCase):

    def test_alerts_are_throttled(self):
        monitor = ObstacleMonitor(ObstacleConfig(alert_interval_s=2.0))
        chair = Detection("chair", 0.8, (250, 40, 200, 400))

        self.assertIsNotNone(monitor.check([chair], FRAME_W, FRAME_H, now=0.0))
        self.assertIsNone(monitor.check([chair], FRAME_W, FRAME_H, now=1.0))
        self.assertIsNotNone(monitor.check([chair], FRAME_W, FRAME_H, now=2.5))

    def test_no_alert_does_not_start_throttle(self):
        monitor = ObstacleMonitor()
        chair = Detection("chair", 0.8, (250, 40, 200, 400))

        self.assertIsNone(monitor.check([], FRAME_W, FRAME_H, now=0.0))
        self.assertIsNotNone(monitor.check([chair], FRAME_W, FRAME_H, now=0.5))


if __name__ == "__main__":
    unittest.main()
