"""
Unit tests for indoornav/sensors/pdr.py.

Tests cover:
    - Acceleration magnitude and low-pass filter helpers
    - Streaming step detector: seeding, threshold, latch, refractory interval
    - Compass-convention step position update
    - Offline reference detector on a synthetic walk

Run with: pytest tests/sensors/test_step_detector.py -v
"""

import unittest

import numpy as np
import pytest

from indoornav.config import StepDetectorConfig
from indoornav.sensors.pdr import (
    StepDetector,
    detect_steps_offline,
    lowpass_update,
    normalized_magnitude,
    pdr_step_update,
    total_accel_magnitude,
)
from indoornav.sensors.types import AccelerationSample
from indoornav.sim.walking import generate_walk

G = 9.81


def vertical(z_in_g: float, t: float) -> AccelerationSample:
    return AccelerationSample(0.0, 0.0, z_in_g * G, t=t)


class TestMagnitudeHelpers(unittest.TestCase):
    """Magnitude, low-pass and normalization helpers."""

    def test_magnitude_pythagorean(self):
        self.assertAlmostEqual(total_accel_magnitude(np.array([3.0, 4.0, 0.0])), 5.0)

    def test_magnitude_invalid_shape(self):
        with pytest.raises(ValueError, match="must have shape"):
            total_accel_magnitude(np.array([1.0, 2.0]))

    def test_lowpass_weights(self):
        out = lowpass_update(np.array([10.0, 0.0, 0.0]), np.array([0.0, 0.0, 5.0]), 0.8)
        np.testing.assert_allclose(out, [8.0, 0.0, 1.0])

    def test_normalized_magnitude_at_rest_is_one(self):
        """Orientation does not matter for a device at rest."""
        tilted = np.array([G / np.sqrt(2), 0.0, G / np.sqrt(2)])
        self.assertAlmostEqual(normalized_magnitude(tilted, G), 1.0)


class TestStepDetector(unittest.TestCase):
    """Streaming detector behaviour."""

    def setUp(self):
        self.detector = StepDetector(StepDetectorConfig())

    def test_first_sample_only_seeds(self):
        """The first sample is never evaluated, however large."""
        self.assertIsNone(self.detector.update(vertical(3.0, 0.0)))
        self.assertIsNone(self.detector.last_magnitude)
        np.testing.assert_allclose(self.detector.filtered, [0.0, 0.0, 3.0 * G])

    def test_fires_on_threshold_crossing(self):
        self.detector.update(vertical(1.0, 0.00))
        event = self.detector.update(vertical(3.0, 0.02))

        # 0.8 * 1 g + 0.2 * 3 g = 1.4 g
        self.assertIsNotNone(event)
        self.assertEqual(event.seq, 1)
        self.assertEqual(event.t, 0.02)
        self.assertAlmostEqual(event.magnitude_g, 1.4, places=9)
        self.assertEqual(self.detector.step_count, 1)

    def test_refractory_interval_blocks_second_step(self):
        self.detector.update(vertical(1.0, 0.00))
        self.assertIsNotNone(self.detector.update(vertical(3.0, 0.02)))

        # 1.12 g reopens the latch
        self.assertIsNone(self.detector.update(vertical(0.0, 0.04)))
        self.assertAlmostEqual(self.detector.last_magnitude, 1.12, places=9)

        # 1.496 g, but only 0.04 s after the previous step
        self.assertIsNone(self.detector.update(vertical(3.0, 0.06)))
        self.assertAlmostEqual(self.detector.last_magnitude, 1.496, places=9)

        # Still above threshold once the interval has elapsed: fires
        event = self.detector.update(vertical(3.0, 0.50))
        self.assertIsNotNone(event)
        self.assertEqual(event.seq, 2)

    def test_latch_allows_one_step_per_excursion(self):
        """A sustained excursion above threshold yields exactly one step."""
        self.detector.update(vertical(1.0, 0.0))
        events = [self.detector.update(vertical(3.0, 0.02 * k)) for k in range(1, 200)]

        self.assertEqual(sum(e is not None for e in events), 1)

    def test_refractory_boundary_is_strict(self):
        """Exactly min_step_interval_s after a step is still too early."""
        detector = StepDetector(StepDetectorConfig(min_step_interval_s=0.5))
        detector.update(vertical(1.0, 0.0))
        self.assertIsNotNone(detector.update(vertical(3.0, 1.0)))
        detector.update(vertical(0.0, 1.25))  # 1.12 g, latch open
        self.assertIsNone(detector.update(vertical(3.0, 1.5)))
        self.assertIsNotNone(detector.update(vertical(3.0, 1.75)))

    def test_sub_threshold_constant_never_fires(self):
        self.detector.update(vertical(1.1, 0.0))
        events = [self.detector.update(vertical(1.1, 0.02 * k)) for k in range(1, 500)]

        self.assertTrue(all(e is None for e in events))
        self.assertAlmostEqual(self.detector.last_magnitude, 1.1, places=6)

    def test_reset_clears_state(self):
        self.detector.update(vertical(1.0, 0.0))
        self.detector.update(vertical(3.0, 0.02))
        self.detector.reset()

        self.assertEqual(self.detector.step_count, 0)
        self.assertIsNone(self.detector.filtered)
        # Seeding again, even with a large sample
        self.assertIsNone(self.detector.update(vertical(3.0, 0.04)))

    def test_filtered_is_a_copy(self):
        self.detector.update(vertical(1.0, 0.0))
        snapshot = self.detector.filtered
        snapshot[2] = 0.0
        self.assertAlmostEqual(self.detector.filtered[2], G)

    def test_counts_steps_of_synthetic_walk(self):
        """2 steps/s with a 5 m/s^2 oscillation: one detection per step."""
        walk = generate_walk([[0.0, 0.0], [0.0, 14.0]], step_freq=2.0)
        fired = 0
        for t, (ax, ay, az) in zip(walk.t, walk.accel):
            if self.detector.update(AccelerationSample(ax, ay, az, t)) is not None:
                fired += 1

        self.assertEqual(walk.n_steps, 20)
        self.assertEqual(fired, walk.n_steps)


class TestStepDetectorConfig(unittest.TestCase):

    def test_invalid_alpha(self):
        with pytest.raises(ValueError, match="alpha"):
            StepDetectorConfig(alpha=1.0)

    def test_unusual_interval_warns(self):
        with pytest.warns(RuntimeWarning, match="cadence"):
            StepDetectorConfig(min_step_interval_s=1.5)


class TestPdrStepUpdate(unittest.TestCase):
    """Compass convention: heading 0 moves along +y, π/2 along +x."""

    def test_heading_zero_moves_forward(self):
        p = pdr_step_update(np.zeros(2), 0.7, 0.0)
        np.testing.assert_allclose(p, [0.0, 0.7], atol=1e-12)

    def test_heading_right_moves_along_x(self):
        p = pdr_step_update(np.array([1.0, 1.0]), 0.7, np.pi / 2)
        np.testing.assert_allclose(p, [1.7, 1.0], atol=1e-12)

    def test_heading_left_moves_along_negative_x(self):
        p = pdr_step_update(np.zeros(2), 1.0, 3 * np.pi / 2)
        np.testing.assert_allclose(p, [-1.0, 0.0], atol=1e-12)

    def test_negative_length_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            pdr_step_update(np.zeros(2), -0.7, 0.0)

    def test_bad_shape_rejected(self):
        with pytest.raises(ValueError, match="shape"):
            pdr_step_update(np.zeros(3), 0.7, 0.0)


class TestOfflineDetector(unittest.TestCase):

    def test_matches_true_step_count(self):
        walk = generate_walk([[0.0, 0.0], [0.0, 14.0]], accel_noise=0.1, seed=1)
        peaks, dynamic = detect_steps_offline(walk.accel, walk.dt)

        self.assertEqual(len(dynamic), len(walk.t))
        self.assertEqual(len(peaks), walk.n_steps)
        np.testing.assert_allclose(walk.t[peaks], walk.step_times, atol=0.05)

    def test_no_steps_at_rest(self):
        accel = np.tile([0.0, 0.0, G], (500, 1))
        peaks, _ = detect_steps_offline(accel, 0.02)
        self.assertEqual(len(peaks), 0)

    def test_invalid_input(self):
        with pytest.raises(ValueError, match="shape"):
            detect_steps_offline(np.zeros((10, 2)), 0.02)
        with pytest.raises(ValueError, match="dt"):
            detect_steps_offline(np.zeros((10, 3)), 0.0)


if __name__ == "__main__":
    unittest.main()
