"""
Step detection and step-and-heading position update.

This module implements the inertial half of pedestrian dead reckoning:
    - Exponential low-pass filtering of raw accelerometer samples
    - Gravity-normalized magnitude of the filtered specific force
    - Streaming step detection (threshold + latch + refractory interval)
    - Compass-convention 2D position update from one step
    - An offline peak detector used as a reference when evaluating recordings

The streaming detector is a single-threshold peak detector with hysteresis:
    m_k = ||f_k|| / g,   f_k = α·f_{k-1} + (1-α)·a_k

A step fires when m_k rises above the threshold while the latch is open and
at least the refractory interval has elapsed since the previous step. The
latch closes on the firing sample and reopens once m_k falls back below the
threshold, so one excursion produces at most one step.

Heading Convention:
    Heading 0 = +y ("forward"), π/2 = +x ("right"), increasing clockwise:
        p_k = p_{k-1} + L·[sin(ψ), cos(ψ)]
"""

import logging
from typing import Optional, Tuple

import numpy as np
from scipy import signal

from indoornav.config import StepDetectorConfig
from indoornav.sensors.types import AccelerationSample, StepEvent

logger = logging.getLogger(__name__)


def total_accel_magnitude(accel: np.ndarray) -> float:
    """
    Euclidean norm of a 3D acceleration vector.

    Args:
        accel: Acceleration, shape (3,). Units: m/s².

    Returns:
        ||accel||. Units: m/s².

    Example:
        >>> total_accel_magnitude(np.array([0.0, 0.0, 9.81]))
        9.81
    """
    accel = np.asarray(accel, dtype=float)
    if accel.shape != (3,):
        raise ValueError(f"accel must have shape (3,), got {accel.shape}")
    return float(np.linalg.norm(accel))


def lowpass_update(prev: np.ndarray, sample: np.ndarray, alpha: float) -> np.ndarray:
    """
    One step of a first-order exponential low-pass filter.

        y_k = α·y_{k-1} + (1-α)·x_k

    Larger α means heavier smoothing. With α = 0.8 at 50 Hz the -3 dB corner
    sits near 1.8 Hz, so walking cadence is attenuated but not removed and
    the gravity bias passes through untouched.

    Args:
        prev: Previous filter output y_{k-1}.
        sample: New input x_k, same shape as prev.
        alpha: Smoothing factor in [0, 1).

    Returns:
        New filter output y_k.
    """
    return alpha * prev + (1.0 - alpha) * sample


def normalized_magnitude(filtered: np.ndarray, g: float = 9.81) -> float:
    """
    Gravity-normalized magnitude ||filtered|| / g.

    A device at rest reads ≈1.0 regardless of orientation.
    """
    return float(np.linalg.norm(filtered) / g)


class StepDetector:
    """
    Streaming step detector over raw accelerometer samples.

    Call update() once per sample, at whatever irregular rate the sensor
    driver delivers. It returns a StepEvent on the sample that completes a
    step and None otherwise.

    The detector holds only the filtered acceleration, the latch and the
    time of the last step. The first sample seeds the filter and is never
    evaluated for a step.

    Usage:
        >>> detector = StepDetector()
        >>> for sample in samples:
        ...     event = detector.update(sample)
        ...     if event is not None:
        ...         tracker.on_step(event)

    Attributes:
        config: StepDetectorConfig in use.
        step_count: Number of steps fired since construction or reset().
        last_magnitude: Most recent gravity-normalized magnitude (None
                        before the second sample).
    """

    def __init__(self, config: Optional[StepDetectorConfig] = None):
        self.config = config if config is not None else StepDetectorConfig()
        self.reset()

    def reset(self) -> None:
        """Forget the filter state, latch, step timing and step count."""
        self._filtered: Optional[np.ndarray] = None
        self._is_peak = False
        self._last_step_time: Optional[float] = None
        self.step_count = 0
        self.last_magnitude: Optional[float] = None

    @property
    def filtered(self) -> Optional[np.ndarray]:
        """Current filtered acceleration [x, y, z] (copy), or None."""
        return None if self._filtered is None else self._filtered.copy()

    def update(self, sample: AccelerationSample) -> Optional[StepEvent]:
        """
        Feed one accelerometer sample.

        Args:
            sample: Raw acceleration including gravity, with timestamp.

        Returns:
            StepEvent if this sample fires a step, else None.
        """
        raw = sample.as_array()
        if self._filtered is None:
            self._filtered = raw
            return None

        cfg = self.config
        self._filtered = lowpass_update(self._filtered, raw, cfg.alpha)
        m = normalized_magnitude(self._filtered, cfg.gravity)
        self.last_magnitude = m

        refractory_over = (
            self._last_step_time is None
            or sample.t - self._last_step_time > cfg.min_step_interval_s
        )

        if m > cfg.threshold_g and refractory_over:
            if not self._is_peak:
                self._is_peak = True
                self._last_step_time = sample.t
                self.step_count += 1
                logger.debug("step %d at t=%.3f (m=%.3f g)", self.step_count, sample.t, m)
                return StepEvent(seq=self.step_count, t=sample.t, magnitude_g=m)
        elif m < cfg.threshold_g:
            self._is_peak = False

        return None


def pdr_step_update(
    p_prev_xy: np.ndarray,
    step_len: float,
    heading_rad: float,
) -> np.ndarray:
    """
    Advance a 2D position by one step along a compass-convention heading.

        p_k = p_{k-1} + L·[sin(ψ), cos(ψ)]

    Args:
        p_prev_xy: Position before the step, shape (2,). Units: m.
        step_len: Step length. Units: m. Must be non-negative.
        heading_rad: Heading, 0 = +y, increasing clockwise. Units: radians.

    Returns:
        Position after the step, shape (2,).

    Example:
        >>> p1 = pdr_step_update(np.zeros(2), 0.7, np.pi / 2)  # facing +x
        >>> print(np.round(p1, 3))  # [0.7, 0.0]
    """
    p_prev_xy = np.asarray(p_prev_xy, dtype=float)
    if p_prev_xy.shape != (2,):
        raise ValueError(f"p_prev_xy must have shape (2,), got {p_prev_xy.shape}")
    if step_len < 0:
        raise ValueError(f"step_len must be non-negative, got {step_len}")

    direction = np.array([np.sin(heading_rad), np.cos(heading_rad)])
    return p_prev_xy + step_len * direction


def detect_steps_offline(
    accel_series: np.ndarray,
    dt: float,
    g: float = 9.81,
    min_peak_height: float = 1.0,
    min_peak_distance: float = 0.3,
    lowpass_cutoff: Optional[float] = 5.0,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Reference step detector over a whole recording.

    Non-causal counterpart of StepDetector, used to judge the streaming
    detector on recorded or simulated data:
        1. Magnitude ||a_k|| of each sample
        2. Gravity removal a_k - g
        3. Zero-phase Butterworth low-pass (optional)
        4. Peaks with minimum height and minimum spacing

    Args:
        accel_series: Accelerometer samples, shape (N, 3). Units: m/s².
        dt: Sample period. Units: seconds.
        g: Gravity magnitude. Units: m/s².
        min_peak_height: Minimum peak height after gravity removal. Units: m/s².
        min_peak_distance: Minimum time between peaks. Units: seconds.
        lowpass_cutoff: Low-pass cutoff in Hz, or None to skip filtering.

    Returns:
        Tuple of (step_indices, accel_dynamic):
            step_indices: Sample indices of detected steps, shape (n_steps,).
            accel_dynamic: Processed gravity-removed magnitude, shape (N,).
    """
    accel_series = np.asarray(accel_series, dtype=float)
    if accel_series.ndim != 2 or accel_series.shape[1] != 3:
        raise ValueError(
            f"accel_series must have shape (N, 3), got {accel_series.shape}"
        )
    if dt <= 0:
        raise ValueError(f"dt must be positive, got {dt}")
    if min_peak_distance <= 0:
        raise ValueError(f"min_peak_distance must be positive, got {min_peak_distance}")

    accel_dynamic = np.linalg.norm(accel_series, axis=1) - g

    if lowpass_cutoff is not None:
        normalized_cutoff = lowpass_cutoff / (0.5 / dt)
        # filtfilt needs more samples than 3x the filter order padding
        if normalized_cutoff < 1.0 and len(accel_dynamic) > 27:
            b, a = signal.butter(4, normalized_cutoff, btype="low")
            accel_dynamic = signal.filtfilt(b, a, accel_dynamic)

    min_distance_samples = max(1, int(min_peak_distance / dt))
    peak_indices, _ = signal.find_peaks(
        accel_dynamic,
        height=min_peak_height,
        distance=min_distance_samples,
    )
    return peak_indices, accel_dynamic
