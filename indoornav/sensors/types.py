"""
Data structures for phone motion sensors.

This module defines the transient sensor packets consumed by the step
detector and heading integrator, and the step event they produce.

Time Base Convention:
    All timestamps are float seconds on a single monotonic clock. The
    pipeline never assumes a fixed sample rate; every time-dependent update
    uses the timestamps it is given.

Frame Conventions:
    - Device frame: the phone's own x, y, z axes (acceleration includes gravity).
    - Tracker frame: 2D, origin at the start position, +y = initial facing
      direction ("forward"), +x = to the right. Heading 0 points along +y and
      increases clockwise, as on a compass.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class AccelerationSample:
    """
    One accelerometer reading, gravity included.

    Attributes:
        x, y, z: Specific force along the device axes. Units: m/s².
        t: Timestamp. Units: seconds.

    Example:
        >>> sample = AccelerationSample(x=0.0, y=0.0, z=9.81, t=0.02)
        >>> sample.as_array()
        array([0.  , 0.  , 9.81])
    """

    x: float
    y: float
    z: float
    t: float = 0.0

    def as_array(self) -> np.ndarray:
        """Return [x, y, z] as a float array of shape (3,)."""
        return np.array([self.x, self.y, self.z], dtype=float)


@dataclass(frozen=True)
class RotationSample:
    """
    One gyroscope yaw-rate reading.

    Attributes:
        yaw_rate_deg_s: Rotation rate about the vertical axis.
                        Units: deg/s. Positive = turning right (clockwise
                        seen from above), which increases the heading.
        t: Timestamp. Units: seconds.
    """

    yaw_rate_deg_s: float
    t: float


@dataclass(frozen=True)
class StepEvent:
    """
    A single detected footfall.

    Attributes:
        seq: 1-based sequence number assigned by the detector.
        t: Timestamp of the sample that triggered the step. Units: seconds.
        magnitude_g: Gravity-normalized filtered magnitude at detection.
    """

    seq: int
    t: float
    magnitude_g: float
