"""
Heading estimation from gyroscope yaw rate.

Open-loop integration of the yaw rate:
    ψ_k = wrap(ψ_{k-1} + ω_k · (π/180) · Δt_k),   Δt_k = t_k - t_{k-1}

The heading is expressed in the tracker frame: 0 = the direction the device
faced at start-up (not true north), increasing clockwise, wrapped to [0, 2π).

Gyro bias makes this estimate drift without bound. No correction is applied
unless an absolute heading (e.g. a compass reading) is injected through
set_absolute_heading(), which overwrites the estimate and marks the
integrator as calibrated.
"""

import logging
import math
from typing import Optional

from indoornav.config import HeadingConfig
from indoornav.sensors.types import RotationSample
from indoornav.utils.angles import wrap_to_2pi

logger = logging.getLogger(__name__)


class HeadingIntegrator:
    """
    Integrates yaw rate into a wrapped heading.

    The first call only records its timestamp. Later calls integrate over
    the elapsed time; a non-positive Δt (duplicate or out-of-order
    timestamp) contributes nothing, and the timestamp is still taken as the
    new reference.

    Attributes:
        heading: Current heading in radians, in [0, 2π).
        is_calibrated: True once an absolute heading has been injected.
    """

    def __init__(self, config: Optional[HeadingConfig] = None):
        self.config = config if config is not None else HeadingConfig()
        self.reset()

    def reset(self) -> None:
        """Return to the initial heading and forget the last timestamp."""
        self.heading = wrap_to_2pi(self.config.initial_heading_rad)
        self.is_calibrated = False
        self._last_t: Optional[float] = None

    def update(self, yaw_rate_deg_s: float, t: float) -> float:
        """
        Integrate one yaw-rate reading.

        Args:
            yaw_rate_deg_s: Yaw rate in deg/s, positive = clockwise.
            t: Timestamp in seconds.

        Returns:
            Heading after the update, radians in [0, 2π).
        """
        if self._last_t is None:
            self._last_t = t
            return self.heading

        dt = t - self._last_t
        self._last_t = t
        if dt > 0:
            self.heading = wrap_to_2pi(self.heading + math.radians(yaw_rate_deg_s) * dt)
        return self.heading

    def update_sample(self, sample: RotationSample) -> float:
        """Convenience wrapper around update() for a RotationSample."""
        return self.update(sample.yaw_rate_deg_s, sample.t)

    def set_absolute_heading(self, heading_deg: float) -> float:
        """
        Overwrite the heading with an absolute reading.

        Args:
            heading_deg: Heading in degrees, compass convention.

        Returns:
            New heading in radians, in [0, 2π).
        """
        self.heading = wrap_to_2pi(math.radians(heading_deg))
        self.is_calibrated = True
        logger.info("heading calibrated to %.1f deg", math.degrees(self.heading))
        return self.heading

    @property
    def heading_deg(self) -> float:
        """Current heading in degrees, in [0, 360)."""
        return math.degrees(self.heading)
