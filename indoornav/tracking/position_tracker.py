"""
Step-and-heading position tracker with visual step confirmation.

The tracker owns the (x, y, heading) state of the user and fuses three
inputs into it:
    - StepDetector: inertial step events from the accelerometer
    - HeadingIntegrator: heading from the gyroscope (or a compass fix)
    - MotionConfidenceGate: whether the camera view is changing

Fusion rule:
    An inertial step is necessary but not sufficient. When a motion gate is
    wired in and reports a static scene, the step is treated as device shake
    and suppressed. Without a gate every detected step is accepted.

Position update for an accepted step (compass convention, 0 = +y):
    x += L·sin(ψ),  y += L·cos(ψ)

Concurrency:
    Sensor callbacks and the render/navigation loop may run on different
    threads. Every mutation of the pose and every read of it happens under
    one lock, so current_pose() always returns a consistent (x, y, heading)
    triple.
"""

import logging
import threading
from collections import deque
from typing import Deque, Dict, List, Optional

import numpy as np

from indoornav.config import NavSystemConfig
from indoornav.sensors.heading import HeadingIntegrator
from indoornav.sensors.pdr import StepDetector, pdr_step_update
from indoornav.sensors.types import AccelerationSample, RotationSample, StepEvent
from indoornav.tracking.pose import Pose
from indoornav.vision.motion_gate import MotionConfidenceGate

logger = logging.getLogger(__name__)


class PositionTracker:
    """
    Dead-reckoning tracker fed by raw sensor samples and camera frames.

    Typical wiring:
        - process_acceleration() / process_rotation() from the sensor stream
        - process_frame() from a throttled loop (~5 Hz)
        - current_pose() from the navigation / render loop

    Args:
        config: Full pipeline configuration. Defaults to the fused preset.
        motion_gate: Gate to use instead of the one built from config.
                     Ignored when config.tracker.use_motion_gate is False.

    Attributes:
        detector: The StepDetector in use.
        heading_integrator: The HeadingIntegrator in use.
        motion_gate: The MotionConfidenceGate, or None for inertial-only.
    """

    def __init__(
        self,
        config: Optional[NavSystemConfig] = None,
        motion_gate: Optional[MotionConfidenceGate] = None,
    ):
        self.config = config if config is not None else NavSystemConfig()
        self.detector = StepDetector(self.config.step_detector)
        self.heading_integrator = HeadingIntegrator(self.config.heading)
        if self.config.tracker.use_motion_gate:
            self.motion_gate = (
                motion_gate if motion_gate is not None
                else MotionConfidenceGate(self.config.motion_gate)
            )
        else:
            self.motion_gate = None

        self._lock = threading.RLock()
        self._position = np.zeros(2)
        self._pending: Deque[StepEvent] = deque()
        self.steps_detected = 0
        self.steps_accepted = 0
        self.steps_suppressed = 0

    def reset(self) -> None:
        """Return to the origin and initial heading, clearing all filter state."""
        with self._lock:
            self._position = np.zeros(2)
            self._pending.clear()
            self.detector.reset()
            self.heading_integrator.reset()
            if self.motion_gate is not None:
                self.motion_gate.reset()
            self.steps_detected = 0
            self.steps_accepted = 0
            self.steps_suppressed = 0
        logger.info("tracker reset")

    @property
    def motion_confirmed(self) -> bool:
        """True if the gate sees motion, or if there is no gate."""
        if self.motion_gate is None:
            return True
        return self.motion_gate.is_moving

    def process_acceleration(self, sample: AccelerationSample) -> Optional[StepEvent]:
        """
        Feed one accelerometer sample.

        Returns:
            The StepEvent if a step was detected and accepted, else None.
        """
        with self._lock:
            event = self.detector.update(sample)
            if event is None:
                return None
            return event if self.on_step(event) else None

    def process_rotation(self, sample: RotationSample) -> float:
        """Feed one gyroscope sample; returns the new heading in radians."""
        with self._lock:
            return self.heading_integrator.update_sample(sample)

    def process_frame(self, frame: Optional[np.ndarray]) -> Optional[float]:
        """
        Feed one camera frame to the motion gate.

        Returns:
            The gate's motion score, or None when no gate is configured.
        """
        if self.motion_gate is None:
            return None
        with self._lock:
            return self.motion_gate.process(frame)

    def calibrate_heading(self, heading_deg: float) -> float:
        """Overwrite the heading with an absolute reading (degrees)."""
        with self._lock:
            return self.heading_integrator.set_absolute_heading(heading_deg)

    def on_step(self, event: Optional[StepEvent] = None) -> bool:
        """
        Apply one detected step.

        Args:
            event: The step that triggered the update. Optional for callers
                   that run their own step detection.

        Returns:
            True if the step moved the position, False if it was suppressed
            by the motion gate.
        """
        with self._lock:
            self.steps_detected += 1
            if not self.motion_confirmed:
                self.steps_suppressed += 1
                logger.debug(
                    "step suppressed: static scene (score %.2f)",
                    self.motion_gate.confidence,
                )
                return False

            heading = self.heading_integrator.heading
            self._position = pdr_step_update(
                self._position, self.config.tracker.step_length_m, heading
            )
            self.steps_accepted += 1
            if event is not None:
                self._pending.append(event)
            logger.debug(
                "step accepted: pos=(%.2f, %.2f) heading=%.0f deg",
                self._position[0], self._position[1], np.degrees(heading),
            )
            return True

    def current_pose(self) -> Pose:
        """Consistent snapshot of (x, y, heading)."""
        with self._lock:
            return Pose(
                x=float(self._position[0]),
                y=float(self._position[1]),
                heading=self.heading_integrator.heading,
            )

    def poll_steps(self) -> List[StepEvent]:
        """Return and clear the accepted step events since the last poll."""
        with self._lock:
            events = list(self._pending)
            self._pending.clear()
            return events

    def get_stats(self) -> Dict[str, float]:
        """
        Diagnostic counters.

        Returns:
            Dictionary with step counts, acceptance rate and calibration flag.
        """
        with self._lock:
            acceptance_rate = (
                self.steps_accepted / self.steps_detected
                if self.steps_detected > 0
                else 0.0
            )
            return {
                "steps_detected": self.steps_detected,
                "steps_accepted": self.steps_accepted,
                "steps_suppressed": self.steps_suppressed,
                "acceptance_rate": acceptance_rate,
                "heading_calibrated": self.heading_integrator.is_calibrated,
            }
