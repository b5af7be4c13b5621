"""
Inertial sensor processing for pedestrian dead reckoning.

Modules:
    types: Sensor packets (AccelerationSample, RotationSample) and StepEvent
    pdr: Low-pass filtering, streaming step detection, step position update,
         offline reference step detector
    heading: Gyro yaw-rate integration with optional absolute calibration

Example:
    >>> from indoornav.sensors import AccelerationSample, StepDetector
    >>> detector = StepDetector()
    >>> detector.update(AccelerationSample(0.0, 0.0, 9.81, t=0.00))  # seeds filter
    >>> detector.update(AccelerationSample(0.0, 0.0, 29.4, t=0.02))  # 1.4 g
    StepEvent(seq=1, t=0.02, magnitude_g=...)
"""

from indoornav.sensors.types import (
    AccelerationSample,
    RotationSample,
    StepEvent,
)

from indoornav.sensors.pdr import (
    StepDetector,
    total_accel_magnitude,
    lowpass_update,
    normalized_magnitude,
    pdr_step_update,
    detect_steps_offline,
)

from indoornav.sensors.heading import HeadingIntegrator

__all__ = [
    # Data types
    "AccelerationSample",
    "RotationSample",
    "StepEvent",
    # Step detection
    "StepDetector",
    "total_accel_magnitude",
    "lowpass_update",
    "normalized_magnitude",
    "pdr_step_update",
    "detect_steps_offline",
    # Heading
    "HeadingIntegrator",
]
