"""
Open-loop synthetic walks for exercising the inertial pipeline.

A walk is a polyline of waypoints. Each leg is preceded by an in-place turn
to the leg's compass bearing, then walked straight at step_freq·step_length.

Signals (sampled every dt):
    accel: (N, 3) specific force in the phone frame. Gravity sits on z; a
           vertical oscillation g + A·sin(2π·f·τ) is added while walking,
           τ being the time since the leg started. One period is one step.
    yaw_rate_deg_s: (N,) rotation rate, positive clockwise. Nonzero only
                    while turning.
    pos_true / heading_true: ground truth in the compass convention
                             (heading 0 = +y, clockwise).

Turn samples carry the rate that, integrated as rate·Δt over each sample's
interval, reproduces the turn exactly.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from indoornav.utils.angles import wrap_to_180
from indoornav.utils.geometry import bearing_deg

GRAVITY = 9.81


@dataclass
class WalkData:
    """
    Synthetic sensor streams and ground truth of one walk.

    Attributes:
        t: Sample times, shape (N,). Units: s.
        accel: Accelerometer samples, shape (N, 3). Units: m/s².
        yaw_rate_deg_s: Yaw rate samples, shape (N,). Units: deg/s.
        pos_true: True positions, shape (N, 2). Units: m.
        heading_true: True heading, shape (N,). Units: rad in [0, 2π).
        is_walking: True while the pedestrian is stepping, shape (N,).
        step_times: Times of the true step peaks. Units: s.
    """

    t: np.ndarray
    accel: np.ndarray
    yaw_rate_deg_s: np.ndarray
    pos_true: np.ndarray
    heading_true: np.ndarray
    is_walking: np.ndarray
    step_times: np.ndarray

    @property
    def dt(self) -> float:
        return float(self.t[1] - self.t[0]) if len(self.t) > 1 else 0.0

    @property
    def n_steps(self) -> int:
        return len(self.step_times)


def generate_walk(
    waypoints: Sequence[Sequence[float]],
    dt: float = 0.02,
    step_freq: float = 2.0,
    step_length: float = 0.7,
    accel_amplitude: float = 5.0,
    turn_rate_deg_s: float = 90.0,
    initial_heading_deg: float = 0.0,
    pause_s: float = 0.5,
    accel_noise: float = 0.0,
    gyro_noise: float = 0.0,
    seed: Optional[int] = None,
) -> WalkData:
    """
    Generate accelerometer, gyro and ground truth for a waypoint walk.

    Args:
        waypoints: (M, 2) positions; the walk starts at waypoints[0].
        dt: Sample period. Units: s. Default 0.02 (50 Hz).
        step_freq: Steps per second while walking.
        step_length: True stride. Units: m.
        accel_amplitude: Vertical oscillation amplitude. Units: m/s².
        turn_rate_deg_s: Magnitude of in-place turn rate.
        initial_heading_deg: Heading at the first waypoint.
        pause_s: Standing time before the first turn and after the last leg.
        accel_noise: Std of white noise added to each accel axis (m/s²).
        gyro_noise: Std of white noise added to the yaw rate (deg/s).
        seed: Seed for the noise generator.

    Returns:
        WalkData with noisy signals and clean ground truth.

    Raises:
        ValueError: For fewer than two waypoints or non-positive rates.
    """
    waypoints = np.asarray(waypoints, dtype=float)
    if waypoints.ndim != 2 or waypoints.shape[1] != 2 or len(waypoints) < 2:
        raise ValueError(f"waypoints must have shape (M>=2, 2), got {waypoints.shape}")
    if dt <= 0 or step_freq <= 0 or step_length <= 0 or turn_rate_deg_s <= 0:
        raise ValueError("dt, step_freq, step_length and turn_rate_deg_s must be positive")

    speed = step_freq * step_length
    accel_z: list = []
    yaw_rate: list = []
    positions: list = []
    headings: list = []
    walking: list = []
    step_times: list = []

    pos = waypoints[0].copy()
    heading_deg = float(initial_heading_deg) % 360.0

    def stand(n: int) -> None:
        for _ in range(n):
            accel_z.append(GRAVITY)
            yaw_rate.append(0.0)
            positions.append(pos.copy())
            headings.append(math.radians(heading_deg))
            walking.append(False)

    stand(max(1, int(round(pause_s / dt))))

    for start, end in zip(waypoints[:-1], waypoints[1:]):
        leg = float(np.linalg.norm(end - start))
        if leg == 0.0:
            continue

        # Turn in place to the leg bearing
        delta = wrap_to_180(bearing_deg(start, end) - heading_deg)
        n_turn = int(round(abs(delta) / (turn_rate_deg_s * dt)))
        if n_turn > 0:
            rate = delta / (n_turn * dt)
            for _ in range(n_turn):
                heading_deg = (heading_deg + rate * dt) % 360.0
                accel_z.append(GRAVITY)
                yaw_rate.append(rate)
                positions.append(pos.copy())
                headings.append(math.radians(heading_deg))
                walking.append(False)
        heading_deg = bearing_deg(start, end)

        # Walk the leg
        n_walk = int(round(leg / (speed * dt)))
        direction = (end - start) / leg
        # time of the last sample before the leg, where τ = 0
        t_leg0 = (len(accel_z) - 1) * dt
        for k in range(1, n_walk + 1):
            tau = k * dt
            accel_z.append(GRAVITY + accel_amplitude * math.sin(2.0 * math.pi * step_freq * tau))
            yaw_rate.append(0.0)
            positions.append(start + direction * min(leg, speed * tau))
            headings.append(math.radians(heading_deg))
            walking.append(True)
        pos = end.copy()
        positions[-1] = pos.copy()

        n_cycles = int(np.floor(n_walk * dt * step_freq - 0.25)) + 1
        for j in range(max(0, n_cycles)):
            t_peak = t_leg0 + (j + 0.25) / step_freq
            if t_peak <= t_leg0 + n_walk * dt:
                step_times.append(t_peak)

    stand(max(1, int(round(pause_s / dt))))

    n = len(accel_z)
    t = np.arange(n) * dt
    accel = np.zeros((n, 3))
    accel[:, 2] = accel_z
    yaw = np.array(yaw_rate, dtype=float)

    rng = np.random.default_rng(seed)
    if accel_noise > 0:
        accel = accel + rng.normal(0.0, accel_noise, accel.shape)
    if gyro_noise > 0:
        yaw = yaw + rng.normal(0.0, gyro_noise, yaw.shape)

    return WalkData(
        t=t,
        accel=accel,
        yaw_rate_deg_s=yaw,
        pos_true=np.array(positions, dtype=float),
        heading_true=np.array(headings, dtype=float),
        is_walking=np.array(walking, dtype=bool),
        step_times=np.array(step_times, dtype=float),
    )
