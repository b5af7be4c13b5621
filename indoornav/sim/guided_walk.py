"""
Closed-loop simulation of a user following the guidance.

A virtual pedestrian reacts to each GuidanceOutput the way the instructions
ask:
    ROTATING: turn in place by the indicated angle (right if angle_diff > 0)
    MOVING: walk forward, producing a step oscillation on the accelerometer
    ARRIVED: stop; the run ends

Sensor samples (accelerometer, yaw rate) are produced every dt and fed to a
PositionTracker. Camera frames from a SyntheticScene and navigation updates
run at the slower frame rate. The navigator only ever sees the tracker's
estimate; the pedestrian's true pose is kept separately as ground truth.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from tqdm import tqdm

from indoornav.config import NavSystemConfig
from indoornav.navigation.feedback import FeedbackManager, Priority
from indoornav.navigation.state_machine import NavigationStateMachine
from indoornav.navigation.types import HapticEvent, NavState
from indoornav.sensors.types import AccelerationSample, RotationSample
from indoornav.sim.scene import SyntheticScene
from indoornav.sim.walking import GRAVITY
from indoornav.tracking.pose import Pose
from indoornav.tracking.position_tracker import PositionTracker

logger = logging.getLogger(__name__)


@dataclass
class GuidedWalkResult:
    """
    Outcome of one closed-loop run.

    Sensor-rate arrays (every dt):
        t, truth_xy, truth_heading_deg

    Navigation-rate arrays (every frame period):
        nav_t, est_xy, est_heading_deg, distance, angle_diff, states

    Attributes:
        instructions: (time, text, haptic event) for each non-silent output,
                      starting with the destination-set message.
        arrived: True if the navigator reached ARRIVED.
        arrival_time: Time of arrival, or None.
        true_steps: Number of step oscillation peaks the pedestrian made.
        tracker_stats: PositionTracker.get_stats() at the end of the run.
    """

    target_xy: Tuple[float, float]
    t: np.ndarray
    truth_xy: np.ndarray
    truth_heading_deg: np.ndarray
    nav_t: np.ndarray
    est_xy: np.ndarray
    est_heading_deg: np.ndarray
    distance: np.ndarray
    angle_diff: np.ndarray
    states: List[NavState]
    instructions: List[Tuple[float, str, Optional[HapticEvent]]]
    arrived: bool
    arrival_time: Optional[float]
    true_steps: int
    tracker_stats: Dict[str, float] = field(default_factory=dict)

    @property
    def final_true_distance(self) -> float:
        """True distance between the pedestrian's final position and the target."""
        return float(np.hypot(*(np.asarray(self.target_xy) - self.truth_xy[-1])))

    @property
    def final_position_error(self) -> float:
        """Distance between the final estimated and true positions."""
        return float(np.linalg.norm(self.est_xy[-1] - self.truth_xy[-1]))


def simulate_guided_walk(
    target_xy: Sequence[float],
    start_xy: Sequence[float] = (0.0, 0.0),
    start_heading_deg: float = 0.0,
    config: Optional[NavSystemConfig] = None,
    dt: float = 0.02,
    frame_period: float = 0.2,
    step_freq: float = 2.0,
    step_length: float = 0.7,
    accel_amplitude: float = 5.0,
    turn_rate_deg_s: float = 60.0,
    accel_noise: float = 0.2,
    gyro_noise: float = 0.5,
    max_time_s: float = 120.0,
    scene: Optional[SyntheticScene] = None,
    feedback: Optional[FeedbackManager] = None,
    seed: Optional[int] = 0,
    show_progress: bool = False,
) -> GuidedWalkResult:
    """
    Run the tracker and navigator against a virtual pedestrian.

    The tracker frame is anchored at start_xy; its heading is calibrated to
    start_heading_deg at t = 0 (one compass fix), then integrated from the
    gyro only.

    Args:
        target_xy: Destination in world coordinates. Units: m.
        start_xy: Start position in world coordinates.
        start_heading_deg: True (and calibrated) initial heading.
        config: Pipeline configuration. Defaults to the fused preset.
        dt: Sensor sample period (s).
        frame_period: Camera/navigation period (s).
        step_freq: Pedestrian cadence (steps/s).
        step_length: True stride (m); may differ from the tracker's.
        accel_amplitude: Vertical oscillation amplitude while walking (m/s²).
        turn_rate_deg_s: Pedestrian turn rate.
        accel_noise: Accelerometer white noise std (m/s²).
        gyro_noise: Gyro white noise std (deg/s).
        max_time_s: Give up after this much simulated time.
        scene: Frame source; a seeded default scene if None.
        feedback: Optional feedback policy driven with every output.
        seed: Seed for sensor noise.
        show_progress: Show a tqdm progress bar over sensor samples.

    Returns:
        GuidedWalkResult
    """
    config = config if config is not None else NavSystemConfig()
    if dt <= 0 or frame_period < dt:
        raise ValueError(f"need 0 < dt <= frame_period, got dt={dt}, frame_period={frame_period}")

    rng = np.random.default_rng(seed)
    scene = scene if scene is not None else SyntheticScene(seed=seed)
    tracker = PositionTracker(config)
    navigator = NavigationStateMachine(config.navigation)

    origin = np.asarray(start_xy, dtype=float)
    target = (float(target_xy[0]), float(target_xy[1]))
    frame_every = max(1, int(round(frame_period / dt)))
    speed = step_freq * step_length

    true_xy = origin.copy()
    true_heading = float(start_heading_deg) % 360.0
    odometer = 0.0
    gait_tau = 0.0
    turn_remaining = 0.0
    true_steps = 0

    t_log: List[float] = []
    truth_xy_log: List[np.ndarray] = []
    truth_heading_log: List[float] = []
    nav_t: List[float] = []
    est_xy: List[Tuple[float, float]] = []
    est_heading: List[float] = []
    dist_log: List[float] = []
    diff_log: List[float] = []
    states: List[NavState] = []
    instructions: List[Tuple[float, str, Optional[HapticEvent]]] = []
    arrival_time: Optional[float] = None

    tracker.calibrate_heading(true_heading)
    text = navigator.set_target(*target)
    instructions.append((0.0, text, None))
    if feedback is not None:
        feedback.announce(text, Priority.CRITICAL, now=0.0)
    mode = navigator.state

    n_samples = int(math.ceil(max_time_s / dt)) + 1
    for k in tqdm(range(n_samples), desc="Guided walk", unit="sample",
                  disable=not show_progress):
        t = k * dt

        # Pedestrian
        yaw_rate = 0.0
        accel_z = GRAVITY
        if mode == NavState.ROTATING and turn_remaining != 0.0:
            turn = math.copysign(min(turn_rate_deg_s * dt, abs(turn_remaining)), turn_remaining)
            true_heading = (true_heading + turn) % 360.0
            turn_remaining -= turn
            yaw_rate = turn / dt
        elif mode == NavState.MOVING:
            prev_cycles = step_freq * gait_tau - 0.25
            gait_tau += dt
            if math.floor(step_freq * gait_tau - 0.25) > math.floor(prev_cycles):
                true_steps += 1
            accel_z += accel_amplitude * math.sin(2.0 * math.pi * step_freq * gait_tau)
            psi = math.radians(true_heading)
            true_xy = true_xy + speed * dt * np.array([math.sin(psi), math.cos(psi)])
            odometer += speed * dt

        t_log.append(t)
        truth_xy_log.append(true_xy.copy())
        truth_heading_log.append(true_heading)

        # Sensors
        noise = rng.normal(0.0, accel_noise, 3) if accel_noise > 0 else np.zeros(3)
        tracker.process_rotation(RotationSample(
            yaw_rate + (rng.normal(0.0, gyro_noise) if gyro_noise > 0 else 0.0), t))
        tracker.process_acceleration(AccelerationSample(
            noise[0], noise[1], accel_z + noise[2], t))

        if k % frame_every != 0:
            continue

        # Camera and navigation
        tracker.process_frame(scene.render(true_heading, odometer))
        est = tracker.current_pose()
        pose = Pose(x=origin[0] + est.x, y=origin[1] + est.y, heading=est.heading)
        output = navigator.update(pose)
        if output is None:
            continue

        nav_t.append(t)
        est_xy.append(pose.xy)
        est_heading.append(pose.heading_deg)
        dist_log.append(output.distance)
        diff_log.append(output.angle_diff)
        states.append(output.state)
        if not output.is_silent:
            instructions.append((t, output.instruction, output.event))
        if feedback is not None:
            feedback.notify(output, now=t)

        mode = output.state
        if output.state == NavState.ROTATING:
            turn_remaining = output.angle_diff
        if mode == NavState.MOVING and output.event == HapticEvent.STRAIGHT:
            gait_tau = 0.0
        if output.state == NavState.ARRIVED:
            arrival_time = t
            logger.info("arrived after %.1f s", t)
            break
    else:
        logger.warning("no arrival within %.0f s", max_time_s)

    return GuidedWalkResult(
        target_xy=target,
        t=np.array(t_log),
        truth_xy=np.array(truth_xy_log),
        truth_heading_deg=np.array(truth_heading_log),
        nav_t=np.array(nav_t),
        est_xy=np.array(est_xy, dtype=float).reshape(-1, 2),
        est_heading_deg=np.array(est_heading),
        distance=np.array(dist_log),
        angle_diff=np.array(diff_log),
        states=states,
        instructions=instructions,
        arrived=arrival_time is not None,
        arrival_time=arrival_time,
        true_steps=true_steps,
        tracker_stats=tracker.get_stats(),
    )

