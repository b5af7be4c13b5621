"""
Example: Guided walk to a target with camera-confirmed steps

Runs the full pipeline in closed loop: a virtual pedestrian turns and walks
as instructed, the tracker dead-reckons from the pedestrian's accelerometer
and gyro, the motion gate confirms steps from synthetic camera frames, and
the navigator issues turn / walk / arrival instructions.

Compares two configurations:
    - fused: steps count only while the camera view is changing
    - inertial_only: every accelerometer step counts

Can run with:
    - Defaults: python examples/example_guided_walk.py
    - Custom target: python examples/example_guided_walk.py --target 6 8 --heading 90
    - Saved config: python examples/example_guided_walk.py --config nav_config.json
"""

import argparse
import logging
import time
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from indoornav.config import NavSystemConfig, load_config
from indoornav.eval import (
    TrajectoryRecorder,
    plot_guidance_timeline,
    plot_trajectory_2d,
    save_figure,
)
from indoornav.navigation import FeedbackManager, Priority
from indoornav.sim import simulate_guided_walk
from indoornav.tracking import Pose
from indoornav.vision import Detection, ObstacleMonitor


class PrintSpeech:
    """Speech device that prints to the console."""

    def __init__(self):
        self.is_speaking = False

    def speak(self, text):
        print(f"    [speech] {text}")

    def cancel(self):
        print("    [speech] (cancelled)")
        self.is_speaking = False


def run(config: NavSystemConfig, name: str, args) -> dict:
    print(f"\nRunning '{name}' configuration...")
    feedback = FeedbackManager(speech=PrintSpeech() if args.speak else None,
                               config=config.feedback)
    start = time.time()
    result = simulate_guided_walk(
        target_xy=args.target,
        start_heading_deg=args.heading,
        config=config,
        accel_noise=args.accel_noise,
        gyro_noise=args.gyro_noise,
        max_time_s=args.max_time,
        feedback=feedback,
        seed=args.seed,
        show_progress=True,
    )
    elapsed = time.time() - start

    recorder = TrajectoryRecorder(min_spacing_m=0.1)
    for xy, heading in zip(result.est_xy, result.est_heading_deg):
        recorder.record(Pose(x=xy[0], y=xy[1], heading=np.radians(heading)))

    stats = result.tracker_stats
    print(f"  Time: {elapsed:.2f} s")
    print(f"  Arrived:          {result.arrived}"
          + (f" at t = {result.arrival_time:.1f} s" if result.arrived else ""))
    print(f"  True steps:       {result.true_steps}")
    print(f"  Steps detected:   {stats['steps_detected']}")
    print(f"  Steps accepted:   {stats['steps_accepted']} "
          f"({stats['acceptance_rate'] * 100:.0f}%)")
    print(f"  Estimated path:   {recorder.path_length():.1f} m")
    print(f"  Final pos error:  {result.final_position_error:.2f} m")
    print(f"  True dist to target at stop: {result.final_true_distance:.2f} m")
    print("  Instructions:")
    for t, text, event in result.instructions:
        tag = f" [{event.value}]" if event is not None else ""
        print(f"    {t:6.1f} s  {text}{tag}")
    return {"result": result, "recorder": recorder}


def obstacle_demo(config: NavSystemConfig) -> None:
    """Feed one detection frame through the obstacle monitor to the speaker."""
    print("\nObstacle alert while a turn instruction is being spoken:")
    speech = PrintSpeech()
    feedback = FeedbackManager(speech=speech, config=config.feedback)
    monitor = ObstacleMonitor(config.obstacles)

    feedback.announce("Turn left 40 degrees.", Priority.NORMAL, now=0.0)
    speech.is_speaking = True
    chair = Detection("chair", 0.8, (250, 40, 200, 400))
    alert = monitor.check([chair], frame_width=640, frame_height=480, now=0.5)
    if alert is not None:
        print(f"  {alert.label} at ~{alert.depth_m:.1f} m")
        feedback.notify(alert, now=0.5)


def main():
    parser = argparse.ArgumentParser(
        description="Guided walk to a target (closed-loop simulation)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Target 10 m ahead, user initially facing right
  python examples/example_guided_walk.py --target 0 10 --heading 90

  # Print what a screen reader would say
  python examples/example_guided_walk.py --speak
        """,
    )
    parser.add_argument("--target", type=float, nargs=2, default=[4.0, 10.0],
                        metavar=("X", "Y"), help="Target position in m (default: 4 10)")
    parser.add_argument("--heading", type=float, default=90.0,
                        help="Initial heading in degrees (default: 90)")
    parser.add_argument("--config", type=str, default=None,
                        help="JSON config file used instead of the presets")
    parser.add_argument("--accel-noise", type=float, default=0.2,
                        help="Accelerometer noise std in m/s^2 (default: 0.2)")
    parser.add_argument("--gyro-noise", type=float, default=0.5,
                        help="Gyro noise std in deg/s (default: 0.5)")
    parser.add_argument("--max-time", type=float, default=120.0,
                        help="Simulation time limit in s (default: 120)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--speak", action="store_true",
                        help="Print announcements as they pass the feedback policy")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    print("\n" + "=" * 70)
    print("Guided Walk: step-and-heading tracking with visual step confirmation")
    print("=" * 70)
    print(f"\n  Start:    (0.0, 0.0), heading {args.heading:.0f} deg")
    print(f"  Target:   ({args.target[0]:.1f}, {args.target[1]:.1f})")

    if args.config:
        configs = {Path(args.config).stem: load_config(args.config)}
    else:
        configs = {
            "fused": NavSystemConfig.fused(),
            "inertial_only": NavSystemConfig.inertial_only(),
        }

    runs = {name: run(cfg, name, args) for name, cfg in configs.items()}
    obstacle_demo(next(iter(configs.values())))

    figs_dir = Path(__file__).parent / "figs"
    first_name, first = next(iter(runs.items()))
    result = first["result"]
    nav_cfg = configs[first_name].navigation

    fig = plot_trajectory_2d(
        result.truth_xy,
        {name: r["recorder"].as_array() for name, r in runs.items()},
        target_xy=result.target_xy,
        arrival_radius=nav_cfg.arrival_radius_m,
        title="Guided Walk: True vs Estimated Path",
    )
    save_figure(fig, figs_dir, "guided_walk_trajectory")

    fig = plot_guidance_timeline(
        result.nav_t,
        result.angle_diff,
        result.distance,
        result.states,
        move_deadband=nav_cfg.move_deadband_deg,
        rotation_deadband=nav_cfg.rotation_deadband_deg,
        title=f"Guidance Timeline ({first_name})",
    )
    save_figure(fig, figs_dir, "guided_walk_timeline")
    plt.close("all")

    print("\n" + "=" * 70)
    print(f"Figures saved to: {figs_dir}/")
    print("=" * 70)


if __name__ == "__main__":
    main()
