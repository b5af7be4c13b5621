"""
Example: Streaming vs offline step detection and inertial dead reckoning

Feeds a corridor walk sample by sample through the streaming StepDetector
and HeadingIntegrator (inside an inertial-only PositionTracker), runs the
non-causal reference detector over the whole recording, and scores both
against the true step times.

Can run with:
    - Inline data (default): python examples/example_step_detection.py
    - Pre-generated dataset: python examples/example_step_detection.py --data corridor_walk
      (create it with scripts/generate_walk_dataset.py)
"""

import argparse
import json
from pathlib import Path
from typing import Dict

import matplotlib.pyplot as plt
import numpy as np
from tqdm import tqdm

from indoornav.config import NavSystemConfig
from indoornav.eval import (
    compute_error_stats,
    compute_final_error,
    compute_position_errors,
    match_step_times,
    plot_step_detection,
    plot_trajectory_2d,
    save_figure,
)
from indoornav.sensors import AccelerationSample, RotationSample, detect_steps_offline
from indoornav.sim import generate_walk
from indoornav.tracking import PositionTracker


def load_walk_dataset(data_dir: str) -> Dict:
    """Load a dataset written by scripts/generate_walk_dataset.py."""
    path = Path(data_dir)
    data = {
        "t": np.loadtxt(path / "time.txt"),
        "accel": np.loadtxt(path / "accel.txt"),
        "yaw_rate": np.loadtxt(path / "yaw_rate.txt"),
        "pos_true": np.loadtxt(path / "ground_truth_position.txt"),
        "step_times": np.atleast_1d(np.loadtxt(path / "step_times.txt")),
    }
    with open(path / "config.json") as f:
        data["config"] = json.load(f)
    return data


def inline_walk() -> Dict:
    waypoints = [[0, 0], [0, 20], [8, 20], [8, 0], [0, 0]]
    walk = generate_walk(waypoints, accel_noise=0.2, gyro_noise=0.5, seed=42)
    return {
        "t": walk.t,
        "accel": walk.accel,
        "yaw_rate": walk.yaw_rate_deg_s,
        "pos_true": walk.pos_true,
        "step_times": walk.step_times,
        "config": {"waypoints": waypoints},
    }


def run(data: Dict) -> None:
    t = data["t"]
    dt = float(t[1] - t[0])
    config = NavSystemConfig.inertial_only()
    tracker = PositionTracker(config)

    magnitudes = np.full(len(t), np.nan)
    est_xy = np.zeros((len(t), 2))
    streaming_times = []
    for k in tqdm(range(len(t)), desc="Streaming detector", unit="sample"):
        tracker.process_rotation(RotationSample(data["yaw_rate"][k], t[k]))
        ax, ay, az = data["accel"][k]
        event = tracker.process_acceleration(AccelerationSample(ax, ay, az, t[k]))
        if event is not None:
            streaming_times.append(event.t)
        if tracker.detector.last_magnitude is not None:
            magnitudes[k] = tracker.detector.last_magnitude
        est_xy[k] = tracker.current_pose().xy

    peak_idx, _ = detect_steps_offline(data["accel"], dt, min_peak_distance=0.3)
    offline_times = t[peak_idx]

    truth = data["step_times"]
    scores = {
        "streaming": match_step_times(streaming_times, truth),
        "offline": match_step_times(offline_times, truth),
    }

    errors = compute_position_errors(data["pos_true"], est_xy)
    stats = compute_error_stats(errors)

    print("\n" + "=" * 70)
    print("RESULTS")
    print("=" * 70)
    print(f"True steps: {len(truth)}")
    for name, s in scores.items():
        print(f"  {name:10s} matched {s['matched']:4d}  missed {s['missed']:3d}  "
              f"false {s['false']:3d}  precision {s['precision']:.2f}  "
              f"recall {s['recall']:.2f}")
    print()
    print("Inertial dead reckoning (fixed 0.7 m stride):")
    print(f"  Final error:  {compute_final_error(data['pos_true'], est_xy):.2f} m")
    print(f"  RMSE:         {stats['rmse']:.2f} m")
    print(f"  Max error:    {stats['max']:.2f} m")

    figs_dir = Path(__file__).parent / "figs"
    fig = plot_step_detection(
        t,
        magnitudes,
        config.step_detector.threshold_g,
        {"truth": truth, "streaming": streaming_times, "offline": offline_times},
    )
    save_figure(fig, figs_dir, "step_detection")
    fig = plot_trajectory_2d(
        data["pos_true"], {"Inertial PDR": est_xy}, title="Corridor Walk: PDR"
    )
    save_figure(fig, figs_dir, "step_detection_trajectory")
    plt.close("all")
    print(f"\nFigures saved to: {figs_dir}/")


def main():
    parser = argparse.ArgumentParser(
        description="Streaming vs offline step detection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Inline generated corridor walk
  python examples/example_step_detection.py

  # Pre-generated dataset
  python scripts/generate_walk_dataset.py --preset noisy --output data/sim/noisy_walk
  python examples/example_step_detection.py --data noisy_walk
        """,
    )
    parser.add_argument("--data", type=str, default=None,
                        help="Dataset name under data/sim/ or a full path")
    args = parser.parse_args()

    print("\n" + "=" * 70)
    print("Step Detection: streaming latch detector vs offline peak picking")
    print("=" * 70)

    if args.data:
        data_path = Path(args.data)
        if not data_path.exists():
            data_path = Path("data/sim") / args.data
        if not data_path.exists():
            print(f"Error: Dataset not found at '{args.data}' or 'data/sim/{args.data}'")
            return
        data = load_walk_dataset(str(data_path))
        print(f"\nDataset: {data_path}")
    else:
        data = inline_walk()
        print("\nUsing inline corridor walk (20 m x 8 m loop)")

    run(data)


if __name__ == "__main__":
    main()
