"""
Plotting helpers for guided walks.

All functions return matplotlib Figure objects; the caller decides whether
to show or save them.
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np

from indoornav.navigation.types import NavState

_COLORS = ["blue", "red", "green", "orange", "purple"]
_LINESTYLES = ["-", "--", "-.", ":", "-"]

_STATE_LEVELS = {
    NavState.IDLE: 0,
    NavState.ROTATING: 1,
    NavState.MOVING: 2,
    NavState.ARRIVED: 3,
}


def plot_trajectory_2d(
    truth_xy: np.ndarray,
    est_xy_dict: Dict[str, np.ndarray],
    target_xy: Optional[Tuple[float, float]] = None,
    arrival_radius: Optional[float] = None,
    title: str = "Guided Walk",
) -> plt.Figure:
    """
    Plot the true path, one or more estimated paths and the target.

    Args:
        truth_xy: True trajectory, shape (N, 2)
        est_xy_dict: Estimated trajectories {name: (M, 2) array}
        target_xy: Target position (optional)
        arrival_radius: Radius of the arrival circle drawn around the target
        title: Plot title

    Returns:
        fig: Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=(9, 8))

    truth_xy = np.asarray(truth_xy)
    ax.plot(truth_xy[:, 0], truth_xy[:, 1], "k-", linewidth=2,
            label="Ground Truth", zorder=10)
    ax.plot(truth_xy[0, 0], truth_xy[0, 1], "go", markersize=10,
            label="Start", zorder=11)

    for i, (name, est_xy) in enumerate(est_xy_dict.items()):
        est_xy = np.asarray(est_xy)
        if len(est_xy) == 0:
            continue
        ax.plot(
            est_xy[:, 0],
            est_xy[:, 1],
            linestyle=_LINESTYLES[i % len(_LINESTYLES)],
            color=_COLORS[i % len(_COLORS)],
            linewidth=1.5,
            label=name,
            alpha=0.8,
        )

    if target_xy is not None:
        ax.plot(target_xy[0], target_xy[1], "r*", markersize=16,
                label="Target", zorder=12)
        if arrival_radius is not None:
            circle = plt.Circle(target_xy, arrival_radius, color="red",
                                fill=False, linestyle="--", alpha=0.6,
                                label="Arrival radius")
            ax.add_patch(circle)

    ax.set_xlabel("X / right (m)", fontsize=12)
    ax.set_ylabel("Y / ahead (m)", fontsize=12)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)
    ax.axis("equal")

    plt.tight_layout()
    return fig


def plot_guidance_timeline(
    t: Sequence[float],
    angle_diff: Sequence[float],
    distance: Sequence[float],
    states: Sequence[NavState],
    move_deadband: Optional[float] = None,
    rotation_deadband: Optional[float] = None,
    title: str = "Guidance Timeline",
) -> plt.Figure:
    """
    Angle to target, distance to target and navigation state over time.

    Deadbands, if given, are drawn as symmetric horizontal bands on the
    angle panel.
    """
    t = np.asarray(t, dtype=float)
    fig, axes = plt.subplots(3, 1, figsize=(12, 9), sharex=True)

    ax = axes[0]
    ax.plot(t, angle_diff, color="blue", linewidth=1.5)
    for band, color in ((move_deadband, "green"), (rotation_deadband, "orange")):
        if band is not None:
            ax.axhline(band, color=color, linestyle="--", linewidth=0.8)
            ax.axhline(-band, color=color, linestyle="--", linewidth=0.8)
    ax.axhline(0, color="k", linewidth=0.8, alpha=0.5)
    ax.set_ylabel("Angle diff (deg)", fontsize=11)
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.plot(t, distance, color="red", linewidth=1.5)
    ax.set_ylabel("Distance (m)", fontsize=11)
    ax.grid(True, alpha=0.3)

    ax = axes[2]
    levels = [_STATE_LEVELS[NavState(s)] for s in states]
    ax.step(t, levels, where="post", color="purple", linewidth=1.5)
    ax.set_yticks(list(_STATE_LEVELS.values()))
    ax.set_yticklabels([s.value for s in _STATE_LEVELS])
    ax.set_xlabel("Time (s)", fontsize=11)
    ax.grid(True, alpha=0.3)

    fig.suptitle(title, fontsize=14, fontweight="bold")
    plt.tight_layout()
    return fig


def plot_step_detection(
    t: np.ndarray,
    magnitude_g: np.ndarray,
    threshold_g: float,
    step_times: Dict[str, Sequence[float]],
    title: str = "Step Detection",
) -> plt.Figure:
    """
    Filtered magnitude with threshold and the step times of each detector.

    Args:
        t: Sample times, shape (N,)
        magnitude_g: Gravity-normalized filtered magnitude, shape (N,)
        threshold_g: Step threshold
        step_times: {detector name: step times}
        title: Plot title
    """
    fig, ax = plt.subplots(figsize=(12, 5))
    ax.plot(t, magnitude_g, color="gray", linewidth=1.0, label="|a| filtered (g)")
    ax.axhline(threshold_g, color="k", linestyle="--", linewidth=0.8,
               label=f"threshold {threshold_g:.2f} g")

    markers = ["v", "^", "o", "s"]
    for i, (name, times) in enumerate(step_times.items()):
        times = np.asarray(times, dtype=float)
        y = np.full(len(times), threshold_g + 0.05 * (i + 1))
        ax.plot(times, y, markers[i % len(markers)], color=_COLORS[i % len(_COLORS)],
                linestyle="none", label=f"{name} ({len(times)})")

    ax.set_xlabel("Time (s)", fontsize=11)
    ax.set_ylabel("Magnitude (g)", fontsize=11)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.legend(fontsize=9)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig


def save_figure(
    fig: plt.Figure,
    out_dir: Union[str, Path],
    name: str,
    formats: Tuple[str, ...] = ("png",),
) -> List[Path]:
    """Save fig as out_dir/name.<fmt> for each format; returns the paths."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for fmt in formats:
        filepath = out_dir / f"{name}.{fmt}"
        fig.savefig(filepath, dpi=150, bbox_inches="tight")
        paths.append(filepath)
    return paths
