"""
Evaluation and visualization.

Modules:
    trajectory: Thinned path recorder
    metrics: Position error metrics and step-time matching
    plots: Trajectory, guidance timeline and step detection figures
"""

from .metrics import (
    compute_error_stats,
    compute_final_error,
    compute_position_errors,
    compute_rmse,
    match_step_times,
)
from .plots import (
    plot_guidance_timeline,
    plot_step_detection,
    plot_trajectory_2d,
    save_figure,
)
from .trajectory import TrajectoryRecorder

__all__ = [
    # Recording
    "TrajectoryRecorder",
    # Metrics
    "compute_position_errors",
    "compute_rmse",
    "compute_error_stats",
    "compute_final_error",
    "match_step_times",
    # Plots
    "plot_trajectory_2d",
    "plot_guidance_timeline",
    "plot_step_detection",
    "save_figure",
]
