"""
Error metrics for dead-reckoning tracks and step detectors.
"""

from typing import Dict, Optional, Sequence, Union

import numpy as np


def compute_position_errors(truth: np.ndarray, estimated: np.ndarray) -> np.ndarray:
    """
    Per-sample error vectors (estimated - truth).

    Args:
        truth: True positions, shape (N, 2)
        estimated: Estimated positions, shape (N, 2)

    Returns:
        errors: Error vectors, shape (N, 2)

    Raises:
        ValueError: If the shapes differ
    """
    truth = np.asarray(truth, dtype=float)
    estimated = np.asarray(estimated, dtype=float)
    if truth.shape != estimated.shape:
        raise ValueError(
            f"Shape mismatch: truth {truth.shape} vs estimated {estimated.shape}"
        )
    return estimated - truth


def compute_rmse(errors: np.ndarray, axis: Optional[int] = None) -> Union[float, np.ndarray]:
    """
    Root mean square of errors.

    axis=None gives a scalar over everything, axis=0 gives one value per
    coordinate.
    """
    errors = np.asarray(errors, dtype=float)
    if axis is None:
        return float(np.sqrt(np.mean(errors**2)))
    return np.sqrt(np.mean(errors**2, axis=axis))


def compute_error_stats(errors: np.ndarray) -> Dict[str, float]:
    """
    Summary statistics of error magnitudes.

    Args:
        errors: Error vectors (N, d) or scalar errors (N,)

    Returns:
        Dictionary with mean, median, std, rmse, p90, p95 and max.
    """
    errors = np.asarray(errors, dtype=float)
    if errors.ndim > 1:
        magnitudes = np.linalg.norm(errors, axis=1)
    else:
        magnitudes = np.abs(errors)

    return {
        "mean": float(np.mean(magnitudes)),
        "median": float(np.median(magnitudes)),
        "std": float(np.std(magnitudes)),
        "rmse": float(np.sqrt(np.mean(magnitudes**2))),
        "p90": float(np.percentile(magnitudes, 90)),
        "p95": float(np.percentile(magnitudes, 95)),
        "max": float(np.max(magnitudes)),
    }


def compute_final_error(truth_xy: np.ndarray, estimated_xy: np.ndarray) -> float:
    """Distance between the last true and last estimated position."""
    truth_xy = np.asarray(truth_xy, dtype=float)
    estimated_xy = np.asarray(estimated_xy, dtype=float)
    return float(np.linalg.norm(estimated_xy[-1] - truth_xy[-1]))


def match_step_times(
    detected_t: Sequence[float],
    true_t: Sequence[float],
    tolerance_s: float = 0.2,
) -> Dict[str, float]:
    """
    Greedy one-to-one matching of detected step times to true step times.

    Each true step can be claimed by at most one detection within
    tolerance_s; detections are visited in time order.

    Returns:
        Dictionary with matched, missed, false (spurious detections),
        precision and recall.
    """
    detected = np.sort(np.asarray(detected_t, dtype=float))
    truth = np.sort(np.asarray(true_t, dtype=float))
    used = np.zeros(len(truth), dtype=bool)

    matched = 0
    for t in detected:
        if len(truth) == 0:
            break
        gaps = np.abs(truth - t)
        gaps[used] = np.inf
        j = int(np.argmin(gaps))
        if gaps[j] <= tolerance_s:
            used[j] = True
            matched += 1

    n_det = len(detected)
    n_true = len(truth)
    return {
        "matched": matched,
        "missed": n_true - matched,
        "false": n_det - matched,
        "precision": matched / n_det if n_det > 0 else 0.0,
        "recall": matched / n_true if n_true > 0 else 0.0,
    }
