"""
Visual motion gate from frame-to-frame luminance difference.

The gate answers one question: "is the camera's view changing?". It is not
optical flow; no displacement direction or magnitude is estimated. The
position tracker uses it to reject steps that the accelerometer reports
while the scene stays still (hand or device shake without walking).

Processing per frame:
    1. Nearest-neighbour downsample to a fixed small grid (default 64x48)
    2. Keep every Nth pixel in both axes (sparse grid)
    3. Luminance Y = 0.299 R + 0.587 G + 0.114 B
    4. Score = mean |Y_k - Y_{k-1}| over the sampled pixels

The first frame has nothing to compare against and scores 0.
"""

import logging
import warnings
from typing import Optional

import numpy as np

from indoornav.config import MotionGateConfig

logger = logging.getLogger(__name__)


def downsample_nearest(frame: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Resize a frame to (height, width) by nearest-neighbour pixel selection.

    Args:
        frame: Image array, shape (H, W) or (H, W, C).
        width: Output width in pixels.
        height: Output height in pixels.

    Returns:
        Array of shape (height, width) or (height, width, C), same dtype.
    """
    src_h, src_w = frame.shape[:2]
    rows = np.minimum(((np.arange(height) + 0.5) * src_h / height).astype(int), src_h - 1)
    cols = np.minimum(((np.arange(width) + 0.5) * src_w / width).astype(int), src_w - 1)
    return frame[rows[:, None], cols[None, :]]


def to_luminance(frame: np.ndarray, weights=(0.299, 0.587, 0.114)) -> np.ndarray:
    """
    Convert an image to float luminance.

    Args:
        frame: Shape (H, W) gray, (H, W, 3) RGB or (H, W, 4) RGBA.
        weights: R, G, B weights.

    Returns:
        Luminance, shape (H, W), float64.
    """
    frame = np.asarray(frame)
    if frame.ndim == 2:
        return frame.astype(float)
    if frame.ndim == 3 and frame.shape[2] in (3, 4):
        return frame[..., :3].astype(float) @ np.asarray(weights, dtype=float)
    raise ValueError(
        f"frame must have shape (H, W), (H, W, 3) or (H, W, 4), got {frame.shape}"
    )


class MotionConfidenceGate:
    """
    Two-frame visual motion detector.

    Usage:
        >>> gate = MotionConfidenceGate()
        >>> gate.process(frame0)   # first frame
        0.0
        >>> score = gate.process(frame1)
        >>> gate.is_moving
        True

    Attributes:
        config: MotionGateConfig in use.
        confidence: Score of the last processed frame (mean gray-level
                    difference; 0 before two frames have been seen).
        frames_processed: Number of frames accepted by process().
    """

    def __init__(self, config: Optional[MotionGateConfig] = None):
        self.config = config if config is not None else MotionGateConfig()
        self.reset()

    def reset(self) -> None:
        """Drop the stored reference frame and score."""
        self._prev: Optional[np.ndarray] = None
        self.confidence = 0.0
        self.frames_processed = 0
        self._warned_upsampling = False

    @property
    def is_moving(self) -> bool:
        """True if the last score exceeds the motion threshold."""
        return bool(self.confidence > self.config.motion_threshold)

    def process(self, frame: Optional[np.ndarray]) -> float:
        """
        Score one camera frame against the previous one.

        Args:
            frame: Decoded frame, shape (H, W), (H, W, 3) or (H, W, 4), or
                   None / empty when the camera has no frame ready.

        Returns:
            Mean absolute luminance difference over the sampled pixels.
            0.0 for the first frame and for frames that are not ready.
        """
        if frame is None or np.size(frame) == 0:
            self.confidence = 0.0
            return self.confidence

        cfg = self.config
        frame = np.asarray(frame)
        if frame.ndim < 2:
            raise ValueError(f"frame must be at least 2D, got shape {frame.shape}")
        if (frame.shape[0] < cfg.height or frame.shape[1] < cfg.width) and not self._warned_upsampling:
            warnings.warn(
                f"Frame {frame.shape[1]}x{frame.shape[0]} is smaller than the "
                f"{cfg.width}x{cfg.height} sampling grid; pixels will be repeated",
                RuntimeWarning,
            )
            self._warned_upsampling = True

        small = downsample_nearest(frame, cfg.width, cfg.height)
        luma = to_luminance(small, cfg.luma_weights)[::cfg.sample_stride, ::cfg.sample_stride]

        if self._prev is None:
            score = 0.0
        else:
            diff = np.abs(luma - self._prev)
            if cfg.pixel_noise_floor > 0:
                diff = np.where(diff > cfg.pixel_noise_floor, diff, 0.0)
            score = float(diff.sum() / diff.size)

        self._prev = luma
        self.frames_processed += 1
        self.confidence = score
        logger.debug("frame %d motion score %.2f", self.frames_processed, score)
        return score
