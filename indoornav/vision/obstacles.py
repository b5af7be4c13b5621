"""
Obstacle proximity heuristics over external object detections.

Object detection itself runs outside this package. Its output is consumed
here as a list of Detection boxes in image pixels, and turned into at most
one "obstacle ahead" alert per check.

Depth is estimated with a pinhole shortcut that assumes the object's
physical height is known from its label:
    depth ≈ H_real / (h_box / H_frame)

It ignores focal length and camera tilt, so it is only good enough to
separate "a few metres away" from "right in front of you".
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from indoornav.config import ObstacleConfig
from indoornav.navigation.types import HapticEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Detection:
    """
    One detected object.

    Attributes:
        label: Class name, e.g. 'person', 'chair'.
        score: Detector confidence in [0, 1].
        bbox: (x, y, w, h) in pixels, (x, y) = top-left corner.
    """

    label: str
    score: float
    bbox: Tuple[float, float, float, float]


@dataclass(frozen=True)
class ObstacleAlert:
    """An obstacle in the walking path, ready to be announced."""

    label: str
    depth_m: float
    instruction: str
    event: HapticEvent = HapticEvent.STOP


def estimate_depth(
    detection: Detection,
    frame_height: float,
    config: Optional[ObstacleConfig] = None,
) -> float:
    """
    Rough distance to a detected object.

    Args:
        detection: Detection with a bounding box in pixels.
        frame_height: Height of the image the box refers to, in pixels.
        config: Supplies the label-to-height table.

    Returns:
        Estimated depth in metres; inf for a zero-height box.
    """
    config = config if config is not None else ObstacleConfig()
    if frame_height <= 0:
        raise ValueError(f"frame_height must be positive, got {frame_height}")
    box_h = detection.bbox[3]
    if box_h <= 0:
        return math.inf
    real_h = config.real_heights_m.get(detection.label, config.default_height_m)
    return real_h / (box_h / frame_height)


def filter_detections(
    detections: Iterable[Detection],
    config: Optional[ObstacleConfig] = None,
) -> List[Detection]:
    """Keep detections whose score is strictly above config.min_score."""
    config = config if config is not None else ObstacleConfig()
    return [d for d in detections if d.score > config.min_score]


def is_central(detection: Detection, frame_width: float) -> bool:
    """True if the box spans the vertical centre line of the frame."""
    x, _, w, _ = detection.bbox
    center_x = frame_width / 2.0
    return x < center_x < x + w


def find_obstacle_ahead(
    detections: Iterable[Detection],
    frame_width: float,
    frame_height: float,
    config: Optional[ObstacleConfig] = None,
) -> Optional[ObstacleAlert]:
    """
    First confident, central and close detection, as an alert.

    A detection is close when its estimated depth is under
    config.alert_distance_m. If no finite depth can be estimated, a box
    taller than config.close_height_ratio of the frame counts as close.

    Returns:
        ObstacleAlert for the first qualifying detection, else None.
    """
    config = config if config is not None else ObstacleConfig()
    for det in filter_detections(detections, config):
        if not is_central(det, frame_width):
            continue
        depth = estimate_depth(det, frame_height, config)
        if math.isfinite(depth):
            close = depth < config.alert_distance_m
        else:
            close = det.bbox[3] > config.close_height_ratio * frame_height
        if close:
            return ObstacleAlert(
                label=det.label,
                depth_m=depth,
                instruction=f"Obstacle: {det.label} ahead!",
            )
    return None


class ObstacleMonitor:
    """
    Throttled obstacle alerts.

    At most one alert is returned per config.alert_interval_s; checks in
    between return None without evaluating the detections.
    """

    def __init__(self, config: Optional[ObstacleConfig] = None):
        self.config = config if config is not None else ObstacleConfig()
        self._last_alert_t: Optional[float] = None

    def check(
        self,
        detections: Iterable[Detection],
        frame_width: float,
        frame_height: float,
        now: float,
    ) -> Optional[ObstacleAlert]:
        if (
            self._last_alert_t is not None
            and now - self._last_alert_t < self.config.alert_interval_s
        ):
            return None

        alert = find_obstacle_ahead(detections, frame_width, frame_height, self.config)
        if alert is not None:
            self._last_alert_t = now
            logger.info("obstacle alert: %s at %.1f m", alert.label, alert.depth_m)
        return alert
