"""
Configuration parameters for the indoor navigation pipeline.

Every tunable constant of the pipeline lives in one of the frozen dataclasses
below. Each section validates itself on construction: impossible values raise
ValueError, plausible-but-unusual values emit a RuntimeWarning.

Sections:
    StepDetectorConfig: Low-pass factor, step threshold and refractory interval
    HeadingConfig: Initial heading of the dead-reckoning frame
    MotionGateConfig: Frame downsampling grid and motion threshold
    TrackerConfig: Step length and whether visual gating is applied
    NavigationConfig: Arrival radius and the two hysteresis deadbands
    FeedbackConfig: Speech throttling interval
    ObstacleConfig: Detection filtering and proximity heuristics
    NavSystemConfig: Aggregate of all sections, with presets and JSON I/O

Presets:
    NavSystemConfig.fused(): Camera-confirmed steps (default)
    NavSystemConfig.inertial_only(): Steps accepted from the accelerometer alone

Example:
    >>> config = NavSystemConfig.fused()
    >>> config.tracker.step_length_m
    0.7
    >>> save_config(config, "nav_config.json")
    >>> load_config("nav_config.json") == config
    True
"""

import json
import warnings
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Tuple, Union


@dataclass(frozen=True)
class StepDetectorConfig:
    """
    Parameters of the streaming step detector.

    Attributes:
        alpha: Low-pass smoothing factor in filtered = α·filtered + (1-α)·sample.
               Range: [0, 1). Default: 0.8.
        gravity: Gravity magnitude used to normalize the filtered magnitude.
                 Units: m/s². Default: 9.81.
        threshold_g: Step threshold on the gravity-normalized magnitude.
                     Default: 1.2.
        min_step_interval_s: Refractory interval between two steps.
                             Units: seconds. Default: 0.4 (2.5 steps/s).
    """

    alpha: float = 0.8
    gravity: float = 9.81
    threshold_g: float = 1.2
    min_step_interval_s: float = 0.4

    def __post_init__(self) -> None:
        if not 0.0 <= self.alpha < 1.0:
            raise ValueError(f"alpha must be in [0, 1), got {self.alpha}")
        if self.gravity <= 0:
            raise ValueError(f"gravity must be positive, got {self.gravity}")
        if self.threshold_g <= 0:
            raise ValueError(f"threshold_g must be positive, got {self.threshold_g}")
        if self.min_step_interval_s <= 0:
            raise ValueError(
                f"min_step_interval_s must be positive, got {self.min_step_interval_s}"
            )
        if not 0.2 <= self.min_step_interval_s <= 1.0:
            warnings.warn(
                f"min_step_interval_s={self.min_step_interval_s} s is outside the "
                "human cadence range [0.2, 1.0] s",
                RuntimeWarning,
            )


@dataclass(frozen=True)
class HeadingConfig:
    """Initial heading of the tracker frame (radians, 0 = initial facing)."""

    initial_heading_rad: float = 0.0


@dataclass(frozen=True)
class MotionGateConfig:
    """
    Parameters of the frame-difference motion gate.

    Attributes:
        width: Downsampled frame width in pixels. Default: 64.
        height: Downsampled frame height in pixels. Default: 48.
        sample_stride: Use every Nth pixel of the downsampled grid in both
                       axes. Default: 2.
        luma_weights: RGB-to-luminance weights. Default: (0.299, 0.587, 0.114).
        pixel_noise_floor: Per-pixel differences at or below this value are
                           ignored. Units: gray levels. Default: 0.0.
        motion_threshold: Mean absolute difference above which the scene is
                          considered to be moving. Units: gray levels.
                          Default: 5.0.
    """

    width: int = 64
    height: int = 48
    sample_stride: int = 2
    luma_weights: Tuple[float, float, float] = (0.299, 0.587, 0.114)
    pixel_noise_floor: float = 0.0
    motion_threshold: float = 5.0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"width and height must be positive, got {self.width}x{self.height}"
            )
        if self.sample_stride < 1:
            raise ValueError(f"sample_stride must be >= 1, got {self.sample_stride}")
        if len(self.luma_weights) != 3:
            raise ValueError(
                f"luma_weights must have 3 entries, got {len(self.luma_weights)}"
            )
        if self.pixel_noise_floor < 0:
            raise ValueError(
                f"pixel_noise_floor must be non-negative, got {self.pixel_noise_floor}"
            )
        if self.motion_threshold < 0:
            raise ValueError(
                f"motion_threshold must be non-negative, got {self.motion_threshold}"
            )
        # JSON round-trips tuples as lists
        object.__setattr__(self, "luma_weights", tuple(float(w) for w in self.luma_weights))


@dataclass(frozen=True)
class TrackerConfig:
    """
    Parameters of the step-and-heading position tracker.

    Attributes:
        step_length_m: Fixed stride length. Units: m. Default: 0.7.
        use_motion_gate: If False, every detected step is accepted.
    """

    step_length_m: float = 0.7
    use_motion_gate: bool = True

    def __post_init__(self) -> None:
        if self.step_length_m <= 0:
            raise ValueError(f"step_length_m must be positive, got {self.step_length_m}")


@dataclass(frozen=True)
class NavigationConfig:
    """
    Thresholds of the guidance state machine.

    Attributes:
        arrival_radius_m: Distance under which the user has arrived. Default: 1.5.
        rotation_deadband_deg: Heading error that sends MOVING back to
                               ROTATING. Default: 20.
        move_deadband_deg: Heading error under which ROTATING becomes
                           MOVING. Default: 10.
        haptic_turn_threshold_deg: Turn instructions larger than this get a
                                   directional haptic event. Default: 45.
        rearm_factor: ARRIVED returns to ROTATING beyond
                      rearm_factor * arrival_radius_m. Default: 2.0.
    """

    arrival_radius_m: float = 1.5
    rotation_deadband_deg: float = 20.0
    move_deadband_deg: float = 10.0
    haptic_turn_threshold_deg: float = 45.0
    rearm_factor: float = 2.0

    def __post_init__(self) -> None:
        if self.arrival_radius_m <= 0:
            raise ValueError(
                f"arrival_radius_m must be positive, got {self.arrival_radius_m}"
            )
        if self.move_deadband_deg <= 0 or self.rotation_deadband_deg <= 0:
            raise ValueError(
                "deadbands must be positive, got "
                f"move={self.move_deadband_deg}, rotation={self.rotation_deadband_deg}"
            )
        if self.move_deadband_deg > self.rotation_deadband_deg:
            raise ValueError(
                f"move_deadband_deg ({self.move_deadband_deg}) must not exceed "
                f"rotation_deadband_deg ({self.rotation_deadband_deg})"
            )
        if self.rearm_factor <= 1.0:
            raise ValueError(f"rearm_factor must be > 1, got {self.rearm_factor}")


@dataclass(frozen=True)
class FeedbackConfig:
    """Minimum interval between two non-critical announcements (seconds)."""

    min_speech_interval_s: float = 2.0

    def __post_init__(self) -> None:
        if self.min_speech_interval_s < 0:
            raise ValueError(
                f"min_speech_interval_s must be non-negative, got {self.min_speech_interval_s}"
            )


def _default_real_heights() -> Dict[str, float]:
    return {
        "person": 1.7,
        "chair": 1.0,
        "table": 0.8,
        "couch": 0.9,
        "potted plant": 0.5,
    }


@dataclass(frozen=True)
class ObstacleConfig:
    """
    Parameters of the obstacle-distance heuristic.

    Attributes:
        min_score: Detections at or below this confidence are ignored.
        alert_distance_m: Estimated depth under which an obstacle is close.
        close_height_ratio: Without a depth estimate, a box taller than this
                            fraction of the frame is close.
        alert_interval_s: Minimum time between two obstacle alerts.
        real_heights_m: Assumed physical height per detection label.
        default_height_m: Height used for labels missing from the table.
    """

    min_score: float = 0.6
    alert_distance_m: float = 1.5
    close_height_ratio: float = 0.3
    alert_interval_s: float = 2.0
    real_heights_m: Dict[str, float] = field(default_factory=_default_real_heights)
    default_height_m: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.min_score <= 1.0:
            raise ValueError(f"min_score must be in [0, 1], got {self.min_score}")
        if self.alert_distance_m <= 0:
            raise ValueError(
                f"alert_distance_m must be positive, got {self.alert_distance_m}"
            )
        if not 0.0 < self.close_height_ratio <= 1.0:
            raise ValueError(
                f"close_height_ratio must be in (0, 1], got {self.close_height_ratio}"
            )
        if self.default_height_m <= 0:
            raise ValueError(
                f"default_height_m must be positive, got {self.default_height_m}"
            )


_SECTIONS = {
    "step_detector": StepDetectorConfig,
    "heading": HeadingConfig,
    "motion_gate": MotionGateConfig,
    "tracker": TrackerConfig,
    "navigation": NavigationConfig,
    "feedback": FeedbackConfig,
    "obstacles": ObstacleConfig,
}


@dataclass(frozen=True)
class NavSystemConfig:
    """
    Complete configuration of the navigation pipeline.

    The default instance is the camera-confirmed ("fused") configuration.
    The inertial-only configuration is the same pipeline with the motion
    gate switched off and a shorter refractory interval.
    """

    step_detector: StepDetectorConfig = field(default_factory=StepDetectorConfig)
    heading: HeadingConfig = field(default_factory=HeadingConfig)
    motion_gate: MotionGateConfig = field(default_factory=MotionGateConfig)
    tracker: TrackerConfig = field(default_factory=TrackerConfig)
    navigation: NavigationConfig = field(default_factory=NavigationConfig)
    feedback: FeedbackConfig = field(default_factory=FeedbackConfig)
    obstacles: ObstacleConfig = field(default_factory=ObstacleConfig)

    @classmethod
    def fused(cls) -> "NavSystemConfig":
        """Steps must be confirmed by visual motion (0.4 s refractory)."""
        return cls()

    @classmethod
    def inertial_only(cls) -> "NavSystemConfig":
        """
        Accelerometer-only step acceptance (0.3 s refractory).

        Equivalent to a motion gate that always reports "moving".
        """
        return cls(
            step_detector=StepDetectorConfig(min_step_interval_s=0.3),
            tracker=TrackerConfig(use_motion_gate=False),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable nested dictionary."""
        data = asdict(self)
        data["motion_gate"]["luma_weights"] = list(self.motion_gate.luma_weights)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NavSystemConfig":
        """
        Build a configuration from a nested dictionary.

        Missing sections and keys take their defaults.

        Raises:
            ValueError: If a section or key is unknown, or a value is invalid.
        """
        unknown = set(data) - set(_SECTIONS)
        if unknown:
            raise ValueError(f"Unknown config sections: {sorted(unknown)}")

        sections = {}
        for name, section_cls in _SECTIONS.items():
            values = data.get(name, {})
            allowed = {f.name for f in fields(section_cls)}
            bad_keys = set(values) - allowed
            if bad_keys:
                raise ValueError(f"Unknown keys in '{name}': {sorted(bad_keys)}")
            sections[name] = section_cls(**values)
        return cls(**sections)


def load_config(path: Union[str, Path]) -> NavSystemConfig:
    """Load a NavSystemConfig from a JSON file."""
    with open(path) as f:
        data = json.load(f)
    return NavSystemConfig.from_dict(data)


def save_config(config: NavSystemConfig, path: Union[str, Path]) -> Path:
    """Write a NavSystemConfig to a JSON file and return its path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(config.to_dict(), f, indent=2)
    return path
