"""Indoor pedestrian navigation core.

This package contains the reusable components of a phone-based indoor
wayfinding aid:
- sensors: Step detection and gyro heading integration
- vision: Frame-difference motion gating and obstacle-distance heuristics
- tracking: Step-and-heading position tracker (fusion of the above)
- navigation: Guidance state machine and feedback policy
- utils: Compass-convention bearing, angle difference and distance
- eval: Trajectory recording, error metrics and plots
- sim: Synthetic sensor streams and closed-loop guided walks
"""

__version__ = "0.1.0"
