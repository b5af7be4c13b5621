"""
Simulation of walks, camera frames and guided navigation runs.

Modules:
    walking: Open-loop accelerometer/gyro streams for a waypoint walk
    scene: Seeded synthetic camera frames that shift with user motion
    guided_walk: Closed loop of tracker, navigator and a virtual pedestrian
"""

from indoornav.sim.walking import GRAVITY, WalkData, generate_walk
from indoornav.sim.scene import SyntheticScene
from indoornav.sim.guided_walk import GuidedWalkResult, simulate_guided_walk

__all__ = [
    "GRAVITY",
    "WalkData",
    "generate_walk",
    "SyntheticScene",
    "GuidedWalkResult",
    "simulate_guided_walk",
]
