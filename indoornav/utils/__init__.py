"""
Utility functions for guidance geometry.

This module provides angle wrapping in the two canonical ranges used by the
package, and compass-convention bearing, turn angle and distance.
"""

from .angles import wrap_to_2pi, wrap_to_2pi_array, wrap_to_360, wrap_to_180
from .geometry import angle_diff_deg, bearing_deg, distance, path_length

__all__ = [
    'wrap_to_2pi',
    'wrap_to_2pi_array',
    'wrap_to_360',
    'wrap_to_180',
    'bearing_deg',
    'angle_diff_deg',
    'distance',
    'path_length',
]
