"""
Synthetic camera frames for the motion gate.

The "world" is a seeded, smoothly textured image that wraps around at its
edges. The camera view is a window into it:
    - turning shifts the window horizontally (pixels_per_degree)
    - walking shifts it vertically with the distance travelled
      (pixels_per_metre), like a floor sliding past a downward-tilted camera

Every rendered frame gets fresh Gaussian sensor noise, so two frames of a
standing user still differ slightly, as with a real camera.
"""

from typing import Optional

import numpy as np
from scipy.ndimage import gaussian_filter


class SyntheticScene:
    """
    Renders RGB uint8 frames for a given heading and distance walked.

    Args:
        width: Frame width in pixels.
        height: Frame height in pixels.
        texture_scale: Size of the world texture relative to the frame.
        smoothness: Gaussian blur (pixels) of the texture; larger means
                    coarser features.
        pixels_per_degree: Horizontal view shift per degree of heading.
        pixels_per_metre: Vertical view shift per metre walked.
        noise_std: Per-channel sensor noise std (gray levels).
        seed: Seed for texture and noise.
    """

    def __init__(
        self,
        width: int = 160,
        height: int = 120,
        texture_scale: int = 4,
        smoothness: float = 3.0,
        pixels_per_degree: float = 4.0,
        pixels_per_metre: float = 40.0,
        noise_std: float = 2.0,
        seed: Optional[int] = 0,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"frame size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels_per_degree = pixels_per_degree
        self.pixels_per_metre = pixels_per_metre
        self.noise_std = noise_std
        self._rng = np.random.default_rng(seed)

        tex_h = height * texture_scale
        tex_w = width * texture_scale
        raw = self._rng.normal(0.0, 1.0, (tex_h, tex_w, 3))
        smooth = gaussian_filter(raw, sigma=(smoothness, smoothness, 0), mode="wrap")
        # stretch to a mid-gray texture with std ~50 gray levels
        smooth = (smooth - smooth.mean()) / (smooth.std() + 1e-12)
        self._texture = np.clip(128.0 + 50.0 * smooth, 0.0, 255.0)

        self._rows = np.arange(height)
        self._cols = np.arange(width)

    def render(self, heading_deg: float, distance_walked_m: float) -> np.ndarray:
        """
        Frame seen at a heading after walking a given distance.

        Args:
            heading_deg: User heading in degrees.
            distance_walked_m: Cumulative distance walked. Units: m.

        Returns:
            Frame of shape (height, width, 3), dtype uint8.
        """
        tex_h, tex_w, _ = self._texture.shape
        col0 = int(round(heading_deg * self.pixels_per_degree)) % tex_w
        row0 = int(round(distance_walked_m * self.pixels_per_metre)) % tex_h

        rows = (self._rows + row0) % tex_h
        cols = (self._cols + col0) % tex_w
        view = self._texture[np.ix_(rows, cols)]

        if self.noise_std > 0:
            view = view + self._rng.normal(0.0, self.noise_std, view.shape)
        return np.clip(np.round(view), 0, 255).astype(np.uint8)
