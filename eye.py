"""
Eye – the sensor model of an animal.

The field of view is a cone centred on the animal's heading, split into
`cells` equal angular slices.  Each food item inside the cone and within
`fov_range` adds  (fov_range - distance) / fov_range  to its slice, so a
cell reads 0 when empty and grows with the number and closeness of the
food it sees.
"""

import math

import numpy as np

from config import ConfigError, FOV_RANGE, FOV_ANGLE, CELLS
from geometry import TAU, bearing, wrap_delta, wrap_signed_angle


class Eye:
    __slots__ = ("fov_range", "fov_angle", "cells")

    def __init__(self, fov_range: float = FOV_RANGE,
                 fov_angle: float = FOV_ANGLE, cells: int = CELLS):
        if not fov_range > 0:
            raise ConfigError(f"fov_range must be positive, got {fov_range}")
        if not 0 < fov_angle <= TAU:
            raise ConfigError(f"fov_angle must be in (0, 2π], got {fov_angle}")
        if int(cells) != cells or cells <= 0:
            raise ConfigError(f"cells must be a positive integer, got {cells}")
        self.fov_range = float(fov_range)
        self.fov_angle = float(fov_angle)
        self.cells     = int(cells)

    def __repr__(self):
        return (f"Eye(fov_range={self.fov_range}, "
                f"fov_angle={math.degrees(self.fov_angle):.1f}°, cells={self.cells})")

    def process_vision(self, position, rotation: float,
                       food_positions: np.ndarray) -> np.ndarray:
        """
        Args:
            position:       (x, y) of the animal
            rotation:       heading of the animal (radians)
            food_positions: float array of shape (n_food, 2)

        Returns:
            float64 array of shape (cells,), values >= 0
        """
        vision = np.zeros(self.cells, dtype=np.float64)
        if len(food_positions) == 0:
            return vision

        dx = wrap_delta(food_positions[:, 0] - position[0])
        dy = wrap_delta(food_positions[:, 1] - position[1])
        dist = np.hypot(dx, dy)

        angle = wrap_signed_angle(bearing(dx, dy) - rotation)
        half  = self.fov_angle / 2.0

        seen = (dist <= self.fov_range) & (angle >= -half) & (angle <= half)
        if not seen.any():
            return vision

        cell = ((angle[seen] + half) / self.fov_angle * self.cells).astype(np.int64)
        cell = np.minimum(cell, self.cells - 1)
        energy = (self.fov_range - dist[seen]) / self.fov_range

        np.add.at(vision, cell, energy)
        return vision
