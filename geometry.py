"""
Toroidal 2-D geometry for ForageSim.

The world is the unit square with both axes wrapping, so every helper
here is plain modular arithmetic.  All functions accept floats or numpy
arrays (element-wise), which lets the eye and the collision pass share
exactly the same maths.
"""

import math
from typing import NamedTuple

import numpy as np

TAU = 2.0 * math.pi


class Vector2(NamedTuple):
    x: float
    y: float


def _below(value, limit):
    # a % limit may round up to limit itself for tiny negative inputs
    if isinstance(value, np.ndarray):
        return np.where(value >= limit, 0.0, value)
    return 0.0 if value >= limit else value


def wrap(value):
    """Wrap a coordinate into [0, 1)."""
    return _below(value % 1.0, 1.0)


def wrap_angle(angle):
    """Wrap an angle into [0, 2π)."""
    return _below(angle % TAU, TAU)


def wrap_signed_angle(angle):
    """Wrap an angle into [-π, π)."""
    return wrap_angle(angle + math.pi) - math.pi


def wrap_delta(delta):
    """Shortest wrapped offset along one axis, in [-0.5, 0.5)."""
    return wrap(delta + 0.5) - 0.5


def toroidal_delta(a: Vector2, b: Vector2) -> Vector2:
    """Displacement from a to b taking the shorter way round on each axis."""
    return Vector2(wrap_delta(b[0] - a[0]), wrap_delta(b[1] - a[1]))


def toroidal_distance(a: Vector2, b: Vector2):
    dx, dy = toroidal_delta(a, b)
    return np.hypot(dx, dy) if isinstance(dx, np.ndarray) else math.hypot(dx, dy)


def rotate(vector: Vector2, angle: float) -> Vector2:
    """Rotate counter-clockwise by angle (radians)."""
    c, s = math.cos(angle), math.sin(angle)
    return Vector2(vector[0] * c - vector[1] * s,
                   vector[0] * s + vector[1] * c)


def heading(rotation: float, length: float = 1.0) -> Vector2:
    """Forward vector of an animal.  Rotation 0 faces +y."""
    return rotate(Vector2(0.0, length), rotation)


def bearing(dx, dy):
    """Angle of (dx, dy) measured the same way as an animal's rotation."""
    return np.arctan2(-dx, dy) if isinstance(dx, np.ndarray) else math.atan2(-dx, dy)


def translate(position: Vector2, offset: Vector2) -> Vector2:
    """Move a position by offset and wrap it back onto the torus."""
    return Vector2(wrap(position[0] + offset[0]), wrap(position[1] + offset[1]))


def random_position(rng) -> Vector2:
    x, y = rng.random(2)
    return Vector2(float(x), float(y))


def random_rotation(rng) -> float:
    return float(wrap_angle(rng.random() * TAU))
