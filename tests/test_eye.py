import math

import numpy as np
import pytest

from config import ConfigError
from eye import Eye
from geometry import Vector2, heading, wrap

CENTER = Vector2(0.5, 0.5)


def food_at(rotation: float, distance: float, origin: Vector2 = CENTER) -> np.ndarray:
    """One food item `distance` away from origin along bearing `rotation`."""
    dx, dy = heading(rotation, distance)
    return np.array([[wrap(origin.x + dx), wrap(origin.y + dy)]])


def test_no_food_reads_zero(eye):
    vision = eye.process_vision(CENTER, 0.0, np.empty((0, 2)))
    assert vision.shape == (eye.cells,)
    assert not vision.any()


def test_food_straight_ahead_lands_in_middle_cell(eye):
    vision = eye.process_vision(CENTER, 0.0, food_at(0.0, 0.1))
    assert vision[4] == pytest.approx((0.25 - 0.1) / 0.25)
    assert vision.sum() == pytest.approx(vision[4])


def test_closer_food_reads_stronger(eye):
    near = eye.process_vision(CENTER, 0.0, food_at(0.0, 0.05))
    far = eye.process_vision(CENTER, 0.0, food_at(0.0, 0.2))
    assert near[4] > far[4] > 0.0


def test_food_beyond_range_is_invisible(eye):
    vision = eye.process_vision(CENTER, 0.0, food_at(0.0, eye.fov_range + 1e-6))
    assert not vision.any()


def test_food_just_inside_range_is_visible(eye):
    vision = eye.process_vision(CENTER, 0.0, food_at(0.0, eye.fov_range - 1e-3))
    assert vision.sum() > 0.0


@pytest.mark.parametrize("side", [-1.0, 1.0])
def test_food_just_outside_cone_is_invisible(side):
    eye = Eye(fov_range=0.25, fov_angle=math.pi / 2, cells=4)
    outside = eye.process_vision(CENTER, 0.0, food_at(side * (math.pi / 4 + 0.01), 0.1))
    inside = eye.process_vision(CENTER, 0.0, food_at(side * (math.pi / 4 - 0.01), 0.1))
    assert not outside.any()
    assert inside.sum() > 0.0


def test_edges_of_cone_map_to_outer_cells():
    eye = Eye(fov_range=0.25, fov_angle=math.pi / 2, cells=4)
    left = eye.process_vision(CENTER, 0.0, food_at(math.pi / 4 - 0.01, 0.1))
    right = eye.process_vision(CENTER, 0.0, food_at(-math.pi / 4 + 0.01, 0.1))
    assert left[3] > 0.0 and left[:3].sum() == 0.0
    assert right[0] > 0.0 and right[1:].sum() == 0.0


def test_food_behind_is_invisible(eye):
    vision = eye.process_vision(CENTER, 0.0, food_at(math.pi, 0.1))
    assert not vision.any()


def test_vision_follows_rotation(eye):
    # facing -x; food at smaller x is straight ahead
    food = np.array([[0.4, 0.5]])
    vision = eye.process_vision(CENTER, math.pi / 2, food)
    assert vision[4] == pytest.approx(0.6)


def test_vision_wraps_across_edges(eye):
    origin = Vector2(0.5, 0.95)
    vision = eye.process_vision(origin, 0.0, np.array([[0.5, 0.05]]))
    assert vision[4] == pytest.approx(0.6)


def test_food_in_same_cell_accumulates(eye):
    foods = np.vstack([food_at(0.0, 0.1), food_at(0.0, 0.2)])
    vision = eye.process_vision(CENTER, 0.0, foods)
    assert vision[4] == pytest.approx(0.6 + 0.2)


def test_food_on_top_of_animal_reads_full(eye):
    # bearing of a zero offset is 0, i.e. straight ahead of an unrotated animal
    vision = eye.process_vision(CENTER, 0.0, np.array([[0.5, 0.5]]))
    assert vision.sum() == pytest.approx(1.0)


@pytest.mark.parametrize("kwargs", [
    {"fov_range": 0.0},
    {"fov_range": -1.0},
    {"fov_angle": 0.0},
    {"fov_angle": 7.0},
    {"cells": 0},
    {"cells": 2.5},
])
def test_invalid_eye_config(kwargs):
    with pytest.raises(ConfigError):
        Eye(**kwargs)
