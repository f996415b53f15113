import dataclasses
import math

import numpy as np
import pytest

from animal import Animal, Food, brain_topology
from config import ConfigError, MAX_ROTATION, MAX_SPEED
from geometry import TAU, Vector2, toroidal_distance
from neural_network import NeuralNetwork
from world import AnimalView, World

from conftest import make_still_animal


def _random_world(rng, eye, **kwargs):
    return World.random(rng, eye, brain_topology(eye), **kwargs)


def test_random_world_sizes(rng, eye):
    world = _random_world(rng, eye, population=7, food_count=11)
    assert len(world.animals) == 7
    assert len(world.foods) == 11
    assert all(a.satiation == 0 for a in world.animals)


def test_positions_and_rotations_stay_in_range(rng, eye):
    # large weights saturate the outputs at their clamps
    world = _random_world(rng, eye, population=20, food_count=30, init_range=5.0)
    for _ in range(300):
        world.step(rng)
        for animal in world.animals:
            assert 0.0 <= animal.position.x < 1.0
            assert 0.0 <= animal.position.y < 1.0
            assert 0.0 <= animal.rotation < TAU
        for food in world.foods:
            assert 0.0 <= food.position.x < 1.0
            assert 0.0 <= food.position.y < 1.0


def test_no_animal_moves_faster_than_max_speed(rng, eye):
    world = _random_world(rng, eye, population=20, food_count=30, init_range=5.0)
    for _ in range(50):
        before = [a.position for a in world.animals]
        world.step(rng)
        for old, animal in zip(before, world.animals):
            assert toroidal_distance(old, animal.position) <= MAX_SPEED + 1e-12


def test_outputs_are_clamped(eye):
    brain = NeuralNetwork.from_layers([(np.zeros((eye.cells, 2)), np.array([10.0, 10.0]))])
    animal = Animal(Vector2(0.5, 0.5), 0.0, eye, brain)
    world = World([animal], [])
    world.step(np.random.default_rng(0))

    assert animal.rotation == pytest.approx(MAX_ROTATION)
    # rotation π/2 faces -x
    assert animal.position.x == pytest.approx(0.5 - MAX_SPEED)
    assert animal.position.y == pytest.approx(0.5)


def test_zero_speed_animal_never_moves(rng, eye):
    animal = make_still_animal(eye, 0.3, 0.7, rotation=1.0)
    foods = [Food.random(rng) for _ in range(40)]
    world = World([animal], foods)

    for _ in range(200):
        world.step(rng)
        assert animal.position == (0.3, 0.7)
        assert animal.rotation == 1.0


def test_food_under_animal_is_eaten_in_one_step(eye):
    animal = make_still_animal(eye, 0.3, 0.3)
    food = Food(Vector2(0.3, 0.3))
    world = World([animal], [food])

    world.step(np.random.default_rng(5))

    assert animal.satiation == 1
    assert food.position != (0.3, 0.3)
    assert len(world.foods) == 1


def test_food_outside_eat_radius_is_left_alone(eye):
    animal = make_still_animal(eye, 0.3, 0.3)
    food = Food(Vector2(0.3 + 0.011, 0.3))
    world = World([animal], [food])

    world.step(np.random.default_rng(5))

    assert animal.satiation == 0
    assert food.position == (0.3 + 0.011, 0.3)


def test_eating_works_across_the_edge(eye):
    animal = make_still_animal(eye, 0.999, 0.5)
    food = Food(Vector2(0.002, 0.5))
    world = World([animal], [food])
    world.step(np.random.default_rng(1))
    assert animal.satiation == 1


def test_shared_food_credits_every_animal_and_respawns_once(eye):
    a = make_still_animal(eye, 0.6, 0.6)
    b = make_still_animal(eye, 0.6, 0.6)
    food = Food(Vector2(0.6, 0.6))
    world = World([a, b], [food])

    world.step(np.random.default_rng(9))

    assert a.satiation == 1
    assert b.satiation == 1
    # exactly one respawn draw
    expected = np.random.default_rng(9).random(2)
    assert food.position == pytest.approx(tuple(expected))


def test_one_animal_can_eat_several_foods(eye):
    animal = make_still_animal(eye, 0.2, 0.2)
    foods = [Food(Vector2(0.2, 0.2)), Food(Vector2(0.205, 0.2)), Food(Vector2(0.5, 0.5))]
    world = World([animal], foods)
    world.step(np.random.default_rng(2))
    assert animal.satiation == 2
    assert foods[2].position == (0.5, 0.5)


def test_fitness_never_decreases_within_generation(rng, eye):
    world = _random_world(rng, eye, population=10, food_count=80)
    last = world.fitness()
    for _ in range(100):
        world.step(rng)
        now = world.fitness()
        assert all(n >= l for n, l in zip(now, last))
        last = now


def test_snapshot_only_exposes_pose(rng, eye):
    world = _random_world(rng, eye, population=3, food_count=4)
    snap = world.snapshot()

    assert [f.name for f in dataclasses.fields(AnimalView)] == ["x", "y", "rotation"]
    assert len(snap.animals) == 3 and len(snap.foods) == 4
    assert snap.animals[0].x == world.animals[0].position.x
    assert snap.foods[2].y == world.foods[2].position.y
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.animals[0].x = 0.0

    data = snap.to_dict()
    assert set(data) == {"animals", "foods"}
    assert set(data["animals"][0]) == {"x", "y", "rotation"}
    assert set(data["foods"][0]) == {"x", "y"}


def test_replace_animals_keeps_population_size(rng, eye):
    world = _random_world(rng, eye, population=4, food_count=1)
    with pytest.raises(ConfigError):
        world.replace_animals(world.animals[:3])

    fresh = [make_still_animal(eye, 0.1, 0.1) for _ in range(4)]
    world.replace_animals(fresh)
    assert world.animals == fresh


def test_best_animal(eye):
    animals = [make_still_animal(eye, 0.1 * i, 0.1) for i in range(3)]
    animals[1].satiation = 4
    assert World(animals, []).best_animal() is animals[1]


def test_negative_physics_rejected():
    with pytest.raises(ConfigError):
        World([], [], max_speed=-1.0)


def test_rotation_is_wrapped_on_construction(eye):
    animal = make_still_animal(eye, 0.5, 0.5, rotation=-math.pi / 2)
    assert animal.rotation == pytest.approx(3 * math.pi / 2)
