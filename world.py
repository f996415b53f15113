"""
World for ForageSim.

The world is the unit torus.  It owns the animals and the food and
advances them one tick at a time:

  1. every animal looks, thinks, turns and moves
  2. every animal within EAT_RADIUS of a food item eats it; each eaten
     food item then respawns once at a random position

Two animals reaching the same food in the same tick both get credit
(multi-credit); the food still respawns only once.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from animal import Animal, Food
from config import (ConfigError, POPULATION, FOOD_COUNT, EAT_RADIUS,
                    MAX_SPEED, MAX_ROTATION, INIT_RANGE)
from eye import Eye
from geometry import wrap_delta


# ──────────────────────────────────────────────────────────────────────────────
# Read-only views handed to renderers / hosts
# ──────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AnimalView:
    x: float
    y: float
    rotation: float


@dataclass(frozen=True)
class FoodView:
    x: float
    y: float


@dataclass(frozen=True)
class WorldSnapshot:
    animals: Tuple[AnimalView, ...]
    foods:   Tuple[FoodView, ...]

    def to_dict(self) -> dict:
        return {
            "animals": [{"x": a.x, "y": a.y, "rotation": a.rotation}
                        for a in self.animals],
            "foods":   [{"x": f.x, "y": f.y} for f in self.foods],
        }


class World:
    """
    Owns the animal and food collections and the physics constants.
    """

    def __init__(self, animals: List[Animal], foods: List[Food],
                 max_speed: float = MAX_SPEED,
                 max_rotation: float = MAX_ROTATION,
                 eat_radius: float = EAT_RADIUS):
        if max_speed < 0 or max_rotation < 0 or eat_radius < 0:
            raise ConfigError("max_speed, max_rotation and eat_radius must be >= 0")
        self.animals      = list(animals)
        self.foods        = list(foods)
        self.max_speed    = float(max_speed)
        self.max_rotation = float(max_rotation)
        self.eat_radius   = float(eat_radius)

    @classmethod
    def random(cls, rng, eye: Eye, topology: Sequence[int],
               population: int = POPULATION, food_count: int = FOOD_COUNT,
               init_range: float = INIT_RANGE, **physics) -> "World":
        """Random animals first, then random food."""
        animals = [Animal.random(rng, eye, topology, init_range)
                   for _ in range(population)]
        foods   = [Food.random(rng) for _ in range(food_count)]
        return cls(animals, foods, **physics)

    # ──────────────────────────────────────────────────────────────────────────
    # Tick
    # ──────────────────────────────────────────────────────────────────────────

    def step(self, rng):
        self.process_brains()
        self.process_collisions(rng)

    def process_brains(self):
        """Every animal decides from the same food layout, then moves."""
        food_positions = self.food_positions()
        for animal in self.animals:
            rotation, speed = animal.think(food_positions, self.max_rotation,
                                           self.max_speed)
            animal.move(rotation, speed)

    def process_collisions(self, rng) -> int:
        """Credit every animal touching a food item; respawn each eaten item once."""
        if not self.animals or not self.foods:
            return 0

        animal_xy = np.array([a.position for a in self.animals], dtype=np.float64)
        food_xy   = self.food_positions()
        dx = wrap_delta(food_xy[None, :, 0] - animal_xy[:, None, 0])
        dy = wrap_delta(food_xy[None, :, 1] - animal_xy[:, None, 1])
        touching = np.hypot(dx, dy) < self.eat_radius     # (animals, foods)

        for animal, row in zip(self.animals, touching):
            animal.satiation += int(row.sum())

        eaten = np.flatnonzero(touching.any(axis=0))
        for idx in eaten:
            self.foods[idx].respawn(rng)
        return len(eaten)

    # ──────────────────────────────────────────────────────────────────────────
    # Generation boundary
    # ──────────────────────────────────────────────────────────────────────────

    def replace_animals(self, animals: List[Animal]):
        """Swap in a whole new population."""
        if len(animals) != len(self.animals):
            raise ConfigError(
                f"population size changed from {len(self.animals)} to {len(animals)}")
        self.animals = list(animals)

    def scatter_food(self, rng):
        for food in self.foods:
            food.respawn(rng)

    # ──────────────────────────────────────────────────────────────────────────
    # Helpers
    # ──────────────────────────────────────────────────────────────────────────

    def food_positions(self) -> np.ndarray:
        if not self.foods:
            return np.empty((0, 2), dtype=np.float64)
        return np.array([f.position for f in self.foods], dtype=np.float64)

    def fitness(self) -> List[int]:
        return [a.satiation for a in self.animals]

    def best_animal(self) -> Animal:
        """Most satiated animal (first one wins ties)."""
        return max(self.animals, key=lambda a: a.satiation)

    def snapshot(self) -> WorldSnapshot:
        """Positions and headings only – brains and satiation stay inside."""
        return WorldSnapshot(
            animals=tuple(AnimalView(a.position.x, a.position.y, a.rotation)
                          for a in self.animals),
            foods=tuple(FoodView(f.position.x, f.position.y) for f in self.foods),
        )
