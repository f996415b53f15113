"""
Animal and Food for ForageSim.

Each animal has:
  - a position on the torus and a rotation (heading)
  - an Eye (shared sensor configuration)
  - a NeuralNetwork brain: eye cells → hidden layers → (rotation, speed)
  - satiation: food eaten this generation (its fitness)

Every tick the animal:
  1. Looks at the food around it
  2. Runs its neural network
  3. Turns, then moves forward along its new heading
"""

from typing import Sequence

import numpy as np

from config import INIT_RANGE
from eye import Eye
from geometry import (Vector2, heading, random_position, random_rotation,
                      translate, wrap_angle)
from neural_network import NeuralNetwork

OUTPUTS = 2   # (rotation delta, speed)


def brain_topology(eye: Eye, hidden_layers: Sequence[int] = None) -> list:
    """Input size follows the eye; defaults to one hidden layer of 2 × cells."""
    if hidden_layers is None:
        hidden_layers = (2 * eye.cells,)
    return [eye.cells, *hidden_layers, OUTPUTS]


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class Food:
    __slots__ = ("position",)

    def __init__(self, position: Vector2):
        self.position = position

    @classmethod
    def random(cls, rng) -> "Food":
        return cls(random_position(rng))

    def respawn(self, rng):
        self.position = random_position(rng)


class Animal:
    """
    A single forager.
    """
    __slots__ = ("position", "rotation", "eye", "brain", "satiation")

    def __init__(self, position: Vector2, rotation: float, eye: Eye,
                 brain: NeuralNetwork):
        self.position  = Vector2(*position)
        self.rotation  = float(wrap_angle(rotation))
        self.eye       = eye
        self.brain     = brain
        self.satiation = 0

    @classmethod
    def random(cls, rng, eye: Eye, topology: Sequence[int],
               init_range: float = INIT_RANGE) -> "Animal":
        position = random_position(rng)
        rotation = random_rotation(rng)
        brain    = NeuralNetwork.random(topology, rng, init_range)
        return cls(position, rotation, eye, brain)

    @classmethod
    def from_chromosome(cls, chromosome, rng, eye: Eye,
                        topology: Sequence[int]) -> "Animal":
        """Fresh animal (random pose, zero satiation) wearing an evolved brain."""
        brain = NeuralNetwork.from_chromosome(topology, chromosome)
        return cls(random_position(rng), random_rotation(rng), eye, brain)

    def as_chromosome(self) -> np.ndarray:
        # Only the brain evolves; pose and satiation are per-generation state.
        return self.brain.chromosome()

    # ──────────────────────────────────────────────────────────────────────────

    def think(self, food_positions: np.ndarray, max_rotation: float,
              max_speed: float):
        """Sense → think.  Returns the (rotation delta, speed) to apply."""
        vision   = self.eye.process_vision(self.position, self.rotation, food_positions)
        response = self.brain.propagate(vision)
        rotation = _clamp(float(response[0]), -max_rotation, max_rotation)
        speed    = _clamp(float(response[1]), 0.0, max_speed)
        return rotation, speed

    def move(self, rotation: float, speed: float):
        """Turn, then step forward along the new heading."""
        self.rotation = float(wrap_angle(self.rotation + rotation))
        if speed > 0.0:
            self.position = translate(self.position, heading(self.rotation, speed))
