import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from animal import Animal, brain_topology  # noqa: E402
from eye import Eye  # noqa: E402
from geometry import Vector2  # noqa: E402
from neural_network import NeuralNetwork, parameter_count  # noqa: E402


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def eye():
    return Eye()


def still_brain(topology) -> NeuralNetwork:
    """A brain whose every output is zero: no turning, no moving."""
    return NeuralNetwork.from_chromosome(topology, np.zeros(parameter_count(topology)))


def make_still_animal(eye: Eye, x: float, y: float, rotation: float = 0.0) -> Animal:
    return Animal(Vector2(x, y), rotation, eye, still_brain(brain_topology(eye)))
