"""
Genetic algorithm for ForageSim.

A chromosome is the flattened weight vector of an animal's brain (see
NeuralNetwork.chromosome).  One generation of evolution:

  for each child:
    1. pick two parents by roulette wheel (fitness-proportionate)
    2. uniform crossover – every gene comes from one parent or the other
    3. mutation – each gene, with probability `chance`, gets a nudge
       drawn from U(-coeff, coeff)
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from config import (ConfigError, MUTATION_CHANCE, MUTATION_COEFF,
                    SELECTION_EPSILON)


@dataclass
class Individual:
    chromosome: np.ndarray
    fitness: float = 0.0


@dataclass(frozen=True)
class Statistics:
    min_fitness: float
    max_fitness: float
    avg_fitness: float

    @classmethod
    def from_population(cls, population: Sequence[Individual]) -> "Statistics":
        if not population:
            raise ConfigError("cannot summarise an empty population")
        fitness = [float(ind.fitness) for ind in population]
        return cls(min(fitness), max(fitness), sum(fitness) / len(fitness))

    def as_dict(self) -> dict:
        return {"min": self.min_fitness, "max": self.max_fitness,
                "avg": self.avg_fitness}

    def __str__(self):
        return (f"min={self.min_fitness:.2f}, max={self.max_fitness:.2f}, "
                f"avg={self.avg_fitness:.2f}")


# ──────────────────────────────────────────────────────────────────────────────
# Selection
# ──────────────────────────────────────────────────────────────────────────────

class RouletteWheelSelection:
    """
    Fitness-proportionate selection.  Every individual gets an `epsilon`
    floor on top of its fitness so that starving animals keep a small
    chance; with no usable weight at all the choice is uniform.
    """

    def __init__(self, epsilon: float = SELECTION_EPSILON):
        if epsilon < 0:
            raise ConfigError(f"epsilon must be >= 0, got {epsilon}")
        self.epsilon = epsilon

    def weights(self, population: Sequence[Individual]) -> np.ndarray:
        fitness = np.array([ind.fitness for ind in population], dtype=np.float64)
        return np.maximum(fitness, 0.0) + self.epsilon

    def select(self, rng, population: Sequence[Individual]) -> Individual:
        if not population:
            raise ConfigError("cannot select from an empty population")
        weights = self.weights(population)
        total = weights.sum()
        if not total > 0:
            return population[int(rng.integers(0, len(population)))]

        cumulative = np.cumsum(weights)
        pick = rng.random() * total
        idx = int(np.searchsorted(cumulative, pick, side="right"))
        return population[min(idx, len(population) - 1)]


# ──────────────────────────────────────────────────────────────────────────────
# Crossover / mutation
# ──────────────────────────────────────────────────────────────────────────────

class UniformCrossover:
    """Each gene is copied from parent A or parent B with equal odds."""

    def crossover(self, rng, parent_a: np.ndarray, parent_b: np.ndarray) -> np.ndarray:
        parent_a = np.asarray(parent_a, dtype=np.float64)
        parent_b = np.asarray(parent_b, dtype=np.float64)
        if parent_a.shape != parent_b.shape:
            raise ConfigError(
                f"parents differ in length: {parent_a.size} vs {parent_b.size}")
        from_a = rng.random(parent_a.size) < 0.5
        return np.where(from_a, parent_a, parent_b)


class UniformMutation:
    """Per gene: with probability `chance`, add U(-coeff, coeff)."""

    def __init__(self, chance: float = MUTATION_CHANCE,
                 coeff: float = MUTATION_COEFF):
        if not 0.0 <= chance <= 1.0:
            raise ConfigError(f"mutation chance must be in [0, 1], got {chance}")
        if coeff < 0:
            raise ConfigError(f"mutation coeff must be >= 0, got {coeff}")
        self.chance = chance
        self.coeff  = coeff

    def mutate(self, rng, chromosome: np.ndarray) -> np.ndarray:
        chromosome = np.array(chromosome, dtype=np.float64)
        hit   = rng.random(chromosome.size) < self.chance
        delta = rng.uniform(-self.coeff, self.coeff, size=chromosome.size)
        chromosome[hit] += delta[hit]
        return chromosome


# ──────────────────────────────────────────────────────────────────────────────
# Population-level operation
# ──────────────────────────────────────────────────────────────────────────────

class GeneticAlgorithm:

    def __init__(self, selection=None, crossover=None, mutation=None):
        self.selection = selection if selection is not None else RouletteWheelSelection()
        self.crossover = crossover if crossover is not None else UniformCrossover()
        self.mutation  = mutation  if mutation  is not None else UniformMutation()

    def evolve(self, rng, population: Sequence[Individual]
               ) -> Tuple[List[Individual], Statistics]:
        """
        Produce exactly len(population) children (fitness 0) and the
        statistics of the population they replace.
        """
        if len(population) < 2:
            raise ConfigError(
                f"evolution needs at least 2 individuals, got {len(population)}")

        children = []
        for _ in range(len(population)):
            parent_a = self.selection.select(rng, population)
            parent_b = self.selection.select(rng, population)
            child = self.crossover.crossover(rng, parent_a.chromosome,
                                             parent_b.chromosome)
            child = self.mutation.mutate(rng, child)
            children.append(Individual(child))

        return children, Statistics.from_population(population)
