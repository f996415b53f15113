"""
Simulation Engine for ForageSim.

Owns one World, one random generator and the generation bookkeeping.

  step()   – advance the world by one tick
  train()  – finish the current generation, evolve, report statistics
  world()  – read-only snapshot for renderers
  run(n)   – headless loop of n generations

Every random draw goes through `self.rng`, so a fixed seed reproduces a
run exactly.
"""

import time

import numpy as np

from animal import Animal, brain_topology
from config import (
    ConfigError, POPULATION, GENERATION_LENGTH, FOOD_COUNT,
    FOV_RANGE, FOV_ANGLE, CELLS, HIDDEN_LAYERS, INIT_RANGE,
    MUTATION_CHANCE, MUTATION_COEFF, SELECTION_EPSILON,
    MAX_SPEED, MAX_ROTATION, EAT_RADIUS,
)
from eye import Eye
from genetic import (GeneticAlgorithm, Individual, RouletteWheelSelection,
                     Statistics, UniformCrossover, UniformMutation)
from neural_network import check_topology
from world import World, WorldSnapshot


class Simulation:
    """
    Main simulation controller.
    """

    def __init__(
        self,
        population:        int   = POPULATION,
        generation_length: int   = GENERATION_LENGTH,
        food_count:        int   = FOOD_COUNT,
        fov_range:         float = FOV_RANGE,
        fov_angle:         float = FOV_ANGLE,
        cells:             int   = CELLS,
        hidden_layers            = HIDDEN_LAYERS,
        mutation_chance:   float = MUTATION_CHANCE,
        mutation_coeff:    float = MUTATION_COEFF,
        max_speed:         float = MAX_SPEED,
        max_rotation:      float = MAX_ROTATION,
        eat_radius:        float = EAT_RADIUS,
        init_range:        float = INIT_RANGE,
        seed:              int   = None,
        on_gen_callback          = None,    # called after each evolution
    ):
        for name, value in (("population", population),
                            ("generation_length", generation_length),
                            ("food_count", food_count)):
            if int(value) != value:
                raise ConfigError(f"{name} must be an integer, got {value}")
        if population < 2:
            raise ConfigError(f"population must be at least 2, got {population}")
        if generation_length < 1:
            raise ConfigError(
                f"generation_length must be at least 1, got {generation_length}")
        if food_count < 0:
            raise ConfigError(f"food_count must be >= 0, got {food_count}")
        if init_range < 0:
            raise ConfigError(f"init_range must be >= 0, got {init_range}")
        if seed is not None and (int(seed) != seed or seed < 0):
            raise ConfigError(f"seed must be a non-negative integer, got {seed}")

        self.population        = int(population)
        self.generation_length = int(generation_length)
        self.eye               = Eye(fov_range, fov_angle, cells)
        self.topology          = check_topology(brain_topology(self.eye, hidden_layers))
        self.ga = GeneticAlgorithm(
            RouletteWheelSelection(SELECTION_EPSILON),
            UniformCrossover(),
            UniformMutation(mutation_chance, mutation_coeff),
        )
        self.rng = np.random.default_rng(seed)
        self.on_gen_callback = on_gen_callback

        self._world = World.random(
            self.rng, self.eye, self.topology,
            population=self.population, food_count=int(food_count),
            init_range=init_range, max_speed=max_speed,
            max_rotation=max_rotation, eat_radius=eat_radius,
        )

        self.age        = 0     # ticks since the last evolution
        self.generation = 0
        self.history    = []    # list of dicts, one per generation
        self._gen_started = time.time()

    # ──────────────────────────────────────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────────────────────────────────────

    def world(self) -> WorldSnapshot:
        return self._world.snapshot()

    def step(self):
        """Advance the world by one tick."""
        self._world.step(self.rng)
        self.age += 1

    def train(self) -> str:
        """Run the rest of the current generation, evolve, return its statistics."""
        while self.age < self.generation_length:
            self.step()
        return str(self.evolve())

    def run(self, generations: int):
        """Run `generations` full generations, printing progress."""
        for _ in range(generations):
            self.train()
            self._print_stats(self.history[-1])

    # ──────────────────────────────────────────────────────────────────────────
    # One generation boundary
    # ──────────────────────────────────────────────────────────────────────────

    def evolve(self) -> Statistics:
        """Replace the population with the GA's offspring and reset the world."""
        # Step 1: animals → individuals
        current = [Individual(animal.as_chromosome(), float(animal.satiation))
                   for animal in self._world.animals]

        # Step 2: evolve
        offspring, statistics = self.ga.evolve(self.rng, current)

        stats = {"generation": self.generation, **statistics.as_dict(),
                 "elapsed_s": round(time.time() - self._gen_started, 3)}
        self.history.append(stats)

        # The callback still sees the generation that just ended
        if self.on_gen_callback:
            self.on_gen_callback(self.generation, stats, self._world)

        # Step 3: individuals → fresh animals
        self._world.replace_animals([
            Animal.from_chromosome(child.chromosome, self.rng, self.eye, self.topology)
            for child in offspring
        ])

        # Step 4: new food layout for the new generation
        self._world.scatter_food(self.rng)

        self.age = 0
        self.generation += 1
        self._gen_started = time.time()
        return statistics

    # ──────────────────────────────────────────────────────────────────────────

    def _print_stats(self, stats: dict):
        gen_idx = stats["generation"]
        if gen_idx % 10 == 0 or gen_idx < 5:
            print(
                f"Gen {gen_idx:>5}  |  "
                f"min {stats['min']:>6.2f}  |  "
                f"max {stats['max']:>6.2f}  |  "
                f"avg {stats['avg']:>6.2f}  |  "
                f"{stats['elapsed_s']:.2f}s"
            )
