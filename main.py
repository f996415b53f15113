"""
ForageSim – Main Entry Point
============================

Usage examples:
  python main.py                          # defaults: 40 animals, 2500 ticks/gen
  python main.py --gens 50 --seed 7       # reproducible run
  python main.py --pop 80 --food 120      # bigger world population
  python main.py --cells 5 --hidden 10 10 # smaller eye, two hidden layers
  python main.py --fov_angle 90           # narrow vision cone (degrees)
  python main.py --no_mutation            # turn off mutations (demonstration)
"""

import argparse
import math
import os

from simulation import Simulation
from visualizer import (ensure_dirs, save_world_snapshot,
                        save_evolution_chart, save_neural_diagram,
                        append_csv)
from config import (SAVE_DIR, SNAPSHOT_INTERVAL, SAVE_NEURAL_SAMPLE,
                    POPULATION, MAX_GENERATIONS, GENERATION_LENGTH,
                    FOOD_COUNT, FOV_RANGE, FOV_ANGLE, CELLS,
                    MUTATION_CHANCE, MUTATION_COEFF)


# ──────────────────────────────────────────────────────────────────────────────
# CLI
# ──────────────────────────────────────────────────────────────────────────────

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="ForageSim – neuro-evolution of foraging animals")
    p.add_argument("--gens",       type=int,   default=MAX_GENERATIONS,
                   help="Number of generations to run")
    p.add_argument("--pop",        type=int,   default=POPULATION,
                   help="Population size")
    p.add_argument("--steps",      type=int,   default=GENERATION_LENGTH,
                   help="Simulation ticks per generation")
    p.add_argument("--food",       type=int,   default=FOOD_COUNT,
                   help="Number of food items in the world")
    p.add_argument("--cells",      type=int,   default=CELLS,
                   help="Angular cells of the eye (= network inputs)")
    p.add_argument("--fov_range",  type=float, default=FOV_RANGE,
                   help="Sight distance (world is 1 x 1)")
    p.add_argument("--fov_angle",  type=float, default=math.degrees(FOV_ANGLE),
                   help="Width of the vision cone in degrees")
    p.add_argument("--hidden",     type=int,   nargs="*", default=None,
                   help="Hidden layer sizes (default: one layer of 2 x cells)")
    p.add_argument("--mutation",   type=float, default=MUTATION_CHANCE,
                   help="Mutation chance per gene")
    p.add_argument("--mutation_coeff", type=float, default=MUTATION_COEFF,
                   help="Largest mutation nudge per gene")
    p.add_argument("--no_mutation",action="store_true",
                   help="Set mutation chance to 0 (demonstration)")
    p.add_argument("--seed",       type=int,   default=None,
                   help="Random seed for reproducibility")
    p.add_argument("--outdir",     default=SAVE_DIR,
                   help="Output directory")
    p.add_argument("--snapshot_interval", type=int, default=SNAPSHOT_INTERVAL,
                   help="Save world snapshot every N generations")
    return p.parse_args(argv)


# ──────────────────────────────────────────────────────────────────────────────
# Callbacks
# ──────────────────────────────────────────────────────────────────────────────

class SimCallbacks:
    """Bundles the per-generation callbacks used by the simulation."""

    def __init__(self, outdir: str, snapshot_interval: int,
                 all_stats: list, fov_range: float = None):
        self.outdir            = outdir
        self.snapshot_interval = max(1, snapshot_interval)
        self.all_stats         = all_stats
        self.fov_range         = fov_range

    def on_generation(self, gen_idx, stats, world):
        # Append to stats list
        self.all_stats.append(stats)

        # CSV log
        append_csv(stats, self.outdir)

        # Save snapshot of the generation that just ended
        if gen_idx % self.snapshot_interval == 0:
            path = save_world_snapshot(world.snapshot(), gen_idx, self.outdir,
                                       fov_range=self.fov_range)
            print(f"  → Snapshot: {path}")

            if SAVE_NEURAL_SAMPLE and world.animals:
                best = world.best_animal()
                npath = save_neural_diagram(
                    best.brain, gen_idx, f"best_{best.satiation}", self.outdir)
                print(f"  → Neural diagram: {npath}")

        # Chart update every 25 gens
        if gen_idx % 25 == 0 and gen_idx > 0:
            save_evolution_chart(self.all_stats, self.outdir)


# ──────────────────────────────────────────────────────────────────────────────
# Main
# ──────────────────────────────────────────────────────────────────────────────

def main(argv=None):
    args = parse_args(argv)
    outdir = args.outdir
    ensure_dirs(outdir)

    mutation_chance = 0.0 if args.no_mutation else args.mutation

    print("=" * 60)
    print("  ForageSim – Neuro-evolution of foraging animals")
    print("=" * 60)
    print(f"  Population : {args.pop}")
    print(f"  Food       : {args.food}")
    print(f"  Generations: {args.gens}")
    print(f"  Ticks/gen  : {args.steps}")
    print(f"  Eye        : {args.cells} cells, {args.fov_angle:.0f}°, "
          f"range {args.fov_range}")
    print(f"  Hidden     : {args.hidden or [2 * args.cells]}")
    print(f"  Mutation   : {mutation_chance} (±{args.mutation_coeff})")
    print(f"  Output dir : {outdir}")
    print("=" * 60)

    all_stats = []

    cb = SimCallbacks(
        outdir            = outdir,
        snapshot_interval = args.snapshot_interval,
        all_stats         = all_stats,
        fov_range         = args.fov_range,
    )

    sim = Simulation(
        population        = args.pop,
        generation_length = args.steps,
        food_count        = args.food,
        fov_range         = args.fov_range,
        fov_angle         = math.radians(args.fov_angle),
        cells             = args.cells,
        hidden_layers     = args.hidden or None,
        mutation_chance   = mutation_chance,
        mutation_coeff    = args.mutation_coeff,
        seed              = args.seed,
        on_gen_callback   = cb.on_generation,
    )

    sim.run(args.gens)

    # Final chart
    chart_path = save_evolution_chart(all_stats, outdir, "evolution_final.png")
    if chart_path:
        print(f"  → Final chart: {chart_path}")

    # Final world snapshot (start of the next generation)
    snap = save_world_snapshot(sim.world(), sim.generation, outdir)
    print(f"  → Final snapshot: {snap}")

    print("\nDone! All outputs saved to:", os.path.abspath(outdir))
    return sim


if __name__ == "__main__":
    main()
