"""
ForageSim Configuration
All tunable parameters for the foraging / neuro-evolution simulation.
"""

import math

# ─── World ────────────────────────────────────────────────────────────────────
# The world is the unit torus [0,1) x [0,1); both axes wrap.
FOOD_COUNT   = 60      # food items alive at any time (eaten food respawns)
EAT_RADIUS   = 0.01    # an animal eats food closer than this

# ─── Population ───────────────────────────────────────────────────────────────
POPULATION        = 40     # animals per generation
MAX_GENERATIONS   = 100    # generations run by the CLI
GENERATION_LENGTH = 2500   # ticks each generation lives

# ─── Movement ─────────────────────────────────────────────────────────────────
MAX_SPEED    = 0.005          # distance travelled per tick at full speed
MAX_ROTATION = math.pi / 2    # largest turn per tick (radians, either way)

# ─── Eye ──────────────────────────────────────────────────────────────────────
FOV_RANGE = 0.25                     # how far an animal can see
FOV_ANGLE = math.pi + math.pi / 4    # width of the vision cone
CELLS     = 9                        # angular sensor cells

# ─── Brain ────────────────────────────────────────────────────────────────────
# Inputs = CELLS, outputs = (rotation delta, speed). None → (2 * CELLS,)
HIDDEN_LAYERS = None
INIT_RANGE    = 1.0    # first-generation weights ~ U(-INIT_RANGE, INIT_RANGE)

# ─── Genetic algorithm ────────────────────────────────────────────────────────
MUTATION_CHANCE   = 0.01   # probability a single gene is perturbed
MUTATION_COEFF    = 0.3    # perturbation ~ U(-MUTATION_COEFF, MUTATION_COEFF)
SELECTION_EPSILON = 1e-3   # fitness floor so starving animals can still breed

# ─── Output / Logging ─────────────────────────────────────────────────────────
SAVE_DIR           = "output"      # directory for saved images and charts
SNAPSHOT_INTERVAL  = 10            # save a world snapshot every N generations
SAVE_NEURAL_SAMPLE = True          # save network weight diagrams
LOG_CSV            = True          # write per-generation CSV log


class ConfigError(ValueError):
    """Invalid configuration or a topology/shape mismatch."""
