"""
ForageSim Server  –  Flask
==========================

The host boundary: a renderer builds a simulation, polls the world every
animation frame, steps it, and asks for a training run on demand.

Endpoints:
  POST /simulation   Build (or rebuild) the simulation from a JSON config body
  GET  /world        Animals {x, y, rotation} and food {x, y}
  POST /step         Advance `ticks` ticks (default 1)
  POST /train        Run one full generation, return its statistics
  GET  /status       Generation, age and config

Config keys for POST /simulation are camelCase (population, generationLength,
foodCount, fovRange, fovAngle, cells, hiddenLayers, mutationChance,
mutationCoeff, seed).  fovAngle is in radians.

Run:
  python server.py
  # → http://localhost:5000
"""

import threading

from flask import Flask, Response, request, jsonify

from simulation import Simulation
from config import (
    ConfigError, POPULATION, GENERATION_LENGTH, FOOD_COUNT,
    FOV_RANGE, FOV_ANGLE, CELLS, HIDDEN_LAYERS,
    MUTATION_CHANCE, MUTATION_COEFF,
)

# ──────────────────────────────────────────────────────────────────────────────
app = Flask(__name__)

# Global simulation state
_sim: Simulation | None = None
_sim_cfg    = {}
_sim_lock   = threading.Lock()


# ──────────────────────────────────────────────────────────────────────────────
# CORS helper – allow a browser renderer (any origin) to call us
# ──────────────────────────────────────────────────────────────────────────────

@app.after_request
def add_cors(response):
    response.headers["Access-Control-Allow-Origin"]  = "*"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    return response

@app.route("/", methods=["OPTIONS"])
@app.route("/<path:p>", methods=["OPTIONS"])
def preflight(p=""):
    return Response(status=200)


@app.errorhandler(ConfigError)
def config_error(err):
    return jsonify({"error": str(err)}), 400


# ──────────────────────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────────────────────

def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"request body must be a JSON object, got {type(data).__name__}")
    return data


def _build_cfg(data: dict) -> dict:
    """Merge request JSON with defaults."""
    hidden = data.get("hiddenLayers", HIDDEN_LAYERS)
    try:
        return {
            "population":        int(data.get("population",       POPULATION)),
            "generation_length": int(data.get("generationLength", GENERATION_LENGTH)),
            "food_count":        int(data.get("foodCount",        FOOD_COUNT)),
            "fov_range":         float(data.get("fovRange",       FOV_RANGE)),
            "fov_angle":         float(data.get("fovAngle",       FOV_ANGLE)),
            "cells":             int(data.get("cells",            CELLS)),
            "hidden_layers":     None if hidden is None else [int(n) for n in hidden],
            "mutation_chance":   float(data.get("mutationChance", MUTATION_CHANCE)),
            "mutation_coeff":    float(data.get("mutationCoeff",  MUTATION_COEFF)),
            "seed":              None if data.get("seed") is None else int(data["seed"]),
        }
    except (TypeError, ValueError) as err:
        raise ConfigError(f"bad simulation config: {err}") from err


class NoSimulation(RuntimeError):
    """Raised when a route needs a simulation that was never created."""


def _require_sim() -> Simulation:
    if _sim is None:
        raise NoSimulation("no simulation – POST /simulation first")
    return _sim


@app.errorhandler(NoSimulation)
def no_simulation(err):
    return jsonify({"error": str(err)}), 409


# ──────────────────────────────────────────────────────────────────────────────
# Routes
# ──────────────────────────────────────────────────────────────────────────────

@app.route("/simulation", methods=["POST"])
def create_simulation():
    global _sim, _sim_cfg

    cfg = _build_cfg(_json_body())
    sim = Simulation(**cfg)
    with _sim_lock:
        _sim, _sim_cfg = sim, cfg
    return jsonify({"status": "created", "cfg": cfg})


@app.route("/world", methods=["GET"])
def world():
    with _sim_lock:
        return jsonify(_require_sim().world().to_dict())


@app.route("/step", methods=["POST"])
def step():
    data = _json_body()
    try:
        ticks = int(data.get("ticks", 1))
    except (TypeError, ValueError) as err:
        raise ConfigError(f"ticks must be an integer: {err}") from err
    if ticks < 1:
        raise ConfigError(f"ticks must be at least 1, got {ticks}")
    with _sim_lock:
        sim = _require_sim()
        for _ in range(ticks):
            sim.step()
        return jsonify({"age": sim.age, "generation": sim.generation})


@app.route("/train", methods=["POST"])
def train():
    with _sim_lock:
        sim = _require_sim()
        summary = sim.train()
        return jsonify({
            "statistics": summary,
            "generation": sim.generation,
            "history":    sim.history[-1],
        })


@app.route("/status", methods=["GET"])
def status():
    with _sim_lock:
        if _sim is None:
            return jsonify({"running": False})
        return jsonify({
            "running":    True,
            "generation": _sim.generation,
            "age":        _sim.age,
            "cfg":        dict(_sim_cfg),
        })


# ──────────────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    print("=" * 50)
    print("  ForageSim Server  →  http://localhost:5000")
    print("=" * 50)
    app.run(host="0.0.0.0", port=5000, threaded=True, debug=False)
