"""
Visualizer for ForageSim.

Produces:
  1. World snapshots  – animals (heading arrows) and food on the torus
  2. Evolution chart  – min / avg / max fitness over generations
  3. Network diagrams – weights of a sampled animal's brain
  4. CSV log          – per-generation stats
"""

import os
import csv
import numpy as np
import matplotlib
matplotlib.use("Agg")          # non-interactive backend (no display needed)
import matplotlib.pyplot as plt

from config import SAVE_DIR, LOG_CSV
from geometry import heading


# ──────────────────────────────────────────────────────────────────────────────
# Directory setup
# ──────────────────────────────────────────────────────────────────────────────

def ensure_dirs(base: str = SAVE_DIR):
    for sub in ("snapshots", "charts", "neural"):
        os.makedirs(os.path.join(base, sub), exist_ok=True)


# ──────────────────────────────────────────────────────────────────────────────
# World snapshot
# ──────────────────────────────────────────────────────────────────────────────

def save_world_snapshot(snapshot, generation: int, base: str = SAVE_DIR,
                        fov_range: float = None):
    """
    Render a WorldSnapshot: food as dots, animals as arrows along their
    heading.  With fov_range given, each animal's sight radius is drawn too.
    """
    fig, ax = plt.subplots(figsize=(6, 6), dpi=100)
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.set_aspect("equal")
    ax.set_facecolor("#111111")
    fig.patch.set_facecolor("#111111")
    ax.set_title(f"Generation {generation}  "
                 f"({len(snapshot.animals)} animals, {len(snapshot.foods)} food)",
                 color="white", fontsize=10)
    ax.tick_params(colors="white")
    for spine in ax.spines.values():
        spine.set_edgecolor("#444444")

    if snapshot.foods:
        fx = [f.x for f in snapshot.foods]
        fy = [f.y for f in snapshot.foods]
        ax.scatter(fx, fy, c="#44FF44", s=6, linewidths=0, zorder=2)

    if snapshot.animals:
        px = [a.x for a in snapshot.animals]
        py = [a.y for a in snapshot.animals]
        dirs = [heading(a.rotation, 0.02) for a in snapshot.animals]
        ax.quiver(px, py, [d.x for d in dirs], [d.y for d in dirs],
                  color="#FF88AA", angles="xy", scale_units="xy", scale=1,
                  width=0.004, zorder=3)
        if fov_range:
            for x, y in zip(px, py):
                ax.add_patch(plt.Circle((x, y), fov_range, fill=False,
                                        color="#333355", lw=0.4, zorder=1))

    path = os.path.join(base, "snapshots", f"gen_{generation:06d}.png")
    plt.savefig(path, dpi=100, bbox_inches="tight", facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# Evolution statistics chart
# ──────────────────────────────────────────────────────────────────────────────

def save_evolution_chart(stats: list, base: str = SAVE_DIR,
                         filename: str = "evolution.png"):
    """
    Plot min / avg / max fitness across all generations, with the band
    between min and max shaded.
    """
    if not stats:
        return
    gens = [s["generation"] for s in stats]
    mins = [s["min"]        for s in stats]
    avgs = [s["avg"]        for s in stats]
    maxs = [s["max"]        for s in stats]

    fig, ax = plt.subplots(figsize=(12, 5), dpi=100)
    fig.patch.set_facecolor("#111111")
    ax.set_facecolor("#111111")

    ax.fill_between(gens, mins, maxs, color="#44FF44", alpha=0.12, zorder=1)
    ax.plot(gens, maxs, color="#44FF44", linewidth=1.2, label="Max", zorder=3)
    ax.plot(gens, avgs, color="#CC44FF", linewidth=1.0, linestyle="--",
            label="Average", zorder=2)
    ax.plot(gens, mins, color="#FF8800", linewidth=1.0, alpha=0.8,
            label="Min", zorder=2)

    ax.set_xlabel("Generation", color="white")
    ax.set_ylabel("Food eaten", color="white")
    ax.set_ylim(0, max(maxs) * 1.05 if max(maxs) > 0 else 1)
    ax.tick_params(axis="both", colors="white")
    for spine in ax.spines.values():
        spine.set_edgecolor("#444444")

    ax.legend(facecolor="#222222", labelcolor="white",
              loc="upper left", fontsize=8)
    ax.set_title("Evolutionary Progress", color="white", fontsize=12)
    plt.tight_layout()
    path = os.path.join(base, "charts", filename)
    plt.savefig(path, dpi=100, bbox_inches="tight",
                facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# Neural network diagram
# ──────────────────────────────────────────────────────────────────────────────

def save_neural_diagram(network, generation: int, label: str = "",
                        base: str = SAVE_DIR, min_weight: float = 0.05):
    """
    Draw a network as a layered graph.
    Eye cells (blue) → hidden (grey) → outputs (pink).
    Green edges = positive weights, red edges = negative; edges weaker
    than min_weight are left out.
    """
    topology = network.topology
    n_cols = len(topology)
    xs = np.linspace(0.0, 1.0, n_cols)

    def _ys(n):
        return [(i + 1) / (n + 1) for i in range(n)]

    fig, ax = plt.subplots(figsize=(10, 6), dpi=100)
    fig.patch.set_facecolor("#111111")
    ax.set_facecolor("#111111")
    ax.axis("off")
    ax.set_xlim(-0.15, 1.15)
    ax.set_ylim(-0.05, 1.08)

    n_edges = 0
    for col, layer in enumerate(network.layers):
        src_ys = _ys(layer.inputs)
        dst_ys = _ys(layer.outputs)
        for i, j in zip(*np.nonzero(np.abs(layer.weights) >= min_weight)):
            w     = layer.weights[i, j]
            color = "#44FF44" if w >= 0 else "#FF4444"
            lw    = 0.3 + min(2.5, abs(w) * 1.5)
            ax.plot([xs[col], xs[col + 1]], [src_ys[i], dst_ys[j]],
                    color=color, lw=lw, alpha=0.5, zorder=1)
            n_edges += 1

    palette = ["#4499FF"] + ["#AAAAAA"] * (n_cols - 2) + ["#FF88AA"]
    for col, n in enumerate(topology):
        for y in _ys(n):
            ax.add_patch(plt.Circle((xs[col], y), 0.015,
                                    color=palette[col], zorder=3))

    titles = ["Eye"] + [f"Hidden {i + 1}" for i in range(n_cols - 2)] + ["Output"]
    for x, title in zip(xs, titles):
        ax.text(x, 1.03, title, color="#CCCCCC", ha="center",
                fontsize=9, fontweight="bold")
    for y, name in zip(_ys(topology[-1]), ("rotation", "speed")):
        ax.text(xs[-1] + 0.03, y, name, color="white", fontsize=7,
                ha="left", va="center", zorder=4)

    ax.set_title(
        f"Gen {generation} — Brain of {label}  "
        f"({n_edges} edges with |w| ≥ {min_weight})",
        color="white", fontsize=10, pad=4)

    path = os.path.join(base, "neural", f"gen_{generation:06d}_{label}.png")
    plt.savefig(path, dpi=100, bbox_inches="tight",
                facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# CSV log
# ──────────────────────────────────────────────────────────────────────────────

def append_csv(stats: dict, base: str = SAVE_DIR):
    """Append one generation's stats to a CSV file."""
    if not LOG_CSV:
        return
    path = os.path.join(base, "evolution_log.csv")
    file_exists = os.path.isfile(path)
    with open(path, "a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(stats.keys()))
        if not file_exists:
            writer.writeheader()
        writer.writerow(stats)
    return path
