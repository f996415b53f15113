"""
Neural Network Brain for ForageSim.

A fixed-topology, fully connected feed-forward network.  The topology is
a list of neuron counts, e.g. [9, 18, 2]:
  9 eye cells  →  18 hidden neurons  →  2 outputs (rotation, speed)

Every layer computes  relu(bias + inputs · weights).

The flattened weights + biases of a network are its chromosome.  Layout,
layer by layer and neuron by neuron:

  [bias_0, w_00, w_10, …, w_n0,  bias_1, w_01, w_11, …]
"""

from typing import List, Sequence

import numpy as np

from config import ConfigError, INIT_RANGE


def check_topology(topology: Sequence[int]) -> List[int]:
    if any(int(n) != n for n in topology):
        raise ConfigError(f"layer sizes must be integers, got {list(topology)}")
    topology = [int(n) for n in topology]
    if len(topology) < 2:
        raise ConfigError(f"topology needs at least 2 layers, got {topology}")
    if any(n <= 0 for n in topology):
        raise ConfigError(f"every layer needs at least one neuron, got {topology}")
    return topology


def parameter_count(topology: Sequence[int]) -> int:
    """Total number of weights + biases (= chromosome length)."""
    topology = check_topology(topology)
    return sum((n_in + 1) * n_out for n_in, n_out in zip(topology, topology[1:]))


class Layer:
    """One dense layer: weights (inputs × outputs) plus per-output biases."""

    __slots__ = ("weights", "biases")

    def __init__(self, weights, biases):
        self.weights = np.asarray(weights, dtype=np.float64)
        self.biases  = np.asarray(biases,  dtype=np.float64)
        if self.weights.ndim != 2:
            raise ConfigError(f"weights must be a matrix, got shape {self.weights.shape}")
        if self.biases.shape != (self.weights.shape[1],):
            raise ConfigError(
                f"expected {self.weights.shape[1]} biases, got shape {self.biases.shape}")

    @property
    def inputs(self) -> int:
        return self.weights.shape[0]

    @property
    def outputs(self) -> int:
        return self.weights.shape[1]

    @classmethod
    def random(cls, inputs: int, outputs: int, rng,
               init_range: float = INIT_RANGE) -> "Layer":
        # Same draw order as the chromosome layout: per neuron, bias then weights
        flat = rng.uniform(-init_range, init_range, size=(inputs + 1) * outputs)
        return cls.from_genes(inputs, outputs, flat)

    @classmethod
    def from_genes(cls, inputs: int, outputs: int, genes) -> "Layer":
        block = np.asarray(genes, dtype=np.float64).reshape(outputs, inputs + 1)
        return cls(block[:, 1:].T.copy(), block[:, 0].copy())

    def genes(self) -> np.ndarray:
        return np.column_stack((self.biases, self.weights.T)).ravel()

    def propagate(self, inputs: np.ndarray) -> np.ndarray:
        return np.maximum(0.0, self.biases + inputs @ self.weights)


class NeuralNetwork:
    """
    Feed-forward brain.  Only the weights ever change; the topology of
    every animal's network is the same.
    """

    def __init__(self, layers: List[Layer]):
        if not layers:
            raise ConfigError("a network needs at least one layer")
        for prev, nxt in zip(layers, layers[1:]):
            if prev.outputs != nxt.inputs:
                raise ConfigError(
                    f"layer with {prev.outputs} outputs cannot feed a layer "
                    f"with {nxt.inputs} inputs")
        self.layers = list(layers)

    # ──────────────────────────────────────────────────────────────────────────
    # Construction
    # ──────────────────────────────────────────────────────────────────────────

    @classmethod
    def random(cls, topology: Sequence[int], rng,
               init_range: float = INIT_RANGE) -> "NeuralNetwork":
        """Uniform random weights; used only for the very first generation."""
        topology = check_topology(topology)
        return cls([Layer.random(n_in, n_out, rng, init_range)
                    for n_in, n_out in zip(topology, topology[1:])])

    @classmethod
    def from_layers(cls, layers) -> "NeuralNetwork":
        """Build from explicit (weights, biases) pairs."""
        return cls([Layer(w, b) for w, b in layers])

    @classmethod
    def from_chromosome(cls, topology: Sequence[int], chromosome) -> "NeuralNetwork":
        """Decode a flat gene vector produced by `chromosome()`."""
        topology = check_topology(topology)
        genes = np.asarray(chromosome, dtype=np.float64).ravel()
        expected = parameter_count(topology)
        if genes.size != expected:
            raise ConfigError(
                f"chromosome has {genes.size} genes, topology {topology} "
                f"needs {expected}")

        layers = []
        offset = 0
        for n_in, n_out in zip(topology, topology[1:]):
            size = (n_in + 1) * n_out
            layers.append(Layer.from_genes(n_in, n_out, genes[offset:offset + size]))
            offset += size
        return cls(layers)

    # ──────────────────────────────────────────────────────────────────────────

    @property
    def topology(self) -> List[int]:
        return [self.layers[0].inputs] + [layer.outputs for layer in self.layers]

    def chromosome(self) -> np.ndarray:
        """Flatten all biases and weights into one gene vector."""
        return np.concatenate([layer.genes() for layer in self.layers])

    def propagate(self, inputs) -> np.ndarray:
        """
        Run one forward pass.

        Args:
            inputs: array of shape (topology[0],)

        Returns:
            array of shape (topology[-1],), every value >= 0
        """
        values = np.asarray(inputs, dtype=np.float64)
        if values.shape != (self.layers[0].inputs,):
            raise ConfigError(
                f"network expects {self.layers[0].inputs} inputs, "
                f"got shape {values.shape}")
        for layer in self.layers:
            values = layer.propagate(values)
        return values

    def summary(self) -> str:
        lines = [f"NeuralNetwork {self.topology} "
                 f"({parameter_count(self.topology)} parameters)"]
        for i, layer in enumerate(self.layers):
            lines.append(
                f"  L{i}: {layer.inputs:>3} → {layer.outputs:<3}"
                f"  |w| mean={np.abs(layer.weights).mean():.3f}"
                f"  bias mean={layer.biases.mean():+.3f}"
            )
        return "\n".join(lines)
