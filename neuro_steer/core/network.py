"""
core/network.py

The brain of a steering agent: a small feedforward network.

Weights are drawn once at birth and never change.
No training. No gradients. A random controller, honestly evaluated.

Inspired by:
- Multilayer perceptrons
- Braitenberg vehicles (wiring is behavior)
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Tuple
import numpy as np


class ConstructionError(ValueError):
    """A network or neuron cannot be built from the given shape."""


class DimensionMismatch(ValueError):
    """An input vector does not match the expected length."""


class Neuron:
    """
    A weight vector, a bias, and a bounded response.

    tanh keeps every activation in (-1, 1). Downstream actuation
    maps that range linearly onto speed and heading.
    """

    def __init__(self, weights: Sequence[float], bias: float = 0.0):
        weights = np.array(weights, dtype=np.float64).reshape(-1)
        if weights.size == 0:
            raise ConstructionError("Neuron needs at least one weight")
        weights.setflags(write=False)
        self._weights = weights
        self._bias = float(bias)

    @classmethod
    def random(cls, input_count: int, rng: np.random.Generator) -> "Neuron":
        """Uniform weights in [-1, 1], zero bias."""
        if input_count <= 0:
            raise ConstructionError(
                f"Neuron input count must be positive, got {input_count}"
            )
        return cls(rng.uniform(-1.0, 1.0, size=input_count), bias=0.0)

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    @property
    def bias(self) -> float:
        return self._bias

    @property
    def input_count(self) -> int:
        return self._weights.size

    def activate(self, inputs: Sequence[float]) -> float:
        inputs = np.asarray(inputs, dtype=np.float64)
        if inputs.shape != self._weights.shape:
            raise DimensionMismatch(
                f"Neuron expects {self.input_count} inputs, got {inputs.size}"
            )
        return float(np.tanh(self._bias + np.dot(inputs, self._weights)))

    def __repr__(self) -> str:
        return f"Neuron(inputs={self.input_count}, bias={self._bias:.3f})"


def _validate_topology(topology: Sequence[int]) -> Tuple[int, ...]:
    topology = tuple(topology)
    if len(topology) < 2:
        raise ConstructionError(
            f"Topology needs at least an input and an output layer, got {list(topology)}"
        )
    for size in topology:
        if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
            raise ConstructionError(f"Layer sizes must be integers, got {size!r}")
        if size <= 0:
            raise ConstructionError(f"Layer sizes must be positive, got {list(topology)}")
    return tuple(int(s) for s in topology)


class Network:
    """
    An ordered stack of neuron layers.

    topology = (inputs, hidden..., outputs). Layer i holds topology[i+1]
    neurons, each reading topology[i] values. The output of one layer is
    exactly the input of the next.

    forward() is pure: same weights, same input, same output. Bit for bit.
    """

    def __init__(
        self,
        topology: Sequence[int],
        rng: Optional[np.random.Generator] = None
    ):
        self._topology = _validate_topology(topology)
        rng = rng if rng is not None else np.random.default_rng()

        layers = []
        for n_inputs, n_neurons in zip(self._topology[:-1], self._topology[1:]):
            layers.append(tuple(Neuron.random(n_inputs, rng) for _ in range(n_neurons)))
        self._layers: Tuple[Tuple[Neuron, ...], ...] = tuple(layers)

    @classmethod
    def from_layers(cls, layers: Sequence[Sequence[Neuron]]) -> "Network":
        """Build a network from explicit neurons (fixed weights, restored snapshots)."""
        layers = tuple(tuple(layer) for layer in layers)
        if not layers or any(len(layer) == 0 for layer in layers):
            raise ConstructionError("Every layer needs at least one neuron")

        topology = [layers[0][0].input_count]
        for index, layer in enumerate(layers):
            expected = topology[-1]
            for neuron in layer:
                if neuron.input_count != expected:
                    raise ConstructionError(
                        f"Layer {index} neurons must take {expected} inputs, "
                        f"got {neuron.input_count}"
                    )
            topology.append(len(layer))

        network = cls.__new__(cls)
        network._topology = tuple(topology)
        network._layers = layers
        return network

    # ==================== Shape ====================

    @property
    def topology(self) -> Tuple[int, ...]:
        return self._topology

    @property
    def layers(self) -> Tuple[Tuple[Neuron, ...], ...]:
        return self._layers

    @property
    def input_size(self) -> int:
        return self._topology[0]

    @property
    def output_size(self) -> int:
        return self._topology[-1]

    @property
    def weight_count(self) -> int:
        return sum(neuron.input_count for layer in self._layers for neuron in layer)

    # ==================== Inference ====================

    def forward(self, inputs: Sequence[float]) -> np.ndarray:
        """
        Propagate an input vector through every layer.

        Neuron order within a layer fixes output order.
        """
        current = np.asarray(inputs, dtype=np.float64)
        if current.ndim != 1 or current.size != self.input_size:
            raise DimensionMismatch(
                f"Network expects {self.input_size} inputs, got {current.size}"
            )

        for layer in self._layers:
            current = np.array([neuron.activate(current) for neuron in layer])

        return current

    # ==================== Snapshot ====================

    def to_dict(self) -> Dict[str, Any]:
        """Serialize weights and biases for replay."""
        return {
            "topology": list(self._topology),
            "layers": [
                [
                    {"weights": neuron.weights.tolist(), "bias": neuron.bias}
                    for neuron in layer
                ]
                for layer in self._layers
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Network":
        layers: List[List[Neuron]] = [
            [Neuron(n["weights"], n.get("bias", 0.0)) for n in layer]
            for layer in data["layers"]
        ]
        network = cls.from_layers(layers)
        if "topology" in data and list(network.topology) != list(data["topology"]):
            raise ConstructionError(
                f"Snapshot topology {data['topology']} does not match its layers "
                f"{list(network.topology)}"
            )
        return network

    def __repr__(self) -> str:
        return f"Network(topology={list(self._topology)}, weights={self.weight_count})"
