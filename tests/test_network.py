"""
Tests for core/network.py

Neurons and feedforward networks with fixed random weights.
"""

import math

import numpy as np
import pytest

from neuro_steer.core.network import (
    Neuron,
    Network,
    ConstructionError,
    DimensionMismatch,
)


class TestNeuron:
    """Tests for Neuron."""

    def test_random_weights_in_range(self):
        """Random weights are uniform in [-1, 1] with zero bias."""
        rng = np.random.default_rng(42)
        neuron = Neuron.random(100, rng)

        assert neuron.input_count == 100
        assert neuron.bias == 0.0
        assert np.all(neuron.weights >= -1.0)
        assert np.all(neuron.weights <= 1.0)

    def test_minimal_activation(self):
        """Weights [1, 1], bias 0: activate([1, 1]) == tanh(2)."""
        neuron = Neuron([1.0, 1.0], bias=0.0)
        assert neuron.activate([1.0, 1.0]) == pytest.approx(math.tanh(2.0))
        assert neuron.activate([1.0, 1.0]) == pytest.approx(0.9640, abs=1e-4)

    def test_bias_is_added(self):
        neuron = Neuron([0.5, -0.5], bias=0.25)
        assert neuron.activate([1.0, 1.0]) == pytest.approx(math.tanh(0.25))

    def test_activation_bounded(self):
        """Output stays inside (-1, 1) for moderate inputs."""
        rng = np.random.default_rng(0)
        neuron = Neuron.random(4, rng)
        for _ in range(200):
            value = neuron.activate(rng.uniform(-2, 2, size=4))
            assert -1.0 < value < 1.0

    def test_dimension_mismatch(self):
        neuron = Neuron([1.0, 1.0])
        with pytest.raises(DimensionMismatch):
            neuron.activate([1.0, 1.0, 1.0])
        with pytest.raises(DimensionMismatch):
            neuron.activate([1.0])

    def test_non_positive_input_count(self):
        rng = np.random.default_rng(0)
        with pytest.raises(ConstructionError):
            Neuron.random(0, rng)
        with pytest.raises(ConstructionError):
            Neuron([])

    def test_weights_are_immutable(self):
        neuron = Neuron([1.0, 2.0])
        with pytest.raises(ValueError):
            neuron.weights[0] = 5.0

    def test_weights_copied_from_source(self):
        source = np.array([1.0, 2.0])
        neuron = Neuron(source)
        source[0] = 99.0
        assert neuron.weights[0] == 1.0


class TestNetworkConstruction:
    """Tests for Network shape and validation."""

    def test_default_topology_shape(self):
        rng = np.random.default_rng(1)
        network = Network([4, 6, 2], rng)

        assert network.topology == (4, 6, 2)
        assert len(network.layers) == 2
        assert len(network.layers[0]) == 6
        assert len(network.layers[1]) == 2
        assert all(n.input_count == 4 for n in network.layers[0])
        assert all(n.input_count == 6 for n in network.layers[1])
        assert network.weight_count == 4 * 6 + 6 * 2

    @pytest.mark.parametrize("topology", [[], [4], [4, 0, 2], [4, -1], [3, 2.5]])
    def test_invalid_topology(self, topology):
        with pytest.raises(ConstructionError):
            Network(topology, np.random.default_rng(0))

    def test_construction_error_is_value_error(self):
        with pytest.raises(ValueError):
            Network([1], np.random.default_rng(0))

    def test_default_rng(self):
        """Without a random source, a fresh one is created."""
        network = Network([2, 1])
        assert network.output_size == 1

    def test_from_layers(self):
        network = Network.from_layers([
            [Neuron([1.0, 0.0]), Neuron([0.0, 1.0]), Neuron([1.0, 1.0])],
            [Neuron([1.0, 1.0, 1.0])],
        ])
        assert network.topology == (2, 3, 1)

    def test_from_layers_rejects_mismatched_shapes(self):
        with pytest.raises(ConstructionError):
            Network.from_layers([
                [Neuron([1.0, 0.0]), Neuron([0.0, 1.0])],
                [Neuron([1.0, 1.0, 1.0])],
            ])

    def test_from_layers_rejects_empty(self):
        with pytest.raises(ConstructionError):
            Network.from_layers([])
        with pytest.raises(ConstructionError):
            Network.from_layers([[Neuron([1.0])], []])


class TestNetworkForward:
    """Tests for forward propagation."""

    def test_determinism(self):
        """Identically seeded networks agree bit for bit."""
        a = Network([4, 6, 2], np.random.default_rng(42))
        b = Network([4, 6, 2], np.random.default_rng(42))
        x = np.array([0.45, 0.19, 0.4, 0.0])

        assert np.array_equal(a.forward(x), b.forward(x))

    def test_forward_is_pure(self):
        network = Network([4, 6, 2], np.random.default_rng(3))
        x = [0.1, -0.2, 0.3, 0.0]
        assert np.array_equal(network.forward(x), network.forward(x))

    @pytest.mark.parametrize("topology", [[2, 1], [4, 6, 2], [3, 8, 8, 5], [1, 1, 1, 1]])
    def test_output_shape(self, topology):
        network = Network(topology, np.random.default_rng(7))
        out = network.forward(np.zeros(topology[0]))
        assert out.shape == (topology[-1],)

    def test_input_dimension_mismatch(self):
        network = Network([4, 6, 2], np.random.default_rng(7))
        with pytest.raises(DimensionMismatch):
            network.forward([0.0, 0.0, 0.0])
        with pytest.raises(DimensionMismatch):
            network.forward([0.0] * 5)

    def test_outputs_bounded(self):
        rng = np.random.default_rng(11)
        network = Network([4, 6, 2], rng)
        for _ in range(100):
            out = network.forward(rng.uniform(-3, 3, size=4))
            assert np.all(out > -1.0) and np.all(out < 1.0)

    def test_layers_chain(self):
        """Each layer's output feeds the next."""
        network = Network.from_layers([
            [Neuron([1.0, 0.0]), Neuron([0.0, 1.0])],
            [Neuron([1.0, -1.0])],
        ])
        x = [0.3, 0.7]
        hidden = [math.tanh(0.3), math.tanh(0.7)]
        expected = math.tanh(hidden[0] - hidden[1])
        assert network.forward(x)[0] == pytest.approx(expected)

    def test_neuron_order_sets_output_order(self):
        network = Network.from_layers([
            [Neuron([1.0]), Neuron([-1.0])],
        ])
        out = network.forward([0.5])
        assert out[0] == pytest.approx(math.tanh(0.5))
        assert out[1] == pytest.approx(math.tanh(-0.5))


class TestNetworkSnapshot:
    """Tests for to_dict / from_dict."""

    def test_snapshot_replays_outputs(self):
        original = Network([4, 6, 2], np.random.default_rng(5))
        restored = Network.from_dict(original.to_dict())
        x = [0.2, -0.4, 0.4, 0.0]

        assert restored.topology == original.topology
        assert np.array_equal(restored.forward(x), original.forward(x))

    def test_snapshot_topology_mismatch(self):
        data = Network([2, 1], np.random.default_rng(0)).to_dict()
        data["topology"] = [2, 3]
        with pytest.raises(ConstructionError):
            Network.from_dict(data)

    def test_repr(self):
        network = Network([4, 6, 2], np.random.default_rng(0))
        assert "Network" in repr(network)
        assert "[4, 6, 2]" in repr(network)
