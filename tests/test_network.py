"""
Tests for the feed-forward network: neurons, layers, shape checks, weights.
"""

import random

import pytest


# ============================================================================
# NEURON TESTS
# ============================================================================

class TestNeuron:
    def test_init_ranges(self):
        from backprop.core.network import Neuron
        neuron = Neuron(50, rng=random.Random(0))
        assert len(neuron.weights) == 50
        assert all(-1.0 <= w.data <= 1.0 for w in neuron.weights)
        assert -0.01 <= neuron.bias.data <= 0.01

    def test_init_uses_config_ranges(self, sequence_random):
        import backprop
        from backprop.config import BackpropConfig
        from backprop.core.network import Neuron
        backprop.configure(BackpropConfig(weight_low=-0.5, weight_high=0.5, bias_low=0.0, bias_high=0.0))
        rng = sequence_random([0.0])
        Neuron(2, rng=rng)
        assert rng.calls == [(-0.5, 0.5), (-0.5, 0.5), (0.0, 0.0)]

    def test_forward_value(self, sequence_random):
        from backprop.core.network import Neuron
        neuron = Neuron(3, rng=sequence_random([0.5, -0.5, 0.25, 0.1]))
        out = neuron([1.0, 2.0, 3.0])
        assert out.data == pytest.approx(0.35)

    def test_relu_clamps(self, sequence_random):
        from backprop.core.network import Neuron
        neuron = Neuron(2, rng=sequence_random([-1.0, -1.0, 0.0]))
        assert neuron([1.0, 1.0]).data == 0.0

    def test_linear_neuron(self, sequence_random):
        from backprop.core.network import Neuron
        neuron = Neuron(2, rng=sequence_random([-1.0, -1.0, 0.0]), nonlin=False)
        assert neuron([1.0, 1.0]).data == -2.0

    def test_backward_reaches_parameters(self, sequence_random):
        from backprop.core.network import Neuron
        neuron = Neuron(3, rng=sequence_random([0.5, -0.5, 0.25, 0.1]))
        out = neuron([1.0, 2.0, 3.0])
        out.backward()
        assert [w.grad for w in neuron.weights] == [1.0, 2.0, 3.0]
        assert neuron.bias.grad == 1.0

    def test_zero_inputs(self, sequence_random):
        from backprop.core.network import Neuron
        neuron = Neuron(0, rng=sequence_random([0.005]))
        out = neuron([])
        assert out.data == 0.005

    def test_dimension_mismatch(self, monkeypatch):
        from backprop.core import network
        from backprop.core.network import DimensionMismatchError, Neuron
        neuron = Neuron(3, rng=random.Random(0))

        calls = []
        monkeypatch.setattr(network, "mul", lambda *args: calls.append(args))
        monkeypatch.setattr(network, "add", lambda *args: calls.append(args))

        with pytest.raises(DimensionMismatchError) as exc_info:
            neuron([0.1, 0.2])
        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 2
        assert "2 input dimensions not compatible with 3 weight dimensions" in str(exc_info.value)
        assert calls == []

    def test_dimension_mismatch_is_value_error(self):
        from backprop.core.network import Neuron
        with pytest.raises(ValueError):
            Neuron(2, rng=random.Random(0))([1.0, 2.0, 3.0])


# ============================================================================
# LAYER / NETWORK TESTS
# ============================================================================

class TestLayer:
    def test_output_width(self):
        from backprop.core.network import Layer
        layer = Layer(3, 4, rng=random.Random(0))
        out = layer([0.1, 0.2, 0.3])
        assert len(out) == 4
        assert layer.n_outputs == 4
        assert all(o.data >= 0.0 for o in out)

    def test_mismatch_before_any_neuron(self):
        from backprop.core.network import DimensionMismatchError, Layer
        layer = Layer(3, 4, rng=random.Random(0))
        with pytest.raises(DimensionMismatchError):
            layer([0.1])

    def test_shared_inputs(self):
        """All neurons see the same input nodes; gradients sum over neurons."""
        from backprop.core.autograd import Node, add
        from backprop.core.network import Layer
        layer = Layer(2, 3, rng=random.Random(1), nonlin=False)
        x = [Node(0.5), Node(-0.5)]
        out = layer(x)
        total = add(add(out[0], out[1]), out[2])
        total.backward()
        expected = sum(neuron.weights[0].data for neuron in layer.neurons)
        assert x[0].grad == pytest.approx(expected)


class TestNetwork:
    def test_shape_propagation(self):
        from backprop.core.network import Network
        network = Network.from_sizes([(3, 4), (4, 5), (5, 1)], rng=random.Random(0))
        out = network([0.1, 0.2, 0.3])
        assert len(out) == 1
        assert network.n_inputs == 3
        assert network.n_outputs == 1

    def test_explicit_layers(self):
        from backprop.core.network import Layer, Network
        rng = random.Random(0)
        network = Network([Layer(3, 4, rng=rng), Layer(4, 5, rng=rng), Layer(5, 1, rng=rng)])
        assert len(network([0.1, 0.2, 0.3])) == 1
        assert repr(network) == "Network([Layer(3 -> 4), Layer(4 -> 5), Layer(5 -> 1)])"

    def test_parameter_count(self):
        from backprop.core.network import Network
        network = Network.from_sizes([(3, 4), (4, 5), (5, 1)], rng=random.Random(0))
        # (3+1)*4 + (4+1)*5 + (5+1)*1 = 16 + 25 + 6
        assert len(network.parameters()) == 47

    def test_mismatched_layers_fail(self):
        from backprop.core.network import DimensionMismatchError, Network
        network = Network.from_sizes([(3, 4), (5, 1)], rng=random.Random(0))
        with pytest.raises(DimensionMismatchError):
            network([0.1, 0.2, 0.3])

    def test_backward(self):
        from backprop.core.network import Network
        network = Network.from_sizes([(3, 4), (4, 1)], rng=random.Random(3), nonlin=False)
        out = network([0.5, -0.2, 0.8])[0]
        out.backward()
        assert any(p.grad != 0.0 for p in network.parameters())

    def test_zero_grad(self):
        from backprop.core.network import Network
        network = Network.from_sizes([(3, 4), (4, 1)], rng=random.Random(3), nonlin=False)
        network([0.5, -0.2, 0.8])[0].backward()
        network.zero_grad()
        assert all(p.grad == 0.0 for p in network.parameters())

    def test_seeded_config_is_reproducible(self):
        import backprop
        from backprop.config import BackpropConfig
        from backprop.core.network import Network
        backprop.configure(BackpropConfig(seed=42))
        first = Network.from_sizes([(2, 3), (3, 1)]).state_dict()
        backprop.configure(BackpropConfig(seed=42))
        second = Network.from_sizes([(2, 3), (3, 1)]).state_dict()
        assert first == second

    def test_default_neurons_draw_distinct_weights(self):
        import backprop
        from backprop.config import BackpropConfig
        from backprop.core.network import Neuron
        backprop.configure(BackpropConfig(seed=42))
        first = [w.data for w in Neuron(3).weights]
        second = [w.data for w in Neuron(3).weights]
        assert first != second

    def test_default_layers_draw_distinct_weights(self):
        import backprop
        from backprop.config import BackpropConfig
        from backprop.core.network import Layer, Network
        backprop.configure(BackpropConfig(seed=42))
        network = Network([Layer(2, 2), Layer(2, 2)])
        first, second = network.state_dict()["layers"]
        assert first["weights"] != second["weights"]

    def test_empty_layers_rejected(self):
        from backprop.core.network import Network
        with pytest.raises(ValueError):
            Network([])


class TestStateDict:
    def test_roundtrip(self):
        from backprop.core.network import Network
        model = Network.from_sizes([(3, 4), (4, 1)], rng=random.Random(0))
        model2 = Network.from_sizes([(3, 4), (4, 1)], rng=random.Random(1))
        model2.load_state_dict(model.state_dict())

        for p1, p2 in zip(model.parameters(), model2.parameters()):
            assert p1.data == p2.data

    def test_deterministic_forward(self):
        """Same weights + same input = same output."""
        from backprop.core.network import Network
        model = Network.from_sizes([(3, 4), (4, 1)], rng=random.Random(0))
        model2 = Network.from_sizes([(3, 4), (4, 1)], rng=random.Random(1))
        model2.load_state_dict(model.state_dict())
        x = [0.3, 0.3, 0.3]
        assert abs(model(x)[0].data - model2(x)[0].data) < 1e-10

    def test_shape_mismatch(self):
        from backprop.core.network import Network
        model = Network.from_sizes([(3, 4), (4, 1)], rng=random.Random(0))
        other = Network.from_sizes([(3, 2), (2, 1)], rng=random.Random(0))
        with pytest.raises(ValueError):
            model.load_state_dict(other.state_dict())

    def test_layer_count_mismatch(self):
        from backprop.core.network import Network
        model = Network.from_sizes([(3, 4), (4, 1)], rng=random.Random(0))
        with pytest.raises(ValueError):
            model.load_state_dict({"layers": []})
