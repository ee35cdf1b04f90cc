"""
Feed-forward network built on the autograd engine.

Neuron -> Layer -> Network. Forward evaluation only composes engine
operators, so any output can be differentiated with run_gradient().
"""

import logging
from typing import Optional, Sequence

from backprop.core.autograd import Node, add, mul, relu
from backprop.protocols import RandomSource

logger = logging.getLogger(__name__)


class DimensionMismatchError(ValueError):
    """Input length does not match the number of weights."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{actual} input dimensions not compatible with {expected} weight dimensions"
        )


def _default_rng() -> RandomSource:
    import backprop
    return backprop.get_rng()


def _as_nodes(inputs) -> list[Node]:
    return [x if isinstance(x, Node) else Node(x) for x in inputs]


# ============================================================================
# MODEL
# ============================================================================

class Neuron:
    """Weighted sum of inputs plus bias, optionally passed through ReLU."""

    def __init__(self, n_inputs: int, rng: Optional[RandomSource] = None, nonlin: bool = True):
        import backprop
        config = backprop.get_config()
        rng = rng if rng is not None else _default_rng()

        self.weights = [
            Node(rng.uniform(config.weight_low, config.weight_high)) for _ in range(n_inputs)
        ]
        self.bias = Node(rng.uniform(config.bias_low, config.bias_high))
        self.nonlin = nonlin

    def __call__(self, inputs: Sequence) -> Node:
        return self.forward(inputs)

    def __repr__(self):
        kind = "ReLU" if self.nonlin else "Linear"
        return f"{kind}Neuron({len(self.weights)})"

    def forward(self, inputs: Sequence) -> Node:
        """Activation for one input vector. Checks the length before building anything."""
        if len(inputs) != len(self.weights):
            raise DimensionMismatchError(expected=len(self.weights), actual=len(inputs))

        total = None
        for w, x in zip(self.weights, _as_nodes(inputs)):
            term = mul(w, x)
            total = term if total is None else add(total, term)
        total = self.bias if total is None else add(total, self.bias)

        return relu(total) if self.nonlin else total

    def parameters(self) -> list[Node]:
        return self.weights + [self.bias]


class Layer:
    """Neurons evaluated side by side over the same input."""

    def __init__(
        self,
        n_inputs: int,
        n_outputs: int,
        rng: Optional[RandomSource] = None,
        nonlin: bool = True,
    ):
        rng = rng if rng is not None else _default_rng()
        self.neurons = [Neuron(n_inputs, rng=rng, nonlin=nonlin) for _ in range(n_outputs)]
        self.n_inputs = n_inputs

    def __call__(self, inputs: Sequence) -> list[Node]:
        return self.forward(inputs)

    def __repr__(self):
        return f"Layer({self.n_inputs} -> {self.n_outputs})"

    @property
    def n_outputs(self) -> int:
        return len(self.neurons)

    def forward(self, inputs: Sequence) -> list[Node]:
        if len(inputs) != self.n_inputs:
            raise DimensionMismatchError(expected=self.n_inputs, actual=len(inputs))
        inputs = _as_nodes(inputs)
        return [neuron(inputs) for neuron in self.neurons]

    def parameters(self) -> list[Node]:
        return [p for neuron in self.neurons for p in neuron.parameters()]


class Network:
    """Layers applied left to right, each feeding the next."""

    def __init__(self, layers: list[Layer]):
        if not layers:
            raise ValueError("Network needs at least one layer")
        self.layers = list(layers)

    @classmethod
    def from_sizes(
        cls,
        sizes: Sequence[tuple[int, int]],
        rng: Optional[RandomSource] = None,
        nonlin: bool = True,
    ) -> "Network":
        """Build from (input width, output width) pairs, one per layer."""
        rng = rng if rng is not None else _default_rng()
        network = cls([Layer(n_in, n_out, rng=rng, nonlin=nonlin) for n_in, n_out in sizes])
        logger.debug(
            "[Network] Built %s (%d parameters)", network, len(network.parameters())
        )
        return network

    def __call__(self, inputs: Sequence) -> list[Node]:
        return self.forward(inputs)

    def __repr__(self):
        return f"Network([{', '.join(repr(layer) for layer in self.layers)}])"

    @property
    def n_inputs(self) -> int:
        return self.layers[0].n_inputs

    @property
    def n_outputs(self) -> int:
        return self.layers[-1].n_outputs

    def forward(self, inputs: Sequence) -> list[Node]:
        """Feed raw inputs to the first layer and thread outputs through the rest."""
        result = inputs
        for layer in self.layers:
            result = layer(result)
        return result

    def parameters(self) -> list[Node]:
        """All trainable parameters: per neuron, weights then bias."""
        return [p for layer in self.layers for p in layer.parameters()]

    def zero_grad(self):
        for p in self.parameters():
            p.grad = 0.0

    def state_dict(self) -> dict:
        """Serialize weights to JSON-friendly dict."""
        return {
            "layers": [
                {
                    "weights": [[w.data for w in neuron.weights] for neuron in layer.neurons],
                    "biases": [neuron.bias.data for neuron in layer.neurons],
                }
                for layer in self.layers
            ]
        }

    def load_state_dict(self, d: dict):
        """Load weights from dict. The shape must match this network."""
        layers = d["layers"]
        if len(layers) != len(self.layers):
            raise ValueError(f"Expected {len(self.layers)} layers, got {len(layers)}")

        for i, (layer, state) in enumerate(zip(self.layers, layers)):
            weights, biases = state["weights"], state["biases"]
            if len(weights) != layer.n_outputs or len(biases) != layer.n_outputs:
                raise ValueError(f"Layer {i}: expected {layer.n_outputs} neurons")
            for neuron, row, bias in zip(layer.neurons, weights, biases):
                if len(row) != len(neuron.weights):
                    raise ValueError(f"Layer {i}: expected {len(neuron.weights)} weights per neuron")
                for w, val in zip(neuron.weights, row):
                    w.data = float(val)
                neuron.bias.data = float(bias)
