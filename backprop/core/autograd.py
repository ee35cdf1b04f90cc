"""
Scalar reverse-mode autograd engine.

Each operator call builds a new Node that records its operands and an
operator tag. Nothing is differentiated at construction time: run_gradient()
walks the graph in reverse topological order and applies the local rule that
matches each node's tag.
"""

import itertools
import logging
from enum import Enum

from backprop.utils import divide

logger = logging.getLogger(__name__)

_ids = itertools.count()


class Op(str, Enum):
    """Operator that produced a node. NONE marks a leaf."""

    NONE = "none"
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    RELU = "relu"


class Node:
    """Scalar value in a computation graph, with its accumulated gradient."""

    __slots__ = ('data', 'grad', 'op', 'operands', 'id')

    def __init__(self, data):
        self.data = float(data)
        self.grad = 0.0
        self.op = Op.NONE
        self.operands = ()
        self.id = next(_ids)

    def __repr__(self):
        return f"Node(data={self.data:.4f}, grad={self.grad:.4f}, op={self.op.value})"

    def set_grad(self, g: float):
        """Overwrite the gradient. Used to seed the root of a backward pass."""
        self.grad = float(g)

    def accumulate_grad(self, delta: float):
        self.grad += delta

    def clear_grad(self):
        """Zero the gradient and detach from history; the node becomes a leaf."""
        self.grad = 0.0
        self.operands = ()
        self.op = Op.NONE

    def backward(self):
        run_gradient(self)

    def relu(self):
        return relu(self)

    def __add__(self, other):
        return add(self, other)

    def __radd__(self, other):
        return add(other, self)

    def __sub__(self, other):
        return sub(self, other)

    def __rsub__(self, other):
        return sub(other, self)

    def __mul__(self, other):
        return mul(self, other)

    def __rmul__(self, other):
        return mul(other, self)

    def __truediv__(self, other):
        return div(self, other)

    def __rtruediv__(self, other):
        return div(other, self)

    def __neg__(self):
        return self * -1


def _as_node(x) -> Node:
    return x if isinstance(x, Node) else Node(x)


def _derive(data: float, op: Op, *operands: Node) -> Node:
    out = Node(data)
    out.op = op
    out.operands = operands
    return out


# ============================================================================
# OPERATORS
# ============================================================================

def add(left, right) -> Node:
    left, right = _as_node(left), _as_node(right)
    return _derive(left.data + right.data, Op.ADD, left, right)


def sub(left, right) -> Node:
    left, right = _as_node(left), _as_node(right)
    return _derive(left.data - right.data, Op.SUB, left, right)


def mul(left, right) -> Node:
    left, right = _as_node(left), _as_node(right)
    return _derive(left.data * right.data, Op.MUL, left, right)


def div(left, right) -> Node:
    """Quotient node. A zero divisor yields inf/nan rather than raising."""
    left, right = _as_node(left), _as_node(right)
    return _derive(divide(left.data, right.data), Op.DIV, left, right)


def relu(x) -> Node:
    x = _as_node(x)
    # NaN compares false both ways and passes through unchanged
    return _derive(0.0 if x.data <= 0 else x.data, Op.RELU, x)


# ============================================================================
# BACKWARD PASS
# ============================================================================

def _leaf_backward(node: Node):
    pass


def _add_backward(node: Node):
    left, right = node.operands
    left.accumulate_grad(node.grad)
    right.accumulate_grad(node.grad)


def _sub_backward(node: Node):
    left, right = node.operands
    left.accumulate_grad(node.grad)
    right.accumulate_grad(-node.grad)


def _mul_backward(node: Node):
    left, right = node.operands
    left.accumulate_grad(right.data * node.grad)
    right.accumulate_grad(left.data * node.grad)


def _div_backward(node: Node):
    left, right = node.operands
    left.accumulate_grad(divide(1.0, right.data) * node.grad)
    right.accumulate_grad(-divide(left.data, right.data * right.data) * node.grad)


def _relu_backward(node: Node):
    (x,) = node.operands
    x.accumulate_grad((1.0 if x.data > 0 else 0.0) * node.grad)


_BACKWARD_RULES = {
    Op.NONE: _leaf_backward,
    Op.ADD: _add_backward,
    Op.SUB: _sub_backward,
    Op.MUL: _mul_backward,
    Op.DIV: _div_backward,
    Op.RELU: _relu_backward,
}


def run_gradient(root: Node):
    """
    Compute d(root)/d(node) for every node reachable from root.

    The root's gradient is seeded to 1.0; every other gradient is accumulated
    into, not reset, so call zero_gradients() first when reusing a graph.
    Non-finite values propagate without being checked.
    """
    from backprop.core.graph import topological_order

    root.set_grad(1.0)
    order = topological_order(root)
    for node in reversed(order):
        _BACKWARD_RULES[node.op](node)

    logger.debug("[Backward] Propagated through %d nodes from node %d", len(order), root.id)
