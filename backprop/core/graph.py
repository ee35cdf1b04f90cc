"""
Graph traversal and read-only inspection.

topological_order() is the ordering the backward pass relies on. The other
helpers walk the same order to export what a graph looks like: pydantic
snapshots (JSON-friendly), a GraphViz DOT description, and summary stats.
"""

import logging
from collections import Counter
from typing import Optional

from pydantic import BaseModel, Field

from backprop.core.autograd import Node, Op

logger = logging.getLogger(__name__)


def topological_order(root: Node, visited: Optional[set[int]] = None) -> list[Node]:
    """
    Depth-first post-order of every node reachable from root.

    Operands are visited in operand order and each node appears exactly once,
    after all of its operands. Nodes whose id is already in `visited` are
    skipped; pass a shared set to order several roots without repeats.
    Uses an explicit stack, so graph depth is not bound by the recursion limit.
    """
    if visited is None:
        visited = set()
    if root.id in visited:
        return []

    order = []
    visited.add(root.id)
    stack = [(root, iter(root.operands))]
    while stack:
        node, pending = stack[-1]
        for operand in pending:
            if operand.id not in visited:
                visited.add(operand.id)
                stack.append((operand, iter(operand.operands)))
                break
        else:
            stack.pop()
            order.append(node)
    return order


def zero_gradients(root: Node):
    """Reset the gradient of every reachable node, keeping the edges."""
    for node in topological_order(root):
        node.grad = 0.0


# ============================================================================
# SNAPSHOTS
# ============================================================================

class NodeSnapshot(BaseModel):
    """Point-in-time view of one node."""

    id: int
    value: float
    gradient: float
    operator: Op
    operands: list[int] = Field(default_factory=list)


def snapshot(root: Node) -> list[NodeSnapshot]:
    """Snapshots of all reachable nodes, in topological order."""
    return [
        NodeSnapshot(
            id=node.id,
            value=node.data,
            gradient=node.grad,
            operator=node.op,
            operands=[operand.id for operand in node.operands],
        )
        for node in topological_order(root)
    ]


# ============================================================================
# EXPORT
# ============================================================================

def to_dot(root: Node) -> str:
    """
    GraphViz DOT description of the graph rooted at `root`.

    Nodes are numbered N0..Nk in topological order; each operand gets an edge
    pointing at the node it feeds.
    """
    order = topological_order(root)
    index = {node.id: i for i, node in enumerate(order)}

    lines = ["digraph G {", '  rankdir="LR";']
    for i, node in enumerate(order):
        label = (
            f"data={node.data} | grad={node.grad:.4f} | "
            f"operation={node.op.value} | id={node.id}"
        )
        lines.append(f'  N{i} [shape=record, label="{label}"];')
        for operand in node.operands:
            lines.append(f"  N{index[operand.id]} -> N{i};")
    lines.append("}")
    return "\n".join(lines) + "\n"


def graph_stats(root: Node) -> dict:
    """Size and shape summary of the graph rooted at `root`."""
    order = topological_order(root)

    fan_out: Counter = Counter()
    depth: dict[int, int] = {}
    n_edges = 0
    for node in order:
        n_edges += len(node.operands)
        for operand in node.operands:
            fan_out[operand.id] += 1
        depth[node.id] = 1 + max((depth[o.id] for o in node.operands), default=-1)

    stats = {
        "nodes": len(order),
        "edges": n_edges,
        "leaves": sum(1 for node in order if node.op is Op.NONE),
        "max_fan_in": max(len(node.operands) for node in order),
        "max_fan_out": max(fan_out.values(), default=0),
        "depth": depth[root.id],
        "operations": dict(Counter(node.op.value for node in order)),
    }
    logger.debug("[Graph] Stats for node %d: %s", root.id, stats)
    return stats
