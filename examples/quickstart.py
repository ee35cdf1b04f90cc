"""
backprop quickstart: build a graph, differentiate it, run a small network.

No configuration needed; initialization ranges default to weights in [-1, 1]
and biases in [-0.01, 0.01] (override with BACKPROP_* env vars).

    python examples/quickstart.py
"""

import random

from backprop.core import Network, Node, graph_stats, run_gradient, to_dot


# -- Step 1: Build a graph and differentiate it -----------------------------

a = Node(4.0)
b = Node(2.0)

c = a + b       # 6
d = c * b       # 12
z = d / a       # 3

run_gradient(z)

print(f"z = {z.data}")
print(f"dz/da = {a.grad}")   # -0.25
print(f"dz/db = {b.grad}")   # 2.0
print(graph_stats(z))


# -- Step 2: Render it ------------------------------------------------------
# Paste the output into any GraphViz viewer.

print(to_dot(z))


# -- Step 3: A small network ------------------------------------------------
# Pass a seeded random source for reproducible weights.

network = Network.from_sizes([(3, 4), (4, 5), (5, 1)], rng=random.Random(0))
output = network([0.1, 0.2, 0.3])
print(f"network output: {[o.data for o in output]}")

output[0].backward()
print(f"non-zero parameter gradients: {sum(1 for p in network.parameters() if p.grad != 0.0)}")
