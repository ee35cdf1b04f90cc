"""Shared numeric helpers for backprop."""

import numpy as np


def divide(a: float, b: float) -> float:
    """
    IEEE 754 division of two floats.

    Python's float division raises ZeroDivisionError; this returns inf, -inf
    or nan instead, so non-finite values flow through the graph.
    """
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        return float(np.float64(a) / np.float64(b))
