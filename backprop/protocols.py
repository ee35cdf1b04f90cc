"""
Protocols for dependency injection.

Callers pass a random source when building networks so initialization can be
made deterministic. random.Random satisfies RandomSource as-is.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Source of uniformly distributed floats for weight initialization."""

    def uniform(self, a: float, b: float) -> float:
        """
        Return a float N such that a <= N <= b.

        Args:
            a: Lower bound
            b: Upper bound
        """
        ...
