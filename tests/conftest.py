import pytest


class SequenceRandom:
    """Deterministic random source: returns the given values in order, cycling."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def uniform(self, a, b):
        self.calls.append((a, b))
        return self.values[(len(self.calls) - 1) % len(self.values)]


@pytest.fixture(autouse=True)
def reset_config():
    """Each test starts from the environment defaults."""
    import backprop
    backprop._config = None
    backprop._rng = None
    yield
    backprop._config = None
    backprop._rng = None


@pytest.fixture
def sequence_random():
    return SequenceRandom
