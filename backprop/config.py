"""
backprop configuration.

Initialization ranges and training defaults are set here.
No hardcoded values in the rest of the package.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class BackpropConfig:
    """Configuration for network initialization and training."""

    # Weight/bias initialization (uniform, inclusive bounds)
    weight_low: float = -1.0
    weight_high: float = 1.0
    bias_low: float = -0.01
    bias_high: float = 0.01

    # Seed for the default random source (None = seeded from the OS)
    seed: Optional[int] = None

    # Training
    learning_rate: float = 0.01
    max_steps: int = 50

    def __post_init__(self):
        if self.weight_low > self.weight_high:
            raise ValueError(
                f"weight_low ({self.weight_low}) must not exceed weight_high ({self.weight_high})"
            )
        if self.bias_low > self.bias_high:
            raise ValueError(
                f"bias_low ({self.bias_low}) must not exceed bias_high ({self.bias_high})"
            )
