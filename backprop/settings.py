"""Default configuration via environment variables."""

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings

from backprop.config import BackpropConfig


class Settings(BaseSettings):
    """backprop defaults. All values from env vars or .env file."""

    # Initialization ranges
    weight_low: float = -1.0
    weight_high: float = 1.0
    bias_low: float = -0.01
    bias_high: float = 0.01
    seed: Optional[int] = None

    # Training
    learning_rate: float = 0.01
    max_steps: int = 50

    model_config = {"env_prefix": "BACKPROP_", "env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @model_validator(mode="after")
    def _check_ranges(self):
        if self.weight_low > self.weight_high:
            raise ValueError("weight_low must not exceed weight_high")
        if self.bias_low > self.bias_high:
            raise ValueError("bias_low must not exceed bias_high")
        return self

    def to_config(self) -> BackpropConfig:
        return BackpropConfig(
            weight_low=self.weight_low,
            weight_high=self.weight_high,
            bias_low=self.bias_low,
            bias_high=self.bias_high,
            seed=self.seed,
            learning_rate=self.learning_rate,
            max_steps=self.max_steps,
        )


# Singleton: import this everywhere instead of creating new Settings()
settings = Settings()
