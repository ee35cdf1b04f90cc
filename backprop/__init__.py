"""
backprop: scalar reverse-mode automatic differentiation.

Builds computation graphs out of scalar nodes, differentiates them with a
single backward pass, and composes them into small feed-forward networks.

Usage:
    from backprop.core import Node, run_gradient

    a, b = Node(4.0), Node(2.0)
    z = (a + b) * b / a
    run_gradient(z)          # a.grad == -0.25, b.grad == 2.0

Defaults come from BACKPROP_* environment variables; override them with
backprop.configure(BackpropConfig(...)).
"""

import logging
import random
import threading

from backprop.config import BackpropConfig

__version__ = "0.1.0"

_log = logging.getLogger(__name__)

_config: BackpropConfig | None = None
_rng: random.Random | None = None
_config_lock = threading.Lock()


def configure(config: BackpropConfig) -> None:
    """Install the configuration used by network construction and training."""
    global _config, _rng

    with _config_lock:
        _config = config
        _rng = None
    _log.debug("Configured: %s", config)


def get_config() -> BackpropConfig:
    """Get the current config, loading it from the environment on first use."""
    global _config

    if _config is not None:
        return _config

    with _config_lock:
        if _config is None:
            from backprop.settings import settings
            _config = settings.to_config()
        return _config


def get_rng() -> random.Random:
    """
    Shared random source for callers that don't pass their own.

    Seeded once from config.seed and reused, so successive draws differ.
    Reset by configure().
    """
    global _rng

    config = get_config()
    with _config_lock:
        if _rng is None:
            _rng = random.Random(config.seed)
        return _rng
