"""
Gradient descent for networks built from the engine.

Loss is an ordinary graph node, so one run_gradient() call from the loss
fills in the gradient of every network parameter.
"""

import logging
import random
from typing import Callable, Optional, Sequence

from backprop.core.autograd import Node, add, div, mul, run_gradient, sub
from backprop.core.network import Network

logger = logging.getLogger(__name__)


def mse_loss(predictions: Sequence[Node], targets: Sequence) -> Node:
    """Mean squared error between predictions and targets."""
    if len(predictions) != len(targets):
        raise ValueError(
            f"Got {len(predictions)} predictions but {len(targets)} targets"
        )

    total = Node(0.0)
    for pred, target in zip(predictions, targets):
        diff = sub(pred, target)
        total = add(total, mul(diff, diff))
    return div(total, len(predictions))


def sgd_step(params: Sequence[Node], lr: float):
    for p in params:
        p.data -= lr * p.grad


def train(
    network: Network,
    samples: Sequence[tuple[Sequence[float], Sequence[float]]],
    max_steps: Optional[int] = None,
    lr: Optional[float] = None,
    batch_size: int = 32,
    rng: Optional[random.Random] = None,
    cancel_check: Optional[Callable[[], bool]] = None,
) -> Optional[dict]:
    """
    Mini-batch SGD on (inputs, targets) samples.

    Defaults for max_steps and lr come from the package config.
    Returns training stats dict or None if there is nothing to train on.
    """
    import backprop
    config = backprop.get_config()
    max_steps = config.max_steps if max_steps is None else max_steps
    lr = config.learning_rate if lr is None else lr
    rng = rng if rng is not None else backprop.get_rng()

    if not samples:
        logger.info("[Train] No samples, skipping")
        return None

    params = network.parameters()
    losses = []

    for step in range(max_steps):
        if cancel_check is not None and cancel_check():
            break

        batch = rng.sample(list(samples), min(batch_size, len(samples)))

        total_loss = Node(0.0)
        for inputs, targets in batch:
            total_loss = add(total_loss, mse_loss(network(inputs), targets))
        avg_loss = div(total_loss, len(batch))
        losses.append(avg_loss.data)

        network.zero_grad()
        run_gradient(avg_loss)
        sgd_step(params, lr)

        logger.debug("[Train] Step %d loss=%.6f", step, avg_loss.data)

    stats = {
        "samples": len(samples),
        "steps": len(losses),
        "initial_loss": losses[0] if losses else None,
        "final_loss": losses[-1] if losses else None,
        "loss_reduction": (losses[0] - losses[-1]) if len(losses) > 1 else 0,
    }

    logger.info(
        f"[Train] Trained: {len(samples)} samples, {len(losses)} steps, "
        f"loss={losses[-1]:.4f}"
        if losses else "[Train] Training cancelled before any steps"
    )

    return stats
