from __future__ import annotations

from functools import partial
from typing import Callable

import numpy as np

from ..config import LayoutConfig

# f(x1, x2) -> force on x1. x2 may carry leading axes, e.g. shape (k, 3);
# the result then has the same leading axes.
PairwiseFn = Callable[[np.ndarray, np.ndarray], np.ndarray]


def pairwise_repulsion(x1: np.ndarray, x2: np.ndarray, repulsion: float, epsilon: float) -> np.ndarray:
    """Softened inverse-square push of x2 on x1: d/r * repulsion / (epsilon + r)**2.

    Coincident points have no direction to push along and yield zero.
    """
    difference = np.asarray(x1, dtype=np.float64) - np.asarray(x2, dtype=np.float64)
    distance = np.linalg.norm(difference, axis=-1, keepdims=True)
    magnitude = repulsion / np.square(epsilon + distance)
    with np.errstate(divide="ignore", invalid="ignore"):
        direction = np.where(distance > 0.0, difference / distance, 0.0)
    return direction * magnitude


def repulsion_law(config: LayoutConfig) -> PairwiseFn:
    return partial(pairwise_repulsion, repulsion=config.repulsion, epsilon=config.epsilon)


def spring_attraction(
    source: np.ndarray,
    target: np.ndarray,
    attraction_constant: float,
    strength: float = 1.0,
) -> np.ndarray:
    # Hooke: proportional to separation, no rest length.
    return (source - target) * (-attraction_constant * strength)


__all__ = ["PairwiseFn", "pairwise_repulsion", "repulsion_law", "spring_attraction"]
