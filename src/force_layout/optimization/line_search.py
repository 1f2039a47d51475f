"""
Backtracking line search with the Armijo sufficient-decrease condition.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

# Sufficient-decrease constant.
ARMIJO_C1 = 1e-4
# Step shrink factor per rejected trial.
BACKTRACK_FACTOR = 0.9
# Maximum number of trial steps.
MAX_TRIALS = 20
# Step returned when the direction does not descend.
MIN_STEP = 1e-8


def backtracking_line_search(
    x: np.ndarray,
    direction: np.ndarray,
    f: float,
    grad: np.ndarray,
    func: Callable[[np.ndarray], float],
    alpha0: float = 1.0,
    c1: float = ARMIJO_C1,
    shrink: float = BACKTRACK_FACTOR,
    max_trials: int = MAX_TRIALS,
) -> float:
    """
    Find a step length along ``direction`` that decreases ``func`` enough.

    Accepts the first ``alpha`` with
    ``func(x + alpha*d) <= f + c1*alpha*(grad.d)``, shrinking by ``shrink``
    after each rejection. If no trial passes, the last (smallest) step is
    returned anyway. A direction with ``grad.d >= 0`` is not a descent
    direction and yields ``MIN_STEP`` without evaluating ``func``.

    Args:
        x: Current point
        direction: Search direction
        f: func(x)
        grad: Gradient at x
        func: Objective
        alpha0: First trial step

    Returns:
        Step length
    """
    slope = float(grad @ direction)
    if slope >= 0:
        return MIN_STEP

    alpha = alpha0
    for _ in range(max_trials):
        if func(x + alpha * direction) <= f + c1 * alpha * slope:
            return alpha
        alpha *= shrink

    return alpha


__all__ = [
    "ARMIJO_C1",
    "BACKTRACK_FACTOR",
    "MAX_TRIALS",
    "MIN_STEP",
    "backtracking_line_search",
]
