"""
Limited-memory BFGS search directions.

The curvature history lives in a fixed-capacity ring buffer: two
preallocated ``(m, size)`` arenas for position deltas ``s`` and gradient
deltas ``y``, a start index and a count. Pushing into a full buffer
overwrites the oldest pair, so both histories always hold the same number
of pairs, at most ``m``.
"""

from __future__ import annotations

from typing import Callable, Iterator, Optional

import numpy as np

from .line_search import backtracking_line_search

# Number of (s, y) pairs kept.
DEFAULT_MEMORY = 10


class LBFGSMemory:
    """
    Ring buffer of L-BFGS correction pairs.

    Example:
        memory = LBFGSMemory(size=x.size)
        memory.push(x_new - x, g_new - g)
        d = lbfgs_direction(g_new, memory)
    """

    def __init__(self, size: int, capacity: int = DEFAULT_MEMORY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = int(capacity)
        self._s = np.zeros((self._capacity, size), dtype=np.float64)
        self._y = np.zeros((self._capacity, size), dtype=np.float64)
        self._rho = np.zeros(self._capacity, dtype=np.float64)
        self._start = 0
        self._count = 0

    @property
    def capacity(self) -> int:
        """Get the maximum number of stored pairs."""
        return self._capacity

    def __len__(self) -> int:
        return self._count

    def clear(self) -> None:
        """Drop all stored pairs."""
        self._start = 0
        self._count = 0

    def push(self, s: np.ndarray, y: np.ndarray) -> bool:
        """
        Store a correction pair, evicting the oldest when full.

        Pairs without positive curvature (``s.y`` not sufficiently above 0)
        are rejected so the implied inverse Hessian stays positive definite.

        Returns:
            True if the pair was stored
        """
        sy = float(s @ y)
        yy = float(y @ y)
        if not sy > np.finfo(np.float64).eps * yy or yy == 0.0:
            return False

        slot = (self._start + self._count) % self._capacity
        if self._count == self._capacity:
            self._start = (self._start + 1) % self._capacity
        else:
            self._count += 1
        self._s[slot] = s
        self._y[slot] = y
        self._rho[slot] = 1.0 / sy
        return True

    def slots(self) -> Iterator[int]:
        """Arena slots from oldest to newest."""
        for k in range(self._count):
            yield (self._start + k) % self._capacity

    def pair(self, slot: int) -> tuple[np.ndarray, np.ndarray, float]:
        """Return (s, y, rho) stored in ``slot``."""
        return self._s[slot], self._y[slot], float(self._rho[slot])

    def newest(self) -> int:
        """Arena slot of the most recent pair."""
        if self._count == 0:
            raise IndexError("memory is empty")
        return (self._start + self._count - 1) % self._capacity


def lbfgs_direction(grad: np.ndarray, memory: LBFGSMemory) -> np.ndarray:
    """
    Two-loop recursion for the L-BFGS search direction.

    With an empty memory the direction is the negative gradient. Otherwise
    the newest-to-oldest pass computes ``alpha_i = rho_i * s_i.q``, the
    initial inverse Hessian is scaled by ``gamma = s.y / y.y`` of the newest
    pair, and the oldest-to-newest pass applies the corrections.

    Args:
        grad: Gradient at the current point
        memory: Stored correction pairs

    Returns:
        Search direction (approximately ``-H^-1 grad``)
    """
    if len(memory) == 0:
        return -np.asarray(grad, dtype=np.float64)

    q = np.array(grad, dtype=np.float64)
    slots = list(memory.slots())
    alphas: dict[int, float] = {}

    for slot in reversed(slots):
        s, y, rho = memory.pair(slot)
        alpha = rho * float(s @ q)
        q -= alpha * y
        alphas[slot] = alpha

    s, y, _ = memory.pair(memory.newest())
    gamma = float(s @ y) / float(y @ y)
    direction = -gamma * q

    for slot in slots:
        s, y, rho = memory.pair(slot)
        beta = rho * float(y @ direction)
        direction += s * (-alphas[slot] - beta)

    return direction


class LBFGSOptimizer:
    """
    Step-wise L-BFGS minimizer.

    Each call to step() computes the two-loop direction, picks a step
    length by backtracking line search, moves, and records the new
    correction pair.

    Example:
        opt = LBFGSOptimizer(stress, x0)
        while opt.iteration < 500 and opt.step() >= 1e-5:
            pass
        x = opt.x
    """

    def __init__(
        self,
        objective: Callable[[np.ndarray], tuple[float, np.ndarray]],
        x0: np.ndarray,
        cost: Optional[Callable[[np.ndarray], float]] = None,
        memory: int = DEFAULT_MEMORY,
    ) -> None:
        """
        Args:
            objective: Returns (value, gradient) at a point
            x0: Starting point (copied)
            cost: Value-only objective for the line search (default:
                first element of ``objective``)
            memory: Number of correction pairs kept
        """
        self._objective = objective
        self._cost = cost if cost is not None else (lambda x: objective(x)[0])
        self.x = np.array(x0, dtype=np.float64)
        self.memory = LBFGSMemory(self.x.size, memory)
        self.f, self.grad = objective(self.x)
        self.iteration = 0

    @property
    def gradient_norm(self) -> float:
        """Get the 2-norm of the gradient at the current point."""
        return float(np.linalg.norm(self.grad))

    def step(self) -> float:
        """
        Take one L-BFGS iteration.

        Returns:
            Gradient 2-norm at the new point
        """
        direction = lbfgs_direction(self.grad, self.memory)
        alpha = backtracking_line_search(self.x, direction, self.f, self.grad, self._cost)

        x_new = self.x + alpha * direction
        f_new, grad_new = self._objective(x_new)
        self.memory.push(x_new - self.x, grad_new - self.grad)

        self.x, self.f, self.grad = x_new, f_new, grad_new
        self.iteration += 1
        return self.gradient_norm


__all__ = ["DEFAULT_MEMORY", "LBFGSMemory", "LBFGSOptimizer", "lbfgs_direction"]
