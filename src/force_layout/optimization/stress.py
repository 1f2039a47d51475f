"""
Kamada-Kawai stress function with analytic gradient.

    stress(p) = 0.5 * w * ||sum_i p_i||^2
              + sum_{i<j} 0.5 * (||p_i - p_j|| * inv_ij - 1)^2

with ``inv_ij = 1 / (d_ij + eps)``. The first term is a weak centering
penalty, the second the classical stress against target distances d_ij.
"""

from __future__ import annotations

import numpy as np

# Weight of the centering penalty.
MEAN_WEIGHT = 1e-3
# Offset added to target distances before inversion.
DISTANCE_EPSILON = 1e-3
# Stand-in length for coincident points when normalizing directions.
MIN_DISTANCE = 1e-10


def inverse_distances(dist: np.ndarray, epsilon: float = DISTANCE_EPSILON) -> np.ndarray:
    """Invert a target distance matrix; zero targets map to 0 (no spring)."""
    dist = np.asarray(dist, dtype=np.float64)
    inv = np.zeros_like(dist)
    nonzero = dist != 0
    inv[nonzero] = 1.0 / (dist[nonzero] + epsilon)
    np.fill_diagonal(inv, 0.0)
    return inv


class StressFunction:
    """
    Stress cost and gradient over a flattened position vector.

    Scratch arrays for pairwise differences are allocated once and reused
    by every evaluation.

    Example:
        f = StressFunction(inverse_distances(dist), dim=2)
        cost, grad = f(x)
    """

    def __init__(
        self,
        inv_dist: np.ndarray,
        dim: int,
        mean_weight: float = MEAN_WEIGHT,
    ) -> None:
        self.inv_dist = np.asarray(inv_dist, dtype=np.float64)
        self.n = self.inv_dist.shape[0]
        self.dim = int(dim)
        self.mean_weight = float(mean_weight)

        self._diff = np.empty((self.n, self.n, self.dim), dtype=np.float64)
        self._dist = np.empty((self.n, self.n), dtype=np.float64)
        self._offset = np.empty((self.n, self.n), dtype=np.float64)

    def _pairwise(self, x: np.ndarray) -> np.ndarray:
        """Fill diff/dist/offset scratch for positions ``x``; return (n, dim) view."""
        pos = x.reshape(self.n, self.dim)
        np.subtract(pos[:, None, :], pos[None, :, :], out=self._diff)
        np.sqrt(np.einsum("ijk,ijk->ij", self._diff, self._diff), out=self._dist)
        np.multiply(self._dist, self.inv_dist, out=self._offset)
        self._offset -= 1.0
        np.fill_diagonal(self._offset, 0.0)
        return pos

    def cost(self, x: np.ndarray) -> float:
        """Evaluate the stress at ``x``."""
        pos = self._pairwise(x)
        total = pos.sum(axis=0)
        centering = 0.5 * self.mean_weight * float(total @ total)
        # Each unordered pair appears twice in the full matrix.
        return centering + 0.25 * float(np.sum(self._offset * self._offset))

    def __call__(self, x: np.ndarray) -> tuple[float, np.ndarray]:
        """Evaluate stress and its gradient at ``x``."""
        pos = self._pairwise(x)
        total = pos.sum(axis=0)
        cost = 0.5 * self.mean_weight * float(total @ total)
        cost += 0.25 * float(np.sum(self._offset * self._offset))

        safe_dist = np.where(self._dist > 0, self._dist, MIN_DISTANCE)
        coeff = self.inv_dist * self._offset / safe_dist
        grad = np.einsum("ij,ijk->ik", coeff, self._diff)
        grad += self.mean_weight * total
        return cost, grad.reshape(-1)


__all__ = [
    "MEAN_WEIGHT",
    "DISTANCE_EPSILON",
    "inverse_distances",
    "StressFunction",
]
