"""
Attractive and Repulsive Forces (ARF) layout algorithm.

Based on the paper:
"Self-Organization Applied to Dynamic Network Layout" by Geipel (2007)

Every node pair is joined by a linear spring of strength 1; connected
pairs get the stronger spring ``a``. A repulsion of ``rho / d`` with
``rho = scaling * sqrt(n)`` keeps nodes apart. Positions follow the net
force with a fixed time step until the total force vanishes.
"""

from __future__ import annotations

import math
from typing import Any, Optional

import numpy as np

from ..base import IterativeLayout
from ..types import EventType, GraphInput, PositionMap, PositionMapLike
from ..validation import validate_positive, validate_spring_strength

# Time step per iteration.
TIME_STEP = 1e-3
# Total force magnitude at which the simulation stops.
ERROR_TOLERANCE = 1e-6
# Floor for pairwise distances.
MIN_DISTANCE = 0.01


class ARFLayout(IterativeLayout):
    """
    Attractive and Repulsive Forces layout.

    The result is returned in simulation coordinates. ``scale`` is ignored
    and ``center`` only places the node of a one-node graph.

    Example:
        layout = ARFLayout(graph=Graph([(0, 1), (1, 2)]), a=2.0, random_seed=3)
        layout.run()
        print(layout.error)
    """

    def __init__(
        self,
        *,
        iterations: int = 1000,
        scaling: float = 1.0,
        a: float = 1.1,
        **kwargs: Any,
    ) -> None:
        """
        Initialize ARF layout.

        Args:
            iterations: Maximum number of iterations. Default 1000.
            scaling: Repulsion scale. Default 1.
            a: Spring strength of edges, must be > 1. Default 1.1.
            **kwargs: BaseLayout arguments (``scale`` has no effect)

        Raises:
            InvalidParameterError: If a <= 1.
        """
        super().__init__(iterations=iterations, **kwargs)
        self._scaling: float = validate_positive(scaling, "scaling", allow_zero=True)
        self._a: float = validate_spring_strength(a)

        self._pos_arr: np.ndarray = np.zeros((0, self._dim))
        self._springs: np.ndarray = np.zeros((0, 0))
        self._diff: np.ndarray = np.zeros((0, 0, self._dim))
        self._distance: np.ndarray = np.zeros((0, 0))
        self._rho: float = 0.0
        self._error: float = math.inf

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def scaling(self) -> float:
        """Get repulsion scale."""
        return self._scaling

    @scaling.setter
    def scaling(self, value: float) -> None:
        """Set repulsion scale."""
        self._scaling = validate_positive(value, "scaling", allow_zero=True)

    @property
    def a(self) -> float:
        """Get edge spring strength."""
        return self._a

    @a.setter
    def a(self, value: float) -> None:
        """Set edge spring strength (must be > 1)."""
        self._a = validate_spring_strength(value)

    @property
    def error(self) -> float:
        """Get the total force magnitude of the last iteration."""
        return self._error

    # -------------------------------------------------------------------------
    # Layout Implementation
    # -------------------------------------------------------------------------

    def _setup(self) -> None:
        n = len(self._node_ids)

        self._pos_arr = self._initialize_positions(self._make_rng(), 0.0, 1.0)

        springs = np.ones((n, n), dtype=np.float64)
        loops = self._sources == self._targets
        springs[self._sources[~loops], self._targets[~loops]] = self._a
        springs[self._targets[~loops], self._sources[~loops]] = self._a
        np.fill_diagonal(springs, 0.0)
        self._springs = springs

        self._rho = self._scaling * math.sqrt(n)
        self._diff = np.empty((n, n, self._dim), dtype=np.float64)
        self._distance = np.empty((n, n), dtype=np.float64)
        self._error = math.inf

    def tick(self) -> bool:
        """
        Perform one iteration of the layout.

        Returns:
            True once the total force is at most the error tolerance.
        """
        if self._error <= ERROR_TOLERANCE:
            return True

        pos = self._pos_arr
        # diff[i, j] points from node i to node j
        np.subtract(pos[None, :, :], pos[:, None, :], out=self._diff)
        np.sqrt(np.einsum("ijk,ijk->ij", self._diff, self._diff), out=self._distance)
        np.maximum(self._distance, MIN_DISTANCE, out=self._distance)

        # Spring pull K_ij toward j, repulsion rho / d_ij away from j
        coeff = self._springs - self._rho / self._distance
        np.fill_diagonal(coeff, 0.0)
        change = np.einsum("ij,ijk->ik", coeff, self._diff)

        pos += TIME_STEP * change
        self._error = float(np.linalg.norm(change, axis=1).sum())

        self._iteration += 1
        self._alpha = min(1.0, self._error)
        self.trigger(
            {
                "type": EventType.tick,
                "alpha": self._alpha,
                "stress": self._error,
                "iteration": self._iteration,
            }
        )
        return self._error <= ERROR_TOLERANCE

    def _finish(self) -> np.ndarray:
        return self._pos_arr.copy()


def arf_layout(
    G: GraphInput,
    pos: Optional[PositionMapLike] = None,
    scaling: float = 1.0,
    a: float = 1.1,
    max_iter: int = 1000,
    seed: Optional[int] = None,
    dim: int = 2,
) -> PositionMap:
    """
    Position nodes using the ARF spring model.

    Args:
        G: Graph (nodes()/edges()) or sequence of node ids
        pos: Initial positions; missing nodes are placed randomly
        scaling: Repulsion scale
        a: Spring strength of edges (must be > 1)
        max_iter: Maximum number of iterations
        seed: Seed for initial placement
        dim: Layout dimension

    Returns:
        Dict mapping each node to an array of ``dim`` coordinates

    Raises:
        InvalidParameterError: If a <= 1.
    """
    layout = ARFLayout(
        graph=G,
        pos=pos,
        scaling=scaling,
        a=a,
        iterations=max_iter,
        random_seed=seed,
        dim=dim,
    )
    return layout.run().positions


__all__ = ["ARFLayout", "arf_layout"]
