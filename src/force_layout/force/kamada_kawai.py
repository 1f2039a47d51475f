"""
Kamada-Kawai force-directed layout algorithm.

Based on the paper:
"An Algorithm for Drawing General Undirected Graphs"
by Kamada and Kawai (1989)

This algorithm minimizes stress (energy) where the ideal distances
between nodes are proportional to their graph-theoretic distances
(shortest path lengths). All nodes move at once: the stress over the
flattened position vector is minimized with L-BFGS and a backtracking
line search.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional

import numpy as np

from ..base import IterativeLayout
from ..optimization import (
    DEFAULT_MEMORY,
    DISCONNECTED_DISTANCE,
    LBFGSOptimizer,
    StressFunction,
    distance_matrix_from_mapping,
    inverse_distances,
    shortest_path_matrix,
)
from ..rescale import rescale_layout
from ..rng import LinearCongruentialRandom
from ..types import (
    CenterLike,
    EventType,
    GraphInput,
    NodeId,
    PositionMap,
    PositionMapLike,
)
from ..validation import validate_positive

# Gradient norm below which the optimizer stops.
GRADIENT_TOLERANCE = 1e-5
# Default iteration cap.
MAX_ITERATIONS = 500

DistanceMapping = Mapping[NodeId, Mapping[NodeId, float]]


def initial_placement(
    n: int,
    dim: int,
    center: np.ndarray,
    rng: Optional[LinearCongruentialRandom] = None,
) -> np.ndarray:
    """
    Deterministic spread of ``n`` points used as the default starting layout.

    - dim 1: evenly spaced on [0, 1]
    - dim 2: unit circle around ``center``
    - dim 3: Fibonacci spiral on the unit sphere around ``center``
    - dim >= 4: random points on the unit hypersphere around ``center``

    Args:
        n: Number of points (>= 2)
        dim: Layout dimension
        center: Center of the spread, shape (dim,)
        rng: Random source for dim >= 4

    Returns:
        Array of shape (n, dim)
    """
    if dim == 1:
        return (np.arange(n, dtype=np.float64) / max(n - 1, 1))[:, None]

    if dim == 2:
        theta = np.linspace(0, 2 * np.pi, n + 1)[:-1]
        return np.column_stack([np.cos(theta), np.sin(theta)]) + center

    if dim == 3:
        golden_ratio = (1 + math.sqrt(5)) / 2
        i = np.arange(n, dtype=np.float64)
        theta = 2 * np.pi * i / golden_ratio
        phi = np.arccos(1 - 2 * (i + 0.5) / n)
        sphere = np.column_stack(
            [np.sin(phi) * np.cos(theta), np.sin(phi) * np.sin(theta), np.cos(phi)]
        )
        return sphere + center

    if rng is None:
        rng = LinearCongruentialRandom()
    coords = rng.fill((n, dim)) * 2 - 1
    norm = np.linalg.norm(coords, axis=1, keepdims=True)
    norm[norm == 0] = 1.0
    return coords / norm + center


class KamadaKawaiLayout(IterativeLayout):
    """
    Kamada-Kawai stress-minimization layout.

    Positions nodes to minimize a stress function where the ideal
    distance between any two nodes is their graph-theoretic distance
    (shortest path length, or a caller-supplied distance mapping).
    Unreachable pairs get a large finite target distance, so
    disconnected components are pushed far apart rather than producing
    infinities.

    Each tick is one L-BFGS iteration; the run stops when the gradient
    norm drops below ``gtol`` or after ``iterations`` steps.

    Example:
        layout = KamadaKawaiLayout(
            graph=Graph([(0, 1), (1, 2), (2, 3)]),
            dim=3,
        )
        layout.run()
    """

    def __init__(
        self,
        *,
        iterations: int = MAX_ITERATIONS,
        dist: Optional[DistanceMapping] = None,
        weight: Optional[str] = "weight",
        gtol: float = GRADIENT_TOLERANCE,
        disconnected_distance: float = DISCONNECTED_DISTANCE,
        memory: int = DEFAULT_MEMORY,
        **kwargs: Any,
    ) -> None:
        """
        Initialize Kamada-Kawai layout.

        Args:
            iterations: Maximum number of L-BFGS iterations. Default 500.
            dist: Target distances as ``dist[u][v]``. If None, shortest
                path lengths are computed from the graph.
            weight: Edge attribute holding edge length (missing -> 1)
            gtol: Gradient norm tolerance. Default 1e-5.
            disconnected_distance: Target distance for unreachable pairs.
                Default 1e6.
            memory: Number of L-BFGS correction pairs. Default 10.
            **kwargs: BaseLayout arguments
        """
        super().__init__(iterations=iterations, **kwargs)

        self._dist: Optional[DistanceMapping] = dist
        self._weight: Optional[str] = weight
        self._gtol: float = validate_positive(gtol, "gtol", allow_zero=True)
        self._disconnected_distance: float = validate_positive(
            disconnected_distance, "disconnected_distance"
        )
        self._memory: int = int(validate_positive(memory, "memory"))

        # Solver state (created in _setup)
        self._optimizer: Optional[LBFGSOptimizer] = None
        self._distance_matrix: np.ndarray = np.zeros((0, 0))
        self._initial_gradient_norm: float = 0.0
        self._gradient_norm: float = 0.0

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def dist(self) -> Optional[DistanceMapping]:
        """Get caller-supplied target distances."""
        return self._dist

    @dist.setter
    def dist(self, value: Optional[DistanceMapping]) -> None:
        """Set caller-supplied target distances (None: shortest paths)."""
        self._dist = value

    @property
    def weight(self) -> Optional[str]:
        """Get the edge attribute holding edge length."""
        return self._weight

    @weight.setter
    def weight(self, value: Optional[str]) -> None:
        """Set the edge attribute holding edge length."""
        self._weight = value

    @property
    def gtol(self) -> float:
        """Get gradient norm tolerance."""
        return self._gtol

    @gtol.setter
    def gtol(self, value: float) -> None:
        """Set gradient norm tolerance."""
        self._gtol = validate_positive(value, "gtol", allow_zero=True)

    @property
    def disconnected_distance(self) -> float:
        """Get the target distance used for unreachable pairs."""
        return self._disconnected_distance

    @disconnected_distance.setter
    def disconnected_distance(self, value: float) -> None:
        """Set the target distance used for unreachable pairs."""
        self._disconnected_distance = validate_positive(value, "disconnected_distance")

    @property
    def stress(self) -> Optional[float]:
        """Get the stress at the end of the last run."""
        return self._optimizer.f if self._optimizer is not None else None

    @property
    def gradient_norm(self) -> float:
        """Get the gradient norm at the end of the last run."""
        return self._gradient_norm

    @property
    def distance_matrix(self) -> np.ndarray:
        """Get the target distance matrix of the last run."""
        return self._distance_matrix.copy()

    # -------------------------------------------------------------------------
    # Layout Implementation
    # -------------------------------------------------------------------------

    def _setup(self) -> None:
        n = len(self._node_ids)
        dim = self._dim

        if self._dist is not None:
            self._distance_matrix = distance_matrix_from_mapping(
                self._dist, self._node_ids, self._disconnected_distance
            )
        else:
            self._distance_matrix = shortest_path_matrix(
                self._graph, self._node_ids, self._weight, self._disconnected_distance
            )

        if self._initial:
            start = self._initialize_positions(self._make_rng())
        else:
            rng = self._make_rng() if dim >= 4 else None
            start = initial_placement(n, dim, self._center_arr, rng)

        stress = StressFunction(inverse_distances(self._distance_matrix), dim)
        self._optimizer = LBFGSOptimizer(stress, start.reshape(-1), stress.cost, self._memory)
        self._initial_gradient_norm = self._optimizer.gradient_norm
        self._gradient_norm = self._initial_gradient_norm

    def tick(self) -> bool:
        """
        Perform one L-BFGS iteration.

        Returns:
            True once the gradient norm is below gtol.
        """
        optimizer = self._optimizer
        assert optimizer is not None, "tick() called before run()"

        if self._gradient_norm < self._gtol:
            return True
        if self._iteration >= self._iterations:
            return False

        self._gradient_norm = optimizer.step()
        self._iteration += 1

        if self._initial_gradient_norm > 0:
            self._alpha = min(1.0, self._gradient_norm / self._initial_gradient_norm)
        else:
            self._alpha = 0.0
        self.trigger(
            {
                "type": EventType.tick,
                "alpha": self._alpha,
                "stress": optimizer.f,
                "iteration": self._iteration,
            }
        )
        return self._gradient_norm < self._gtol

    def _finish(self) -> np.ndarray:
        assert self._optimizer is not None
        positions = self._optimizer.x.reshape(len(self._node_ids), self._dim)
        return rescale_layout(positions, self._scale, self._center_arr)


def kamada_kawai_layout(
    G: GraphInput,
    dist: Optional[DistanceMapping] = None,
    pos: Optional[PositionMapLike] = None,
    weight: Optional[str] = "weight",
    scale: float = 1.0,
    center: CenterLike = None,
    dim: int = 2,
    seed: Optional[int] = None,
    max_iter: int = MAX_ITERATIONS,
    gtol: float = GRADIENT_TOLERANCE,
    disconnected_distance: float = DISCONNECTED_DISTANCE,
) -> PositionMap:
    """
    Position nodes using Kamada-Kawai stress minimization.

    Args:
        G: Graph (nodes()/edges()) or sequence of node ids
        dist: Target distances ``dist[u][v]`` (default: shortest paths)
        pos: Initial positions (default: circle, sphere, hypersphere or
            line depending on dim)
        weight: Edge attribute holding edge length
        scale: Radius of the result
        center: Center of the result (default origin)
        dim: Layout dimension
        seed: Seed for random parts of the initial placement
        max_iter: Maximum number of L-BFGS iterations
        gtol: Gradient norm tolerance
        disconnected_distance: Target distance for unreachable pairs

    Returns:
        Dict mapping each node to an array of ``dim`` coordinates
    """
    layout = KamadaKawaiLayout(
        graph=G,
        dist=dist,
        pos=pos,
        weight=weight,
        scale=scale,
        center=center,
        dim=dim,
        random_seed=seed,
        iterations=max_iter,
        gtol=gtol,
        disconnected_distance=disconnected_distance,
    )
    return layout.run().positions


__all__ = ["KamadaKawaiLayout", "initial_placement", "kamada_kawai_layout"]
