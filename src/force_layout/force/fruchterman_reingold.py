"""
Fruchterman-Reingold force-directed layout algorithm.

Based on the paper:
"Graph Drawing by Force-directed Placement" by Fruchterman and Reingold (1991)

The algorithm simulates a physical system where:
- All nodes repel each other (like electrical charges)
- Connected nodes attract each other (like springs)
- A "temperature" limits movement and cools linearly to zero
"""

from __future__ import annotations

import math
import warnings
from typing import Any, Optional, Sequence

import numpy as np

from ..base import IterativeLayout
from ..rescale import rescale_layout
from ..types import (
    CenterLike,
    EventType,
    GraphInput,
    NodeId,
    PositionMap,
    PositionMapLike,
)
from ..validation import LayoutWarning, validate_positive

# Initial temperature (maximum displacement in the first iteration).
INITIAL_TEMPERATURE = 0.1
# Floor for pairwise distances.
MIN_DISTANCE = 0.1


class FruchtermanReingoldLayout(IterativeLayout):
    """
    Fruchterman-Reingold force-directed graph layout.

    This algorithm positions nodes by simulating a physical system where:
    - All node pairs repel with force k^2 / d
    - Connected node pairs attract with force d^2 / k
    - Movement per iteration is capped by a temperature that decreases
      linearly from ``temperature`` to zero over the run

    Works in any dimension. Fixed nodes keep their initial position; when
    any node is fixed the result is not rescaled.

    Example:
        layout = FruchtermanReingoldLayout(
            graph=Graph([(0, 1), (1, 2), (2, 0)]),
            iterations=100,
            random_seed=42,
        )
        layout.run()

        for node, (x, y) in layout.positions.items():
            print(f"Node {node}: ({x:.3f}, {y:.3f})")
    """

    def __init__(
        self,
        *,
        iterations: int = 50,
        optimal_distance: Optional[float] = None,
        temperature: float = INITIAL_TEMPERATURE,
        fixed: Optional[Sequence[NodeId]] = None,
        min_distance: float = MIN_DISTANCE,
        **kwargs: Any,
    ) -> None:
        """
        Initialize Fruchterman-Reingold layout.

        Args:
            iterations: Number of iterations
            optimal_distance: Optimal distance between nodes (k). If None,
                1/sqrt(n).
            temperature: Initial temperature. Default 0.1.
            fixed: Node ids that keep their initial position
            min_distance: Floor applied to pairwise distances. Default 0.1.
            **kwargs: BaseLayout arguments (graph, pos, scale, center, dim,
                random_seed, on_start, on_tick, on_end)
        """
        super().__init__(iterations=iterations, **kwargs)

        self._optimal_distance: Optional[float] = None
        self.optimal_distance = optimal_distance
        self._temperature: float = validate_positive(temperature, "temperature", allow_zero=True)
        self._fixed: Optional[list[NodeId]] = list(fixed) if fixed is not None else None
        self._min_distance: float = validate_positive(min_distance, "min_distance")

        # Simulation state (allocated in _setup)
        self._pos_arr: np.ndarray = np.zeros((0, self._dim))
        self._delta: np.ndarray = np.zeros((0, 0, self._dim))
        self._distance: np.ndarray = np.zeros((0, 0))
        self._factor: np.ndarray = np.zeros((0, 0))
        self._disp: np.ndarray = np.zeros((0, self._dim))
        self._fixed_mask: np.ndarray = np.zeros(0, dtype=bool)
        self._k: float = 0.0
        self._t: float = 0.0
        self._dt: float = 0.0

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def optimal_distance(self) -> Optional[float]:
        """Get optimal distance between nodes (None: 1/sqrt(n))."""
        return self._optimal_distance

    @optimal_distance.setter
    def optimal_distance(self, value: Optional[float]) -> None:
        """Set optimal distance between nodes."""
        self._optimal_distance = (
            validate_positive(value, "optimal_distance") if value is not None else None
        )

    @property
    def temperature(self) -> float:
        """Get initial temperature."""
        return self._temperature

    @temperature.setter
    def temperature(self, value: float) -> None:
        """Set initial temperature."""
        self._temperature = validate_positive(value, "temperature", allow_zero=True)

    @property
    def current_temperature(self) -> float:
        """Get the temperature reached by the last run."""
        return self._t

    @property
    def fixed(self) -> Optional[list[NodeId]]:
        """Get fixed node ids."""
        return self._fixed

    @fixed.setter
    def fixed(self, value: Optional[Sequence[NodeId]]) -> None:
        """Set fixed node ids."""
        self._fixed = list(value) if value is not None else None

    @property
    def min_distance(self) -> float:
        """Get the floor applied to pairwise distances."""
        return self._min_distance

    @min_distance.setter
    def min_distance(self, value: float) -> None:
        """Set the floor applied to pairwise distances."""
        self._min_distance = validate_positive(value, "min_distance")

    # -------------------------------------------------------------------------
    # Layout Implementation
    # -------------------------------------------------------------------------

    def _setup(self) -> None:
        n = len(self._node_ids)
        dim = self._dim

        self._pos_arr = self._initialize_positions(self._make_rng(), 0.0, 1.0)
        self._fixed_mask = self._fixed_mask_for(self._fixed)

        self._k = self._optimal_distance or 1.0 / math.sqrt(n)
        self._t = self._temperature
        self._dt = self._temperature / (self._iterations + 1)

        self._delta = np.empty((n, n, dim), dtype=np.float64)
        self._distance = np.empty((n, n), dtype=np.float64)
        self._factor = np.empty((n, n), dtype=np.float64)
        self._disp = np.empty((n, dim), dtype=np.float64)

    def _fixed_mask_for(self, fixed: Optional[Sequence[NodeId]]) -> np.ndarray:
        unknown = [node for node in fixed or () if node not in self._index]
        if unknown:
            warnings.warn(
                f"Ignoring {len(unknown)} fixed node(s) not in the graph: {unknown[:5]!r}",
                LayoutWarning,
                stacklevel=5,
            )
        return self._fixed_node_mask(fixed)

    def tick(self) -> bool:
        """
        Perform one iteration of the layout.

        Returns:
            True when the iteration budget is exhausted, False otherwise.
        """
        if self._iteration >= self._iterations:
            return True

        k = self._k

        self._compute_repulsive_forces(k * k)
        self._compute_attractive_forces(k)
        self._apply_displacements()

        # Cool down
        self._t -= self._dt
        self._iteration += 1
        self._alpha = self._t / self._temperature if self._temperature > 0 else 0.0

        self.trigger(
            {
                "type": EventType.tick,
                "alpha": self._alpha,
                "stress": None,
                "iteration": self._iteration,
            }
        )
        return False

    def _compute_repulsive_forces(self, k_sq: float) -> None:
        """Pairwise repulsion k^2/d away from every other node, O(n^2)."""
        pos = self._pos_arr
        np.subtract(pos[:, None, :], pos[None, :, :], out=self._delta)
        np.sqrt(np.einsum("ijk,ijk->ij", self._delta, self._delta), out=self._distance)
        np.maximum(self._distance, self._min_distance, out=self._distance)

        # (delta / d) * (k^2 / d)
        np.square(self._distance, out=self._factor)
        np.divide(k_sq, self._factor, out=self._factor)
        np.einsum("ij,ijk->ik", self._factor, self._delta, out=self._disp)

    def _compute_attractive_forces(self, k: float) -> None:
        """Edge attraction d^2/k toward the neighbor."""
        if self._sources.size == 0:
            return
        pos = self._pos_arr
        delta = pos[self._sources] - pos[self._targets]
        distance = np.maximum(np.linalg.norm(delta, axis=1), self._min_distance)

        # (delta / d) * (d^2 / k)
        force = delta * (distance / k)[:, None]
        np.subtract.at(self._disp, self._sources, force)
        np.add.at(self._disp, self._targets, force)

    def _apply_displacements(self) -> None:
        """Move free nodes, capping each displacement at the temperature."""
        length = np.linalg.norm(self._disp, axis=1)
        limited = np.minimum(length, max(self._t, 0.0))
        scale = np.divide(limited, length, out=np.zeros_like(length), where=length > 0)
        scale[self._fixed_mask] = 0.0
        self._pos_arr += self._disp * scale[:, None]

    def _finish(self) -> np.ndarray:
        if self._fixed_mask.any():
            return self._pos_arr.copy()
        return rescale_layout(self._pos_arr, self._scale, self._center_arr)


def fruchterman_reingold_layout(
    G: GraphInput,
    k: Optional[float] = None,
    pos: Optional[PositionMapLike] = None,
    fixed: Optional[Sequence[NodeId]] = None,
    iterations: int = 50,
    scale: float = 1.0,
    center: CenterLike = None,
    dim: int = 2,
    seed: Optional[int] = None,
) -> PositionMap:
    """
    Position nodes using the Fruchterman-Reingold force-directed algorithm.

    Args:
        G: Graph (nodes()/edges()) or sequence of node ids
        k: Optimal distance between nodes (default 1/sqrt(n))
        pos: Initial positions; missing nodes are placed randomly
        fixed: Nodes kept at their initial position (disables rescaling)
        iterations: Number of iterations
        scale: Radius of the result
        center: Center of the result (default origin)
        dim: Layout dimension
        seed: Seed for initial placement

    Returns:
        Dict mapping each node to an array of ``dim`` coordinates

    Raises:
        InvalidCenterError: If center does not have ``dim`` components.
    """
    layout = FruchtermanReingoldLayout(
        graph=G,
        optimal_distance=k,
        pos=pos,
        fixed=fixed,
        iterations=iterations,
        scale=scale,
        center=center,
        dim=dim,
        random_seed=seed,
    )
    return layout.run().positions


def spring_layout(
    G: GraphInput,
    k: Optional[float] = None,
    pos: Optional[PositionMapLike] = None,
    fixed: Optional[Sequence[NodeId]] = None,
    iterations: int = 50,
    scale: float = 1.0,
    center: CenterLike = None,
    dim: int = 2,
    seed: Optional[int] = None,
) -> PositionMap:
    """Legacy name of :func:`fruchterman_reingold_layout`."""
    return fruchterman_reingold_layout(
        G,
        k=k,
        pos=pos,
        fixed=fixed,
        iterations=iterations,
        scale=scale,
        center=center,
        dim=dim,
        seed=seed,
    )


__all__ = ["FruchtermanReingoldLayout", "fruchterman_reingold_layout", "spring_layout"]
