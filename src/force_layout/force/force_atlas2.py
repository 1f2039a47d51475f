"""
ForceAtlas2 force-directed layout algorithm.

Based on the paper:
"ForceAtlas2, a Continuous Graph Layout Algorithm for Handy Network Visualization
Designed for the Gephi Software" by Jacomy, Venturini, Heymann, and Bastian (2014)

Key features:
- Mass-weighted repulsion (hubs repel more strongly)
- Adaptive global speed based on swing/traction
- No temperature cooling - stops when total movement vanishes
- LinLog mode for tighter clusters
- Optional node sizes and outbound attraction distribution
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional

import numpy as np

from ..base import IterativeLayout
from ..graph import edge_weight
from ..rescale import rescale_layout
from ..types import (
    CenterLike,
    EventType,
    GraphInput,
    NodeId,
    PositionMap,
    PositionMapLike,
)
from ..validation import validate_positive

# Floor for pairwise and gravity distances.
MIN_DISTANCE = 0.01
# Total absolute movement below which the simulation stops.
CONVERGENCE_THRESHOLD = 1e-10

# Speed adaptation constants.
MAX_JITTER = 10.0
MIN_SPEED_EFFICIENCY = 0.05
MAX_SPEED_RISE = 0.5
MAX_SPEED = 1000.0
# Per-node displacement cap when node sizes are used.
MAX_SIZED_DISPLACEMENT = 10.0


def estimate_factor(
    n: int,
    swing: float,
    traction: float,
    speed: float,
    speed_efficiency: float,
    jitter_tolerance: float,
) -> tuple[float, float]:
    """
    Adapt the global speed from the current swing and traction.

    Args:
        n: Number of nodes
        swing: Sum of mass-weighted update magnitudes (oscillation)
        traction: Sum of half mass-weighted ``|2p + update|`` (net movement)
        speed: Current global speed
        speed_efficiency: Current speed efficiency
        jitter_tolerance: Tolerance for oscillation

    Returns:
        (speed, speed_efficiency) for the next step
    """
    opt_jitter = 0.05 * math.sqrt(n)
    min_jitter = math.sqrt(opt_jitter)
    other = min(MAX_JITTER, opt_jitter * traction / (n * n))
    jitter = jitter_tolerance * max(min_jitter, other)

    if swing > 2.0 * traction:
        if speed_efficiency > MIN_SPEED_EFFICIENCY:
            speed_efficiency *= 0.5
        jitter = max(jitter, jitter_tolerance)

    if swing == 0:
        target_speed = math.inf
    else:
        target_speed = jitter * speed_efficiency * traction / swing

    if swing > jitter * traction:
        if speed_efficiency > MIN_SPEED_EFFICIENCY:
            speed_efficiency *= 0.7
    elif speed < MAX_SPEED:
        speed_efficiency *= 1.3

    speed = speed + min(target_speed - speed, MAX_SPEED_RISE * speed)
    return speed, speed_efficiency


class ForceAtlas2Layout(IterativeLayout):
    """
    ForceAtlas2 force-directed graph layout.

    This algorithm positions nodes using forces with several key differences
    from Fruchterman-Reingold:
    - Repulsion is mass-weighted: hubs repel more strongly
    - A single adaptive speed driven by swing/traction replaces the temperature
    - LinLog mode produces tighter clusters
    - Strong gravity mode prevents component drift

    Example:
        layout = ForceAtlas2Layout(
            graph=Graph([("a", "b"), ("b", "c")]),
            iterations=200,
            linlog=True,
            random_seed=1,
        )
        layout.run()
        print(layout.converged, layout.iteration)
    """

    def __init__(
        self,
        *,
        iterations: int = 100,
        jitter_tolerance: float = 1.0,
        scaling_ratio: float = 2.0,
        gravity: float = 1.0,
        distributed_action: bool = False,
        strong_gravity: bool = False,
        node_mass: Optional[Mapping[NodeId, float]] = None,
        node_size: Optional[Mapping[NodeId, float]] = None,
        weight: Optional[str] = None,
        dissuade_hubs: bool = False,
        linlog: bool = False,
        **kwargs: Any,
    ) -> None:
        """
        Initialize ForceAtlas2 layout.

        Args:
            iterations: Maximum number of iterations. Default 100.
            jitter_tolerance: Tolerance for oscillation. Higher is faster but
                less precise. Default 1.0.
            scaling_ratio: Repulsion strength. Default 2.0.
            gravity: Attraction toward the centroid. Default 1.0.
            distributed_action: Divide each node's attraction by its mass
            strong_gravity: Gravity grows with distance from the centroid
            node_mass: Per-node mass (default: degree + 1)
            node_size: Per-node size; enables size-adjusted repulsion and
                displacement capping (default size 1)
            weight: Edge attribute used as attraction weight (None: 1)
            dissuade_hubs: Push hubs to the periphery (same attraction
                distribution as distributed_action)
            linlog: Use logarithmic attraction
            **kwargs: BaseLayout arguments
        """
        super().__init__(iterations=iterations, **kwargs)

        self._jitter_tolerance: float = validate_positive(jitter_tolerance, "jitter_tolerance")
        self._scaling_ratio: float = validate_positive(scaling_ratio, "scaling_ratio", allow_zero=True)
        self._gravity: float = validate_positive(gravity, "gravity", allow_zero=True)
        self._distributed_action: bool = distributed_action
        self._strong_gravity: bool = strong_gravity
        self._node_mass: Optional[Mapping[NodeId, float]] = node_mass
        self._node_size: Optional[Mapping[NodeId, float]] = node_size
        self._weight: Optional[str] = weight
        self._dissuade_hubs: bool = dissuade_hubs
        self._linlog: bool = linlog

        # Simulation state (allocated in _setup)
        self._pos_arr: np.ndarray = np.zeros((0, self._dim))
        self._adjacency: np.ndarray = np.zeros((0, 0))
        self._mass: np.ndarray = np.zeros(0)
        self._size: np.ndarray = np.zeros(0)
        self._diff: np.ndarray = np.zeros((0, 0, self._dim))
        self._distance: np.ndarray = np.zeros((0, 0))
        self._coeff: np.ndarray = np.zeros((0, 0))
        self._speed: float = 1.0
        self._speed_efficiency: float = 1.0
        self._swing: float = 0.0
        self._traction: float = 0.0

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def jitter_tolerance(self) -> float:
        """Get jitter tolerance."""
        return self._jitter_tolerance

    @jitter_tolerance.setter
    def jitter_tolerance(self, value: float) -> None:
        """Set jitter tolerance."""
        self._jitter_tolerance = validate_positive(value, "jitter_tolerance")

    @property
    def scaling_ratio(self) -> float:
        """Get repulsion scaling ratio."""
        return self._scaling_ratio

    @scaling_ratio.setter
    def scaling_ratio(self, value: float) -> None:
        """Set repulsion scaling ratio."""
        self._scaling_ratio = validate_positive(value, "scaling_ratio", allow_zero=True)

    @property
    def gravity(self) -> float:
        """Get gravity strength."""
        return self._gravity

    @gravity.setter
    def gravity(self, value: float) -> None:
        """Set gravity strength."""
        self._gravity = validate_positive(value, "gravity", allow_zero=True)

    @property
    def distributed_action(self) -> bool:
        """Get whether attraction is divided by node mass."""
        return self._distributed_action

    @distributed_action.setter
    def distributed_action(self, value: bool) -> None:
        """Set whether attraction is divided by node mass."""
        self._distributed_action = value

    @property
    def strong_gravity(self) -> bool:
        """Get strong gravity mode."""
        return self._strong_gravity

    @strong_gravity.setter
    def strong_gravity(self, value: bool) -> None:
        """Set strong gravity mode."""
        self._strong_gravity = value

    @property
    def dissuade_hubs(self) -> bool:
        """Get hub dissuasion mode."""
        return self._dissuade_hubs

    @dissuade_hubs.setter
    def dissuade_hubs(self, value: bool) -> None:
        """Set hub dissuasion mode."""
        self._dissuade_hubs = value

    @property
    def linlog(self) -> bool:
        """Get LinLog mode."""
        return self._linlog

    @linlog.setter
    def linlog(self, value: bool) -> None:
        """Set LinLog mode."""
        self._linlog = value

    @property
    def weight(self) -> Optional[str]:
        """Get the edge attribute used as attraction weight."""
        return self._weight

    @weight.setter
    def weight(self, value: Optional[str]) -> None:
        """Set the edge attribute used as attraction weight."""
        self._weight = value

    @property
    def speed(self) -> float:
        """Get the global speed reached by the last run."""
        return self._speed

    @property
    def swing(self) -> float:
        """Get the swing of the last iteration."""
        return self._swing

    @property
    def traction(self) -> float:
        """Get the traction of the last iteration."""
        return self._traction

    # -------------------------------------------------------------------------
    # Layout Implementation
    # -------------------------------------------------------------------------

    def _setup(self) -> None:
        n = len(self._node_ids)
        dim = self._dim

        self._pos_arr = self._initialize_positions(self._make_rng(), -1.0, 1.0)
        self._mass = self._build_mass()
        self._size = self._build_size()
        self._adjacency = self._build_adjacency()

        self._diff = np.empty((n, n, dim), dtype=np.float64)
        self._distance = np.empty((n, n), dtype=np.float64)
        self._coeff = np.empty((n, n), dtype=np.float64)

        self._speed = 1.0
        self._speed_efficiency = 1.0
        self._swing = 0.0
        self._traction = 0.0

    def _build_mass(self) -> np.ndarray:
        """Mass per node: caller value if truthy, else degree + 1."""
        mass = self._degrees() + 1.0
        if self._node_mass:
            for i, node in enumerate(self._node_ids):
                value = self._node_mass.get(node)
                if value:
                    mass[i] = float(value)
        return mass

    def _build_size(self) -> np.ndarray:
        """Size per node: caller value if truthy, else 1."""
        size = np.ones(len(self._node_ids), dtype=np.float64)
        if self._node_size:
            for i, node in enumerate(self._node_ids):
                value = self._node_size.get(node)
                if value:
                    size[i] = float(value)
        return size

    def _build_adjacency(self) -> np.ndarray:
        """Symmetric weighted adjacency matrix (zero diagonal)."""
        n = len(self._node_ids)
        adjacency = np.zeros((n, n), dtype=np.float64)
        for u, v in self._graph.edges():
            i, j = self._index[u], self._index[v]
            w = edge_weight(self._graph, u, v, self._weight)
            adjacency[i, j] = w
            adjacency[j, i] = w
        np.fill_diagonal(adjacency, 0.0)
        return adjacency

    @property
    def _adjust_sizes(self) -> bool:
        return self._node_size is not None

    def tick(self) -> bool:
        """
        Perform one iteration of the layout.

        Returns:
            True once the total absolute movement falls below the threshold.
        """
        if self._iteration >= self._iterations:
            return True

        n = len(self._node_ids)
        pos = self._pos_arr
        mass = self._mass

        # Pairwise differences and distances (diagonal stays harmless:
        # diff is zero there)
        np.subtract(pos[:, None, :], pos[None, :, :], out=self._diff)
        np.sqrt(np.einsum("ijk,ijk->ij", self._diff, self._diff), out=self._distance)
        np.maximum(self._distance, MIN_DISTANCE, out=self._distance)

        update = self._compute_attraction()
        update += self._compute_repulsion()
        update += self._compute_gravity()

        # Swing: oscillation; traction: net movement
        self._swing = float(np.sum(mass * np.linalg.norm(update, axis=1)))
        self._traction = float(np.sum(0.5 * mass * np.linalg.norm(2.0 * pos + update, axis=1)))

        self._speed, self._speed_efficiency = estimate_factor(
            n,
            self._swing,
            self._traction,
            self._speed,
            self._speed_efficiency,
            self._jitter_tolerance,
        )

        displacement = update * self._step_factors(update)[:, None]
        pos += displacement

        self._iteration += 1
        self._alpha = 1.0 - self._iteration / self._iterations if self._iterations else 0.0
        self.trigger(
            {
                "type": EventType.tick,
                "alpha": self._alpha,
                "stress": None,
                "iteration": self._iteration,
            }
        )

        return float(np.abs(displacement).sum()) < CONVERGENCE_THRESHOLD

    def _compute_attraction(self) -> np.ndarray:
        """Edge attraction from the weighted adjacency matrix."""
        if self._linlog:
            # -w * log(1 + d) / d
            np.log1p(self._distance, out=self._coeff)
            np.divide(self._coeff, self._distance, out=self._coeff)
            np.multiply(self._coeff, self._adjacency, out=self._coeff)
            attraction = -np.einsum("ij,ijk->ik", self._coeff, self._diff)
        else:
            attraction = -np.einsum("ij,ijk->ik", self._adjacency, self._diff)

        if self._distributed_action or self._dissuade_hubs:
            attraction /= self._mass[:, None]
        return attraction

    def _compute_repulsion(self) -> np.ndarray:
        """Mass-weighted repulsion scaling_ratio * m_i * m_j / d^2."""
        mass = self._mass
        if self._adjust_sizes:
            distance = self._distance - (self._size[:, None] - self._size[None, :])
            np.maximum(distance, MIN_DISTANCE, out=distance)
        else:
            distance = self._distance

        # (diff / d) * factor
        np.multiply(mass[:, None], mass[None, :], out=self._coeff)
        self._coeff *= self._scaling_ratio
        self._coeff /= distance**3
        return np.einsum("ij,ijk->ik", self._coeff, self._diff)

    def _compute_gravity(self) -> np.ndarray:
        """Pull toward the centroid of the current positions."""
        centered = self._pos_arr - self._pos_arr.mean(axis=0)
        weight = (self._gravity * self._mass)[:, None]
        if self._strong_gravity:
            return -weight * centered

        dist = np.linalg.norm(centered, axis=1)
        unit = np.divide(
            centered,
            dist[:, None],
            out=np.zeros_like(centered),
            where=(dist > MIN_DISTANCE)[:, None],
        )
        return -weight * unit

    def _step_factors(self, update: np.ndarray) -> np.ndarray:
        """Per-node scale applied to the update vector."""
        speed = self._speed
        df = np.linalg.norm(update, axis=1)
        factor = speed / (1.0 + np.sqrt(speed * self._mass * df))
        if not self._adjust_sizes:
            return factor

        factor *= 0.1
        capped = np.minimum(factor * df, MAX_SIZED_DISPLACEMENT)
        return np.divide(capped, df, out=np.zeros_like(df), where=df > 0)

    def _finish(self) -> np.ndarray:
        return rescale_layout(self._pos_arr, self._scale, self._center_arr)


def forceatlas2_layout(
    G: GraphInput,
    pos: Optional[PositionMapLike] = None,
    max_iter: int = 100,
    jitter_tolerance: float = 1.0,
    scaling_ratio: float = 2.0,
    gravity: float = 1.0,
    distributed_action: bool = False,
    strong_gravity: bool = False,
    node_mass: Optional[Mapping[NodeId, float]] = None,
    node_size: Optional[Mapping[NodeId, float]] = None,
    weight: Optional[str] = None,
    dissuade_hubs: bool = False,
    linlog: bool = False,
    seed: Optional[int] = None,
    dim: int = 2,
    scale: float = 1.0,
    center: CenterLike = None,
) -> PositionMap:
    """
    Position nodes using the ForceAtlas2 force-directed algorithm.

    Args:
        G: Graph (nodes()/edges()) or sequence of node ids
        pos: Initial positions; missing nodes are placed randomly
        max_iter: Maximum number of iterations
        jitter_tolerance: Tolerance for oscillation
        scaling_ratio: Repulsion strength
        gravity: Attraction toward the centroid
        distributed_action: Divide attraction by node mass
        strong_gravity: Use distance-proportional gravity
        node_mass: Per-node mass (default degree + 1)
        node_size: Per-node size (enables size adjustment)
        weight: Edge attribute used as attraction weight
        dissuade_hubs: Push hubs to the periphery
        linlog: Use logarithmic attraction
        seed: Seed for initial placement
        dim: Layout dimension
        scale: Radius of the result
        center: Center of the result (default origin)

    Returns:
        Dict mapping each node to an array of ``dim`` coordinates
    """
    layout = ForceAtlas2Layout(
        graph=G,
        pos=pos,
        iterations=max_iter,
        jitter_tolerance=jitter_tolerance,
        scaling_ratio=scaling_ratio,
        gravity=gravity,
        distributed_action=distributed_action,
        strong_gravity=strong_gravity,
        node_mass=node_mass,
        node_size=node_size,
        weight=weight,
        dissuade_hubs=dissuade_hubs,
        linlog=linlog,
        random_seed=seed,
        dim=dim,
        scale=scale,
        center=center,
    )
    return layout.run().positions


__all__ = ["ForceAtlas2Layout", "estimate_factor", "forceatlas2_layout"]
