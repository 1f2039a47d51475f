"""
Base classes for force-directed layout algorithms.

This module provides abstract base classes that define the common interface
and shared functionality for all layout algorithms:

- BaseLayout: Graph resolution, parameter validation, degenerate cases,
  initial placement, event system and the resulting position map
- IterativeLayout: Tick loop with an iteration budget and convergence flag
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional, Sequence

import numpy as np

if TYPE_CHECKING:
    from typing_extensions import Self

from .graph import resolve_graph
from .rng import LinearCongruentialRandom
from .types import (
    CenterLike,
    Event,
    EventCallback,
    EventType,
    GraphInput,
    GraphLike,
    NodeId,
    PositionMap,
    PositionMapLike,
)
from .validation import (
    validate_center,
    validate_dim,
    validate_edges,
    validate_iterations,
    validate_positions,
)

logger = logging.getLogger(__name__)


class BaseLayout(ABC):
    """
    Abstract base class for all layout algorithms.

    Provides shared infrastructure:
    - Graph resolution (GraphLike objects or bare node sequences)
    - Validation of dim, center, initial positions and edges
    - Degenerate cases: no nodes gives {}, one node sits at the center
    - Seeded initial placement honoring partial initial positions
    - Event system (start/tick/end events)

    Example:
        layout = SomeLayout(graph=g, dim=3, random_seed=7)
        layout.run()

        for node, xyz in layout.positions.items():
            print(node, xyz)
    """

    # Smallest layout dimension the algorithm supports
    _min_dim: int = 1

    def __init__(
        self,
        *,
        graph: Optional[GraphInput] = None,
        pos: Optional[PositionMapLike] = None,
        scale: float = 1.0,
        center: CenterLike = None,
        dim: int = 2,
        random_seed: Optional[int] = None,
        on_start: Optional[EventCallback] = None,
        on_tick: Optional[EventCallback] = None,
        on_end: Optional[EventCallback] = None,
    ) -> None:
        """
        Initialize layout with configuration.

        Args:
            graph: Object with nodes()/edges() or a sequence of node ids
            pos: Initial positions (may cover only some nodes)
            scale: Radius of the final layout
            center: Center of the final layout (default: origin)
            dim: Number of coordinates per node
            random_seed: Seed for initial placement
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event
        """
        self._graph: GraphLike = resolve_graph([])
        self._pos: Optional[PositionMapLike] = None
        self._scale: float = 1.0
        self._center: CenterLike = None
        self._dim: int = 2
        self._random_seed: Optional[int] = None
        self._events: dict[EventType, EventCallback] = {}

        # Per-run state (populated by _prepare)
        self._node_ids: list[NodeId] = []
        self._index: dict[NodeId, int] = {}
        self._sources: np.ndarray = np.zeros(0, dtype=np.intp)
        self._targets: np.ndarray = np.zeros(0, dtype=np.intp)
        self._center_arr: np.ndarray = np.zeros(2, dtype=np.float64)
        self._initial: dict[NodeId, np.ndarray] = {}
        self._positions: PositionMap = {}
        self._alpha: float = 0.0

        if graph is not None:
            self.graph = graph
        self.pos = pos
        self.scale = scale
        self.center = center
        self.dim = dim
        if random_seed is not None:
            self.random_seed = random_seed

        if on_start:
            self._events[EventType.start] = on_start
        if on_tick:
            self._events[EventType.tick] = on_tick
        if on_end:
            self._events[EventType.end] = on_end

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def graph(self) -> GraphLike:
        """Get the graph being laid out."""
        return self._graph

    @graph.setter
    def graph(self, value: GraphInput) -> None:
        """Set the graph (GraphLike or sequence of node ids)."""
        self._graph = resolve_graph(value)

    @property
    def pos(self) -> Optional[PositionMapLike]:
        """Get initial positions."""
        return self._pos

    @pos.setter
    def pos(self, value: Optional[PositionMapLike]) -> None:
        """Set initial positions (None for random placement)."""
        self._pos = value

    @property
    def scale(self) -> float:
        """Get the radius of the final layout."""
        return self._scale

    @scale.setter
    def scale(self, value: float) -> None:
        """Set the radius of the final layout."""
        self._scale = float(value)

    @property
    def center(self) -> CenterLike:
        """Get the center of the final layout."""
        return self._center

    @center.setter
    def center(self, value: CenterLike) -> None:
        """Set the center; its length is checked against dim by validate()."""
        self._center = None if value is None else tuple(float(c) for c in value)

    @property
    def dim(self) -> int:
        """Get the layout dimension."""
        return self._dim

    @dim.setter
    def dim(self, value: int) -> None:
        """
        Set the layout dimension.

        Raises:
            InvalidDimensionError: If value is below the supported minimum.
        """
        self._dim = validate_dim(value, self._min_dim)

    @property
    def random_seed(self) -> Optional[int]:
        """Get random seed for reproducible layouts."""
        return self._random_seed

    @random_seed.setter
    def random_seed(self, value: Optional[int]) -> None:
        """Set random seed for reproducible layouts."""
        self._random_seed = value

    @property
    def alpha(self) -> float:
        """Get the progress measure reported with the last event."""
        return self._alpha

    @property
    def positions(self) -> PositionMap:
        """Get the computed positions (empty before run())."""
        return {node: p.copy() for node, p in self._positions.items()}

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: EventType | str, callback: EventCallback) -> Self:
        """
        Subscribe to a layout event.

        Args:
            event: Event type (EventType enum or string name)
            callback: Function to call when event fires

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        self._events[event] = callback
        return self

    def trigger(self, event: Event) -> None:
        """
        Trigger an event, calling the registered callback.

        Args:
            event: Event payload with type and optional data
        """
        event_type = event.get("type")
        if event_type is not None and event_type in self._events:
            self._events[event_type](event)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> Self:
        """
        Validate current configuration.

        Checks dim, that center has exactly dim components, that supplied
        initial positions have dim components and that every edge names a
        node of the graph. Called automatically by run() but can be called
        early for fail-fast behavior.

        Returns:
            self (for chaining)

        Raises:
            InvalidDimensionError: If dim is unsupported.
            InvalidCenterError: If center does not match dim.
            InvalidPositionError: If an initial position is malformed.
            InvalidEdgeError: If an edge references an unknown node.
        """
        self._prepare()
        return self

    def _prepare(self) -> None:
        """Resolve nodes/edges into index arrays and validate parameters."""
        dim = validate_dim(self._dim, self._min_dim)
        self._center_arr = validate_center(self._center, dim)

        self._node_ids = list(self._graph.nodes())
        self._index = {node: i for i, node in enumerate(self._node_ids)}
        edges = list(self._graph.edges())
        validate_edges(edges, self._index, strict=True)
        self._sources = np.fromiter(
            (self._index[e[0]] for e in edges), dtype=np.intp, count=len(edges)
        )
        self._targets = np.fromiter(
            (self._index[e[1]] for e in edges), dtype=np.intp, count=len(edges)
        )
        self._initial = validate_positions(self._pos, dim, self._node_ids)

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    def run(self, **kwargs: Any) -> Self:
        """
        Run the layout algorithm.

        Validates the configuration, resolves the degenerate cases and
        otherwise delegates to _compute(). The start and end events fire
        in every case.

        Returns:
            self (for chaining)
        """
        self._prepare()
        self._positions = {}
        self._alpha = 1.0
        self.trigger({"type": EventType.start, "alpha": self._alpha, "iteration": 0})

        n = len(self._node_ids)
        if n == 1:
            self._positions = {self._node_ids[0]: self._center_arr.copy()}
        elif n > 1:
            result = self._compute(**kwargs)
            self._positions = {node: result[i].copy() for i, node in enumerate(self._node_ids)}

        self._alpha = 0.0
        self.trigger({"type": EventType.end, "alpha": self._alpha})
        return self

    @abstractmethod
    def _compute(self, **kwargs: Any) -> np.ndarray:
        """
        Compute node positions for two or more nodes.

        Returns:
            Array of shape (n, dim), rows in node order
        """
        pass

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def _make_rng(self) -> LinearCongruentialRandom:
        """Create the per-run random source."""
        return LinearCongruentialRandom(self._random_seed)

    def _initialize_positions(
        self,
        rng: LinearCongruentialRandom,
        low: float = 0.0,
        high: float = 1.0,
    ) -> np.ndarray:
        """
        Build the starting position array.

        Without initial positions every node is drawn uniformly in
        [low, high)^dim. With partial initial positions, missing nodes are
        drawn inside the bounding box of the supplied ones (an axis with
        zero extent uses width 1).

        Returns:
            Array of shape (n, dim)
        """
        n = len(self._node_ids)
        dim = self._dim

        if not self._initial:
            return rng.uniform(low, high, (n, dim))

        supplied = np.array(list(self._initial.values()))
        lo = supplied.min(axis=0)
        width = supplied.max(axis=0) - lo
        width[width == 0] = 1.0

        positions = np.empty((n, dim), dtype=np.float64)
        for i, node in enumerate(self._node_ids):
            if node in self._initial:
                positions[i] = self._initial[node]
            else:
                positions[i] = lo + rng.uniform(0.0, 1.0, dim) * width
        return positions

    def _degrees(self) -> np.ndarray:
        """Node degrees from the edge index arrays (self-loops count once)."""
        n = len(self._node_ids)
        degrees = np.zeros(n, dtype=np.float64)
        loops = self._sources == self._targets
        np.add.at(degrees, self._sources, 1.0)
        np.add.at(degrees, self._targets[~loops], 1.0)
        return degrees

    def _fixed_node_mask(self, fixed: Optional[Sequence[NodeId]]) -> np.ndarray:
        """Boolean mask of fixed nodes; ids not in the graph are ignored."""
        mask = np.zeros(len(self._node_ids), dtype=bool)
        for node in fixed or ():
            i = self._index.get(node)
            if i is not None:
                mask[i] = True
        return mask


class IterativeLayout(BaseLayout):
    """
    Base class for iterative layout algorithms.

    Provides:
    - Iteration budget
    - Tick-based iteration loop
    - Convergence tracking (iteration count, converged flag)

    Subclasses set up their simulation state in _setup(), advance it in
    tick() and return the final array from _finish().
    """

    def __init__(self, *, iterations: int = 50, **kwargs: Any) -> None:
        """
        Initialize iterative layout.

        Args:
            iterations: Maximum number of iterations
            **kwargs: BaseLayout arguments
        """
        super().__init__(**kwargs)
        self._iterations: int = validate_iterations(iterations)
        self._iteration: int = 0
        self._converged: bool = False

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def iterations(self) -> int:
        """Get maximum iterations."""
        return self._iterations

    @iterations.setter
    def iterations(self, value: int) -> None:
        """Set maximum iterations."""
        self._iterations = validate_iterations(value)

    @property
    def iteration(self) -> int:
        """Get the number of iterations performed by the last run."""
        return self._iteration

    @property
    def converged(self) -> bool:
        """Get whether the last run stopped on its convergence criterion."""
        return self._converged

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    def _compute(self, **kwargs: Any) -> np.ndarray:
        self._iteration = 0
        self._converged = False
        self._setup()
        self.kick()
        logger.debug(
            "%s: %d nodes, %d iterations, converged=%s",
            type(self).__name__,
            len(self._node_ids),
            self._iteration,
            self._converged,
        )
        return self._finish()

    @abstractmethod
    def _setup(self) -> None:
        """Allocate simulation state for the current graph."""
        pass

    @abstractmethod
    def tick(self) -> bool:
        """
        Perform one iteration of the layout.

        Returns:
            True if converged, False if more iterations needed.
        """
        pass

    @abstractmethod
    def _finish(self) -> np.ndarray:
        """Return the final (n, dim) position array."""
        pass

    def kick(self) -> None:
        """Run tick() repeatedly until convergence or max iterations."""
        while self._iteration < self._iterations:
            if self.tick():
                self._converged = True
                break


__all__ = [
    "BaseLayout",
    "IterativeLayout",
]
