"""
Common types for force-directed layout algorithms.

This module provides the fundamental types shared by every layout:
- NodeId: Opaque, hashable vertex key supplied by the caller
- Position / PositionMap: Coordinates produced by a layout
- GraphLike: Protocol for graph inputs (nodes, edges, optional edge weights)
- EventType / Event: Layout lifecycle events
"""

from __future__ import annotations

from enum import IntEnum
from typing import (
    Callable,
    Hashable,
    Iterable,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    TypedDict,
    Union,
    runtime_checkable,
)

import numpy as np

NodeId = Hashable
"""Vertex key: any hashable value, usually an int or a str."""

Edge = tuple[NodeId, NodeId]
"""Undirected edge between two node ids."""

Position = np.ndarray
"""Coordinate vector of length ``dim``."""

PositionMap = dict[NodeId, np.ndarray]
"""Mapping from node id to its position."""

PositionLike = Union[Sequence[float], np.ndarray]
"""Input position: any sequence of floats."""

PositionMapLike = Mapping[NodeId, PositionLike]
"""Input position mapping (initial positions may be partial)."""

CenterLike = Optional[Union[Sequence[float], np.ndarray]]
"""Layout center: ``None`` for the origin, else exactly ``dim`` components."""


@runtime_checkable
class GraphLike(Protocol):
    """
    Protocol for graph inputs.

    Any object exposing ``nodes()`` and ``edges()`` can be laid out.
    Weighted graphs additionally implement ``edge_weight(u, v, attr)``;
    the layouts look that method up with ``getattr`` so it stays optional.
    """

    def nodes(self) -> Sequence[NodeId]: ...

    def edges(self) -> Sequence[Edge]: ...


GraphInput = Union[GraphLike, Iterable[NodeId]]
"""Accepted graph argument: a GraphLike or a bare sequence of node ids."""


class EventType(IntEnum):
    """
    Layout lifecycle events.

    - start: Layout iterations have begun
    - tick: Fired once per iteration
    - end: Layout has converged or exhausted its iteration budget
    """

    start = 0
    tick = 1
    end = 2


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    alpha: float
    stress: Optional[float]
    iteration: int


EventCallback = Callable[[Optional[Event]], None]


__all__ = [
    "NodeId",
    "Edge",
    "Position",
    "PositionMap",
    "PositionLike",
    "PositionMapLike",
    "CenterLike",
    "GraphLike",
    "GraphInput",
    "EventType",
    "Event",
    "EventCallback",
]
