"""
Graph inputs for layout algorithms.

Layouts accept anything implementing the GraphLike protocol
(``nodes()``, ``edges()``, optional ``edge_weight(u, v, attr)``) or a bare
sequence of node ids. ``resolve_graph`` turns both into a GraphLike so the
algorithms never inspect their input beyond that protocol.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

from .types import Edge, GraphInput, GraphLike, NodeId
from .validation import InvalidGraphError


class Graph:
    """
    Minimal undirected graph container.

    Nodes keep insertion order; edges are stored in insertion order,
    duplicates and self-loops included. Edge attributes are kept per
    unordered node pair (the last ``add_edge`` call wins).

    Example:
        g = Graph()
        g.add_edge("a", "b", weight=2.0)
        g.add_edge("b", "c")
        pos = kamada_kawai_layout(g)
    """

    def __init__(
        self,
        edges: Optional[Iterable[Sequence[Any]]] = None,
        nodes: Optional[Iterable[NodeId]] = None,
    ) -> None:
        self._nodes: dict[NodeId, None] = {}
        self._edges: list[Edge] = []
        self._edge_data: dict[frozenset[NodeId], dict[str, Any]] = {}

        if nodes is not None:
            for node in nodes:
                self.add_node(node)
        if edges is not None:
            for edge in edges:
                if len(edge) > 2 and isinstance(edge[2], dict):
                    self.add_edge(edge[0], edge[1], **edge[2])
                else:
                    self.add_edge(edge[0], edge[1])

    def add_node(self, node: NodeId) -> None:
        """Add a node (no-op if already present)."""
        self._nodes.setdefault(node, None)

    def add_edge(self, u: NodeId, v: NodeId, **attrs: Any) -> None:
        """Add an edge, creating missing endpoints."""
        self.add_node(u)
        self.add_node(v)
        self._edges.append((u, v))
        self._edge_data.setdefault(frozenset((u, v)), {}).update(attrs)

    def nodes(self) -> list[NodeId]:
        """Return nodes in insertion order."""
        return list(self._nodes)

    def edges(self) -> list[Edge]:
        """Return edges in insertion order."""
        return list(self._edges)

    def edge_weight(self, u: NodeId, v: NodeId, attr: str) -> Optional[float]:
        """Return attribute ``attr`` of edge (u, v), or None if unset."""
        data = self._edge_data.get(frozenset((u, v)))
        if data is None:
            return None
        return data.get(attr)

    def degree(self, node: NodeId) -> int:
        """Number of edges incident to ``node`` (a self-loop counts once)."""
        return sum(1 for u, v in self._edges if u == node or v == node)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        return node in self._nodes

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self._nodes)}, edges={len(self._edges)})"


class NodeList:
    """Adapter presenting a bare sequence of node ids as an edgeless graph."""

    def __init__(self, nodes: Iterable[NodeId]) -> None:
        self._nodes = list(nodes)

    def nodes(self) -> list[NodeId]:
        return list(self._nodes)

    def edges(self) -> list[Edge]:
        return []

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"NodeList({self._nodes!r})"


def resolve_graph(graph: GraphInput) -> GraphLike:
    """
    Resolve a graph argument into a GraphLike.

    Args:
        graph: Object with ``nodes()``/``edges()`` or an iterable of node ids

    Returns:
        The graph itself, or a NodeList wrapping the node ids

    Raises:
        InvalidGraphError: If graph is neither form
    """
    if isinstance(graph, GraphLike):
        return graph
    if isinstance(graph, (str, bytes)) or not isinstance(graph, Iterable):
        raise InvalidGraphError(
            "graph must provide nodes() and edges() or be an iterable of node ids, "
            f"got {type(graph).__name__}"
        )
    return NodeList(graph)


def edge_weight(graph: GraphLike, u: NodeId, v: NodeId, attr: Optional[str]) -> float:
    """
    Look up the weight of edge (u, v).

    Missing lookups, missing attributes and falsy weights all count as 1.
    """
    if attr is None:
        return 1.0
    lookup = getattr(graph, "edge_weight", None)
    if lookup is None:
        return 1.0
    value = lookup(u, v, attr)
    return float(value) if value else 1.0


__all__ = [
    "Graph",
    "NodeList",
    "resolve_graph",
    "edge_weight",
]
