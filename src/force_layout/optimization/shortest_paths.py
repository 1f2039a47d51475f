"""
All-pairs shortest path distances for stress-based layouts.

Floyd-Warshall over a dense matrix, vectorized one pivot at a time.
Unreachable pairs get a finite sentinel so downstream arithmetic never
sees infinities.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

import numpy as np

from ..graph import edge_weight
from ..types import GraphLike, NodeId

# Target distance for node pairs with no connecting path.
DISCONNECTED_DISTANCE = 1e6


def floyd_warshall(weights: np.ndarray) -> np.ndarray:
    """
    Compute all-pairs shortest paths from a dense weight matrix.

    Args:
        weights: (n, n) matrix; ``inf`` marks a missing edge

    Returns:
        New (n, n) matrix of shortest path lengths (``inf`` if unreachable)
    """
    dist = np.array(weights, dtype=np.float64)
    np.fill_diagonal(dist, 0.0)
    for k in range(dist.shape[0]):
        np.minimum(dist, dist[:, k, None] + dist[None, k, :], out=dist)
    return dist


def shortest_path_matrix(
    graph: GraphLike,
    nodes: Sequence[NodeId],
    weight: Optional[str] = "weight",
    disconnected_distance: float = DISCONNECTED_DISTANCE,
) -> np.ndarray:
    """
    Build the target distance matrix of a graph.

    Edge lengths come from ``graph.edge_weight(u, v, weight)`` when
    available (missing or zero weights count as 1). Parallel edges keep the
    shortest length; self-loops are ignored.

    Args:
        graph: GraphLike providing edges
        nodes: Node order of the matrix rows/columns
        weight: Edge attribute holding the edge length
        disconnected_distance: Value used for unreachable pairs

    Returns:
        (n, n) float64 matrix with zero diagonal and no infinities
    """
    index = {node: i for i, node in enumerate(nodes)}
    n = len(nodes)
    weights = np.full((n, n), np.inf)

    for u, v in graph.edges():
        i, j = index[u], index[v]
        if i == j:
            continue
        w = edge_weight(graph, u, v, weight)
        if w < weights[i, j]:
            weights[i, j] = w
            weights[j, i] = w

    dist = floyd_warshall(weights)
    dist[~np.isfinite(dist)] = disconnected_distance
    return dist


def distance_matrix_from_mapping(
    dist: Mapping[NodeId, Mapping[NodeId, Any]],
    nodes: Sequence[NodeId],
    disconnected_distance: float = DISCONNECTED_DISTANCE,
) -> np.ndarray:
    """
    Convert a two-level mapping of target distances into a dense matrix.

    Missing or non-finite entries become ``disconnected_distance``; the
    diagonal is always 0.
    """
    n = len(nodes)
    matrix = np.full((n, n), float(disconnected_distance))
    for i, u in enumerate(nodes):
        row = dist.get(u)
        if not row:
            continue
        for j, v in enumerate(nodes):
            if v in row:
                value = float(row[v])
                if np.isfinite(value):
                    matrix[i, j] = value
    np.fill_diagonal(matrix, 0.0)
    return matrix


__all__ = [
    "DISCONNECTED_DISTANCE",
    "floyd_warshall",
    "shortest_path_matrix",
    "distance_matrix_from_mapping",
]
