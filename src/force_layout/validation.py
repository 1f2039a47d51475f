"""
Input validation utilities for force-directed layout algorithms.

Provides centralized validation functions for layout dimension, center,
initial positions, edges and numeric parameters. Raises descriptive
exceptions on invalid input, always before any layout computation starts.
"""

from __future__ import annotations

import math
from typing import Any, Collection, Iterable, Mapping, Optional, Sequence

import numpy as np


class ValidationError(ValueError):
    """Base exception for layout validation errors."""

    pass


class InvalidParameterError(ValidationError):
    """Raised when a numeric layout parameter is out of range."""

    pass


class InvalidCenterError(InvalidParameterError):
    """Raised when the center does not have exactly ``dim`` components."""

    pass


class InvalidDimensionError(InvalidParameterError):
    """Raised when the layout dimension is unsupported."""

    pass


class InvalidPositionError(ValidationError):
    """Raised when an initial position is malformed."""

    pass


class InvalidEdgeError(ValidationError):
    """Raised when an edge references a node that is not in the graph."""

    pass


class InvalidGraphError(ValidationError):
    """Raised when the graph argument cannot be interpreted."""

    pass


class LayoutWarning(UserWarning):
    """Warning for inputs a layout tolerates but probably did not intend."""

    pass


def validate_dim(dim: int, minimum: int = 1) -> int:
    """
    Validate layout dimension.

    Args:
        dim: Requested number of coordinates per node
        minimum: Smallest dimension the algorithm supports

    Returns:
        Validated dimension as int

    Raises:
        InvalidDimensionError: If dim is not an integer >= minimum
    """
    if isinstance(dim, bool) or int(dim) != dim:
        raise InvalidDimensionError(f"dim must be an integer, got {dim!r}")
    dim = int(dim)
    if dim < minimum:
        raise InvalidDimensionError(f"dim must be >= {minimum}, got {dim}")
    return dim


def validate_center(center: Optional[Sequence[float]], dim: int) -> np.ndarray:
    """
    Validate the layout center against the layout dimension.

    Args:
        center: Center coordinates, or None for the origin
        dim: Layout dimension

    Returns:
        Center as a float64 array of shape (dim,)

    Raises:
        InvalidCenterError: If center does not have exactly dim finite components
    """
    if center is None:
        return np.zeros(dim, dtype=np.float64)

    arr = np.asarray(center, dtype=np.float64).reshape(-1)
    if arr.shape[0] != dim:
        raise InvalidCenterError(
            f"length of center coordinates ({arr.shape[0]}) must match "
            f"dimension of layout ({dim})"
        )
    if not np.all(np.isfinite(arr)):
        raise InvalidCenterError(f"center coordinates must be finite, got {arr.tolist()}")
    return arr


def validate_positions(
    pos: Optional[Mapping[Any, Any]],
    dim: int,
    nodes: Collection[Any],
) -> dict[Any, np.ndarray]:
    """
    Validate initial positions for the nodes of a graph.

    Entries for nodes that are not in the graph are ignored.

    Args:
        pos: Mapping from node id to position, or None
        dim: Layout dimension
        nodes: Node ids of the graph being laid out

    Returns:
        Dict of validated float64 arrays for the nodes present in ``pos``

    Raises:
        InvalidPositionError: If a position has the wrong length or is not finite
    """
    result: dict[Any, np.ndarray] = {}
    if not pos:
        return result

    for node in nodes:
        if node not in pos:
            continue
        arr = np.asarray(pos[node], dtype=np.float64).reshape(-1)
        if arr.shape[0] != dim:
            raise InvalidPositionError(
                f"Position of node {node!r} has {arr.shape[0]} components, expected {dim}"
            )
        if not np.all(np.isfinite(arr)):
            raise InvalidPositionError(f"Position of node {node!r} is not finite")
        result[node] = arr.copy()
    return result


def validate_edges(
    edges: Iterable[Sequence[Any]],
    index: Mapping[Any, int],
    strict: bool = True,
) -> list[tuple[int, str]]:
    """
    Validate that every edge endpoint is a known node.

    Args:
        edges: Sequence of (source, target) pairs
        index: Mapping from node id to node index
        strict: If True, raises on invalid. If False, returns list of issues.

    Returns:
        List of (edge_index, issue_description) tuples

    Raises:
        InvalidEdgeError: If strict=True and invalid edges found
    """
    issues: list[tuple[int, str]] = []

    for i, edge in enumerate(edges):
        if len(edge) < 2:
            issues.append((i, f"Edge {i}: expected (source, target), got {edge!r}"))
            continue
        source, target = edge[0], edge[1]
        if source not in index:
            issues.append((i, f"Edge {i}: source {source!r} is not a node of the graph"))
        if target not in index:
            issues.append((i, f"Edge {i}: target {target!r} is not a node of the graph"))

    if strict and issues:
        msg = "Invalid edges:\n" + "\n".join(issue[1] for issue in issues)
        raise InvalidEdgeError(msg)

    return issues


def validate_iterations(iterations: int, name: str = "iterations") -> int:
    """
    Validate iteration count is non-negative.

    Args:
        iterations: Number of iterations
        name: Parameter name used in the error message

    Returns:
        Validated iteration count

    Raises:
        InvalidParameterError: If iterations < 0
    """
    if iterations < 0:
        raise InvalidParameterError(f"{name} must be >= 0, got {iterations}")
    return int(iterations)


def validate_positive(value: float, name: str, allow_zero: bool = False) -> float:
    """
    Validate that a numeric parameter is positive (or non-negative).

    Raises:
        InvalidParameterError: If value is not finite or out of range
    """
    value = float(value)
    if not math.isfinite(value):
        raise InvalidParameterError(f"{name} must be finite, got {value}")
    if value < 0 or (value == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise InvalidParameterError(f"{name} must be {bound}, got {value}")
    return value


def validate_spring_strength(a: float) -> float:
    """
    Validate the spring strength of the ARF model.

    Raises:
        InvalidParameterError: If a <= 1
    """
    a = float(a)
    if not a > 1:
        raise InvalidParameterError(f"The parameter a should be larger than 1, got {a}")
    return a


__all__ = [
    "ValidationError",
    "InvalidParameterError",
    "InvalidCenterError",
    "InvalidDimensionError",
    "InvalidPositionError",
    "InvalidEdgeError",
    "InvalidGraphError",
    "LayoutWarning",
    "validate_dim",
    "validate_center",
    "validate_positions",
    "validate_edges",
    "validate_iterations",
    "validate_positive",
    "validate_spring_strength",
]
