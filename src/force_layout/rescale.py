"""
Layout rescaling utilities.

Center a position set on its centroid and scale it uniformly so the
farthest node lies at distance ``scale`` from ``center``.
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

import numpy as np

from .types import NodeId, PositionLike, PositionMap
from .validation import InvalidPositionError, validate_center


def rescale_layout(
    pos: np.ndarray,
    scale: float = 1.0,
    center: Optional[Sequence[float]] = None,
) -> np.ndarray:
    """
    Rescale an (N, D) position array into a ball of radius ``scale``.

    The centroid is moved to ``center`` and the largest distance from it
    becomes ``scale``. When all positions coincide every row becomes
    exactly ``center``.

    Args:
        pos: Array of shape (N, D)
        scale: Target radius
        center: Target center with exactly D components (default: origin)

    Returns:
        New float64 array of shape (N, D)

    Raises:
        InvalidCenterError: If center does not have D components
    """
    arr = np.array(pos, dtype=np.float64)
    if arr.ndim != 2:
        raise InvalidPositionError(f"positions must be a 2-D array, got shape {arr.shape}")
    dim = arr.shape[1]
    target = validate_center(center, dim)
    if arr.shape[0] == 0:
        return arr
    # Coincident input: the centroid subtraction below may leave rounding residue.
    if np.all(arr == arr[0]):
        arr[:] = target
        return arr

    arr -= arr.mean(axis=0)
    max_norm = float(np.max(np.linalg.norm(arr, axis=1)))
    if max_norm > 0:
        arr *= scale / max_norm
        arr += target
    else:
        arr[:] = target
    return arr


def rescale_layout_dict(
    pos: Mapping[NodeId, PositionLike],
    scale: float = 1.0,
    center: Optional[Sequence[float]] = None,
) -> PositionMap:
    """
    Rescale a position mapping; see :func:`rescale_layout`.

    Returns:
        New dict with the same keys
    """
    if not pos:
        return {}
    nodes = list(pos)
    try:
        arr = np.array([np.asarray(pos[node], dtype=np.float64) for node in nodes])
    except ValueError as exc:
        raise InvalidPositionError("all positions must have the same length") from exc
    scaled = rescale_layout(arr, scale=scale, center=center)
    return {node: scaled[i] for i, node in enumerate(nodes)}


__all__ = ["rescale_layout", "rescale_layout_dict"]
