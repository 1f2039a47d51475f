"""
Numerical building blocks for stress-based layouts.

- shortest_paths: Floyd-Warshall target distance matrices
- stress: Kamada-Kawai stress cost and analytic gradient
- lbfgs: Ring-buffer L-BFGS memory, two-loop direction, step-wise optimizer
- line_search: Armijo backtracking line search
"""

from .lbfgs import DEFAULT_MEMORY, LBFGSMemory, LBFGSOptimizer, lbfgs_direction
from .line_search import backtracking_line_search
from .shortest_paths import (
    DISCONNECTED_DISTANCE,
    distance_matrix_from_mapping,
    floyd_warshall,
    shortest_path_matrix,
)
from .stress import StressFunction, inverse_distances

__all__ = [
    "DEFAULT_MEMORY",
    "LBFGSMemory",
    "LBFGSOptimizer",
    "lbfgs_direction",
    "backtracking_line_search",
    "DISCONNECTED_DISTANCE",
    "distance_matrix_from_mapping",
    "floyd_warshall",
    "shortest_path_matrix",
    "StressFunction",
    "inverse_distances",
]
