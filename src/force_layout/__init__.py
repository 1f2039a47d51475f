"""
force-layout: Force-directed and stress-based graph layout in Python.

This package computes node coordinates for graph drawings in any
dimension.

Available algorithms:
- Fruchterman-Reingold: Repulsion/attraction simulation with cooling
- ForceAtlas2: Adaptive-speed simulation driven by swing/traction
- Kamada-Kawai: Stress minimization with L-BFGS
- ARF: Attractive and repulsive forces spring model
"""

__version__ = "0.1.0"

# Base classes for building layouts
from .base import BaseLayout, IterativeLayout

# Force-directed layouts
from .force import (
    ARFLayout,
    ForceAtlas2Layout,
    FruchtermanReingoldLayout,
    KamadaKawaiLayout,
    arf_layout,
    forceatlas2_layout,
    fruchterman_reingold_layout,
    kamada_kawai_layout,
    spring_layout,
)

# Graph input
from .graph import Graph, NodeList, resolve_graph

# Utilities
from .rescale import rescale_layout, rescale_layout_dict
from .rng import LinearCongruentialRandom
from .types import (
    Event,
    EventType,
    GraphLike,
    NodeId,
    PositionMap,
)

# Validation utilities
from .validation import (
    InvalidCenterError,
    InvalidDimensionError,
    InvalidEdgeError,
    InvalidGraphError,
    InvalidParameterError,
    InvalidPositionError,
    LayoutWarning,
    ValidationError,
)

__all__ = [
    # Version
    "__version__",
    # Shared types
    "NodeId",
    "PositionMap",
    "GraphLike",
    "EventType",
    "Event",
    # Base classes
    "BaseLayout",
    "IterativeLayout",
    # Graph input
    "Graph",
    "NodeList",
    "resolve_graph",
    # Force-directed layouts
    "FruchtermanReingoldLayout",
    "ForceAtlas2Layout",
    "KamadaKawaiLayout",
    "ARFLayout",
    "fruchterman_reingold_layout",
    "spring_layout",
    "forceatlas2_layout",
    "kamada_kawai_layout",
    "arf_layout",
    # Utilities
    "rescale_layout",
    "rescale_layout_dict",
    "LinearCongruentialRandom",
    # Validation
    "ValidationError",
    "InvalidParameterError",
    "InvalidCenterError",
    "InvalidDimensionError",
    "InvalidPositionError",
    "InvalidEdgeError",
    "InvalidGraphError",
    "LayoutWarning",
]
