"""
Force-directed graph layout algorithms.

This module provides classic force-directed layout algorithms:
- FruchtermanReingold: Classic force-directed with repulsion/attraction
- ForceAtlas2: Mass-weighted forces with adaptive swing/traction speed
- KamadaKawai: Stress minimization based on graph-theoretic distances
- ARF: Attractive and repulsive forces spring model
"""

from .arf import ARFLayout, arf_layout
from .force_atlas2 import ForceAtlas2Layout, forceatlas2_layout
from .fruchterman_reingold import (
    FruchtermanReingoldLayout,
    fruchterman_reingold_layout,
    spring_layout,
)
from .kamada_kawai import KamadaKawaiLayout, kamada_kawai_layout

__all__ = [
    "FruchtermanReingoldLayout",
    "fruchterman_reingold_layout",
    "spring_layout",
    "ForceAtlas2Layout",
    "forceatlas2_layout",
    "KamadaKawaiLayout",
    "kamada_kawai_layout",
    "ARFLayout",
    "arf_layout",
]
