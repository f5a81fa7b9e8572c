"""
Composition tree engine.

Nodes, input transformations, composition schemes and the tree with
its global configuration, plus grid sampling over a canvas.
"""

from .composition import Average, CompositionScheme, WeightedAverage, compose
from .grid_manager import GridManager
from .initial_tree import create_initial_tree
from .node import CombinedNode, CompositionTreeNode, LeafNode
from .transformations import (
    Dim, HigherOrderNoiseModule, InputTransformation, ScaleAll, ZoomScale, apply_transformations
)
from .tree import CompositionTree, GlobalConf

__all__ = [
    "Average", "CompositionScheme", "WeightedAverage", "compose",
    "GridManager", "create_initial_tree",
    "CombinedNode", "CompositionTreeNode", "LeafNode",
    "Dim", "HigherOrderNoiseModule", "InputTransformation", "ScaleAll", "ZoomScale",
    "apply_transformations",
    "CompositionTree", "GlobalConf"
]
