"""
noisetree: procedural noise composition trees.

Noise generators are composed into a tree whose nodes transform input
coordinates and merge their children's outputs.  Trees are built from
tagged JSON or key/value IR definitions and edited in place by path.
"""

from .compatibility import build_tree_from_ir, load_tree, tree_from_json
from .engine import CompositionTree, GlobalConf, GridManager, create_initial_tree
from .errors import (
    CompositionError, ConfigError, IndexOutOfRange, LeafMutationError, NotComposed,
    ParseError, PathNotFound, SchemeMismatchError, StaleHandleError
)

__version__ = "0.1.0"

__all__ = [
    "build_tree_from_ir", "load_tree", "tree_from_json",
    "CompositionTree", "GlobalConf", "GridManager", "create_initial_tree",
    "CompositionError", "ConfigError", "IndexOutOfRange", "LeafMutationError", "NotComposed",
    "ParseError", "PathNotFound", "SchemeMismatchError", "StaleHandleError"
]
