"""
Definition formats for composition trees.

Both the tagged-tree JSON format and the generic key/value IR compile
to the same runtime tree; the IR converts through the tagged models.
"""

from .definition import (
    NodeDefinition, TreeDefinition, build_node, build_scheme, build_transformation,
    build_tree, parse_tree_definition, to_json, tree_from_json, wrap_fragment
)
from .ir import (
    IrNode, IrSetting, build_tree_from_ir, load_node, load_scheme, load_transformation,
    load_tree, parse_global_conf, parse_ir, parse_node_definition, parse_scheme,
    parse_transformation, parse_tree
)

__all__ = [
    "NodeDefinition", "TreeDefinition", "build_node", "build_scheme", "build_transformation",
    "build_tree", "parse_tree_definition", "to_json", "tree_from_json", "wrap_fragment",
    "IrNode", "IrSetting", "build_tree_from_ir", "load_node", "load_scheme",
    "load_transformation", "load_tree", "parse_global_conf", "parse_ir",
    "parse_node_definition", "parse_scheme", "parse_transformation", "parse_tree"
]
