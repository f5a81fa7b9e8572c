"""
The default composition tree loaded when no definition is supplied.
"""

from ..procgen import GeneratorSpec, MultiFractalConf, SeedableConf, build_generator
from .composition import Average
from .node import CombinedNode, LeafNode
from .transformations import ZoomScale
from .tree import CompositionTree, GlobalConf

INITIAL_SEED = "cXEL5v9dTsCgCnkgdd43XWZS6Q9c44AD"


def _initial_leaf(kind: str) -> LeafNode:
    confs = [
        MultiFractalConf(octaves=6, frequency=1.0, lacunarity=2.0, persistence=0.5),
        SeedableConf(seed=INITIAL_SEED),
    ]
    return LeafNode(build_generator(GeneratorSpec(kind, confs)))


def create_initial_tree() -> CompositionTree:
    """Average of an Fbm and a Billow leaf under a slight zoom."""

    root = CombinedNode(
        Average(),
        children=[_initial_leaf("Fbm"), _initial_leaf("Billow")],
        transformations=[ZoomScale(speed=1.0, zoom=1.1)],
    )
    return CompositionTree(root, GlobalConf())
