"""
Composition tree: a root node plus the global configuration that maps
canvas coordinates into noise space.
"""

import logging
from typing import Optional, Sequence, Union

import numpy as np
from pydantic import BaseModel, ConfigDict

from .composition import CompositionScheme
from .node import CompositionTreeNode, Path
from .transformations import InputTransformation

logger = logging.getLogger(__name__)

Scalar = Union[float, np.ndarray]


class GlobalConf(BaseModel):
    """Canvas-to-noise-space mapping shared by the whole tree."""

    model_config = ConfigDict(extra="forbid")

    canvas_size: int = 0
    needs_resize: bool = False
    zoom: float = 0.015
    speed: float = 0.008
    x_offset: float = 0.0
    y_offset: float = 0.0
    z_offset: float = 0.0
    # Passed through to the color mapping step; never read here.
    color_function: Optional[str] = None


class CompositionTree:
    """
    Root node and global configuration.

    Canvas coordinates are scaled by `zoom` (x, y) and `speed` (z, the
    sequence number), then shifted by the offsets, before they reach the
    root node.
    """

    def __init__(self, root_node: CompositionTreeNode, global_conf: Optional[GlobalConf] = None):
        self.root_node = root_node
        self.global_conf = global_conf if global_conf is not None else GlobalConf()

    def get(self, coord: Sequence[Scalar]) -> Scalar:
        x, y, z = coord
        conf = self.global_conf
        return self.root_node.get((
            x * conf.zoom + conf.x_offset,
            y * conf.zoom + conf.y_offset,
            z * conf.speed + conf.z_offset,
        ))

    def evaluate(self, x: Scalar, y: Scalar, z: Scalar) -> Scalar:
        """Evaluate at one canvas coordinate, or at broadcast arrays of them."""
        return self.get((x, y, z))

    def traverse(self, path: Path) -> CompositionTreeNode:
        return self.root_node.traverse(path)

    def add_node(self, path: Path, index: int, node: CompositionTreeNode) -> None:
        self.root_node.add_node(path, index, node)

    def delete_node(self, path: Path, index: int) -> CompositionTreeNode:
        return self.root_node.delete_node(path, index)

    def replace_node(self, path: Path, index: int, node: CompositionTreeNode) -> CompositionTreeNode:
        return self.root_node.replace_node(path, index, node)

    def set_composition_scheme(self, path: Path, scheme: CompositionScheme) -> None:
        self.root_node.set_composition_scheme(path, scheme)

    def add_input_transformation(
        self,
        path: Path,
        transformation: InputTransformation,
        index: Optional[int] = None
    ) -> None:
        self.root_node.add_input_transformation(path, transformation, index)

    def delete_input_transformation(self, path: Path, index: int) -> InputTransformation:
        return self.root_node.delete_input_transformation(path, index)

    def replace_input_transformation(
        self,
        path: Path,
        index: int,
        transformation: InputTransformation
    ) -> InputTransformation:
        return self.root_node.replace_input_transformation(path, index, transformation)

    def set_global_conf(self, global_conf: GlobalConf) -> None:
        logger.debug("Replacing global conf: %r", global_conf)
        self.global_conf = global_conf

    def __repr__(self) -> str:
        return f"CompositionTree({self.root_node!r}, {self.global_conf!r})"
