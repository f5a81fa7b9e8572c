"""
Composition tree nodes.

A node is either a leaf wrapping one noise generator or a combined
node that merges its children with a composition scheme.  Every node
carries its own input transformation pipeline.  Nodes also own the
path-addressed structural mutation primitives; a path is a list of
child indices descending from the node it is resolved against.
"""

import logging
from typing import List, Optional, Sequence, Union

import numpy as np

from ..errors import IndexOutOfRange, LeafMutationError, NotComposed, PathNotFound
from ..procgen import NoiseGenerator
from .composition import CompositionScheme
from .transformations import InputTransformation, apply_transformations

logger = logging.getLogger(__name__)

Scalar = Union[float, np.ndarray]
Path = Sequence[int]


class CompositionTreeNode:
    """Base class for leaf and combined nodes."""

    is_leaf = False

    def __init__(self, transformations: Optional[Sequence[InputTransformation]] = None):
        self.transformations: List[InputTransformation] = list(transformations or [])

    def get(self, coord: Sequence[Scalar]) -> Scalar:
        """Transform `coord` with this node's pipeline, then evaluate."""
        return self._evaluate(apply_transformations(self.transformations, coord))

    def _evaluate(self, coord) -> Scalar:
        raise NotImplementedError

    # Traversal

    def traverse(self, path: Path) -> "CompositionTreeNode":
        """
        Resolve `path` to a node.

        Raises:
            NotComposed: If the path descends through a leaf
            PathNotFound: If an index does not exist
        """

        node = self
        for depth, index in enumerate(path):
            if node.is_leaf:
                raise NotComposed(
                    f"Attempted to access child of module at index {index} (depth {depth}) "
                    f"but it is a leaf node! Path: {list(path)}"
                )
            if not 0 <= index < len(node.children):
                raise PathNotFound(
                    f"Attempted to access child of module at index {index} (depth {depth}) "
                    f"but it only has {len(node.children)} children! Path: {list(path)}"
                )
            node = node.children[index]

        return node

    def _composed_target(self, path: Path, action: str) -> "CombinedNode":
        target = self.traverse(path)
        if target.is_leaf:
            raise LeafMutationError(
                f"Attempted to {action} module at path {list(path)}, but it is a leaf node!"
            )
        return target

    # Structural mutation

    def add_node(self, path: Path, index: int, node: "CompositionTreeNode") -> None:
        """Insert `node` as child `index` of the combined node at `path`."""
        self._composed_target(path, "add child node to").add_child(index, node)

    def delete_node(self, path: Path, index: int) -> "CompositionTreeNode":
        """Remove and return child `index` of the combined node at `path`."""
        return self._composed_target(path, "remove child node from").remove_child(index)

    def replace_node(self, path: Path, index: int, node: "CompositionTreeNode") -> "CompositionTreeNode":
        """
        Swap child `index` of the combined node at `path` for `node`.

        Equivalent to delete_node followed by add_node at the same index,
        but validated up front so a failure leaves the tree untouched.
        Returns the node that was replaced.
        """
        return self._composed_target(path, "replace child node of").replace_child(index, node)

    def set_composition_scheme(self, path: Path, scheme: CompositionScheme) -> None:
        """
        Replace the scheme of the combined node at `path`.

        Weight counts are not checked here; a mismatched WeightedAverage
        fails when the node is next evaluated.
        """
        target = self._composed_target(path, "set composition scheme of")
        target.scheme = scheme

    # Input transformation editing

    def add_input_transformation(
        self,
        path: Path,
        transformation: InputTransformation,
        index: Optional[int] = None
    ) -> None:
        """Append (or insert at `index`) a transformation on the node at `path`."""

        transformations = self.traverse(path).transformations
        if index is None:
            transformations.append(transformation)
            return
        if not 0 <= index <= len(transformations):
            raise IndexOutOfRange(
                f"Attempted to insert input transformation at index {index} "
                f"but there are only {len(transformations)} transformations!"
            )
        transformations.insert(index, transformation)

    def delete_input_transformation(self, path: Path, index: int) -> InputTransformation:
        """Remove and return transformation `index` of the node at `path`."""

        transformations = self.traverse(path).transformations
        _check_existing_index(index, len(transformations), "input transformation")
        return transformations.pop(index)

    def replace_input_transformation(
        self,
        path: Path,
        index: int,
        transformation: InputTransformation
    ) -> InputTransformation:
        """Swap transformation `index` of the node at `path`."""

        transformations = self.traverse(path).transformations
        _check_existing_index(index, len(transformations), "input transformation")
        previous = transformations[index]
        transformations[index] = transformation
        return previous


class LeafNode(CompositionTreeNode):
    """Terminal node holding one noise generator."""

    is_leaf = True

    def __init__(
        self,
        generator: NoiseGenerator,
        transformations: Optional[Sequence[InputTransformation]] = None
    ):
        super().__init__(transformations)
        self.generator = generator

    def _evaluate(self, coord) -> Scalar:
        return self.generator.get(coord)

    def __repr__(self) -> str:
        return f"LeafNode({self.generator!r}, transformations={self.transformations!r})"


class CombinedNode(CompositionTreeNode):
    """
    A group of child nodes merged into a single output.

    Children may themselves be combined nodes, so trees grow without
    limit in both height and width.
    """

    def __init__(
        self,
        scheme: CompositionScheme,
        children: Optional[Sequence[CompositionTreeNode]] = None,
        transformations: Optional[Sequence[InputTransformation]] = None
    ):
        super().__init__(transformations)
        self.scheme = scheme
        self.children: List[CompositionTreeNode] = list(children or [])

    def _evaluate(self, coord) -> Scalar:
        # Every child sees the same coordinate; each applies its own
        # transformations inside its get().
        return self.scheme.compose([child.get(coord) for child in self.children])

    def add_child(self, index: int, child: CompositionTreeNode) -> None:
        child_count = len(self.children)
        if not 0 <= index <= child_count:
            raise IndexOutOfRange(
                f"Attempted to add noise module at index {index} but our children length is {child_count}."
            )
        self.children.insert(index, child)
        logger.debug("Inserted child at index %d (%d children)", index, child_count + 1)

    def remove_child(self, index: int) -> CompositionTreeNode:
        _check_existing_index(index, len(self.children), "child node")
        child = self.children.pop(index)
        logger.debug("Removed child at index %d (%d children)", index, len(self.children))
        return child

    def replace_child(self, index: int, child: CompositionTreeNode) -> CompositionTreeNode:
        _check_existing_index(index, len(self.children), "child node")
        previous = self.children[index]
        self.children[index] = child
        logger.debug("Replaced child at index %d", index)
        return previous

    def __repr__(self) -> str:
        return (
            f"CombinedNode({self.scheme!r}, children={self.children!r}, "
            f"transformations={self.transformations!r})"
        )


def _check_existing_index(index: int, count: int, what: str) -> None:
    if not 0 <= index < count:
        raise IndexOutOfRange(
            f"Attempted to remove {what} at index {index} but there are only {count}!"
        )
