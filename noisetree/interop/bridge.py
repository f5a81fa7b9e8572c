"""
Host boundary for composition trees.

Every entry point takes a tree handle plus plain values (paths, indices,
JSON definition text in either format) and returns a BridgeResult
instead of raising, so a host can report the diagnostic and carry on
with the previous tree.  Definitions are parsed and built before the
tree is touched, so a bad definition never leaves a partial edit.
"""

import functools
import json
import logging
import threading
from typing import Any, Callable, List, Optional, Sequence, Union

from pydantic import BaseModel

from ..compatibility import load_node, load_scheme, load_transformation, load_tree, parse_global_conf
from ..engine.initial_tree import create_initial_tree as build_initial_tree
from ..errors import CompositionError, ParseError, PathNotFound
from .handles import TreeHandleTable

logger = logging.getLogger(__name__)

PathLike = Union[str, Sequence[int]]


class BridgeResult(BaseModel):
    """Outcome of one bridge call."""

    success: bool
    error: Optional[str] = None
    error_kind: Optional[str] = None
    handle: Optional[int] = None
    value: Optional[float] = None


def parse_path(path: PathLike) -> List[int]:
    """Accept a list of child indices or its JSON text."""

    if isinstance(path, str):
        try:
            path = json.loads(path) if path.strip() else []
        except ValueError:
            raise ParseError(f"Unable to parse path from string: {path}") from None

    if not isinstance(path, (list, tuple)) or not all(
        isinstance(i, int) and not isinstance(i, bool) for i in path
    ):
        raise ParseError(f"Path must be a list of child indices, got {path!r}")
    if any(i < 0 for i in path):
        raise PathNotFound(f"Path indices must be non-negative: {list(path)}")
    return list(path)


def bridge_call(func: Callable) -> Callable:
    """
    Run a HostBridge method under the bridge lock and turn the
    CompositionErrors it raises into failed BridgeResults.
    """

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> BridgeResult:
        try:
            with self.lock:
                result = func(self, *args, **kwargs)
        except CompositionError as e:
            logger.warning("%s failed: %s", func.__name__, e)
            return BridgeResult(success=False, error=str(e), error_kind=type(e).__name__)
        return result if result is not None else BridgeResult(success=True)

    return wrapper


class HostBridge:
    """
    Mutation and evaluation entry points over a TreeHandleTable.

    Every entry point runs under one lock, so calls from concurrent
    request handlers never interleave: an evaluation sees a tree either
    before or after a whole edit.  Code that bypasses the bridge and
    edits trees directly must do its own exclusion.
    """

    def __init__(self, table: Optional[TreeHandleTable] = None):
        self.table = table if table is not None else TreeHandleTable()
        self.lock = threading.RLock()

    # Tree lifecycle

    @bridge_call
    def create_tree(self, definition: Any) -> BridgeResult:
        """Build a tree from a definition in either format."""
        handle = self.table.insert(load_tree(definition))
        return BridgeResult(success=True, handle=handle)

    @bridge_call
    def create_initial_tree(self) -> BridgeResult:
        handle = self.table.insert(build_initial_tree())
        return BridgeResult(success=True, handle=handle)

    @bridge_call
    def release_tree(self, handle: int) -> None:
        self.table.release(handle)

    @bridge_call
    def evaluate(self, handle: int, x: float, y: float, z: float) -> BridgeResult:
        value = self.table.get(handle).evaluate(x, y, z)
        return BridgeResult(success=True, value=float(value))

    # Structural mutation

    @bridge_call
    def add_node(self, handle: int, path: PathLike, index: int, definition: Any) -> None:
        tree = self.table.get(handle)
        node = load_node(definition)
        tree.add_node(parse_path(path), index, node)

    @bridge_call
    def delete_node(self, handle: int, path: PathLike, index: int) -> None:
        self.table.get(handle).delete_node(parse_path(path), index)

    @bridge_call
    def replace_node(self, handle: int, path: PathLike, index: int, definition: Any) -> None:
        tree = self.table.get(handle)
        node = load_node(definition)
        tree.replace_node(parse_path(path), index, node)

    @bridge_call
    def set_composition_scheme(self, handle: int, path: PathLike, definition: Any) -> None:
        tree = self.table.get(handle)
        scheme = load_scheme(definition)
        tree.set_composition_scheme(parse_path(path), scheme)

    # Input transformations

    @bridge_call
    def add_input_transformation(
        self,
        handle: int,
        path: PathLike,
        definition: Any,
        index: Optional[int] = None
    ) -> None:
        tree = self.table.get(handle)
        transformation = load_transformation(definition)
        tree.add_input_transformation(parse_path(path), transformation, index)

    @bridge_call
    def delete_input_transformation(self, handle: int, path: PathLike, index: int) -> None:
        self.table.get(handle).delete_input_transformation(parse_path(path), index)

    @bridge_call
    def replace_input_transformation(self, handle: int, path: PathLike, index: int, definition: Any) -> None:
        tree = self.table.get(handle)
        transformation = load_transformation(definition)
        tree.replace_input_transformation(parse_path(path), index, transformation)

    @bridge_call
    def set_global_conf(self, handle: int, definition: Any) -> None:
        tree = self.table.get(handle)
        tree.set_global_conf(parse_global_conf(definition))


# Module-level entry points over one process-wide handle table.
default_bridge = HostBridge()

create_tree = default_bridge.create_tree
create_initial_tree = default_bridge.create_initial_tree
release_tree = default_bridge.release_tree
evaluate = default_bridge.evaluate
add_node = default_bridge.add_node
delete_node = default_bridge.delete_node
replace_node = default_bridge.replace_node
set_composition_scheme = default_bridge.set_composition_scheme
add_input_transformation = default_bridge.add_input_transformation
delete_input_transformation = default_bridge.delete_input_transformation
replace_input_transformation = default_bridge.replace_input_transformation
set_global_conf = default_bridge.set_global_conf
