"""
Input transformations applied to a coordinate before a node is sampled.

Transformations form an ordered pipeline: each one receives the
coordinate as rewritten by the steps before it.
"""

from enum import Enum
from typing import Sequence, Tuple, Union

import numpy as np


Scalar = Union[float, np.ndarray]
Coord = Tuple[Scalar, Scalar, Scalar]


class Dim(str, Enum):
    """Coordinate axis."""

    X = "X"
    Y = "Y"
    Z = "Z"

    @classmethod
    def parse(cls, value: str) -> "Dim":
        return cls(value.upper())


class InputTransformation:
    """Base class for coordinate rewriting steps."""

    def transform(self, coord: Coord) -> Coord:
        raise NotImplementedError


class ZoomScale(InputTransformation):
    """Scales X and Y by `zoom` and Z (the sequence axis) by `speed`."""

    def __init__(self, speed: float = 1.0, zoom: float = 1.0):
        self.speed = speed
        self.zoom = zoom

    def transform(self, coord: Coord) -> Coord:
        x, y, z = coord
        return (x * self.zoom, y * self.zoom, z * self.speed)

    def __repr__(self) -> str:
        return f"ZoomScale(speed={self.speed!r}, zoom={self.zoom!r})"


class ScaleAll(InputTransformation):
    """Multiplies every coordinate component by `factor`."""

    def __init__(self, factor: float):
        self.factor = factor

    def transform(self, coord: Coord) -> Coord:
        x, y, z = coord
        return (x * self.factor, y * self.factor, z * self.factor)

    def __repr__(self) -> str:
        return f"ScaleAll({self.factor!r})"


class HigherOrderNoiseModule(InputTransformation):
    """
    Replaces one axis of the coordinate with the output of a sub-tree.

    The sub-tree is evaluated at the incoming coordinate (already
    transformed by earlier steps); the other two axes pass through.
    """

    def __init__(self, node, replaced_dim: Dim):
        self.node = node
        self.replaced_dim = Dim.parse(replaced_dim)

    def transform(self, coord: Coord) -> Coord:
        x, y, z = coord
        value = self.node.get(coord)

        if self.replaced_dim is Dim.X:
            return (value, y, z)
        if self.replaced_dim is Dim.Y:
            return (x, value, z)
        return (x, y, value)

    def __repr__(self) -> str:
        return f"HigherOrderNoiseModule({self.node!r}, {self.replaced_dim.value!r})"


def apply_transformations(transformations: Sequence[InputTransformation], coord: Sequence[Scalar]) -> Coord:
    """Fold `coord` through each transformation, left to right."""

    result = tuple(coord)
    for transformation in transformations:
        result = transformation.transform(result)
    return result
