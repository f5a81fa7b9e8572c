"""
Composition schemes: reduce the outputs of sibling nodes to one value.
"""

from typing import List, Sequence, Union

import numpy as np

from ..errors import SchemeMismatchError


Scalar = Union[float, np.ndarray]


class CompositionScheme:
    """Base class for child output reducers."""

    def compose(self, values: Sequence[Scalar]) -> Scalar:
        raise NotImplementedError


class Average(CompositionScheme):
    """Arithmetic mean of every child output."""

    def compose(self, values: Sequence[Scalar]) -> Scalar:
        if len(values) == 0:
            raise SchemeMismatchError("Cannot average the outputs of a composed module with no children!")
        return sum(values) / len(values)

    def __eq__(self, other) -> bool:
        return isinstance(other, Average)

    def __repr__(self) -> str:
        return "Average()"


class WeightedAverage(CompositionScheme):
    """
    Weighted sum of child outputs.

    Weights pair with children by position.  They are not normalized, so
    by convention they should sum to 1.
    """

    def __init__(self, weights: Sequence[float]):
        self.weights: List[float] = list(weights)

    def compose(self, values: Sequence[Scalar]) -> Scalar:
        if len(self.weights) != len(values):
            raise SchemeMismatchError(
                f"`WeightedAverage` has {len(self.weights)} weights but the composed module "
                f"has {len(values)} children!"
            )
        return sum(value * weight for value, weight in zip(values, self.weights))

    def __eq__(self, other) -> bool:
        return isinstance(other, WeightedAverage) and other.weights == self.weights

    def __repr__(self) -> str:
        return f"WeightedAverage({self.weights!r})"


def compose(scheme: CompositionScheme, values: Sequence[Scalar]) -> Scalar:
    """Reduce child outputs with `scheme`."""
    return scheme.compose(values)
