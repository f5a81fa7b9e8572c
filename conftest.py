"""Pytest fixtures shared by the composition tree tests."""

import pytest

from noisetree.engine import Average, CombinedNode, LeafNode
from noisetree.procgen.generators import ConstantGenerator


def constant_leaf(value: float, transformations=None) -> LeafNode:
    return LeafNode(ConstantGenerator(value), transformations)


@pytest.fixture
def make_leaf():
    """Factory for leaves that always return one value."""
    return constant_leaf


@pytest.fixture
def nested_root():
    """
    root (Combined)
      [0] leaf 0.1
      [1] Combined
            [0] leaf 0.7
    """
    grandchild = constant_leaf(0.7)
    inner = CombinedNode(Average(), children=[grandchild])
    return CombinedNode(Average(), children=[constant_leaf(0.1), inner])
