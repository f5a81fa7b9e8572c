"""
Tests for the input transformation pipeline.
"""

import numpy as np
import pytest

from noisetree.engine import (
    Dim, HigherOrderNoiseModule, LeafNode, ScaleAll, ZoomScale, apply_transformations
)
from noisetree.procgen import NoiseGenerator


class EchoX(NoiseGenerator):
    """Returns the x component it was sampled at."""

    kind = "EchoX"

    def sample(self, x, y, z):
        return x.copy()


def test_zoom_scale():
    assert apply_transformations([ZoomScale(speed=3.0, zoom=2.0)], (1.0, 1.0, 1.0)) == (2.0, 2.0, 3.0)


def test_pipeline_applies_left_to_right():
    transformations = [ScaleAll(2.0), ZoomScale(speed=1.0, zoom=2.0)]

    assert apply_transformations(transformations, (1.0, 1.0, 1.0)) == (4.0, 4.0, 2.0)


def test_empty_pipeline_is_identity():
    assert apply_transformations([], [1.0, 2.0, 3.0]) == (1.0, 2.0, 3.0)


def test_higher_order_module_replaces_axis(make_leaf):
    honf = HigherOrderNoiseModule(make_leaf(0.25), "y")

    assert honf.replaced_dim is Dim.Y
    assert apply_transformations([honf], (1.0, 2.0, 3.0)) == (1.0, 0.25, 3.0)


def test_higher_order_module_sees_transformed_coordinate():
    honf = HigherOrderNoiseModule(LeafNode(EchoX()), Dim.Z)

    result = apply_transformations([ScaleAll(3.0), honf], (1.0, 2.0, 5.0))

    assert result == (3.0, 6.0, 3.0)


def test_leaf_transforms_before_sampling():
    leaf = LeafNode(EchoX(), [ScaleAll(2.0)])

    assert leaf.get((1.5, 0.0, 0.0)) == pytest.approx(3.0)


def test_transformations_broadcast_over_arrays():
    xs = np.array([1.0, 2.0, 3.0])
    leaf = LeafNode(EchoX(), [ZoomScale(speed=1.0, zoom=0.5)])

    np.testing.assert_allclose(leaf.get((xs, 0.0, 0.0)), [0.5, 1.0, 1.5])


def test_dim_parse_rejects_unknown_axis():
    assert Dim.parse("x") is Dim.X
    with pytest.raises(ValueError):
        Dim.parse("w")
