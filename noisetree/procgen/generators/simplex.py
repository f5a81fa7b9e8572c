"""
Simplex-family generators backed by the `opensimplex` package.
"""

import numpy as np
from opensimplex import OpenSimplex

from ..grammar import ConfFragment
from .base import NoiseGenerator, SeedableMixin


# Rotation that puts the lattice's main diagonal on the Z axis so X/Y
# slices show no axis-aligned artifacts.
_ROTATE_XY = 0.577350269189626
_ROTATE_SKEW = -0.211324865405187


class OpenSimplexGenerator(SeedableMixin, NoiseGenerator):
    """OpenSimplex noise, vectorized over coordinate arrays."""

    kind = "OpenSimplex"

    def __init__(self):
        self._reseed()

    def _reseed(self):
        generator = OpenSimplex(seed=self.seed)
        self._noise3 = np.vectorize(generator.noise3, otypes=[np.float64])

    def configure(self, conf: ConfFragment) -> None:
        super().configure(conf)
        self._reseed()

    def sample(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        return self._noise3(x, y, z)


class SuperSimplexGenerator(OpenSimplexGenerator):
    """OpenSimplex sampled through a rotated lattice orientation."""

    kind = "SuperSimplex"

    def sample(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        xy = x + y
        skew = xy * _ROTATE_SKEW
        zz = z * _ROTATE_XY

        xr = x + skew - zz
        yr = y + skew - zz
        zr = xy * _ROTATE_XY + zz

        return self._noise3(xr, yr, zr)
