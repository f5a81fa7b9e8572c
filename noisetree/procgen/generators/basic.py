"""
Value noise and constant generators.
"""

import numpy as np

from ..grammar import ConfFragment, ConstantConf
from ..modules import noise
from .base import NoiseGenerator, SeedableMixin


class ValueGenerator(SeedableMixin, NoiseGenerator):
    """Interpolated lattice value noise."""

    kind = "Value"

    def sample(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        return noise.value_noise(x, y, z, seed=self.seed)


class ConstantGenerator(NoiseGenerator):
    """Returns the same literal value everywhere."""

    kind = "Constant"

    def __init__(self, constant: float = 0.0):
        self.constant = constant

    def configure(self, conf: ConfFragment) -> None:
        if isinstance(conf, ConstantConf):
            self.constant = conf.constant
        else:
            super().configure(conf)

    def sample(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        return np.full_like(x, self.constant)

    def __repr__(self) -> str:
        return f"ConstantGenerator({self.constant!r})"
