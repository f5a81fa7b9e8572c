"""
Base noise generator and configuration mixins.
"""

from abc import ABC, abstractmethod
from typing import Sequence, Union

import numpy as np

from ..grammar import (
    MULTIFRACTAL_LIMITS,
    ConfFragment,
    MultiFractalConf,
    SeedableConf,
)


Scalar = Union[float, np.ndarray]


class NoiseGenerator(ABC):
    """
    Base class for all noise generators.

    A generator maps a 3D coordinate to one scalar.  Coordinate
    components may be floats or numpy arrays that broadcast together;
    arrays yield an array of the broadcast shape, floats yield a float.
    """

    kind: str = ""

    def get(self, point: Sequence[Scalar]) -> Scalar:
        """Sample the generator at `point` = (x, y, z)."""

        x, y, z = point
        shape = np.broadcast_shapes(np.shape(x), np.shape(y), np.shape(z))
        flat = [
            np.broadcast_to(np.asarray(c, dtype=np.float64), shape).reshape(-1)
            for c in (x, y, z)
        ]

        values = self.sample(*flat)

        if shape == ():
            return float(values[0])
        return values.reshape(shape)

    @abstractmethod
    def sample(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        """Evaluate over flat coordinate arrays of equal length."""
        pass

    def configure(self, conf: ConfFragment) -> None:
        """Apply one configuration fragment.  Mixins handle their own kind."""
        raise TypeError(f"{type(self).__name__} cannot be configured with {conf.fragment}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class SeedableMixin:
    """Adds a 32-bit seed, configured by `Seedable` fragments."""

    seed: int = SeedableConf().numeric_seed()

    def configure(self, conf: ConfFragment) -> None:
        if isinstance(conf, SeedableConf):
            self.seed = conf.numeric_seed()
        else:
            super().configure(conf)


class MultiFractalMixin:
    """Adds octave parameters, configured by `MultiFractal` fragments."""

    octaves: int = 6
    frequency: float = 1.0
    lacunarity: float = 2.0
    persistence: float = 0.5

    def configure(self, conf: ConfFragment) -> None:
        if isinstance(conf, MultiFractalConf):
            params = MULTIFRACTAL_LIMITS.clamp(conf.model_dump())
            self.octaves = int(params["octaves"])
            self.frequency = params["frequency"]
            self.lacunarity = params["lacunarity"]
            self.persistence = params["persistence"]
        else:
            super().configure(conf)

    def fractal_params(self) -> dict:
        return {
            "frequency": self.frequency,
            "octaves": self.octaves,
            "persistence": self.persistence,
            "lacunarity": self.lacunarity,
        }
