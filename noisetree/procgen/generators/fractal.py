"""
Fractal generators built from octaves of gradient noise.
"""

import numpy as np

from ..grammar import RIDGED_LIMITS, ConfFragment, RidgedMultiConf
from ..modules import noise
from .base import MultiFractalMixin, NoiseGenerator, SeedableMixin


class FbmGenerator(MultiFractalMixin, SeedableMixin, NoiseGenerator):
    """Fractional Brownian motion: a plain sum of gradient octaves."""

    kind = "Fbm"

    def sample(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        return noise.fbm_noise(x, y, z, seed=self.seed, **self.fractal_params())


class BillowGenerator(MultiFractalMixin, SeedableMixin, NoiseGenerator):
    """Billowy octave sum, rounded lobes instead of smooth hills."""

    kind = "Billow"

    def sample(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        return noise.billow_noise(x, y, z, seed=self.seed, **self.fractal_params())


class HybridMultiGenerator(MultiFractalMixin, SeedableMixin, NoiseGenerator):
    kind = "HybridMulti"

    def sample(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        return noise.hybrid_multifractal(x, y, z, seed=self.seed, **self.fractal_params())


class BasicMultiGenerator(MultiFractalMixin, SeedableMixin, NoiseGenerator):
    kind = "BasicMulti"

    def sample(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        return noise.basic_multifractal(x, y, z, seed=self.seed, **self.fractal_params())


class RidgedMultiGenerator(MultiFractalMixin, SeedableMixin, NoiseGenerator):
    """
    Ridged multifractal noise.

    Accepts a `RidgedMulti` fragment on top of the usual multifractal
    and seed fragments to set the feedback attenuation.
    """

    kind = "RidgedMulti"

    persistence = 1.0
    attenuation = 2.0

    def configure(self, conf: ConfFragment) -> None:
        if isinstance(conf, RidgedMultiConf):
            self.attenuation = RIDGED_LIMITS.clamp(conf.model_dump())["attenuation"]
        else:
            super().configure(conf)

    def sample(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        return noise.ridged_multifractal(
            x, y, z,
            attenuation=self.attenuation,
            seed=self.seed,
            **self.fractal_params()
        )
