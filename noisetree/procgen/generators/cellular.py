"""
Cellular (Worley) generator.
"""

import numpy as np

from ..grammar import WORLEY_LIMITS, ConfFragment, RangeFunction, WorleyConf
from ..modules import noise
from .base import NoiseGenerator, SeedableMixin


class WorleyGenerator(SeedableMixin, NoiseGenerator):
    """
    Worley noise over a jittered cell lattice.

    Configured by `Seedable` and `Worley` fragments.  With the range
    function disabled the output is the nearest cell's value only,
    which gives flat Voronoi cells.
    """

    kind = "Worley"

    range_function = RangeFunction.EUCLIDEAN
    enable_range = False
    frequency = 1.0
    displacement = 1.0

    def configure(self, conf: ConfFragment) -> None:
        if isinstance(conf, WorleyConf):
            params = WORLEY_LIMITS.clamp(conf.model_dump())
            self.range_function = conf.range_function
            self.enable_range = conf.range_function_enabled
            self.frequency = params["worley_frequency"]
            self.displacement = params["displacement"]
        else:
            super().configure(conf)

    def sample(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        return noise.worley_noise(
            x, y, z,
            frequency=self.frequency,
            displacement=self.displacement,
            range_function=self.range_function.value,
            enable_range=self.enable_range,
            seed=self.seed
        )
