"""
Noise generators.

Each generator wraps one noise algorithm behind the same
`get((x, y, z)) -> float` contract and is configured by fragments.
"""

from .base import NoiseGenerator
from .basic import ConstantGenerator, ValueGenerator
from .cellular import WorleyGenerator
from .fractal import (
    BasicMultiGenerator, BillowGenerator, FbmGenerator,
    HybridMultiGenerator, RidgedMultiGenerator
)
from .simplex import OpenSimplexGenerator, SuperSimplexGenerator

__all__ = [
    "NoiseGenerator", "ConstantGenerator", "ValueGenerator", "WorleyGenerator",
    "BasicMultiGenerator", "BillowGenerator", "FbmGenerator",
    "HybridMultiGenerator", "RidgedMultiGenerator",
    "OpenSimplexGenerator", "SuperSimplexGenerator"
]
