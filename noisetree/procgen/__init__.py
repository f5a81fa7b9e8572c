"""
Noise generator catalog.

This package provides:
- Numpy noise kernels (gradient, value, Worley and fractal sums)
- Configured generator objects behind one get((x, y, z)) contract
- The configuration fragment grammar and IR key table
- GeneratorCatalog: kind tag + fragments -> generator
"""

from .core import GeneratorCatalog, GeneratorSpec, build_generator, default_catalog
from .grammar import (
    ConfFragment, ConstantConf, ModuleRegistry, MultiFractalConf, ParameterLimits,
    RangeFunction, RidgedMultiConf, SeedableConf, WorleyConf
)
from .generators import NoiseGenerator

__all__ = [
    "GeneratorCatalog",
    "GeneratorSpec",
    "build_generator",
    "default_catalog",
    "NoiseGenerator",
    "ModuleRegistry",
    "ParameterLimits",
    "ConfFragment",
    "ConstantConf",
    "MultiFractalConf",
    "RangeFunction",
    "RidgedMultiConf",
    "SeedableConf",
    "WorleyConf"
]
