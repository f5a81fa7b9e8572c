"""
Noise kernels.

- noise: gradient, value and Worley noise plus their fractal sums
"""

from . import noise

__all__ = ["noise"]
