"""
Noise functions for scalar field generation.

Numpy implementations of the lattice noise algorithms behind the
generator kinds:
- Gradient (Perlin-style) noise and its fractal sums
- Value noise
- Worley noise (cellular)

Every kernel takes flat float64 coordinate arrays of equal shape and
returns an array of the same shape, roughly in [-1, 1].
"""

import itertools
from typing import Callable, Dict

import numpy as np


MASK32 = np.uint64(0xFFFFFFFF)

# Edge midpoints of a cube, the classic 3D gradient set
GRADIENTS_3D = np.array([
    [1, 1, 0], [-1, 1, 0], [1, -1, 0], [-1, -1, 0],
    [1, 0, 1], [-1, 0, 1], [1, 0, -1], [-1, 0, -1],
    [0, 1, 1], [0, -1, 1], [0, 1, -1], [0, -1, -1],
], dtype=np.float64)


def hash_coord(ix: np.ndarray, iy: np.ndarray, iz: np.ndarray, seed: int = 0) -> np.ndarray:
    """32-bit integer hash of lattice coordinates."""
    h = (
        ix.astype(np.uint64) * np.uint64(374761393)
        + iy.astype(np.uint64) * np.uint64(668265263)
        + iz.astype(np.uint64) * np.uint64(2147483647)
        + np.uint64(seed & 0xFFFFFFFF) * np.uint64(2246822519)
    ) & MASK32
    h ^= h >> np.uint64(13)
    h = (h * np.uint64(1274126177)) & MASK32
    h ^= h >> np.uint64(16)
    return h


def hash_to_unit(h: np.ndarray) -> np.ndarray:
    """Map a 32-bit hash to [0, 1]."""
    return h.astype(np.float64) / 4294967295.0


def fade(t: np.ndarray) -> np.ndarray:
    """Quintic interpolation curve (6t^5 - 15t^4 + 10t^3)."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(a, b, t):
    return a + t * (b - a)


def _lattice(x: np.ndarray, y: np.ndarray, z: np.ndarray):
    """Split coordinates into integer cell and fractional offset."""
    x0 = np.floor(x)
    y0 = np.floor(y)
    z0 = np.floor(z)
    return (
        x0.astype(np.int64), y0.astype(np.int64), z0.astype(np.int64),
        x - x0, y - y0, z - z0,
    )


def _trilinear(corner: Callable, fx, fy, fz) -> np.ndarray:
    """Blend the eight corner values of each cell with faded weights."""
    u = fade(fx)
    v = fade(fy)
    w = fade(fz)

    x00 = lerp(corner(0, 0, 0), corner(1, 0, 0), u)
    x10 = lerp(corner(0, 1, 0), corner(1, 1, 0), u)
    x01 = lerp(corner(0, 0, 1), corner(1, 0, 1), u)
    x11 = lerp(corner(0, 1, 1), corner(1, 1, 1), u)

    y0 = lerp(x00, x10, v)
    y1 = lerp(x01, x11, v)
    return lerp(y0, y1, w)


def gradient_noise(x: np.ndarray, y: np.ndarray, z: np.ndarray, seed: int = 0) -> np.ndarray:
    """
    Single octave of 3D gradient noise.

    Args:
        x, y, z: Coordinate arrays
        seed: Random seed

    Returns:
        Noise values in range approximately [-1, 1]
    """

    ix, iy, iz, fx, fy, fz = _lattice(x, y, z)

    def corner(dx, dy, dz):
        h = hash_coord(ix + dx, iy + dy, iz + dz, seed)
        g = GRADIENTS_3D[(h % np.uint64(12)).astype(np.intp)]
        return g[:, 0] * (fx - dx) + g[:, 1] * (fy - dy) + g[:, 2] * (fz - dz)

    return _trilinear(corner, fx, fy, fz)


def value_noise(x: np.ndarray, y: np.ndarray, z: np.ndarray, seed: int = 0) -> np.ndarray:
    """Smoothly interpolated hashed lattice values in [-1, 1]."""

    ix, iy, iz, fx, fy, fz = _lattice(x, y, z)

    def corner(dx, dy, dz):
        return hash_to_unit(hash_coord(ix + dx, iy + dy, iz + dz, seed)) * 2.0 - 1.0

    return _trilinear(corner, fx, fy, fz)


def fbm_noise(
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    frequency: float = 1.0,
    octaves: int = 6,
    persistence: float = 0.5,
    lacunarity: float = 2.0,
    seed: int = 0
) -> np.ndarray:
    """
    Generate fractional Brownian motion (fBm) noise.

    Args:
        x, y, z: Coordinate arrays
        frequency: Base frequency of the noise
        octaves: Number of octaves to sum
        persistence: Amplitude reduction per octave
        lacunarity: Frequency multiplication per octave
        seed: Random seed

    Returns:
        Noise values in range approximately [-1, 1]
    """

    total = np.zeros_like(x)
    amplitude = 1.0
    freq = frequency
    max_value = 0.0

    for i in range(octaves):
        total += gradient_noise(x * freq, y * freq, z * freq, seed + i) * amplitude
        max_value += amplitude

        amplitude *= persistence
        freq *= lacunarity

    return total / max_value


def billow_noise(
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    frequency: float = 1.0,
    octaves: int = 6,
    persistence: float = 0.5,
    lacunarity: float = 2.0,
    seed: int = 0
) -> np.ndarray:
    """
    Generate billowy noise (puffy, cloud-like lobes).

    Same octave sum as fBm, but each octave is folded with 2|n| - 1.
    """

    total = np.zeros_like(x)
    amplitude = 1.0
    freq = frequency
    max_value = 0.0

    for i in range(octaves):
        signal = gradient_noise(x * freq, y * freq, z * freq, seed + i)
        total += (2.0 * np.abs(signal) - 1.0) * amplitude
        max_value += amplitude

        amplitude *= persistence
        freq *= lacunarity

    return total / max_value


def ridged_multifractal(
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    frequency: float = 1.0,
    octaves: int = 6,
    persistence: float = 1.0,
    lacunarity: float = 2.0,
    attenuation: float = 2.0,
    seed: int = 0
) -> np.ndarray:
    """
    Generate ridged multifractal noise (good for mountain ridges).

    Each octave's ridge signal is weighted by the previous octave, so
    detail accumulates on the ridges and valleys stay smooth.

    Args:
        x, y, z: Coordinate arrays
        frequency: Base frequency
        octaves: Number of octaves
        persistence: Amplitude reduction per octave
        lacunarity: Frequency multiplication per octave
        attenuation: Divisor applied to the feedback weight
        seed: Random seed

    Returns:
        Noise values
    """

    total = np.zeros_like(x)
    weight = np.ones_like(x)
    amplitude = 1.0
    freq = frequency
    max_value = 0.0

    for i in range(octaves):
        signal = gradient_noise(x * freq, y * freq, z * freq, seed + i)

        # Create ridges by taking absolute value and inverting
        signal = 1.0 - np.abs(signal)
        signal = signal * signal * weight

        weight = np.clip(signal / attenuation, 0.0, 1.0)

        total += signal * amplitude
        max_value += amplitude

        amplitude *= persistence
        freq *= lacunarity

    return (total / max_value) * 2.0 - 1.0


def hybrid_multifractal(
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    frequency: float = 1.0,
    octaves: int = 6,
    persistence: float = 0.5,
    lacunarity: float = 2.0,
    seed: int = 0
) -> np.ndarray:
    """Multifractal where each octave is scaled by the running signal."""

    freq = frequency
    amplitude = 1.0
    result = gradient_noise(x * freq, y * freq, z * freq, seed)
    weight = result
    max_value = 1.0

    for i in range(1, octaves):
        freq *= lacunarity
        amplitude *= persistence

        weight = np.minimum(weight, 1.0)
        signal = gradient_noise(x * freq, y * freq, z * freq, seed + i) * amplitude
        result = result + weight * signal
        weight = weight * signal
        max_value += amplitude

    return result / max_value


def basic_multifractal(
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    frequency: float = 1.0,
    octaves: int = 6,
    persistence: float = 0.5,
    lacunarity: float = 2.0,
    seed: int = 0
) -> np.ndarray:
    """Multifractal where higher octaves are multiplied into the result."""

    freq = frequency
    amplitude = 1.0
    result = gradient_noise(x * freq, y * freq, z * freq, seed)

    for i in range(1, octaves):
        freq *= lacunarity
        amplitude *= persistence

        signal = gradient_noise(x * freq, y * freq, z * freq, seed + i) * amplitude
        result = result + signal * result

    return result * 0.5


RANGE_FUNCTIONS: Dict[str, Callable] = {
    "euclidean": lambda dx, dy, dz: np.sqrt(dx * dx + dy * dy + dz * dz),
    "euclideanSquared": lambda dx, dy, dz: dx * dx + dy * dy + dz * dz,
    "manhattan": lambda dx, dy, dz: np.abs(dx) + np.abs(dy) + np.abs(dz),
    "chebyshev": lambda dx, dy, dz: np.maximum(np.maximum(np.abs(dx), np.abs(dy)), np.abs(dz)),
    "quadratic": lambda dx, dy, dz: (
        dx * dx + dy * dy + dz * dz + dx * dy + dx * dz + dy * dz
    ),
}


def worley_noise(
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    frequency: float = 1.0,
    displacement: float = 1.0,
    range_function: str = "euclidean",
    enable_range: bool = False,
    seed: int = 0
) -> np.ndarray:
    """
    Generate Worley (cellular) noise.

    Creates cell-like patterns: each point takes the random value of
    the nearest feature point, optionally plus its distance.

    Args:
        x, y, z: Coordinate arrays
        frequency: Cell density (higher = smaller cells)
        displacement: Scale of the per-cell random value
        range_function: Name of the distance function
        enable_range: Add the distance to the nearest point to the output
        seed: Random seed

    Returns:
        Cell values, plus scaled distance when enabled
    """

    distance = RANGE_FUNCTIONS[range_function]

    # Scale coordinates
    sx = x * frequency
    sy = y * frequency
    sz = z * frequency

    cell_x, cell_y, cell_z, _, _, _ = _lattice(sx, sy, sz)

    min_dist = np.full_like(sx, np.inf)
    nearest_value = np.zeros_like(sx)

    # Check neighboring cells
    for dx, dy, dz in itertools.product((-1, 0, 1), repeat=3):
        nx = cell_x + dx
        ny = cell_y + dy
        nz = cell_z + dz

        # Random feature point inside the neighbor cell
        point_x = nx + hash_to_unit(hash_coord(nx, ny, nz, seed))
        point_y = ny + hash_to_unit(hash_coord(nx, ny, nz, seed + 1))
        point_z = nz + hash_to_unit(hash_coord(nx, ny, nz, seed + 2))

        dist = distance(sx - point_x, sy - point_y, sz - point_z)
        closer = dist < min_dist

        min_dist = np.where(closer, dist, min_dist)
        cell_value = hash_to_unit(hash_coord(nx, ny, nz, seed + 3)) * 2.0 - 1.0
        nearest_value = np.where(closer, cell_value, nearest_value)

    value = min_dist * 2.0 - 1.0 if enable_range else 0.0
    return value + displacement * nearest_value
