"""
Working grid for city generation.

The grid is a set of NumPy buffers allocated fresh for every generation
run. Stages mutate it in place; the orchestrator converts it into
immutable Cell models once all stages are done.
"""

import numbers
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np
import structlog

from .prng import CityPRNG
from .exceptions import InvalidDimensions

logger = structlog.get_logger()

UNASSIGNED = -1

# Neighbor offsets as (dx, dy). Order is significant: smoothing breaks
# majority ties by the first neighbor seen.
ORTHOGONAL_OFFSETS: List[Tuple[int, int]] = [(-1, 0), (1, 0), (0, -1), (0, 1)]
DIAGONAL_OFFSETS: List[Tuple[int, int]] = [(-1, -1), (1, -1), (-1, 1), (1, 1)]
NEIGHBOR_OFFSETS: List[Tuple[int, int]] = ORTHOGONAL_OFFSETS + DIAGONAL_OFFSETS


class NoiseMode(str, Enum):
    """Elevation noise flavours."""

    HASH = "hash"  # trigonometric hash texture, uncorrelated between cells
    VALUE = "value"  # smooth value noise over a hashed lattice


@dataclass
class CityGrid:
    """Mutable cell buffers, indexed [y, x]."""

    width: int
    height: int
    district: np.ndarray  # seed index per cell, UNASSIGNED until grown
    street: np.ndarray
    elevation: np.ndarray
    variation: np.ndarray

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def unassigned_count(self) -> int:
        return int(np.count_nonzero(self.district == UNASSIGNED))

    def street_count(self) -> int:
        return int(np.count_nonzero(self.street))


def validate_dimensions(
    width, height, max_width: Optional[int] = None, max_height: Optional[int] = None
) -> None:
    """
    Check that width and height describe a grid that can be allocated.

    Raises:
        InvalidDimensions: on non-integer, non-positive or oversized dimensions
    """
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidDimensions(f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidDimensions(f"{name} must be positive, got {value}")

    if max_width is not None and width > max_width:
        raise InvalidDimensions(f"width {width} exceeds maximum {max_width}")
    if max_height is not None and height > max_height:
        raise InvalidDimensions(f"height {height} exceeds maximum {max_height}")


def hash_noise(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """
    Trigonometric hash "noise" in (-1, 1).

    Not smooth: neighboring samples are effectively uncorrelated. The
    remainder keeps the sign of the sine term.
    """
    return np.fmod(np.sin(x * 12.9898 + y * 78.233) * 43758.5453, 1.0)


def value_noise(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Smooth 2D value noise in [-1, 1]."""
    x0 = np.floor(x)
    y0 = np.floor(y)
    fx = x - x0
    fy = y - y0

    def lattice(i, j):
        return np.abs(hash_noise(i, j)) * 2.0 - 1.0

    # smoothstep fade
    u = fx * fx * (3.0 - 2.0 * fx)
    v = fy * fy * (3.0 - 2.0 * fy)

    top = lattice(x0, y0) * (1 - u) + lattice(x0 + 1, y0) * u
    bottom = lattice(x0, y0 + 1) * (1 - u) + lattice(x0 + 1, y0 + 1) * u
    return top * (1 - v) + bottom * v


def sample_noise(
    width: int, height: int, scale: float, mode: NoiseMode = NoiseMode.HASH
) -> np.ndarray:
    """Sample the noise field at every cell, scaled by the spatial frequency."""
    xs = np.arange(width, dtype=np.float64) * scale
    ys = np.arange(height, dtype=np.float64) * scale
    grid_x, grid_y = np.meshgrid(xs, ys)

    if NoiseMode(mode) == NoiseMode.VALUE:
        return value_noise(grid_x, grid_y)
    return hash_noise(grid_x, grid_y)


def initialize_grid(
    width: int,
    height: int,
    prng: CityPRNG,
    base_elevation: float = 0.2,
    noise_scale: float = 0.1,
    noise_amplitude: float = 0.5,
    noise_mode: NoiseMode = NoiseMode.HASH,
) -> CityGrid:
    """
    Allocate a height x width grid with baseline elevation noise.

    Every cell starts unassigned and without street. Elevation is a small
    random baseline plus the sampled noise term.

    Args:
        width: Number of columns
        height: Number of rows
        prng: Random source; two draws are consumed per cell, row-major
        base_elevation: Upper bound of the random baseline
        noise_scale: Spatial frequency of the noise samples
        noise_amplitude: Weight of the noise term
        noise_mode: Noise function to sample

    Returns:
        Freshly allocated CityGrid
    """
    validate_dimensions(width, height)

    district = np.full((height, width), UNASSIGNED, dtype=np.int32)
    street = np.zeros((height, width), dtype=bool)

    # per cell: (baseline, variation) pair, row-major
    draws = prng.random_array(2 * width * height).reshape(height, width, 2)
    elevation = draws[:, :, 0] * base_elevation
    variation = (draws[:, :, 1] * 3).astype(np.int8)

    elevation += sample_noise(width, height, noise_scale, noise_mode) * noise_amplitude

    logger.debug(
        "Grid initialized",
        width=width,
        height=height,
        noise_mode=NoiseMode(noise_mode).value,
        elevation_min=float(elevation.min()),
        elevation_max=float(elevation.max()),
    )

    return CityGrid(
        width=width,
        height=height,
        district=district,
        street=street,
        elevation=elevation,
        variation=variation,
    )
