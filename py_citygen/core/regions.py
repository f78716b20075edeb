"""
Region growing: jittered nearest-seed partition of the grid.

Each cell joins the seed with the smallest perturbed Euclidean distance.
The perturbation breaks up the straight polygonal edges of an exact
Voronoi partition.
"""

from typing import Sequence

import numpy as np
import structlog
from scipy.spatial.distance import cdist

from .prng import CityPRNG
from .grid import UNASSIGNED, CityGrid
from .models import DistrictSeed

logger = structlog.get_logger()


def _seed_centers(seeds: Sequence[DistrictSeed]) -> np.ndarray:
    """Seed centers as an (n, 2) array of (x, y)."""
    return np.array([[s.center_x, s.center_y] for s in seeds], dtype=np.float64)


def seed_distances(grid: CityGrid, seeds: Sequence[DistrictSeed]) -> np.ndarray:
    """True distance from every cell to every seed, shape (height, width, n_seeds)."""
    ys, xs = np.mgrid[0 : grid.height, 0 : grid.width]
    cells = np.column_stack([xs.ravel(), ys.ravel()]).astype(np.float64)
    distances = cdist(cells, _seed_centers(seeds))
    return distances.reshape(grid.height, grid.width, len(seeds))


def grow_regions(
    grid: CityGrid, seeds: Sequence[DistrictSeed], prng: CityPRNG, jitter: float = 1.0
) -> None:
    """
    Assign every cell to the seed with the minimal jittered distance.

    One uniform offset in [-jitter, jitter) is drawn per (cell, seed)
    pair, row-major over cells and in seed order within a cell. Equal
    perturbed distances resolve to the earlier seed.

    Args:
        grid: Working grid, district buffer is overwritten
        seeds: Seeds in tie-break order
        prng: Random source for the jitter
        jitter: Maximum absolute perturbation in cells
    """
    distances = seed_distances(grid, seeds)

    offsets = (prng.random_array(distances.size) - 0.5) * 2.0 * jitter
    offsets = offsets.reshape(distances.shape)

    perturbed = distances + offsets
    # argmin returns the first minimum, i.e. the earlier seed on ties
    grid.district[:, :] = np.argmin(perturbed, axis=2)

    filled = fill_unassigned(grid, seeds)

    counts = np.bincount(grid.district.ravel(), minlength=len(seeds))
    logger.info(
        "Regions grown",
        seeds=len(seeds),
        fallback_filled=filled,
        cells_per_seed={s.id: int(c) for s, c in zip(seeds, counts)},
    )


def fill_unassigned(grid: CityGrid, seeds: Sequence[DistrictSeed]) -> int:
    """
    Assign any cell still unassigned to its nearest seed by true distance.

    Returns:
        Number of cells filled
    """
    missing = np.argwhere(grid.district == UNASSIGNED)
    if len(missing) == 0:
        return 0

    # argwhere yields (y, x); distances are measured in (x, y)
    points = missing[:, ::-1].astype(np.float64)
    nearest = np.argmin(cdist(points, _seed_centers(seeds)), axis=1)
    grid.district[missing[:, 0], missing[:, 1]] = nearest

    logger.warning("Filled unassigned cells by nearest seed", count=len(missing))
    return len(missing)
