"""
Boundary smoothing by cellular-automata relaxation.

A cell sharing its district with fewer than `threshold` of its eight
neighbors switches to the neighborhood majority. Updates are
simultaneous: each iteration reads a snapshot of the previous one and
writes into a fresh buffer.
"""

from typing import Dict

import numpy as np
import structlog

from .grid import NEIGHBOR_OFFSETS, CityGrid

logger = structlog.get_logger()

MINORITY_DIFFERENT_NEIGHBORS = 6


def majority_district(district: np.ndarray, x: int, y: int) -> int:
    """
    Most common district among the 8 neighbors of an interior cell.

    Ties go to the district seen first in neighbor order (left, right,
    up, down, then the diagonals).
    """
    counts: Dict[int, int] = {}
    for dx, dy in NEIGHBOR_OFFSETS:
        neighbor = int(district[y + dy, x + dx])
        counts[neighbor] = counts.get(neighbor, 0) + 1

    best, best_count = int(district[y, x]), 0
    for candidate, count in counts.items():
        if count > best_count:
            best, best_count = candidate, count
    return best


def smooth_step(district: np.ndarray, street: np.ndarray, threshold: int = 3) -> np.ndarray:
    """
    Run one relaxation pass.

    Args:
        district: Snapshot of district indices, not modified
        street: Street flags; street cells keep their district
        threshold: Minimum same-district neighbors for a cell to stay put

    Returns:
        New district buffer
    """
    height, width = district.shape
    updated = district.copy()

    for y in range(1, height - 1):
        for x in range(1, width - 1):
            if street[y, x]:
                continue

            current = district[y, x]
            same = sum(
                1 for dx, dy in NEIGHBOR_OFFSETS if district[y + dy, x + dx] == current
            )
            if same < threshold:
                updated[y, x] = majority_district(district, x, y)

    return updated


def smooth_boundaries(grid: CityGrid, iterations: int = 2, threshold: int = 3) -> int:
    """
    Smooth district boundaries in place.

    Returns:
        Total number of cell reassignments over all iterations
    """
    before = count_minority_cells(grid.district)
    changed = 0

    for iteration in range(iterations):
        snapshot = grid.district
        grid.district = smooth_step(snapshot, grid.street, threshold)
        step_changes = int(np.count_nonzero(grid.district != snapshot))
        changed += step_changes
        logger.debug("Smoothing iteration", iteration=iteration, changed=step_changes)

    logger.info(
        "Boundaries smoothed",
        iterations=iterations,
        changed=changed,
        minority_before=before,
        minority_after=count_minority_cells(grid.district),
    )
    return changed


def count_minority_cells(district: np.ndarray) -> int:
    """Count interior cells whose district differs from at least 6 of 8 neighbors."""
    height, width = district.shape
    if height < 3 or width < 3:
        return 0

    center = district[1:-1, 1:-1]
    different = np.zeros(center.shape, dtype=np.int32)
    for dx, dy in NEIGHBOR_OFFSETS:
        shifted = district[1 + dy : height - 1 + dy, 1 + dx : width - 1 + dx]
        different += shifted != center

    return int(np.count_nonzero(different >= MINORITY_DIFFERENT_NEIGHBORS))
