"""
Street network generation.

Main streets are straight Bresenham lines between each seed and its
nearest other seeds, widened by their orthogonal neighbors. Boundary
streets are scattered along district borders. Both passes only ever set
street flags, so re-marking a cell is harmless.
"""

from typing import List, Sequence, Tuple

import numpy as np
import structlog
from scipy.spatial.distance import cdist

from .prng import CityPRNG
from .grid import ORTHOGONAL_OFFSETS, CityGrid
from .models import DistrictSeed, Point, StreetSegment, StreetType

logger = structlog.get_logger()


def bresenham_line(start: Tuple[int, int], end: Tuple[int, int]) -> List[Tuple[int, int]]:
    """
    Rasterize a line between two integer points.

    Returns:
        (x, y) cells from start to end, both inclusive
    """
    x, y = start
    end_x, end_y = end
    dx = abs(end_x - x)
    dy = abs(end_y - y)
    sx = 1 if x < end_x else -1
    sy = 1 if y < end_y else -1
    err = dx - dy

    cells = []
    while True:
        cells.append((x, y))
        if x == end_x and y == end_y:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy
    return cells


def mark_street_cells(grid: CityGrid, segment: StreetSegment, widen: bool = True) -> int:
    """
    Mark the cells under a segment as street.

    Main segments also mark the four orthogonal neighbors of each
    traversed cell when `widen` is set.

    Returns:
        Number of cells newly marked
    """
    before = grid.street_count()
    wide = widen and segment.type == StreetType.MAIN

    for x, y in bresenham_line((segment.start.x, segment.start.y), (segment.end.x, segment.end.y)):
        if not grid.in_bounds(x, y):
            continue
        grid.street[y, x] = True
        if wide:
            for dx, dy in ORTHOGONAL_OFFSETS:
                if grid.in_bounds(x + dx, y + dy):
                    grid.street[y + dy, x + dx] = True

    return grid.street_count() - before


def nearest_seed_order(seeds: Sequence[DistrictSeed]) -> List[List[int]]:
    """For each seed, the other seed indices sorted by distance, ties by seed order."""
    centers = np.array([[s.center_x, s.center_y] for s in seeds], dtype=np.float64)
    distances = cdist(centers, centers)

    order = []
    for i in range(len(seeds)):
        ranked = np.argsort(distances[i], kind="stable")
        order.append([int(j) for j in ranked if j != i])
    return order


def generate_main_streets(
    grid: CityGrid,
    seeds: Sequence[DistrictSeed],
    connections: int = 2,
    widen: bool = True,
) -> List[StreetSegment]:
    """
    Connect every seed to its nearest other seeds with straight roads.

    Args:
        grid: Working grid, street flags are set in place
        seeds: District seeds
        connections: Number of nearest seeds each seed connects to
        widen: Mark orthogonal neighbors of main road cells as well

    Returns:
        One main segment per connection, in seed order
    """
    segments = []
    for i, ranked in enumerate(nearest_seed_order(seeds)):
        origin = seeds[i]
        for j in ranked[:connections]:
            target = seeds[j]
            segment = StreetSegment(
                start=Point(x=origin.center_x, y=origin.center_y),
                end=Point(x=target.center_x, y=target.center_y),
                type=StreetType.MAIN,
            )
            mark_street_cells(grid, segment, widen=widen)
            segments.append(segment)

    logger.debug("Main streets generated", segments=len(segments), street_cells=grid.street_count())
    return segments


def is_border_cell(grid: CityGrid, x: int, y: int) -> bool:
    """True if any 4-neighbor of an interior cell belongs to another district."""
    current = grid.district[y, x]
    return any(grid.district[y + dy, x + dx] != current for dx, dy in ORTHOGONAL_OFFSETS)


def add_boundary_streets(grid: CityGrid, prng: CityPRNG, probability: float = 0.3) -> int:
    """
    Scatter streets along district borders.

    Interior border cells that are not yet streets become streets with
    the given probability, one draw per such cell, row-major.

    Returns:
        Number of cells marked
    """
    marked = 0
    for y in range(1, grid.height - 1):
        for x in range(1, grid.width - 1):
            if grid.street[y, x] or not is_border_cell(grid, x, y):
                continue
            if prng.chance(probability):
                grid.street[y, x] = True
                marked += 1

    logger.debug("Boundary streets added", cells=marked)
    return marked


def generate_streets(
    grid: CityGrid,
    seeds: Sequence[DistrictSeed],
    prng: CityPRNG,
    connections: int = 2,
    widen: bool = True,
    boundary_probability: float = 0.3,
) -> List[StreetSegment]:
    """
    Build the full street network: main roads first, then boundary streets.

    Returns:
        Main street segments; boundary streets exist only as cell flags
    """
    segments = generate_main_streets(grid, seeds, connections=connections, widen=widen)
    boundary_cells = add_boundary_streets(grid, prng, probability=boundary_probability)

    logger.info(
        "Street network generated",
        main_segments=len(segments),
        boundary_cells=boundary_cells,
        street_cells=grid.street_count(),
    )
    return segments
