"""
District analysis over the final grid.

Groups non-street cells by district and derives bounds, adjacency and
display attributes for every district that still owns at least one
non-street cell.
"""

from typing import Dict, List, Sequence, Set

import numpy as np
import structlog

from ..config.archetypes import DistrictArchetype
from .prng import CityPRNG
from .grid import NEIGHBOR_OFFSETS, CityGrid
from .models import Bounds, Cell, DistrictInfo, DistrictSeed, Point

logger = structlog.get_logger()


def build_cells(grid: CityGrid, seeds: Sequence[DistrictSeed]) -> List[List[Cell]]:
    """Convert the working buffers into immutable Cell rows."""
    rows = []
    for y in range(grid.height):
        row = []
        for x in range(grid.width):
            index = int(grid.district[y, x])
            row.append(
                Cell(
                    x=x,
                    y=y,
                    district_id=seeds[index].id if index >= 0 else None,
                    is_street=bool(grid.street[y, x]),
                    building_type=None,
                    elevation=float(grid.elevation[y, x]),
                    variation=int(grid.variation[y, x]),
                )
            )
        rows.append(row)
    return rows


def district_adjacency(district: np.ndarray) -> Dict[int, Set[int]]:
    """
    Pairs of districts whose cells touch in the 8-neighborhood.

    Street cells count with the district they belong to. The result is
    symmetric because every offset is paired with its opposite.
    """
    height, width = district.shape
    adjacency: Dict[int, Set[int]] = {}

    for dx, dy in NEIGHBOR_OFFSETS:
        # overlap of the grid with itself shifted by (dx, dy)
        src = district[max(0, -dy) : height - max(0, dy), max(0, -dx) : width - max(0, dx)]
        dst = district[max(0, dy) : height + min(0, dy), max(0, dx) : width + min(0, dx)]
        mask = src != dst
        if not np.any(mask):
            continue
        pairs = np.unique(np.stack([src[mask], dst[mask]], axis=1), axis=0)
        for a, b in pairs:
            adjacency.setdefault(int(a), set()).add(int(b))

    return adjacency


def compute_bounds(cells: Sequence[Cell]) -> Bounds:
    min_x = min(c.x for c in cells)
    min_y = min(c.y for c in cells)
    max_x = max(c.x for c in cells)
    max_y = max(c.y for c in cells)
    return Bounds(x=min_x, y=min_y, width=max_x - min_x + 1, height=max_y - min_y + 1)


def analyze_districts(
    grid: CityGrid,
    cells: List[List[Cell]],
    seeds: Sequence[DistrictSeed],
    archetypes: Sequence[DistrictArchetype],
    prng: CityPRNG,
) -> Dict[str, DistrictInfo]:
    """
    Derive district membership, bounds and adjacency from the final grid.

    Args:
        grid: Final working grid
        cells: Cell models built from the grid
        seeds: Seeds in catalog order
        archetypes: Catalog aligned with seeds, for names and rent levels
        prng: Random source for names and scene strength

    Returns:
        District id to DistrictInfo, in seed order. Districts without
        non-street cells are left out.
    """
    members: Dict[int, List[Cell]] = {i: [] for i in range(len(seeds))}
    for y in range(grid.height):
        for x in range(grid.width):
            index = int(grid.district[y, x])
            if index >= 0 and not grid.street[y, x]:
                members[index].append(cells[y][x])

    surviving = {i for i, m in members.items() if m}
    adjacency = district_adjacency(grid.district)

    districts: Dict[str, DistrictInfo] = {}
    for index, seed in enumerate(seeds):
        if index not in surviving:
            continue

        archetype = archetypes[index]
        neighbors = tuple(
            sorted(seeds[n].id for n in adjacency.get(index, set()) if n in surviving)
        )
        name = prng.choice(archetype.names)
        scene_strength = prng.randint(20) + 10

        districts[seed.id] = DistrictInfo(
            id=seed.id,
            name=name,
            type=seed.type,
            cells=tuple(members[index]),
            bounds=compute_bounds(members[index]),
            center=Point(x=seed.center_x, y=seed.center_y),
            neighbors=neighbors,
            color=seed.color,
            scene_strength=scene_strength,
            rent_multiplier=archetype.rent_multiplier,
        )

    logger.info(
        "Districts analyzed",
        districts=len(districts),
        vanished=[s.id for i, s in enumerate(seeds) if i not in surviving],
    )
    return districts
