"""Invariant checks run on the pipeline output before it is returned."""

from typing import Dict, Sequence

import structlog

from .exceptions import InternalInvariantViolation
from .grid import CityGrid
from .models import DistrictInfo, DistrictSeed

logger = structlog.get_logger()


def check_full_assignment(grid: CityGrid) -> None:
    """Every cell must belong to a district after region growth."""
    missing = grid.unassigned_count()
    if missing:
        raise InternalInvariantViolation(f"{missing} cells have no district after region growth")


def check_district_references(
    districts: Dict[str, DistrictInfo], seeds: Sequence[DistrictSeed]
) -> None:
    """Every district and every neighbor reference must name a known seed."""
    seed_ids = {s.id for s in seeds}
    for district_id, info in districts.items():
        if district_id not in seed_ids:
            raise InternalInvariantViolation(f"District {district_id} has no seed")
        unknown = [n for n in info.neighbors if n not in districts]
        if unknown:
            raise InternalInvariantViolation(
                f"District {district_id} lists unknown neighbors {unknown}"
            )


def check_seed_coverage(
    districts: Dict[str, DistrictInfo],
    seeds: Sequence[DistrictSeed],
    grid: CityGrid,
    strict: bool = True,
    min_extent: int = 20,
) -> None:
    """
    Every seed should own a district in the final map.

    On grids smaller than `min_extent` in either direction streets can
    legitimately swallow a district, so a missing one is only logged.
    """
    vanished = [s.id for s in seeds if s.id not in districts]
    if not vanished:
        return

    if strict and min(grid.width, grid.height) >= min_extent:
        raise InternalInvariantViolation(
            f"Seeds without surviving district: {vanished}"
        )

    logger.warning(
        "Districts vanished under streets",
        vanished=vanished,
        width=grid.width,
        height=grid.height,
    )
