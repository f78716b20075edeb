"""Seed placement: one anchor per district archetype."""

import math
from typing import List, Sequence

import structlog

from ..config.archetypes import DistrictArchetype
from .exceptions import InvalidConfiguration
from .models import DistrictSeed

logger = structlog.get_logger()

# Absorbs float error in anchor * extent, e.g. 0.7 * 30 -> 20.999...
_ANCHOR_EPSILON = 1e-9


def district_id_for(index: int) -> str:
    return f"district_{index}"


def validate_archetypes(archetypes: Sequence[DistrictArchetype]) -> None:
    """Reject empty catalogs and duplicate archetype tags."""
    if not archetypes:
        raise InvalidConfiguration("Archetype catalog is empty")

    seen = set()
    for archetype in archetypes:
        if archetype.type in seen:
            raise InvalidConfiguration(f"Duplicate archetype: {archetype.type}")
        seen.add(archetype.type)


def anchor_to_cell(fraction: float, extent: int) -> int:
    """Scale a normalized anchor coordinate to a cell index inside [0, extent)."""
    index = math.floor(fraction * extent + _ANCHOR_EPSILON)
    return min(max(index, 0), extent - 1)


def place_seeds(
    width: int, height: int, archetypes: Sequence[DistrictArchetype]
) -> List[DistrictSeed]:
    """
    Create one seed per archetype at its fixed anchor.

    Args:
        width: Grid width
        height: Grid height
        archetypes: Archetype catalog; its order becomes the seed order

    Returns:
        Seeds in catalog order
    """
    validate_archetypes(archetypes)

    seeds = []
    for index, archetype in enumerate(archetypes):
        anchor_x, anchor_y = archetype.anchor
        seeds.append(
            DistrictSeed(
                id=district_id_for(index),
                type=archetype.type,
                center_x=anchor_to_cell(anchor_x, width),
                center_y=anchor_to_cell(anchor_y, height),
                color=archetype.color,
                influence=1.0,
            )
        )

    logger.debug(
        "Placed district seeds",
        seeds=[(s.type, s.center_x, s.center_y) for s in seeds],
    )
    return seeds
