"""
District archetype catalog.

Each archetype is a named district category with one fixed anchor point,
given as a fraction of the grid extent, and a display color. The default
catalog places five archetypes in a quincunx: four anchors near the
quadrant centers and one at the grid center.
"""

from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DistrictArchetype(BaseModel):
    """Configuration for one district category."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(min_length=1, description="Archetype tag, e.g. 'downtown'")
    color: str = Field(description="Display color in hex format")
    anchor: Tuple[float, float] = Field(
        description="Normalized (x, y) anchor position in [0, 1] x [0, 1]"
    )
    names: Tuple[str, ...] = Field(
        default=("Unknown District",), min_length=1, description="Candidate district names"
    )
    rent_multiplier: float = Field(default=1.0, gt=0, description="Relative rent level")

    @field_validator("anchor")
    @classmethod
    def _anchor_in_unit_square(cls, anchor: Tuple[float, float]) -> Tuple[float, float]:
        x, y = anchor
        if not (0.0 <= x <= 1.0 and 0.0 <= y <= 1.0):
            raise ValueError(f"anchor {anchor} is outside [0, 1]")
        return anchor


DEFAULT_ARCHETYPES: List[DistrictArchetype] = [
    DistrictArchetype(
        type="downtown",
        color="#3B82F6",
        anchor=(0.3, 0.3),
        names=("Financial District", "City Center", "Metro Core"),
        rent_multiplier=2.0,
    ),
    DistrictArchetype(
        type="warehouse",
        color="#EF4444",
        anchor=(0.7, 0.3),
        names=("Industrial Zone", "Factory District", "The Docks"),
        rent_multiplier=0.8,
    ),
    DistrictArchetype(
        type="college",
        color="#10B981",
        anchor=(0.5, 0.5),
        names=("University Hill", "Campus Quarter", "Student Village"),
        rent_multiplier=1.2,
    ),
    DistrictArchetype(
        type="residential",
        color="#F59E0B",
        anchor=(0.3, 0.7),
        names=("Suburbs", "Oak Heights", "Riverside"),
        rent_multiplier=1.0,
    ),
    DistrictArchetype(
        type="arts",
        color="#8B5CF6",
        anchor=(0.7, 0.7),
        names=("Creative Quarter", "Gallery District", "Bohemian Village"),
        rent_multiplier=1.5,
    ),
]

ARCHETYPES: Dict[str, DistrictArchetype] = {a.type: a for a in DEFAULT_ARCHETYPES}


def get_archetype(name: str) -> DistrictArchetype:
    """Get an archetype from the default catalog by its type tag."""
    if name not in ARCHETYPES:
        raise KeyError(f"Unknown archetype: {name}")
    return ARCHETYPES[name]


def list_archetypes() -> List[str]:
    """List archetype tags in catalog order."""
    return [a.type for a in DEFAULT_ARCHETYPES]
