"""
Data structures returned by city generation.

All models are frozen and their sequence fields are tuples, so a
GeneratedCity is handed to the caller as a finished value. The districts
mapping is a plain dict: reassigning the attribute is rejected, but the
dict itself is only read by convention.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class StreetType(str, Enum):
    """Street classification."""

    MAIN = "main"
    SECONDARY = "secondary"


class Point(BaseModel):
    """Integer grid coordinate."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int


class Cell(BaseModel):
    """A single grid cell of the generated city."""

    model_config = ConfigDict(frozen=True)

    x: int = Field(description="Column index")
    y: int = Field(description="Row index")
    district_id: Optional[str] = Field(default=None, description="Owning district")
    is_street: bool = Field(default=False, description="Cell is part of the street network")
    building_type: Optional[str] = Field(
        default=None, description="Building tag, set by consumers of the layout"
    )
    elevation: float = Field(default=0.0, description="Advisory noise-derived elevation")
    variation: int = Field(default=0, description="Sprite variety tag (0-2)")


class DistrictSeed(BaseModel):
    """Anchor point of one district archetype."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="District identifier")
    type: str = Field(description="Archetype tag")
    center_x: int = Field(description="Anchor column")
    center_y: int = Field(description="Anchor row")
    color: str = Field(description="District color in hex format")
    influence: float = Field(default=1.0, description="Reserved influence weight")

    @property
    def center(self) -> Point:
        return Point(x=self.center_x, y=self.center_y)


class StreetSegment(BaseModel):
    """Vector projection of a rasterized street."""

    model_config = ConfigDict(frozen=True)

    start: Point
    end: Point
    type: StreetType = StreetType.MAIN


class Bounds(BaseModel):
    """Axis-aligned bounding box in cell units."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    width: int
    height: int

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height


class DistrictInfo(BaseModel):
    """Derived description of one district in the final grid."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="District identifier")
    name: str = Field(description="Display name")
    type: str = Field(description="Archetype tag")
    cells: Tuple[Cell, ...] = Field(description="Member cells, streets excluded")
    bounds: Bounds = Field(description="Bounding box of member cells")
    center: Point = Field(description="Seed anchor")
    neighbors: Tuple[str, ...] = Field(default=(), description="Adjacent district ids, sorted")
    color: str = Field(description="District color in hex format")
    scene_strength: int = Field(default=10, description="Initial scene strength")
    rent_multiplier: float = Field(default=1.0, description="Relative rent level")


class GeneratedCity(BaseModel):
    """Immutable output bundle of one generation run."""

    model_config = ConfigDict(frozen=True)

    width: int
    height: int
    seed: Optional[str] = Field(default=None, description="PRNG seed used for generation")
    cells: Tuple[Tuple[Cell, ...], ...] = Field(description="Grid rows, indexed cells[y][x]")
    districts: Dict[str, DistrictInfo] = Field(description="District id to district info")
    streets: Tuple[StreetSegment, ...] = ()
    seeds: Tuple[DistrictSeed, ...] = ()

    def cell_at(self, x: int, y: int) -> Cell:
        """Get the cell at column x, row y."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Cell ({x}, {y}) is outside {self.width}x{self.height} grid")
        return self.cells[y][x]

    def district_at(self, x: int, y: int) -> Optional[DistrictInfo]:
        """Get the district owning the cell at (x, y), if it survived analysis."""
        district_id = self.cell_at(x, y).district_id
        if district_id is None:
            return None
        return self.districts.get(district_id)

    def street_cells(self) -> List[Cell]:
        return [cell for row in self.cells for cell in row if cell.is_street]

    def districts_of_type(self, district_type: str) -> List[DistrictInfo]:
        return [d for d in self.districts.values() if d.type == district_type]

    def adjacency(self) -> Dict[str, List[str]]:
        """District adjacency as an ordered map of sorted neighbor lists."""
        return {district_id: list(d.neighbors) for district_id, d in self.districts.items()}

    def to_json(self) -> str:
        """Serialize the whole city for persistence."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str) -> "GeneratedCity":
        return cls.model_validate_json(data)
