"""Tests for district analysis and invariant checks."""

import numpy as np
import pytest

from py_citygen.config.archetypes import DEFAULT_ARCHETYPES
from py_citygen.core.prng import CityPRNG
from py_citygen.core.districts import (
    analyze_districts,
    build_cells,
    compute_bounds,
    district_adjacency,
)
from py_citygen.core.exceptions import InternalInvariantViolation
from py_citygen.core.grid import UNASSIGNED, CityGrid
from py_citygen.core.models import Cell
from py_citygen.core.seeds import place_seeds
from py_citygen.core.validation import (
    check_district_references,
    check_full_assignment,
    check_seed_coverage,
)


def grid_from(district, street=None):
    district = np.array(district, dtype=np.int32)
    height, width = district.shape
    if street is None:
        street = np.zeros((height, width), dtype=bool)
    return CityGrid(
        width=width,
        height=height,
        district=district,
        street=np.array(street, dtype=bool),
        elevation=np.zeros((height, width)),
        variation=np.zeros((height, width), dtype=np.int8),
    )


class TestDistrictAdjacency:
    """Test adjacency extraction."""

    def test_stripes(self):
        district = np.array([[0, 1, 2], [0, 1, 2], [0, 1, 2]])
        assert district_adjacency(district) == {0: {1}, 1: {0, 2}, 2: {1}}

    def test_diagonal_contact(self):
        """Cells touching only at a corner are neighbors."""
        district = np.array([[0, 1], [2, 0]])
        adjacency = district_adjacency(district)

        assert 2 in adjacency[1]
        assert 1 in adjacency[2]

    def test_uniform(self):
        assert district_adjacency(np.zeros((4, 4), dtype=np.int32)) == {}

    def test_single_cell(self):
        assert district_adjacency(np.zeros((1, 1), dtype=np.int32)) == {}

    def test_symmetric(self):
        rng = np.random.default_rng(7)
        district = rng.integers(0, 5, size=(12, 9))
        adjacency = district_adjacency(district)

        for a, neighbors in adjacency.items():
            for b in neighbors:
                assert a in adjacency[b]


class TestComputeBounds:
    def test_bounds(self):
        cells = [Cell(x=2, y=3), Cell(x=5, y=1), Cell(x=4, y=4)]
        bounds = compute_bounds(cells)

        assert (bounds.x, bounds.y, bounds.width, bounds.height) == (2, 1, 4, 4)
        assert bounds.contains(5, 4)
        assert not bounds.contains(6, 4)

    def test_single_cell_bounds(self):
        bounds = compute_bounds([Cell(x=0, y=0)])
        assert (bounds.width, bounds.height) == (1, 1)


class TestAnalyzeDistricts:
    """Test district derivation on hand-built grids."""

    @pytest.fixture
    def seeds(self):
        return place_seeds(4, 2, DEFAULT_ARCHETYPES[:2])

    def test_two_districts(self, seeds):
        street = [[False, True, False, False], [False, False, False, False]]
        grid = grid_from([[0, 0, 1, 1], [0, 0, 1, 1]], street)
        cells = build_cells(grid, seeds)

        districts = analyze_districts(grid, cells, seeds, DEFAULT_ARCHETYPES[:2], CityPRNG("d"))

        assert list(districts) == ["district_0", "district_1"]
        downtown = districts["district_0"]
        assert len(downtown.cells) == 3
        assert all(not c.is_street for c in downtown.cells)
        assert (downtown.bounds.x, downtown.bounds.y) == (0, 0)
        assert (downtown.bounds.width, downtown.bounds.height) == (2, 2)
        assert downtown.neighbors == ("district_1",)
        assert districts["district_1"].neighbors == ("district_0",)

    def test_display_attributes(self, seeds):
        grid = grid_from([[0, 0, 1, 1], [0, 0, 1, 1]])
        cells = build_cells(grid, seeds)

        districts = analyze_districts(grid, cells, seeds, DEFAULT_ARCHETYPES[:2], CityPRNG("d"))

        for index, (district_id, info) in enumerate(districts.items()):
            archetype = DEFAULT_ARCHETYPES[index]
            assert info.type == archetype.type
            assert info.name in archetype.names
            assert info.color == archetype.color
            assert info.rent_multiplier == archetype.rent_multiplier
            assert 10 <= info.scene_strength < 30
            assert (info.center.x, info.center.y) == (
                seeds[index].center_x,
                seeds[index].center_y,
            )

    def test_all_street_district_vanishes(self, seeds):
        street = [[False, False, True, True], [False, False, True, True]]
        grid = grid_from([[0, 0, 1, 1], [0, 0, 1, 1]], street)
        cells = build_cells(grid, seeds)

        districts = analyze_districts(grid, cells, seeds, DEFAULT_ARCHETYPES[:2], CityPRNG("d"))

        assert list(districts) == ["district_0"]
        # vanished districts are not listed as neighbors
        assert districts["district_0"].neighbors == ()

    def test_build_cells(self, seeds):
        grid = grid_from([[0, 0, 1, 1], [0, 0, 1, 1]])
        grid.elevation[1, 3] = 0.25
        grid.variation[1, 3] = 2
        cells = build_cells(grid, seeds)

        cell = cells[1][3]
        assert (cell.x, cell.y) == (3, 1)
        assert cell.district_id == "district_1"
        assert cell.elevation == 0.25
        assert cell.variation == 2
        assert cell.building_type is None


class TestValidation:
    """Test invariant checks."""

    @pytest.fixture
    def seeds(self):
        return place_seeds(30, 20, DEFAULT_ARCHETYPES)

    def test_full_assignment(self):
        check_full_assignment(grid_from(np.zeros((3, 3))))

    def test_unassigned_cell(self):
        grid = grid_from(np.zeros((3, 3)))
        grid.district[1, 1] = UNASSIGNED
        with pytest.raises(InternalInvariantViolation):
            check_full_assignment(grid)

    def test_unknown_district(self, seeds):
        grid = grid_from([[0, 0], [0, 0]])
        districts = analyze_districts(
            grid, build_cells(grid, seeds), seeds, DEFAULT_ARCHETYPES, CityPRNG("v")
        )
        with pytest.raises(InternalInvariantViolation):
            check_district_references(districts, seeds[1:])

    def test_missing_seed_on_large_grid(self, seeds):
        grid = grid_from(np.zeros((20, 30)))
        districts = analyze_districts(
            grid, build_cells(grid, seeds), seeds, DEFAULT_ARCHETYPES, CityPRNG("v")
        )
        with pytest.raises(InternalInvariantViolation):
            check_seed_coverage(districts, seeds, grid)

    def test_missing_seed_tolerated_on_small_grid(self, seeds):
        grid = grid_from(np.zeros((5, 5)))
        districts = analyze_districts(
            grid, build_cells(grid, seeds), seeds, DEFAULT_ARCHETYPES, CityPRNG("v")
        )
        check_seed_coverage(districts, seeds, grid)

    def test_missing_seed_tolerated_when_not_strict(self, seeds):
        grid = grid_from(np.zeros((20, 30)))
        districts = analyze_districts(
            grid, build_cells(grid, seeds), seeds, DEFAULT_ARCHETYPES, CityPRNG("v")
        )
        check_seed_coverage(districts, seeds, grid, strict=False)
