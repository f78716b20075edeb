"""
City generation pipeline.

Process:
1. initialize_grid() - Allocate cell buffers with elevation noise
2. place_seeds() - One anchor per district archetype
3. grow_regions() - Jittered nearest-seed partition
4. smooth_boundaries() - Cellular-automata relaxation of district edges
5. generate_streets() - Main roads between seeds, streets along borders
6. analyze_districts() - Membership, bounds and adjacency per district

Every call allocates its own grid and draws all randomness from one
CityPRNG, so a seed string reproduces the same city.
"""

import time
from typing import Any, Dict, List, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config.archetypes import DEFAULT_ARCHETYPES, DistrictArchetype
from ..config.config import settings
from .prng import CityPRNG, random_seed
from .districts import analyze_districts, build_cells
from .exceptions import InvalidConfiguration
from .grid import NoiseMode, initialize_grid, validate_dimensions
from .models import GeneratedCity
from .regions import grow_regions
from .seeds import place_seeds, validate_archetypes
from .smoothing import smooth_boundaries
from .streets import generate_streets
from .validation import check_district_references, check_full_assignment, check_seed_coverage

logger = structlog.get_logger()


class CityOptions(BaseModel):
    """City generation options."""

    model_config = ConfigDict(frozen=True)

    archetypes: List[DistrictArchetype] = Field(
        default_factory=lambda: list(DEFAULT_ARCHETYPES),
        description="District archetype catalog, one seed each",
    )

    # Grid
    base_elevation: float = Field(default=0.2, ge=0, description="Max random baseline elevation")
    noise_scale: float = Field(default=0.1, gt=0, description="Spatial frequency of noise samples")
    noise_amplitude: float = Field(default=0.5, ge=0, description="Weight of the noise term")
    noise_mode: NoiseMode = Field(default=NoiseMode.HASH, description="Elevation noise function")

    # Regions
    jitter: float = Field(default=1.0, ge=0, description="Max distance perturbation in cells")

    # Smoothing
    smoothing_iterations: int = Field(default=2, ge=0, description="Relaxation passes")
    smoothing_threshold: int = Field(
        default=3, ge=0, le=8, description="Same-district neighbors needed to keep a cell"
    )

    # Streets
    main_street_connections: int = Field(
        default=2, ge=0, description="Nearest seeds each seed connects to"
    )
    widen_main_streets: bool = Field(default=True, description="Mark orthogonal neighbors of main roads")
    boundary_street_probability: float = Field(
        default=0.3, ge=0, le=1, description="Chance of a street on each border cell"
    )

    # Invariants
    strict_districts: bool = Field(
        default=True, description="Fail when a seed loses all of its cells"
    )
    strict_min_extent: int = Field(
        default=20, ge=1, description="Smallest grid side on which strict_districts applies"
    )


def resolve_options(options: Union[CityOptions, Dict[str, Any], None]) -> CityOptions:
    """Build CityOptions from None, a mapping or an existing instance."""
    if options is None:
        return CityOptions()
    if isinstance(options, CityOptions):
        return options
    try:
        return CityOptions(**options)
    except ValidationError as e:
        raise InvalidConfiguration(f"Invalid city options: {e}") from e
    except TypeError as e:
        raise InvalidConfiguration(f"City options must be a mapping: {e}") from e


def validate_request(width, height, options: CityOptions) -> None:
    """Check all caller input before anything is allocated."""
    validate_dimensions(
        width, height, max_width=settings.max_city_width, max_height=settings.max_city_height
    )
    validate_archetypes(options.archetypes)


def generate_city(
    width: int,
    height: int,
    options: Union[CityOptions, Dict[str, Any], None] = None,
    seed: Optional[str] = None,
    prng: Optional[CityPRNG] = None,
) -> GeneratedCity:
    """
    Generate a complete city.

    Args:
        width: Grid width in cells
        height: Grid height in cells
        options: Generation options
        seed: Seed string; a random one is created when neither seed nor
            prng is given, and recorded in the result
        prng: Existing random source, takes precedence over seed; its
            seed is recorded only if nothing was drawn from it yet

    Returns:
        Immutable GeneratedCity

    Raises:
        InvalidConfiguration: bad dimensions or options, before allocation
        InternalInvariantViolation: the pipeline produced an inconsistent city
    """
    options = resolve_options(options)
    validate_request(width, height, options)

    if prng is None:
        if seed is None:
            seed = settings.default_seed or random_seed()
        prng = CityPRNG(seed)
    else:
        # a used source no longer reproduces from its seed
        seed = prng.seed if prng.fresh else None

    start_time = time.time()
    logger.info("Starting city generation", width=width, height=height, seed=seed)

    grid = initialize_grid(
        width,
        height,
        prng,
        base_elevation=options.base_elevation,
        noise_scale=options.noise_scale,
        noise_amplitude=options.noise_amplitude,
        noise_mode=options.noise_mode,
    )

    seeds = place_seeds(width, height, options.archetypes)

    grow_regions(grid, seeds, prng, jitter=options.jitter)
    check_full_assignment(grid)

    smooth_boundaries(
        grid, iterations=options.smoothing_iterations, threshold=options.smoothing_threshold
    )

    streets = generate_streets(
        grid,
        seeds,
        prng,
        connections=options.main_street_connections,
        widen=options.widen_main_streets,
        boundary_probability=options.boundary_street_probability,
    )

    cells = build_cells(grid, seeds)
    districts = analyze_districts(grid, cells, seeds, options.archetypes, prng)

    check_district_references(districts, seeds)
    check_seed_coverage(
        districts,
        seeds,
        grid,
        strict=options.strict_districts,
        min_extent=options.strict_min_extent,
    )

    city = GeneratedCity(
        width=width,
        height=height,
        seed=seed,
        cells=cells,
        districts=districts,
        streets=streets,
        seeds=seeds,
    )

    logger.info(
        "City generation complete",
        seed=seed,
        districts=len(districts),
        street_segments=len(streets),
        street_cells=grid.street_count(),
        generation_time_seconds=round(time.time() - start_time, 3),
    )
    return city


class CityGenerator:
    """
    Reusable generator configuration.

    Holds only width, height, options and seed; every generate() call
    runs the pipeline on a fresh grid. With a seed set, repeated calls
    return equal cities.
    """

    def __init__(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        options: Union[CityOptions, Dict[str, Any], None] = None,
        seed: Optional[str] = None,
    ) -> None:
        self.width = settings.default_city_width if width is None else width
        self.height = settings.default_city_height if height is None else height
        self.options = resolve_options(options)
        self.seed = seed if seed is not None else settings.default_seed

        validate_request(self.width, self.height, self.options)

    def generate(self) -> GeneratedCity:
        return generate_city(self.width, self.height, options=self.options, seed=self.seed)
