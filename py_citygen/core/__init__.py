"""
Core city generation functionality.
"""

from .prng import CityPRNG
from .city_generator import CityGenerator, CityOptions, generate_city
from .exceptions import (
    CityGenerationError,
    InternalInvariantViolation,
    InvalidConfiguration,
    InvalidDimensions,
)
from .grid import CityGrid, NoiseMode, initialize_grid
from .models import (
    Bounds,
    Cell,
    DistrictInfo,
    DistrictSeed,
    GeneratedCity,
    Point,
    StreetSegment,
    StreetType,
)

__all__ = ['CityPRNG', 'CityGenerator', 'CityOptions', 'generate_city',
           'CityGenerationError', 'InternalInvariantViolation', 'InvalidConfiguration',
           'InvalidDimensions', 'CityGrid', 'NoiseMode', 'initialize_grid',
           'Bounds', 'Cell', 'DistrictInfo', 'DistrictSeed', 'GeneratedCity', 'Point',
           'StreetSegment', 'StreetType']
