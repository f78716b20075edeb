"""
py-citygen: procedural city district generator.
"""

from .core import (
    CityGenerator,
    CityOptions,
    GeneratedCity,
    InternalInvariantViolation,
    InvalidConfiguration,
    InvalidDimensions,
    generate_city,
)

__version__ = "0.1.0"

__all__ = ['CityGenerator', 'CityOptions', 'GeneratedCity', 'InternalInvariantViolation',
           'InvalidConfiguration', 'InvalidDimensions', 'generate_city']
