"""Errors raised by the city generation pipeline."""


class CityGenerationError(Exception):
    """Base class for all city generation errors."""


class InvalidConfiguration(CityGenerationError, ValueError):
    """Caller supplied dimensions or options that cannot be generated."""


class InvalidDimensions(InvalidConfiguration):
    """Grid width or height is not a positive integer."""


class InternalInvariantViolation(CityGenerationError, RuntimeError):
    """The pipeline produced an inconsistent grid or district map."""
