"""
Configuration modules for city generation.
"""

from .archetypes import (
    ARCHETYPES,
    DEFAULT_ARCHETYPES,
    DistrictArchetype,
    get_archetype,
    list_archetypes,
)
from .config import Settings, settings
from .logging_config import configure_logging

__all__ = ['ARCHETYPES', 'DEFAULT_ARCHETYPES', 'DistrictArchetype', 'get_archetype',
           'list_archetypes', 'Settings', 'settings', 'configure_logging']
