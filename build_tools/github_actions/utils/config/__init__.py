"""Configuration module for loading, parsing, and validation."""

from .config_parser import ConfigParser
from .config_validator import (
    ConfigValidator,
    ConfigurationError,
    PLATFORMS_SCHEMA,
    BUILDS_SCHEMA,
)

__all__ = [
    'ConfigParser',
    'ConfigValidator',
    'ConfigurationError',
    'PLATFORMS_SCHEMA',
    'BUILDS_SCHEMA',
]
