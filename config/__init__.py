"""
Configuration management for godecl

Handles loading and validation of parse options.
"""

from .loader import ConfigurationError, ConfigurationLoader
from .defaults import DEFAULT_OPTIONS, ENV_VAR_MAPPING

__all__ = ["ConfigurationLoader", "ConfigurationError", "DEFAULT_OPTIONS", "ENV_VAR_MAPPING"]
