"""
Configuration management for AnchorFlow

This module provides loading, validation and snapshotting of the
key=value run configuration.
"""

from .config import (Config, expand_value, load_config, save_config,
                     validate_config)
from .options import DEFAULTS, OPTIONS, format_options_help

__all__ = [
    "Config",
    "load_config",
    "save_config",
    "validate_config",
    "expand_value",
    "OPTIONS",
    "DEFAULTS",
    "format_options_help",
]
