"""
Utility functions and classes for AnchorFlow
"""

from .logging import LoggerMixin, UnitLogAdapter, get_logger, setup_logging
from .validation import (validate_directory_exists, validate_external_tools,
                         validate_file_exists, validate_input_files)

__all__ = [
    "setup_logging",
    "get_logger",
    "LoggerMixin",
    "UnitLogAdapter",
    "validate_file_exists",
    "validate_directory_exists",
    "validate_external_tools",
    "validate_input_files",
]
