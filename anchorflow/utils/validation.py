"""
Validation utilities for AnchorFlow
"""

import logging
import shutil
from pathlib import Path
from typing import Dict, List, Sequence, Union

from ..config import Config
from ..config.options import PATH_OPTIONS

logger = logging.getLogger(__name__)


def validate_file_exists(file_path: Union[str, Path], file_type: str = "file") -> bool:
    """
    Validate that a file exists

    Args:
        file_path: Path to file
        file_type: Type description for error messages

    Returns:
        True if file exists, False otherwise
    """
    path = Path(file_path)

    if not path.exists():
        logger.warning(f"{file_type} not found: {path}")
        return False

    if not path.is_file():
        logger.warning(f"{file_type} is not a file: {path}")
        return False

    return True


def validate_directory_exists(
    dir_path: Union[str, Path], create_if_missing: bool = False
) -> bool:
    """
    Validate that a directory exists

    Args:
        dir_path: Path to directory
        create_if_missing: Whether to create directory if missing

    Returns:
        True if directory exists or was created, False otherwise
    """
    path = Path(dir_path)

    if not path.exists():
        if create_if_missing:
            try:
                path.mkdir(parents=True, exist_ok=True)
                logger.info(f"Created directory: {path}")
                return True
            except OSError as e:
                logger.error(f"Could not create directory {path}: {e}")
                return False
        logger.error(f"Directory not found: {path}")
        return False

    if not path.is_dir():
        logger.error(f"Path is not a directory: {path}")
        return False

    return True


def validate_external_tools(tools: Sequence[str]) -> Dict[str, bool]:
    """
    Check if external command-line tools are on the PATH

    Args:
        tools: List of tool names/commands

    Returns:
        Dictionary mapping tool names to availability status
    """
    results = {}

    for tool in tools:
        results[tool] = shutil.which(tool) is not None
        logger.debug(f"Tool {tool}: {'available' if results[tool] else 'not found'}")

    return results


def validate_input_files(config: Config) -> List[str]:
    """
    Validate input files named in the configuration

    Args:
        config: AnchorFlow configuration object

    Returns:
        List of validation issues
    """
    issues = []

    for key in PATH_OPTIONS:
        file_path = config[key]
        if file_path and not validate_file_exists(file_path, key):
            issues.append(f"{key} file not found: {file_path}")

    return issues
