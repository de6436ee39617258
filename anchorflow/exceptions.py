"""
Exception types raised by AnchorFlow
"""

from pathlib import Path
from typing import Optional, Union


class AnchorFlowError(Exception):
    """Base class for all AnchorFlow errors"""


class MissingFileError(AnchorFlowError, FileNotFoundError):
    """A configuration or sample list file could not be read"""

    def __init__(
        self, path: Union[str, Path], file_type: str = "file", reason: str = "not found"
    ):
        self.path = Path(path)
        self.file_type = file_type
        super().__init__(f"{file_type} {reason}: {path}")


class ValidationError(AnchorFlowError, ValueError):
    """Required configuration fields are missing for the resolved mode"""


class MalformedListEntryError(ValidationError):
    """A sample list line lacks a path or a usable sample name"""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        super().__init__(message)
