"""
AnchorFlow: multi-sample dispatch for DHS-anchor interaction analyses

AnchorFlow reads a key=value configuration describing one or more samples,
resolves which input mode it uses, runs one single-sample analysis per
sample in parallel and optionally merges the resulting genome browser
tracks once every sample has finished.

Example:
    >>> from anchorflow import AnchorFlowRun
    >>> report = AnchorFlowRun("analysis.conf").run()
"""

import logging
from importlib import metadata

try:
    __version__ = metadata.version("anchorflow")
except metadata.PackageNotFoundError:
    __version__ = "0.1.0-dev"

from .config import Config, load_config
from .core import AnchorFlowRun, RunReport
from .dispatch import InputMode, resolve_mode
from .exceptions import (AnchorFlowError, MalformedListEntryError,
                         MissingFileError, ValidationError)
from .utils import setup_logging

__all__ = [
    "__version__",
    "AnchorFlowRun",
    "RunReport",
    "Config",
    "load_config",
    "InputMode",
    "resolve_mode",
    "setup_logging",
    "AnchorFlowError",
    "MissingFileError",
    "ValidationError",
    "MalformedListEntryError",
]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

