"""
Logging utilities for AnchorFlow
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

import colorlog

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: Union[str, int] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    format_string: Optional[str] = None,
    use_colors: bool = True,
) -> logging.Logger:
    """
    Set up logging for AnchorFlow

    Args:
        level: Logging level (INFO, DEBUG, etc.)
        log_file: Optional file to write logs to
        format_string: Custom format string
        use_colors: Whether to use colored output for console

    Returns:
        Configured package logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    if format_string is None:
        format_string = DEFAULT_FORMAT

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    if use_colors:
        console_handler = colorlog.StreamHandler(sys.stdout)
        console_formatter = colorlog.ColoredFormatter(
            "%(log_color)s" + format_string,
            datefmt=DATE_FORMAT,
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )
    else:
        console_handler = logging.StreamHandler(sys.stdout)
        console_formatter = logging.Formatter(format_string, datefmt=DATE_FORMAT)

    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(logging.Formatter(format_string, datefmt=DATE_FORMAT))
        file_handler.setLevel(level)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(level)

    anchorflow_logger = logging.getLogger("anchorflow")
    anchorflow_logger.setLevel(level)

    return anchorflow_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the anchorflow namespace"""
    if name.startswith("anchorflow"):
        return logging.getLogger(name)
    return logging.getLogger(f"anchorflow.{name}")


class UnitLogAdapter(logging.LoggerAdapter):
    """Prefix every message with the analysis unit it concerns"""

    def process(self, msg, kwargs):
        return f"[{self.extra['unit']}] {msg}", kwargs


class LoggerMixin:
    """Mixin class to add logging capability to any class"""

    @property
    def logger(self) -> logging.Logger:
        return get_logger(self.__class__.__name__.lower())

    def unit_logger(self, unit: str) -> UnitLogAdapter:
        """Logger whose messages name one sample or merge unit"""
        return UnitLogAdapter(self.logger, {"unit": unit})
