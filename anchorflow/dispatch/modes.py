"""
Input mode resolution

Exactly one input mode is selected per run. A multi-sample list key takes
precedence over the single-sample keys, so a configuration may leave the
single-sample keys blank or filled without conflict.
"""

import logging
from enum import Enum
from typing import Optional

from ..config import Config
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


class InputMode(Enum):
    """Input mode of a run"""

    MATRIX_LIST = "matrices"
    REFERENCE_LIST = "references"
    SINGLE_SAMPLE = "single"

    @property
    def is_multi_sample(self) -> bool:
        return self is not InputMode.SINGLE_SAMPLE

    @property
    def list_key(self) -> Optional[str]:
        """Configuration key holding the sample list file"""
        if self is InputMode.SINGLE_SAMPLE:
            return None
        return self.value

    @property
    def input_flag(self) -> Optional[str]:
        """Analysis flag carrying each sample's input path"""
        return {
            InputMode.MATRIX_LIST: "-matrix",
            InputMode.REFERENCE_LIST: "-ref",
        }.get(self)

    @property
    def delimiter(self) -> Optional[str]:
        """Field separator of the sample list file"""
        return {
            InputMode.MATRIX_LIST: " ",
            InputMode.REFERENCE_LIST: "\t",
        }.get(self)


def resolve_mode(config: Config) -> InputMode:
    """
    Select the input mode of a configuration and check its required fields

    Args:
        config: Loaded configuration

    Returns:
        The selected InputMode

    Raises:
        ValidationError: if a field required by the selected mode is empty
    """
    if not config.is_set("anchor") or not config.is_set("outDirectory"):
        raise ValidationError("missing anchor or outDirectory")

    if not config["assembly"]:
        logger.debug(f"No assembly given, using {config.assembly}")

    if config.is_set("matrices"):
        mode = InputMode.MATRIX_LIST
    elif config.is_set("references"):
        if not config.is_set("db"):
            raise ValidationError("missing db")
        mode = InputMode.REFERENCE_LIST
    else:
        has_matrix = config.is_set("matrix")
        has_reference = config.is_set("reference") and config.is_set("db")
        if not (has_matrix or has_reference):
            raise ValidationError("missing reference or db")
        mode = InputMode.SINGLE_SAMPLE

    logger.info(f"Input mode: {mode.name}")
    return mode
