"""
Sample list parsing for multi-sample runs
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..config import Config
from ..exceptions import MalformedListEntryError, MissingFileError
from .modes import InputMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleSpec:
    """One sample of a run"""

    input_path: str
    sample_name: str
    ordinal: Optional[int] = None
    total: Optional[int] = None
    line_number: Optional[int] = None

    @property
    def is_multi_sample(self) -> bool:
        return self.ordinal is not None

    @property
    def label(self) -> str:
        if self.sample_name:
            return self.sample_name
        if self.ordinal is not None:
            return f"sample_{self.ordinal}"
        return "sample"

    def problems(self) -> List[str]:
        """Reasons this entry cannot be dispatched, empty when well formed"""
        if not self.is_multi_sample:
            return []

        missing = []
        if not self.input_path:
            missing.append("input path")
        if not self.sample_name:
            missing.append("sample name")
        if missing:
            return ["is missing its " + " and ".join(missing)]

        if not is_safe_sample_name(self.sample_name):
            return [
                f"has sample name {self.sample_name!r}, which is not a plain "
                "directory name"
            ]
        return []

    @property
    def is_well_formed(self) -> bool:
        return not self.problems()

    def check(self) -> None:
        """Raise MalformedListEntryError when the entry cannot be dispatched"""
        problems = self.problems()
        if problems:
            where = f" (line {self.line_number})" if self.line_number else ""
            raise MalformedListEntryError(
                f"Sample {self.ordinal}/{self.total}{where} {problems[0]}",
                line_number=self.line_number,
            )


def is_safe_sample_name(name: str) -> bool:
    """A sample name must stay inside outDirectory as a single component"""
    if name in (".", ".."):
        return False
    if os.path.isabs(name):
        return False
    separators = {"/", os.sep} | ({os.altsep} if os.altsep else set())
    return not any(sep in name for sep in separators)


def parse_list_line(line: str, delimiter: str) -> List[str]:
    """Return the first two fields of a list line, padding with empty strings"""
    fields = line.rstrip("\r\n").split(delimiter)
    fields += [""] * (2 - len(fields))
    return fields[:2]


def build_sample_list(mode: InputMode, list_file: Union[str, Path]) -> List[SampleSpec]:
    """
    Parse a sample list file into ordered SampleSpecs

    Matrix lists hold ``<matrix> <sample>`` per line (single space),
    reference lists ``<reference>\\t<sample>`` (single tab). Lines with a
    missing field are kept with an empty value and fail later, at dispatch.

    Args:
        mode: A multi-sample input mode
        list_file: Path to the sample list

    Returns:
        SampleSpecs with 1-based ordinals in file order
    """
    if not mode.is_multi_sample:
        raise ValueError(f"{mode.name} does not use a sample list")

    list_path = Path(list_file)
    if not list_path.is_file():
        raise MissingFileError(list_path, f"Sample list ({mode.list_key})")

    try:
        with open(list_path, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise MissingFileError(
            list_path, f"Sample list ({mode.list_key})", reason="is not readable"
        ) from e

    entries = []
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        input_path, sample_name = parse_list_line(line, mode.delimiter)
        if not input_path or not sample_name:
            logger.warning(
                f"{list_path}:{line_number}: expected two fields separated by "
                f"{mode.delimiter!r}, got {line!r}"
            )
        entries.append((line_number, input_path, sample_name))

    total = len(entries)
    samples = [
        SampleSpec(
            input_path=input_path,
            sample_name=sample_name,
            ordinal=ordinal,
            total=total,
            line_number=line_number,
        )
        for ordinal, (line_number, input_path, sample_name) in enumerate(entries, start=1)
    ]

    logger.info(f"Found {total} samples in {list_path}")
    return samples


def single_sample(config: Config) -> SampleSpec:
    """The implicit sample of a single-sample run"""
    input_path = config["matrix"] or config["reference"]
    return SampleSpec(input_path=input_path, sample_name="")


def collect_samples(config: Config, mode: InputMode) -> List[SampleSpec]:
    """Samples of a run for its resolved mode"""
    if mode.is_multi_sample:
        return build_sample_list(mode, config[mode.list_key])
    return [single_sample(config)]
