"""
Analysis and merge invocations
"""

import logging
import os
import shlex
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..config import Config
from ..exceptions import ValidationError
from .modes import InputMode
from .samples import SampleSpec

logger = logging.getLogger(__name__)

DEFAULT_ANALYSIS_COMMAND = "single-sample-analysis"
DEFAULT_MERGE_COMMAND = "merge-tracks"

ANALYSIS_COMMAND_ENV = "ANCHORFLOW_ANALYSIS_CMD"
MERGE_COMMAND_ENV = "ANCHORFLOW_MERGE_CMD"

ANCHORS_FILENAME = "anchors.bed"


def resolve_command(
    command: Optional[Union[str, Sequence[str]]], env_var: str, default: str
) -> List[str]:
    """Split an external command given explicitly, by environment, or by default"""
    if command is None:
        command = os.environ.get(env_var) or default
    if isinstance(command, str):
        try:
            argv = shlex.split(command)
        except ValueError as e:
            raise ValidationError(f"Cannot parse command {command!r}: {e}") from e
    else:
        argv = list(command)
    if not argv:
        raise ValidationError("External command is empty")
    return argv


@dataclass(frozen=True)
class AnalysisInvocation:
    """Arguments of one single-sample analysis run"""

    config_path: Path
    sample: SampleSpec
    out_dir: Path
    mode: InputMode

    @property
    def name(self) -> str:
        return self.sample.label

    def arguments(self) -> List[str]:
        """Arguments following the analysis command"""
        args = [str(self.config_path)]
        if not self.mode.is_multi_sample:
            return args

        args += [
            self.mode.input_flag,
            self.sample.input_path,
            "-out",
            str(self.out_dir),
            "-sample",
            self.sample.sample_name,
            "-track",
            str(self.sample.ordinal),
            "-numSamples",
            str(self.sample.total),
        ]
        return args

    def command(self, analysis_cmd: Sequence[str]) -> List[str]:
        return list(analysis_cmd) + self.arguments()


@dataclass(frozen=True)
class MergeInvocation:
    """Arguments of the track merging run"""

    anchors_file: Path
    out_dir: Path
    sample_source: Path
    assembly: str

    @property
    def name(self) -> str:
        return "merge_tracks"

    def arguments(self) -> List[str]:
        return [
            str(self.anchors_file),
            str(self.out_dir),
            str(self.sample_source),
            self.assembly,
        ]

    def command(self, merge_cmd: Sequence[str]) -> List[str]:
        return list(merge_cmd) + self.arguments()


def sample_out_dir(config: Config, sample: SampleSpec) -> Path:
    """Output directory of a sample: outDirectory/sampleName, or outDirectory"""
    out_directory = Path(config.out_directory)
    if sample.is_multi_sample and sample.is_well_formed:
        return out_directory / sample.sample_name
    return out_directory


def build_invocations(
    config: Config, mode: InputMode, samples: Sequence[SampleSpec]
) -> List[AnalysisInvocation]:
    """Build one analysis invocation per sample"""
    if config.source is None:
        raise ValueError("Configuration was not loaded from a file")

    invocations = [
        AnalysisInvocation(
            config_path=config.source,
            sample=sample,
            out_dir=sample_out_dir(config, sample),
            mode=mode,
        )
        for sample in samples
    ]

    check_unique_out_dirs(invocations)
    return invocations


def check_unique_out_dirs(invocations: Sequence[AnalysisInvocation]) -> None:
    """Reject runs where two well-formed samples would share an output directory"""
    counts = Counter(inv.out_dir for inv in invocations if inv.sample.is_well_formed)
    duplicated = sorted(str(path) for path, count in counts.items() if count > 1)
    if duplicated:
        raise ValidationError(
            f"duplicate sample output directories: {', '.join(duplicated)}"
        )


def build_merge_invocation(config: Config, mode: InputMode) -> MergeInvocation:
    """Build the track merging invocation of a run"""
    out_directory = Path(config.out_directory)
    if mode.is_multi_sample:
        sample_source = Path(config[mode.list_key])
    else:
        sample_source = config.source

    return MergeInvocation(
        anchors_file=out_directory / ANCHORS_FILENAME,
        out_dir=out_directory,
        sample_source=sample_source,
        assembly=config.assembly,
    )
