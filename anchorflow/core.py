"""
Core AnchorFlow run orchestrator
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

from .config import Config, load_config, save_config, validate_config
from .dispatch import (AnalysisInvocation, Dispatcher, DryRunExecutor,
                       Executor, InputMode, JobOutcome, LocalExecutor,
                       SampleResult, build_invocations, collect_samples,
                       resolve_mode, trigger_aggregation)
from .exceptions import ValidationError
from .utils import get_logger, validate_directory_exists, validate_input_files

logger = get_logger(__name__)

SUMMARY_FILE = "dispatch_summary.tsv"
RESOLVED_CONFIG_FILE = "resolved_config.yaml"


@dataclass
class RunReport:
    """Outcome of a complete run"""

    mode: InputMode
    results: List[SampleResult] = field(default_factory=list)
    merge_result: Optional[JobOutcome] = None
    execution_time: Optional[float] = None

    @property
    def n_failed(self) -> int:
        failed = sum(1 for r in self.results if not r.success)
        if self.merge_result is not None and not self.merge_result.success:
            failed += 1
        return failed

    @property
    def success(self) -> bool:
        return self.n_failed == 0


class AnchorFlowRun:
    """
    Orchestrates one AnchorFlow run

    Loads and validates the configuration, launches one single-sample
    analysis per sample, joins them and, when requested, merges the tracks.
    """

    def __init__(
        self,
        config: Union[str, Path, Config],
        executor: Optional[Executor] = None,
        analysis_cmd: Optional[Union[str, Sequence[str]]] = None,
        merge_cmd: Optional[Union[str, Sequence[str]]] = None,
    ):
        if isinstance(config, (str, Path)):
            self.config = load_config(config)
        elif isinstance(config, Config):
            self.config = config
        else:
            raise ValueError("Invalid config type. Expected str, Path, or Config object")

        self.executor = executor or LocalExecutor(modules=self.config.modules)
        if not self.executor.modules:
            self.executor.modules = self.config.modules
        self.analysis_cmd = analysis_cmd
        self.merge_cmd = merge_cmd

        self.mode: Optional[InputMode] = None
        self.invocations: List[AnalysisInvocation] = []

    def prepare(self) -> List[AnalysisInvocation]:
        """Resolve the input mode and build one invocation per sample"""
        for issue in validate_config(self.config):
            logger.warning(f"Configuration issue: {issue}")

        self.mode = resolve_mode(self.config)

        for issue in validate_input_files(self.config):
            logger.warning(issue)

        samples = collect_samples(self.config, self.mode)
        self.invocations = build_invocations(self.config, self.mode, samples)
        return self.invocations

    def run(self) -> RunReport:
        """Dispatch every sample, wait for them and merge tracks"""
        start_time = time.time()

        if self.mode is None:
            self.prepare()

        out_directory = Path(self.config.out_directory)
        if not isinstance(self.executor, DryRunExecutor):
            if not validate_directory_exists(out_directory, create_if_missing=True):
                raise ValidationError(f"Cannot use outDirectory {out_directory}")
            save_config(self.config, out_directory / RESOLVED_CONFIG_FILE)

        dispatcher = Dispatcher(self.executor, analysis_cmd=self.analysis_cmd)
        try:
            dispatcher.dispatch(self.invocations)
            results = dispatcher.wait_all()

            merge_result = trigger_aggregation(
                self.config,
                self.mode,
                self.executor,
                after=dispatcher.handles,
                merge_cmd=self.merge_cmd,
            )
        finally:
            self.executor.shutdown()

        report = RunReport(
            mode=self.mode,
            results=results,
            merge_result=merge_result,
            execution_time=time.time() - start_time,
        )

        if not isinstance(self.executor, DryRunExecutor):
            self.summarize_results(report).to_csv(
                out_directory / SUMMARY_FILE, sep="\t", index=False
            )
        self._log_summary(report)

        return report

    def summarize_results(self, report: RunReport) -> pd.DataFrame:
        """Create summary DataFrame of a run"""
        summary_data = []
        for result in report.results:
            summary_data.append(
                {
                    "sample": result.sample_name,
                    "track": result.ordinal,
                    "status": result.status,
                    "success": result.success,
                    "out_dir": str(result.out_dir),
                    "job_id": result.job_id,
                    "returncode": result.returncode,
                    "execution_time_min": (
                        result.execution_time / 60 if result.execution_time else None
                    ),
                    "log_file": str(result.log_file) if result.log_file else None,
                    "error": result.error_message,
                }
            )
        return pd.DataFrame(summary_data)

    def _log_summary(self, report: RunReport) -> None:
        logger.info("=" * 50)
        logger.info("ANCHORFLOW RUN SUMMARY")
        logger.info("=" * 50)
        logger.info(f"Input mode: {report.mode.name}")

        for result in report.results:
            status = "✓" if result.success else "✗"
            name = result.sample_name or str(result.out_dir)
            logger.info(f"  {status} {name}: {result.status}")
            if result.error_message:
                logger.info(f"    Error: {result.error_message}")

        if report.merge_result is not None:
            status = "✓" if report.merge_result.success else "✗"
            logger.info(f"  {status} merge_tracks: {report.merge_result.status}")

        if report.execution_time is not None:
            logger.info(f"Total time: {report.execution_time:.2f} seconds")

    def describe(self) -> Dict[str, Any]:
        """Resolved mode and per-sample arguments, without launching anything"""
        if self.mode is None:
            self.prepare()

        return {
            "mode": self.mode.name,
            "samples": [
                {
                    "sample": inv.sample.sample_name,
                    "input": inv.sample.input_path,
                    "out_dir": str(inv.out_dir),
                    "arguments": inv.arguments(),
                }
                for inv in self.invocations
            ],
        }
