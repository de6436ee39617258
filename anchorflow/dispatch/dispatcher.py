"""
Per-sample dispatch of the single-sample analysis
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..exceptions import MalformedListEntryError
from ..utils.logging import LoggerMixin
from .executors import Executor, JobHandle
from .invocation import (ANALYSIS_COMMAND_ENV, DEFAULT_ANALYSIS_COMMAND,
                         AnalysisInvocation, resolve_command)

logger = logging.getLogger(__name__)

ANALYSIS_LOG = "analysis.log"


@dataclass
class SampleResult:
    """Result of the analysis of a single sample"""

    sample_name: str
    success: bool
    status: str
    out_dir: Path
    ordinal: Optional[int] = None
    returncode: Optional[int] = None
    job_id: Optional[str] = None
    log_file: Optional[Path] = None
    error_message: Optional[str] = None
    execution_time: Optional[float] = None


@dataclass
class SampleJob:
    """A dispatched sample and its handle, if it was launched"""

    invocation: AnalysisInvocation
    handle: Optional[JobHandle] = None
    error_message: Optional[str] = None

    @property
    def launched(self) -> bool:
        return self.handle is not None


class Dispatcher(LoggerMixin):
    """Launch one analysis unit per sample and join them"""

    def __init__(
        self,
        executor: Executor,
        analysis_cmd: Optional[Union[str, Sequence[str]]] = None,
    ):
        self.executor = executor
        self.analysis_cmd = resolve_command(
            analysis_cmd, ANALYSIS_COMMAND_ENV, DEFAULT_ANALYSIS_COMMAND
        )
        self.jobs: List[SampleJob] = []

    def dispatch(self, invocations: Sequence[AnalysisInvocation]) -> List[SampleJob]:
        """
        Launch every invocation without waiting for any of them

        Malformed samples are not launched; they are reported as failed by
        wait_all() and do not affect the other samples.
        """
        for invocation in invocations:
            try:
                invocation.sample.check()
            except MalformedListEntryError as e:
                self.unit_logger(invocation.name).error(f"Skipping sample: {e}")
                self.jobs.append(SampleJob(invocation, error_message=str(e)))
                continue

            handle = self.executor.submit(
                invocation.name,
                invocation.command(self.analysis_cmd),
                log_file=invocation.out_dir / ANALYSIS_LOG,
            )
            self.jobs.append(SampleJob(invocation, handle=handle))

        launched = sum(1 for job in self.jobs if job.launched)
        self.logger.info(
            f"Dispatched {launched}/{len(self.jobs)} samples with the "
            f"{self.executor.name} executor"
        )
        return self.jobs

    @property
    def handles(self) -> List[JobHandle]:
        return [job.handle for job in self.jobs if job.handle is not None]

    def wait_all(self) -> List[SampleResult]:
        """Join every dispatched sample, in dispatch order"""
        results = []

        for job in self.jobs:
            sample = job.invocation.sample
            if job.handle is None:
                results.append(
                    SampleResult(
                        sample_name=sample.sample_name,
                        success=False,
                        status="malformed",
                        out_dir=job.invocation.out_dir,
                        ordinal=sample.ordinal,
                        error_message=job.error_message,
                    )
                )
                continue

            outcome = self.executor.wait(job.handle)
            results.append(
                SampleResult(
                    sample_name=sample.sample_name,
                    success=outcome.success,
                    status=outcome.status,
                    out_dir=job.invocation.out_dir,
                    ordinal=sample.ordinal,
                    returncode=outcome.returncode,
                    job_id=outcome.job_id,
                    log_file=outcome.log_file,
                    error_message=outcome.error_message,
                    execution_time=outcome.execution_time,
                )
            )

        successful = sum(1 for r in results if r.success)
        self.logger.info(f"Analysis finished: {successful}/{len(results)} samples successful")
        return results
