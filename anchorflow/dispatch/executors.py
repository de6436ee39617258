"""
Executors running external commands for the dispatcher

Each executor exposes ``submit`` (never waits for the unit it launches) and
``wait`` (the join). ``after`` handles passed to ``submit`` must finish
before the new unit starts: the local executor blocks on them, the SLURM
executor chains them with an ``afterany`` dependency.
"""

import logging
import os
import shlex
import subprocess
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from ..utils.logging import LoggerMixin

logger = logging.getLogger(__name__)


@dataclass
class JobOutcome:
    """Outcome of one external command"""

    name: str
    success: bool
    status: str
    returncode: Optional[int] = None
    job_id: Optional[str] = None
    log_file: Optional[Path] = None
    error_message: Optional[str] = None
    execution_time: Optional[float] = None


@dataclass
class JobHandle:
    """Handle on a launched unit of work"""

    name: str
    future: Optional[Future] = None
    job_id: Optional[str] = None
    outcome: Optional[JobOutcome] = None


def wrap_with_modules(command: Sequence[str], modules: Sequence[str]) -> List[str]:
    """Run a command in a login shell after loading environment modules"""
    if not modules:
        return list(command)
    script = f"module load {' '.join(modules)} && exec {shlex.join(command)}"
    return ["bash", "-lc", script]


class Executor(LoggerMixin):
    """Base class of the dispatch executors"""

    name = "base"
    # True when wait() returns only after the unit has finished
    waits_for_completion = True

    def __init__(self, modules: Sequence[str] = ()):
        self.modules = tuple(modules)

    def submit(
        self,
        name: str,
        command: Sequence[str],
        log_file: Path,
        after: Sequence[JobHandle] = (),
    ) -> JobHandle:
        raise NotImplementedError

    def wait(self, handle: JobHandle) -> JobOutcome:
        if handle.future is not None:
            return handle.future.result()
        return handle.outcome

    def shutdown(self) -> None:
        pass


class LocalExecutor(Executor):
    """Run each unit as a subprocess on a local thread pool"""

    name = "local"

    def __init__(
        self,
        max_workers: Optional[int] = None,
        modules: Sequence[str] = (),
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        super().__init__(modules)
        if max_workers is None:
            max_workers = os.cpu_count() or 1
        self.max_workers = max_workers
        self.runner = runner
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="anchorflow"
        )

    def submit(
        self,
        name: str,
        command: Sequence[str],
        log_file: Path,
        after: Sequence[JobHandle] = (),
    ) -> JobHandle:
        for handle in after:
            self.wait(handle)

        future = self._pool.submit(self._run, name, list(command), Path(log_file))
        return JobHandle(name=name, future=future)

    def _run(self, name: str, command: List[str], log_file: Path) -> JobOutcome:
        full_command = wrap_with_modules(command, self.modules)
        start_time = time.time()
        log = self.unit_logger(name)

        log.info("Starting")
        log.debug(f"Command: {shlex.join(full_command)}")

        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(log_file, "w") as output:
                result = self.runner(
                    full_command,
                    stdout=output,
                    stderr=subprocess.STDOUT,
                    check=False,
                )
        except OSError as e:
            log.error(f"Could not run: {e}")
            return JobOutcome(
                name=name,
                success=False,
                status="failed",
                log_file=log_file,
                error_message=str(e),
                execution_time=time.time() - start_time,
            )

        execution_time = time.time() - start_time

        if result.returncode != 0:
            error_msg = f"exited with code {result.returncode}, see {log_file}"
            log.error(error_msg)
            return JobOutcome(
                name=name,
                success=False,
                status="failed",
                returncode=result.returncode,
                log_file=log_file,
                error_message=error_msg,
                execution_time=execution_time,
            )

        log.info(f"Completed in {execution_time:.2f} seconds")
        return JobOutcome(
            name=name,
            success=True,
            status="completed",
            returncode=0,
            log_file=log_file,
            execution_time=execution_time,
        )

    def shutdown(self) -> None:
        self._pool.shutdown(wait=True)


class SlurmExecutor(Executor):
    """Submit each unit as a SLURM batch job"""

    name = "slurm"
    waits_for_completion = False

    def __init__(
        self,
        partition: Optional[str] = None,
        time_limit: Optional[str] = None,
        memory: Optional[str] = None,
        extra_args: Sequence[str] = (),
        modules: Sequence[str] = (),
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        super().__init__(modules)
        self.partition = partition
        self.time_limit = time_limit
        self.memory = memory
        self.extra_args = list(extra_args)
        self.runner = runner

    def render_script(self, command: Sequence[str]) -> str:
        """Batch script body for a command"""
        lines = ["#!/bin/bash", "set -e"]
        if self.modules:
            lines.append(f"module load {' '.join(self.modules)}")
        lines.append(shlex.join(command))
        return "\n".join(lines) + "\n"

    def sbatch_command(
        self, name: str, log_file: Path, after: Sequence[JobHandle] = ()
    ) -> List[str]:
        cmd = [
            "sbatch",
            "--parsable",
            "--job-name",
            f"anchorflow_{name}",
            "--output",
            str(log_file),
        ]
        if self.partition:
            cmd += ["--partition", self.partition]
        if self.time_limit:
            cmd += ["--time", self.time_limit]
        if self.memory:
            cmd += ["--mem", self.memory]

        dependencies = [handle.job_id for handle in after if handle.job_id]
        if dependencies:
            cmd.append(f"--dependency=afterany:{':'.join(dependencies)}")

        return cmd + self.extra_args

    def submit(
        self,
        name: str,
        command: Sequence[str],
        log_file: Path,
        after: Sequence[JobHandle] = (),
    ) -> JobHandle:
        log_file = Path(log_file)
        cmd = self.sbatch_command(name, log_file, after)
        self.logger.debug(f"Command: {shlex.join(cmd)}")

        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            result = self.runner(
                cmd,
                input=self.render_script(command),
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            error_msg = f"sbatch failed: {e.stderr.strip() if e.stderr else e}"
            self.logger.error(f"Could not submit {name}: {error_msg}")
            outcome = JobOutcome(
                name=name,
                success=False,
                status="failed",
                returncode=e.returncode,
                log_file=log_file,
                error_message=error_msg,
            )
            return JobHandle(name=name, outcome=outcome)
        except OSError as e:
            self.logger.error(f"Could not submit {name}: {e}")
            outcome = JobOutcome(
                name=name,
                success=False,
                status="failed",
                log_file=log_file,
                error_message=str(e),
            )
            return JobHandle(name=name, outcome=outcome)

        # --parsable prints "jobid" or "jobid;cluster"
        job_id = result.stdout.strip().split(";")[0]
        self.logger.info(f"Submitted {name} as job {job_id}")

        outcome = JobOutcome(
            name=name,
            success=True,
            status="submitted",
            job_id=job_id,
            log_file=log_file,
        )
        return JobHandle(name=name, job_id=job_id, outcome=outcome)


class DryRunExecutor(Executor):
    """Record and log commands without launching anything"""

    name = "dry-run"
    waits_for_completion = False

    def __init__(self, modules: Sequence[str] = ()):
        super().__init__(modules)
        self.commands: List[List[str]] = []

    def submit(
        self,
        name: str,
        command: Sequence[str],
        log_file: Path,
        after: Sequence[JobHandle] = (),
    ) -> JobHandle:
        full_command = wrap_with_modules(command, self.modules)
        self.commands.append(full_command)
        self.logger.info(f"[dry-run] {name}: {shlex.join(full_command)}")

        outcome = JobOutcome(
            name=name, success=True, status="dry-run", log_file=Path(log_file)
        )
        return JobHandle(name=name, outcome=outcome)


EXECUTORS = {
    LocalExecutor.name: LocalExecutor,
    SlurmExecutor.name: SlurmExecutor,
    DryRunExecutor.name: DryRunExecutor,
}
