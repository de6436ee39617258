"""
Dispatch module for AnchorFlow

This module resolves the input mode of a run, builds its sample list,
launches one single-sample analysis per sample through an executor and
triggers track merging once every sample has finished.
"""

from .aggregation import should_merge_tracks, trigger_aggregation
from .dispatcher import Dispatcher, SampleJob, SampleResult
from .executors import (EXECUTORS, DryRunExecutor, Executor, JobHandle,
                        JobOutcome, LocalExecutor, SlurmExecutor)
from .invocation import (AnalysisInvocation, MergeInvocation,
                         build_invocations, build_merge_invocation)
from .modes import InputMode, resolve_mode
from .samples import SampleSpec, build_sample_list, collect_samples

__all__ = [
    "InputMode",
    "resolve_mode",
    "SampleSpec",
    "build_sample_list",
    "collect_samples",
    "AnalysisInvocation",
    "MergeInvocation",
    "build_invocations",
    "build_merge_invocation",
    "Dispatcher",
    "SampleJob",
    "SampleResult",
    "Executor",
    "LocalExecutor",
    "SlurmExecutor",
    "DryRunExecutor",
    "EXECUTORS",
    "JobHandle",
    "JobOutcome",
    "should_merge_tracks",
    "trigger_aggregation",
]
