"""
Track merging after all samples have been analysed
"""

import logging
from typing import Optional, Sequence, Union

from ..config import Config
from .executors import Executor, JobHandle, JobOutcome
from .invocation import (DEFAULT_MERGE_COMMAND, MERGE_COMMAND_ENV,
                         build_merge_invocation, resolve_command)
from .modes import InputMode

logger = logging.getLogger(__name__)

MERGE_LOG = "merge_tracks.log"


def should_merge_tracks(config: Config) -> bool:
    """Tracks are merged only when explicitly requested with tracks=y"""
    return config.tracks == "y"


def trigger_aggregation(
    config: Config,
    mode: InputMode,
    executor: Executor,
    after: Sequence[JobHandle] = (),
    merge_cmd: Optional[Union[str, Sequence[str]]] = None,
) -> Optional[JobOutcome]:
    """
    Merge the per-sample tracks once every sample unit has finished

    Args:
        config: Run configuration
        mode: Resolved input mode
        executor: Executor used for the sample units
        after: Handles of the sample units the merge depends on
        merge_cmd: Track merging command, overriding the environment/default

    Returns:
        Outcome of the merge, or None when tracks were not requested
    """
    if not should_merge_tracks(config):
        logger.info(f"Track merging not requested (tracks={config.tracks!r})")
        return None

    merge = build_merge_invocation(config, mode)
    command = merge.command(
        resolve_command(merge_cmd, MERGE_COMMAND_ENV, DEFAULT_MERGE_COMMAND)
    )

    if executor.waits_for_completion:
        for handle in after:
            executor.wait(handle)
        if not merge.anchors_file.exists():
            logger.warning(
                f"{merge.anchors_file} not found, merging tracks of the samples available"
            )

    logger.info(f"Merging tracks for assembly {merge.assembly}")
    handle = executor.submit(
        merge.name, command, log_file=merge.out_dir / MERGE_LOG, after=after
    )
    return executor.wait(handle)
