"""
Command-line interface for AnchorFlow
"""

import shlex
import sys
from typing import Optional

import click

from . import __version__
from .config import format_options_help, load_config
from .core import AnchorFlowRun
from .dispatch import (EXECUTORS, DryRunExecutor, Executor, LocalExecutor,
                       SlurmExecutor)
from .dispatch.invocation import (ANALYSIS_COMMAND_ENV, DEFAULT_ANALYSIS_COMMAND,
                                  resolve_command)
from .exceptions import AnchorFlowError
from .utils import setup_logging, validate_external_tools

# -help is handled explicitly so that it also lists the configuration options
CONTEXT_SETTINGS = {"help_option_names": []}


def print_usage_and_exit(ctx: click.Context) -> None:
    click.echo(ctx.get_help())
    click.echo()
    click.echo(format_options_help())
    ctx.exit(1)


def check_command(
    ctx: click.Context, param: click.Parameter, value: Optional[str]
) -> Optional[str]:
    if value is None:
        return value
    try:
        argv = shlex.split(value)
    except ValueError as e:
        raise click.BadParameter(str(e))
    if not argv:
        raise click.BadParameter("command must not be empty")
    return value


def build_executor(
    name: str,
    max_workers: Optional[int],
    partition: Optional[str],
    time_limit: Optional[str],
    memory: Optional[str],
) -> Executor:
    if name == SlurmExecutor.name:
        return SlurmExecutor(partition=partition, time_limit=time_limit, memory=memory)
    if name == DryRunExecutor.name:
        return DryRunExecutor()
    return LocalExecutor(max_workers=max_workers)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__)
@click.argument("config_file", required=False)
@click.option(
    "-help",
    "--help",
    "show_help",
    is_flag=True,
    help="Show usage and the configuration options, then exit",
)
@click.option(
    "--executor",
    type=click.Choice(sorted(EXECUTORS)),
    default=LocalExecutor.name,
    show_default=True,
    help="How sample analyses are launched",
)
@click.option("--max-workers", type=int, help="Parallel samples with the local executor")
@click.option(
    "--analysis-cmd", callback=check_command, help="Single-sample analysis command"
)
@click.option("--merge-cmd", callback=check_command, help="Track merging command")
@click.option("--partition", help="SLURM partition")
@click.option("--time", "time_limit", help="SLURM time limit per job")
@click.option("--mem", "memory", help="SLURM memory per job")
@click.option("--log-file", type=click.Path(), help="Also write the log to this file")
@click.option("--check", is_flag=True, help="Validate and show the samples, launch nothing")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--quiet", "-q", is_flag=True, help="Enable quiet mode (minimal output)")
@click.pass_context
def main(
    ctx,
    config_file,
    show_help,
    executor,
    max_workers,
    analysis_cmd,
    merge_cmd,
    partition,
    time_limit,
    memory,
    log_file,
    check,
    verbose,
    quiet,
):
    """
    AnchorFlow: multi-sample dispatch of DHS-anchor interaction analyses

    Reads CONFIG_FILE, resolves its input mode, runs one single-sample
    analysis per sample and, with tracks=y, merges the genome browser tracks.
    """
    if show_help or config_file is None:
        print_usage_and_exit(ctx)

    log_level = "DEBUG" if verbose else "WARNING" if quiet else "INFO"
    setup_logging(level=log_level, log_file=log_file, use_colors=sys.stdout.isatty())

    try:
        config = load_config(config_file)
        run = AnchorFlowRun(
            config,
            executor=build_executor(executor, max_workers, partition, time_limit, memory),
            analysis_cmd=analysis_cmd,
            merge_cmd=merge_cmd,
        )

        if check:
            description = run.describe()
            click.echo(f"Input mode: {description['mode']}")
            for sample in description["samples"]:
                click.echo(f"  {sample['out_dir']}: {' '.join(sample['arguments'])}")
            return

        if executor == LocalExecutor.name:
            command = resolve_command(
                analysis_cmd, ANALYSIS_COMMAND_ENV, DEFAULT_ANALYSIS_COMMAND
            )
            if not validate_external_tools([command[0]])[command[0]]:
                click.echo(f"Warning: {command[0]} not found on PATH", err=True)

        report = run.run()

    except AnchorFlowError as e:
        click.echo(str(e))
        sys.exit(1)

    if not report.success:
        click.echo(f"{report.n_failed} unit(s) failed, see {config.out_directory}")
        sys.exit(2)


if __name__ == "__main__":
    main()
