# src/elmtest_adapter/cli/run_cmds.py

import asyncio
import os
import sys
from collections.abc import Sequence
from pathlib import Path

import click
import structlog
from rich.console import Console

from elmtest_adapter.cli.render import build_result_tree, count_statuses, summary_line
from elmtest_adapter.cli.utils import config_path_option, load_config_or_exit, logging_options, setup_logging_from_context
from elmtest_adapter.runtime import CANCELLED, ElmTestRunner, RunOutcome
from elmtest_adapter.suite import locate_test_line
from elmtest_adapter.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.run")


def project_relative_files(files: Sequence[Path], project: Path) -> list[str]:
    """elm-test runs inside the project folder, so file arguments are made relative to it."""
    return [os.path.relpath(f.resolve(), project) for f in files]


def _run_headless(runner: ElmTestRunner, files: list[str]) -> RunOutcome | int:
    """Runs elm-test to completion; an int is the exit code of an aborted run."""
    try:
        return asyncio.run(runner.run_some_tests(files))
    except KeyboardInterrupt:
        log.warning("Run interrupted by KeyboardInterrupt (CTRL-C).")
        return 130
    except Exception:
        log.critical("elm-test run exited with an unhandled exception.", exc_info=True)
        return 1


def report_outcome(runner: ElmTestRunner, outcome: RunOutcome, console: Console) -> int:
    """Prints the outcome of a run and returns the exit code for it."""
    if outcome is CANCELLED:
        click.echo("Run cancelled.", err=True)
        return 130
    if isinstance(outcome, str):
        click.echo(f"Error: {outcome}", err=True)
        return 1

    events = runner.builder.events if runner.builder else {}
    console.print(build_result_tree(outcome, events, title=runner.state.project))
    counts = count_statuses(events)
    console.print(summary_line(counts))
    return 1 if counts["failed"] else 0


@click.command(name="run")
@click.argument("files", nargs=-1, type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "-p",
    "--project",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Folder of the Elm project (the one holding elm.json).",
)
@click.option(
    "-w",
    "--workspace",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Workspace folder; defaults to the project folder.",
)
@config_path_option
@logging_options
@click.pass_context
def run_cli(
    ctx: click.Context,
    files: tuple[Path, ...],
    project: Path,
    workspace: Path | None,
    config_path: Path,
    **kwargs,
):
    """Run elm-test once and print the results, optionally only for FILES."""
    config = load_config_or_exit(ctx, config_path, **kwargs)
    project = project.resolve()
    workspace = (workspace or project).resolve()
    log.info("Executing 'run' command", project=str(project), files=[str(f) for f in files])

    runner = ElmTestRunner(project, workspace, config.runner)
    outcome = _run_headless(runner, project_relative_files(files, project))
    exit_code = outcome if isinstance(outcome, int) else report_outcome(runner, outcome, Console())

    log.info("'run' command finished.", exit_code=exit_code)
    if exit_code != 0:
        sys.exit(exit_code)


@click.command(name="locate")
@click.argument("labels", nargs=-1, required=True)
@click.option(
    "-f",
    "--file",
    "test_file",
    type=click.Path(exists=True, dir_okay=False, readable=True, path_type=Path),
    required=True,
    help="Elm test module to search.",
)
@logging_options
@click.pass_context
def locate_cli(ctx: click.Context, labels: tuple[str, ...], test_file: Path, **kwargs):
    """Print the 1-based line where the test named by LABELS is defined.

    LABELS are the describe and test names from the outermost inwards,
    without the module name.
    """
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
    )
    line = asyncio.run(locate_test_line(test_file, list(labels)))
    if line is None:
        click.echo(f"Error: no test {' / '.join(labels)!r} found in '{test_file}'", err=True)
        ctx.exit(1)
    click.echo(line + 1)


# 🖥️⚙️
