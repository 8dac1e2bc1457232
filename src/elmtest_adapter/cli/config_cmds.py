# src/elmtest_adapter/cli/config_cmds.py

from pathlib import Path

import click
import structlog
from rich.pretty import pretty_repr

from elmtest_adapter.cli.utils import config_path_option, load_config_or_exit, logging_options
from elmtest_adapter.runtime import ElmTestRunner
from elmtest_adapter.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.config")


@click.group(name="config")
def config_cli():
    """Commands for inspecting configuration."""
    pass


@config_cli.command(name="show")
@config_path_option
@click.option(
    "-p",
    "--project",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Also show the elm-test command line for this project.",
)
@logging_options
@click.pass_context
def show_config(ctx: click.Context, config_path: Path, project: Path | None, **kwargs):
    """Load, validate, and display the configuration."""
    config = load_config_or_exit(ctx, config_path, **kwargs)
    log.info("Executing 'config show' command", config_path=str(config_path))

    # Echo a rich-formatted string for testability.
    click.echo(pretty_repr(config, expand_all=True))

    if project is not None:
        project = project.resolve()
        runner = ElmTestRunner(project, project, config.runner)
        click.echo(f"Command: {' '.join(runner.elm_test_args())}")


# 🔼⚙️
