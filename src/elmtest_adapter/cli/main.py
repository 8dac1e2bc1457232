# src/elmtest_adapter/cli/main.py

"""
Main CLI entry point for elmtest-adapter using Click.
Handles global options like logging level.
"""

from importlib.metadata import PackageNotFoundError, version

import click
import structlog

from elmtest_adapter.cli.config_cmds import config_cli
from elmtest_adapter.cli.run_cmds import locate_cli, run_cli
from elmtest_adapter.cli.utils import logging_options, setup_logging_from_context
from elmtest_adapter.cli.watch_cmds import watch_cli
from elmtest_adapter.telemetry import StructLogger

try:
    __version__ = version("elmtest-adapter")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

log: StructLogger = structlog.get_logger("cli.main")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", package_name="elmtest-adapter")
@logging_options
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: str | None,
    log_file: str | None,
    json_logs: bool | None,
):
    """
    elmtest-adapter: run elm-test and report results per test.

    Runs the tests of an Elm project with elm-test, builds the suite tree from
    its JSON report and renders or watches the results.
    Configuration precedence: CLI options > Environment Variables > Config File > Defaults.
    """
    ctx.ensure_object(dict)

    ctx.obj["LOG_LEVEL"] = log_level
    ctx.obj["LOG_FILE"] = log_file
    ctx.obj["JSON_LOGS"] = json_logs if json_logs is not None else False

    setup_logging_from_context(ctx, default_log_level="WARNING")
    log.debug(
        "Main CLI group initialized",
        log_level=log_level,
        log_file=log_file,
        json_logs=json_logs,
    )


cli.add_command(config_cli)
cli.add_command(locate_cli)
cli.add_command(run_cli)
cli.add_command(watch_cli)

if __name__ == "__main__":
    cli()

# 🖥️⚙️
