# src/elmtest_adapter/cli/utils.py

import logging
from pathlib import Path

import click
import structlog

from elmtest_adapter.config import DEFAULT_CONFIG_NAME, AdapterConfig, load_config
from elmtest_adapter.exceptions import ConfigurationError
from elmtest_adapter.telemetry.logger import setup_logging as core_setup_logging

log = structlog.get_logger("cli.utils")

LOG_LEVEL_CHOICES = click.Choice(list(logging.getLevelNamesMapping().keys()), case_sensitive=False)


def logging_options(f):
    """Decorator to add logging options to any command."""
    f = click.option(
        "-l",
        "--log-level",
        type=LOG_LEVEL_CHOICES,
        default=None,
        envvar="ELMTEST_ADAPTER_LOG_LEVEL",
        help="Set the logging level (overrides config file).",
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, writable=True, resolve_path=True),
        default=None,
        envvar="ELMTEST_ADAPTER_LOG_FILE",
        help="Path to write logs to a file (JSON format).",
    )(f)
    f = click.option(
        "--json-logs",
        is_flag=True,
        default=None,
        envvar="ELMTEST_ADAPTER_JSON_LOGS",
        help="Output console logs as JSON.",
    )(f)
    return f


def config_path_option(f):
    """Decorator for the configuration file option shared by commands."""
    return click.option(
        "-c",
        "--config-path",
        type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
        default=Path(DEFAULT_CONFIG_NAME),
        show_default=True,
        envvar="ELMTEST_ADAPTER_CONF",
        help="Path to the configuration file (env var ELMTEST_ADAPTER_CONF).",
        show_envvar=True,
    )(f)


def setup_logging_from_context(
    ctx: click.Context,
    local_log_level: str | None = None,
    local_log_file: str | None = None,
    local_json_logs: bool | None = None,
    default_log_level: str = "WARNING",
) -> None:
    """
    Setup logging using context values, allowing local overrides.
    """
    obj = ctx.obj or {}
    log_level_str = local_log_level or obj.get("LOG_LEVEL") or default_log_level
    log_file_path = local_log_file or obj.get("LOG_FILE")
    use_json_logs = local_json_logs if local_json_logs is not None else obj.get("JSON_LOGS", False)

    numeric_level = logging.getLevelNamesMapping().get(log_level_str.upper())
    if numeric_level is None:
        numeric_level = logging.INFO
        log_level_str = "INFO"

    core_setup_logging(
        level=numeric_level,
        json_logs=use_json_logs,
        log_file=log_file_path,
    )

    log.debug(
        "CLI logging initialized via utils",
        level=log_level_str,
        file=log_file_path or "console",
        json=use_json_logs,
    )


def load_config_or_exit(ctx: click.Context, config_path: Path, **kwargs) -> AdapterConfig:
    """
    Loads the configuration and sets up logging for a command.

    The ``[global] log_level`` of the file applies when no level was given on
    the command line. An invalid configuration exits with status 1.
    """
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
    )
    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        log.error("Failed to load or validate configuration", error=str(e))
        click.echo(f"Error: Configuration problem in '{config_path}':\n{e}", err=True)
        ctx.exit(1)

    if not kwargs.get("log_level") and not (ctx.obj or {}).get("LOG_LEVEL"):
        setup_logging_from_context(
            ctx,
            local_log_level=config.global_config.log_level,
            local_log_file=kwargs.get("log_file"),
            local_json_logs=kwargs.get("json_logs"),
        )
    return config


# ⚙️🛠️
