# src/elmtest_adapter/config/loader.py

"""
Loads the TOML configuration file into attrs models.
"""

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import attrs
import structlog

from elmtest_adapter.config.models import AdapterConfig, GlobalConfig, RunnerConfig
from elmtest_adapter.exceptions import ConfigurationError
from elmtest_adapter.telemetry import StructLogger

log: StructLogger = structlog.get_logger("config.loader")

DEFAULT_CONFIG_NAME = "elmtest.conf"
ENV_PREFIX = "ELMTEST_ADAPTER_"
# Environment variables that override [runner] settings.
RUNNER_ENV_OVERRIDES = {
    "elm_test_path": f"{ENV_PREFIX}ELM_TEST_PATH",
    "elm_path": f"{ENV_PREFIX}ELM_PATH",
}


def load_config(config_path: Path | None = None) -> AdapterConfig:
    """
    Loads, validates and returns the configuration.

    A missing file yields the defaults. Environment overrides are applied on
    top of the file.
    """
    path = config_path or Path(DEFAULT_CONFIG_NAME)
    load_log = log.bind(path=str(path))

    raw: Mapping[str, Any] = {}
    if path.is_file():
        load_log.debug("Reading configuration file")
        try:
            with path.open("rb") as f:
                raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError("Invalid TOML", path=str(path), details=e) from e
        except OSError as e:
            raise ConfigurationError("Cannot read configuration", path=str(path), details=e) from e
    else:
        load_log.info("No configuration file, using defaults")

    try:
        config = _structure(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}", path=str(path), details=e) from e

    config = _apply_env_overrides(config)
    load_log.debug("Configuration loaded", runner=attrs.asdict(config.runner))
    return config


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, Mapping):
        raise TypeError(f"[{name}] must be a table")
    return section


def _known_fields(cls: type, section: Mapping[str, Any], name: str) -> dict[str, Any]:
    names = {a.name for a in attrs.fields(cls)}
    unknown = sorted(set(section) - names)
    if unknown:
        raise ValueError(f"Unknown keys in [{name}]: {unknown}")
    return dict(section)


def _structure(raw: Mapping[str, Any]) -> AdapterConfig:
    runner = RunnerConfig(**_known_fields(RunnerConfig, _section(raw, "runner"), "runner"))
    global_config = GlobalConfig(**_known_fields(GlobalConfig, _section(raw, "global"), "global"))
    return AdapterConfig(runner=runner, global_config=global_config)


def _apply_env_overrides(config: AdapterConfig) -> AdapterConfig:
    overrides = {
        field_name: os.environ[env_var]
        for field_name, env_var in RUNNER_ENV_OVERRIDES.items()
        if os.environ.get(env_var)
    }
    if not overrides:
        return config
    log.debug("Applying environment overrides", keys=sorted(overrides))
    return attrs.evolve(config, runner=attrs.evolve(config.runner, **overrides))


# 🔼⚙️
