#
# src/elmtest_adapter/config/models.py
#
"""
Attrs-based data models for elmtest-adapter configuration.
"""

import logging
from typing import Any

from attrs import define, field


# --- Validators ---
def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging.getLevelNamesMapping().keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_non_negative_int(inst: Any, attr: Any, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"Field '{attr.name}' must be a non-negative integer, got {value!r}")


def _validate_extension(inst: Any, attr: Any, value: str) -> None:
    if not value.startswith("."):
        raise ValueError(f"Field '{attr.name}' must start with '.', got {value!r}")


def _non_empty(value: str | None) -> str | None:
    """Treats empty strings from settings as unset."""
    return value if value else None


@define(frozen=True, slots=True)
class RunnerConfig:
    """How elm-test is located and invoked."""

    elm_test_path: str | None = field(default=None, converter=_non_empty)
    elm_path: str | None = field(default=None, converter=_non_empty)
    # Run once with visible output, then again for the JSON report.
    show_output: bool = field(default=False)
    # elm-test exits with 0-3 when tests ran, higher on compile/setup errors.
    max_accepted_exit_code: int = field(default=3, validator=_validate_non_negative_int)
    tests_folder: str = field(default="tests")
    file_extension: str = field(default=".elm", validator=_validate_extension)


@define(frozen=True, slots=True)
class GlobalConfig:
    """Global default settings for elmtest-adapter."""

    log_level: str = field(default="WARNING", validator=_validate_log_level)


@define(frozen=True, slots=True)
class AdapterConfig:
    """Root configuration object."""

    runner: RunnerConfig = field(factory=RunnerConfig)
    global_config: GlobalConfig = field(factory=GlobalConfig, metadata={"toml_name": "global"})


# 🔼⚙️
