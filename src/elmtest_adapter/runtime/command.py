# src/elmtest_adapter/runtime/command.py

"""
Builds the elm-test command line.
"""

from collections.abc import Sequence
from pathlib import Path

import structlog
from attrs import define, field

from elmtest_adapter.config import RunnerConfig
from elmtest_adapter.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.command")

DEFAULT_ELM_TEST = "elm-test"
REPORT_ARGS = ("--report", "json")


@define(frozen=True, slots=True)
class ElmBinaries:
    elm_test: str | None = field(default=None)
    elm: str | None = field(default=None)


def build_elm_test_args(binaries: ElmBinaries, files: Sequence[str] | None = None) -> list[str]:
    args = [binaries.elm_test or DEFAULT_ELM_TEST]
    if binaries.elm:
        args += ["--compiler", binaries.elm]
    return args + list(files or [])


def build_elm_test_args_with_report(args: Sequence[str]) -> list[str]:
    return [*args, *REPORT_ARGS]


def find_local_npm_binary(binary: str, project_root: Path) -> str | None:
    binary_path = project_root / "node_modules" / ".bin" / binary
    return str(binary_path) if binary_path.exists() else None


def resolve_elm_binaries(configured: ElmBinaries, *roots: Path) -> ElmBinaries:
    """
    Fills in binaries that are not configured from ``node_modules/.bin``.

    Roots are searched in order; duplicates are skipped.
    """
    unique_roots = list(dict.fromkeys(roots))

    def local(binary: str) -> str | None:
        return next(
            (found for root in unique_roots if (found := find_local_npm_binary(binary, root))),
            None,
        )

    resolved = ElmBinaries(
        elm_test=configured.elm_test or local("elm-test"),
        elm=configured.elm or local("elm"),
    )
    log.debug("Resolved elm binaries", elm_test=resolved.elm_test, elm=resolved.elm)
    return resolved


def binaries_from_config(config: RunnerConfig) -> ElmBinaries:
    return ElmBinaries(elm_test=config.elm_test_path, elm=config.elm_path)


# 🔼⚙️
