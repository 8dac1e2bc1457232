#
# src/elmtest_adapter/protocols.py
#
"""
Contracts with the collaborators around the adapter.

Upstream, a language server answers a "find tests" request with the suites it
sees in the source. Downstream, an ``AdapterListener`` receives the events a
test explorer needs to render load, run and retire state.
"""

from collections.abc import Sequence
from typing import Protocol, TypeAlias, runtime_checkable

from attrs import converters, define, field

from elmtest_adapter.results.models import TestDecoration
from elmtest_adapter.suite.nodes import Suite


# --- Upstream: language server ---
@define(frozen=True, slots=True)
class SourcePosition:
    """A 0-based line/character position as sent by the language server."""

    line: int = field()
    character: int = field(default=0)


@define(frozen=True, slots=True)
class TestSuiteDescription:
    """
    One suite or test found in the sources; a description without tests is a test.

    ``position`` is None when the definition could not be found, for example
    a test whose label is computed.
    """

    __test__ = False

    label: str = field()
    file: str = field()
    position: SourcePosition | None = field(default=None)
    tests: tuple["TestSuiteDescription", ...] | None = field(default=None)


@runtime_checkable
class TestFinder(Protocol):
    """The "find tests" request of the language server."""

    async def find_tests(self, project_folder: str) -> Sequence[TestSuiteDescription]:
        """
        Lists the top level suites of a project.

        Args:
            project_folder: Identifier of the Elm project folder.

        Returns:
            The suites, each with nested tests and 0-based positions.
        """
        ...


# --- Downstream: test explorer ---
@define(frozen=True, slots=True)
class LoadStarted:
    type: str = field(default="started", init=False)


@define(frozen=True, slots=True)
class LoadFinished:
    suite: Suite | None = field(default=None)
    error_message: str | None = field(default=None)


@define(frozen=True, slots=True)
class RunStarted:
    tests: tuple[str, ...] = field(converter=tuple, factory=tuple)


@define(frozen=True, slots=True)
class TestStateChanged:
    """Outcome of one test: ``running``, ``passed``, ``skipped`` or ``failed``."""

    __test__ = False

    test: str = field()
    state: str = field()
    message: str | None = field(default=None)
    description: str | None = field(default=None)
    decorations: tuple[TestDecoration, ...] | None = field(default=None)


@define(frozen=True, slots=True)
class RunFinished:
    type: str = field(default="finished", init=False)


@define(frozen=True, slots=True)
class Retire:
    """Results for ``tests`` are stale; ``None`` retires every test."""

    tests: tuple[str, ...] | None = field(default=None, converter=converters.optional(tuple))


AdapterEvent: TypeAlias = LoadStarted | LoadFinished | RunStarted | TestStateChanged | RunFinished | Retire


@runtime_checkable
class AdapterListener(Protocol):
    """Receives adapter events, for example to update a test explorer tree."""

    def on_event(self, event: AdapterEvent) -> None:
        ...


# 🔼⚙️
