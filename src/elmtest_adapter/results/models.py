# src/elmtest_adapter/results/models.py

"""
Attrs-based data models for the elm-test JSON report.

Each variant carries a ``tag`` class attribute that mirrors the wire name,
so callers can dispatch with ``match`` on the class or compare tags.
"""

from typing import ClassVar, TypeAlias

from attrs import define, field


# --- Failures ---
@define(frozen=True, slots=True)
class MessageFailure:
    """A failure that only carries free text."""

    tag: ClassVar[str] = "message"
    message: str = field()


@define(frozen=True, slots=True)
class ComparisonFailure:
    """A failed ``Expect.*`` comparison between two rendered values."""

    tag: ClassVar[str] = "comparison"
    comparison: str = field()
    actual: str = field()
    expected: str = field()


@define(frozen=True, slots=True)
class DataFailure:
    """A failure with an arbitrary key/value diagnostic payload."""

    tag: ClassVar[str] = "data"
    data: dict[str, str] = field(factory=dict)


Failure: TypeAlias = MessageFailure | ComparisonFailure | DataFailure


# --- Test status ---
@define(frozen=True, slots=True)
class Pass:
    tag: ClassVar[str] = "pass"


@define(frozen=True, slots=True)
class Todo:
    tag: ClassVar[str] = "todo"
    comment: str = field()


@define(frozen=True, slots=True)
class Fail:
    tag: ClassVar[str] = "fail"
    failures: tuple[Failure, ...] = field(converter=tuple, factory=tuple)


TestStatus: TypeAlias = Pass | Todo | Fail


# --- Events ---
@define(frozen=True, slots=True)
class RunStart:
    tag: ClassVar[str] = "runStart"
    test_count: int = field()


@define(frozen=True, slots=True)
class RunComplete:
    tag: ClassVar[str] = "runComplete"
    passed: int = field()
    failed: int = field()
    duration: int = field()


@define(frozen=True, slots=True)
class TestCompleted:
    """One finished test, identified by its label path (outermost first)."""

    __test__ = False

    tag: ClassVar[str] = "testCompleted"
    labels: tuple[str, ...] = field(converter=tuple)
    messages: tuple[str, ...] = field(converter=tuple, factory=tuple)
    duration: int = field(default=0)
    status: TestStatus = field(factory=Pass)


Event: TypeAlias = RunStart | RunComplete | TestCompleted


# --- Parser outputs ---
@define(frozen=True, slots=True)
class Message:
    """A line (or buffer) that is not part of the structured report."""

    type: ClassVar[str] = "message"
    line: str = field()


@define(frozen=True, slots=True)
class Result:
    type: ClassVar[str] = "result"
    event: Event = field()


Output: TypeAlias = Message | Result


# --- Compile errors (stderr payload) ---
@define(frozen=True, slots=True)
class Position:
    """A 1-based line/column position as reported by the compiler."""

    line: int = field()
    column: int = field()


@define(frozen=True, slots=True)
class Region:
    start: Position = field()
    end: Position = field()


@define(frozen=True, slots=True)
class StyledString:
    string: str = field()
    bold: bool = field(default=False)
    underline: bool = field(default=False)
    color: str | None = field(default=None)


MessagePart: TypeAlias = str | StyledString


@define(frozen=True, slots=True)
class Problem:
    title: str = field()
    region: Region = field()
    message: tuple[MessagePart, ...] = field(converter=tuple, factory=tuple)


@define(frozen=True, slots=True)
class CompileError:
    path: str = field()
    name: str = field()
    problems: tuple[Problem, ...] = field(converter=tuple, factory=tuple)


@define(frozen=True, slots=True)
class CompileErrors:
    type: ClassVar[str] = "compile-errors"
    errors: tuple[CompileError, ...] = field(converter=tuple, factory=tuple)


ErrorOutput: TypeAlias = Message | CompileErrors


# --- Editor decorations ---
@define(frozen=True, slots=True)
class TestDecoration:
    """Inline text shown next to a 0-based source line of a failed test."""

    __test__ = False

    line: int = field()
    message: str = field()


# 🔼⚙️
