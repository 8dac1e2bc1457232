# src/elmtest_adapter/results/parser.py

"""
Parses the output of ``elm-test --report json``.

stdout carries one JSON object per line, interleaved with arbitrary text the
tests may print. stderr carries a single JSON document describing compile
errors, or plain text when something else went wrong.
"""

import json
from collections.abc import Mapping
from typing import Any

import structlog

from elmtest_adapter.exceptions import ProtocolError
from elmtest_adapter.results.models import (
    CompileError,
    CompileErrors,
    ComparisonFailure,
    DataFailure,
    ErrorOutput,
    Fail,
    Failure,
    Message,
    MessageFailure,
    MessagePart,
    Output,
    Pass,
    Position,
    Problem,
    Region,
    Result,
    RunComplete,
    RunStart,
    StyledString,
    TestCompleted,
    TestStatus,
    Todo,
)
from elmtest_adapter.telemetry import StructLogger

log: StructLogger = structlog.get_logger("results.parser")


def parse_output(line: str) -> Output:
    """
    Parses one stdout line.

    Lines that are not JSON objects are returned as a ``Message`` carrying the
    line verbatim. A JSON object with an unknown ``event`` or ``status`` raises
    ``ProtocolError``.
    """
    try:
        parsed = json.loads(line)
    except json.JSONDecodeError:
        return Message(line)
    if not isinstance(parsed, Mapping):
        return Message(line)
    return parse_result(parsed)


def parse_result(parsed: Mapping[str, Any]) -> Result:
    """Dispatches a decoded report object on its ``event`` field."""
    event = parsed.get("event")
    if event == "runStart":
        return Result(RunStart(test_count=_parse_int(parsed.get("testCount"), "testCount")))
    if event == "runComplete":
        return Result(
            RunComplete(
                passed=_parse_int(parsed.get("passed"), "passed"),
                failed=_parse_int(parsed.get("failed"), "failed"),
                duration=_parse_int(parsed.get("duration"), "duration"),
            )
        )
    if event == "testCompleted":
        status = _parse_status(parsed)
        labels = parsed.get("labels") or []
        if not labels:
            raise ProtocolError("testCompleted event without labels")
        messages = parsed.get("messages") or []
        return Result(
            TestCompleted(
                labels=[str(label) for label in labels],
                messages=[str(m) for m in messages],
                duration=_parse_int(parsed.get("duration"), "duration"),
                status=status,
            )
        )
    raise ProtocolError(f"unknown event {event}")


def _parse_status(parsed: Mapping[str, Any]) -> TestStatus:
    status = parsed.get("status")
    if status == "pass":
        return Pass()
    if status == "todo":
        failures = parsed.get("failures") or [""]
        return Todo(comment=str(failures[0]))
    if status == "fail":
        return Fail(failures=[_parse_failure(f) for f in parsed.get("failures") or []])
    raise ProtocolError(f"unknown status {status}")


def _parse_failure(failure: Any) -> Failure:
    if not isinstance(failure, Mapping):
        raise ProtocolError(f"unknown failure {json.dumps(failure)}")
    reason = failure.get("reason")
    data = reason.get("data") if isinstance(reason, Mapping) else None

    if isinstance(data, Mapping):
        if data.get("comparison"):
            return ComparisonFailure(
                comparison=str(data["comparison"]),
                actual=_decode_string_literal(str(data.get("actual"))),
                expected=_decode_string_literal(str(data.get("expected"))),
            )
        return DataFailure(data={str(key): str(value) for key, value in data.items()})
    if data:
        return MessageFailure(message=str(data))
    if failure.get("message"):
        return MessageFailure(message=str(failure["message"]))
    raise ProtocolError(f"unknown failure {json.dumps(failure)}")


def _decode_string_literal(value: str) -> str:
    """elm-test renders Elm strings as quoted literals; unwrap them once."""
    if value.startswith('"'):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError:
            return value
        if isinstance(decoded, str):
            return decoded
    return value


def _parse_int(value: Any, name: str) -> int:
    # Numbers arrive string-encoded ("13").
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"invalid number for '{name}': {value!r}") from e


def parse_error_output(text: str) -> ErrorOutput:
    """
    Parses the whole stderr buffer of an elm-test run.

    Anything that is not a well-formed ``compile-errors`` document degrades to
    a ``Message`` holding the raw text.
    """
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return Message(text)

    if not isinstance(parsed, Mapping) or parsed.get("type") != "compile-errors":
        log.debug("stderr is JSON but not a compile error report", kind=type(parsed).__name__)
        return Message(text)

    try:
        return CompileErrors(errors=[_parse_compile_error(e) for e in parsed.get("errors") or []])
    except (KeyError, TypeError, ValueError) as e:
        log.warning("Malformed compile error report", error=str(e))
        return Message(text)


def _parse_compile_error(raw: Mapping[str, Any]) -> CompileError:
    return CompileError(
        path=str(raw["path"]),
        name=str(raw.get("name", "")),
        problems=[_parse_problem(p) for p in raw.get("problems") or []],
    )


def _parse_problem(raw: Mapping[str, Any]) -> Problem:
    region = raw["region"]
    return Problem(
        title=str(raw["title"]),
        region=Region(start=_parse_position(region["start"]), end=_parse_position(region["end"])),
        message=[_parse_message_part(part) for part in raw.get("message") or []],
    )


def _parse_position(raw: Mapping[str, Any]) -> Position:
    return Position(line=int(raw["line"]), column=int(raw["column"]))


def _parse_message_part(raw: Any) -> MessagePart:
    if isinstance(raw, str):
        return raw
    return StyledString(
        string=str(raw["string"]),
        bold=bool(raw.get("bold", False)),
        underline=bool(raw.get("underline", False)),
        color=raw.get("color"),
    )


# 🔼⚙️
