# src/elmtest_adapter/results/messages.py

"""
Human-readable renderings of test results and compile errors.
"""

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
    Position,
    Problem,
    Region,
    TestCompleted,
    TestDecoration,
    TestStatus,
)

ONE_LINE_LIMIT = 20


def build_message(event: TestCompleted) -> str:
    """
    Renders a finished test as text.

    For failures the test's own messages come first, followed by the lines
    of each failure: a comparison renders as actual value, ``| operator`` and
    expected value.
    """
    if isinstance(event.status, Fail):
        lines = [line for failure in event.status.failures for line in _failure_lines(failure)]
        return "\n".join([*event.messages, *lines])
    return "\n".join(event.messages)


def _failure_lines(failure: Failure) -> list[str]:
    match failure:
        case ComparisonFailure(comparison=comparison, actual=actual, expected=expected):
            return [actual, f"| {comparison}", expected]
        case DataFailure(data=data):
            return [f"{key}: {value}" for key, value in data.items()]
        case MessageFailure(message=message):
            return [message]
    raise TypeError(f"unknown failure {failure!r}")


def build_error_message(output: ErrorOutput) -> str:
    if isinstance(output, Message):
        return output.line
    return build_compile_errors_message(output)


def build_compile_errors_message(report: CompileErrors) -> str:
    return "\n\n".join(_compile_error_message(error) for error in report.errors)


def _compile_error_message(error: CompileError) -> str:
    return "\n\n".join([error.path, *(_problem_message(problem) for problem in error.problems)])


def _problem_message(problem: Problem) -> str:
    header = f"{_region(problem.region)} {problem.title}\n"
    return header + "".join(_message_string(part) for part in problem.message)


def _region(region: Region) -> str:
    return f"{_position(region.start)}-{_position(region.end)}"


def _position(pos: Position) -> str:
    return f"{pos.line}:{pos.column}"


def _message_string(part: MessagePart) -> str:
    return part if isinstance(part, str) else part.string


def abbreviate_to_one_line(text: str) -> str:
    one_line = " ".join(text.split("\n"))
    if len(one_line) > ONE_LINE_LIMIT:
        return one_line[:ONE_LINE_LIMIT] + " ..."
    return one_line


def build_decorations(status: TestStatus, line: int) -> list[TestDecoration]:
    """Creates one line-anchored decoration per failure of a failed test."""
    if not isinstance(status, Fail):
        return []
    decorations = []
    for failure in status.failures:
        match failure:
            case ComparisonFailure():
                expected = abbreviate_to_one_line(failure.expected)
                actual = abbreviate_to_one_line(failure.actual)
                message = f"{failure.comparison} {expected} {actual}"
            case DataFailure():
                message = "\n".join(f"{key}: {value}" for key, value in failure.data.items())
            case _:
                message = failure.message
        decorations.append(TestDecoration(line=line, message=message))
    return decorations


# 🔼⚙️
