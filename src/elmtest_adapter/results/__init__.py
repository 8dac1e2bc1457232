#
# src/elmtest_adapter/results/__init__.py
#
"""
Parsing and rendering of the elm-test JSON report.
"""
from .messages import (
    abbreviate_to_one_line,
    build_compile_errors_message,
    build_decorations,
    build_error_message,
    build_message,
)
from .models import (
    CompileErrors,
    ComparisonFailure,
    DataFailure,
    Event,
    Fail,
    Message,
    MessageFailure,
    Output,
    Pass,
    Result,
    RunComplete,
    RunStart,
    TestCompleted,
    TestDecoration,
    TestStatus,
    Todo,
)
from .parser import parse_error_output, parse_output, parse_result

__all__ = [
    "CompileErrors",
    "ComparisonFailure",
    "DataFailure",
    "Event",
    "Fail",
    "Message",
    "MessageFailure",
    "Output",
    "Pass",
    "Result",
    "RunComplete",
    "RunStart",
    "TestCompleted",
    "TestDecoration",
    "TestStatus",
    "Todo",
    "abbreviate_to_one_line",
    "build_compile_errors_message",
    "build_decorations",
    "build_error_message",
    "build_message",
    "parse_error_output",
    "parse_output",
    "parse_result",
]

# 🔼⚙️
