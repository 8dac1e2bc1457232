# src/elmtest_adapter/suite/locator.py

"""
Finds where a test is defined in the text of an Elm test module.

This is a text search, not a parser. The outermost label is matched against
``describe``/``test``/``fuzz`` definitions and the least indented match wins,
which favours top level definitions when the same name is reused inside
nested blocks. Every label of the path is then searched for, in order,
after that anchor.
"""

import asyncio
import re
from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from elmtest_adapter.telemetry import StructLogger

log: StructLogger = structlog.get_logger("suite.locator")


def _definition_pattern(label: str) -> re.Pattern[str]:
    return re.compile(rf'(describe|test|fuzz\s+.*?)\s+"{re.escape(label)}"')


def find_offset_for_test(
    names: Sequence[str],
    text: str,
    get_indent: Callable[[int], int],
) -> int | None:
    """
    Returns the offset of the opening quote of the innermost label, or None.

    ``get_indent`` maps an offset to the column it sits in.
    """
    if not names:
        return None

    matches = [match.start() for match in _definition_pattern(names[0]).finditer(text)]
    if not matches:
        return None

    # min() keeps the first of equally indented matches.
    offset = min(matches, key=get_indent)
    for name in names:
        offset = text.find(f'"{name}"', offset)
        if offset < 0:
            return None
    return offset


def indent_function(text: str) -> Callable[[int], int]:
    def get_indent(offset: int) -> int:
        return offset - text.rfind("\n", 0, offset)

    return get_indent


def line_of_offset(text: str, offset: int) -> int:
    """0-based line number containing ``offset``."""
    return text.count("\n", 0, offset)


def find_line_for_test(names: Sequence[str], text: str) -> int | None:
    offset = find_offset_for_test(names, text, indent_function(text))
    if offset is None:
        return None
    return line_of_offset(text, offset)


async def locate_test_line(path: Path, names: Sequence[str]) -> int | None:
    """Reads ``path`` off the event loop and locates ``names`` in it."""
    try:
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except OSError as e:
        log.warning("Cannot read test file", path=str(path), error=str(e))
        return None
    line = find_line_for_test(names, text)
    log.debug("Located test", path=str(path), names=list(names), line=line)
    return line


# 🔼⚙️
