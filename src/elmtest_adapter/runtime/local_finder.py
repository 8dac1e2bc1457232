# src/elmtest_adapter/runtime/local_finder.py

"""
A ``TestFinder`` for use without a language server.

It runs elm-test once and describes the suites it reported, locating each
definition in the test sources with the text search of ``suite.locator``.
"""

import asyncio
from collections.abc import Sequence
from pathlib import Path

import structlog

from elmtest_adapter.config import RunnerConfig
from elmtest_adapter.exceptions import RunnerError
from elmtest_adapter.protocols import SourcePosition, TestSuiteDescription
from elmtest_adapter.runtime.runner import CANCELLED, ElmTestRunner
from elmtest_adapter.suite import Node, Suite, find_line_for_test
from elmtest_adapter.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.local_finder")


class LocalTestFinder:
    def __init__(self, project_folder: Path, workspace_folder: Path, config: RunnerConfig | None = None):
        self.project_folder = project_folder
        self.workspace_folder = workspace_folder
        self.config = config or RunnerConfig()

    async def find_tests(self, project_folder: str) -> Sequence[TestSuiteDescription]:
        runner = ElmTestRunner(Path(project_folder), self.workspace_folder, self.config)
        outcome = await runner.run_some_tests()
        if outcome is CANCELLED:
            return []
        if isinstance(outcome, str):
            raise RunnerError(outcome)

        texts: dict[str, str] = {}
        descriptions = []
        for module in outcome.children:
            if module.file and module.file not in texts:
                texts[module.file] = await self._read(module.file)
            descriptions.append(self._describe(module, [], texts.get(module.file or "", "")))
        log.debug("Described suites", count=len(descriptions))
        return descriptions

    async def _read(self, file: str) -> str:
        path = self.project_folder / file
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except OSError as e:
            log.warning("Cannot read test file", path=str(path), error=str(e))
            return ""

    def _describe(self, node: Node, names: list[str], text: str) -> TestSuiteDescription:
        # The module label itself is not written in the file.
        line = find_line_for_test(names, text) if names else 0
        position = SourcePosition(line=line) if line is not None else None
        file = str(self.project_folder / node.file) if node.file else ""
        tests = None
        if isinstance(node, Suite):
            tests = tuple(self._describe(child, [*names, child.label], text) for child in node.children)
        return TestSuiteDescription(
            label=node.label,
            file=file,
            position=position,
            tests=tests,
        )


# 🔼⚙️
