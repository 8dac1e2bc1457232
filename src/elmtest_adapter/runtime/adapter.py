# src/elmtest_adapter/runtime/adapter.py

"""
Test explorer integration: loads the suite tree, runs tests and reports
per-test state, and retires results when files are saved.
"""

from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from elmtest_adapter.config import RunnerConfig
from elmtest_adapter.protocols import (
    AdapterEvent,
    AdapterListener,
    LoadFinished,
    LoadStarted,
    Retire,
    RunFinished,
    RunStarted,
    TestFinder,
    TestStateChanged,
)
from elmtest_adapter.results import Fail, Pass, Todo, build_decorations, build_message
from elmtest_adapter.results.models import TestCompleted
from elmtest_adapter.runtime.runner import CANCELLED, ElmTestRunner
from elmtest_adapter.suite import (
    Node,
    Suite,
    Test,
    copy_locations,
    get_files_and_all_test_ids,
    get_line_fun,
    get_test_ids_for_file,
    get_tests_root,
    leaves,
    locate_test_line,
    merge_top_level_suites,
    walk,
)
from elmtest_adapter.suite.discovery import from_run_node, from_test_suites
from elmtest_adapter.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.adapter")

RunnerFactory = Callable[[Path, Path, RunnerConfig], ElmTestRunner]


class ElmTestAdapter:
    """Connects one Elm project to a test explorer."""

    def __init__(
        self,
        project_folder: Path,
        workspace_folder: Path,
        finder: TestFinder,
        listener: AdapterListener | None = None,
        config: RunnerConfig | None = None,
        runner_factory: RunnerFactory = ElmTestRunner,
    ):
        self.project_folder = project_folder
        self.workspace_folder = workspace_folder
        self.finder = finder
        self.listener = listener
        self.config = config or RunnerConfig()
        self.runner_factory = runner_factory
        self.loaded_suite: Suite | None = None
        self.runner: ElmTestRunner | None = None
        self.is_loading = False
        self._log = log.bind(project=self.root_id)
        self._log.info("Initializing Elm Test Runner adapter", workspace=str(workspace_folder))

    @property
    def root_id(self) -> str:
        try:
            relative = self.project_folder.relative_to(self.workspace_folder)
        except ValueError:
            return self.project_folder.name
        return relative.as_posix() if relative.parts else self.workspace_folder.name

    def get_root_suite(self, children: list[Node]) -> Suite:
        # Children keep ids rooted at "" (``/Module/...``), not at the root id,
        # so ids from the language server and from a run agree.
        return Suite(id=self.root_id, label=self.root_id, children=children)

    def emit(self, event: AdapterEvent) -> None:
        if self.listener is None:
            return
        try:
            self.listener.on_event(event)
        except Exception as e:
            # A broken listener must not abort a run.
            self._log.warning("Listener failed to handle event", event=type(event).__name__, error=str(e))

    # --- Loading ---
    async def load(self) -> None:
        """Discards the loaded tree and asks the language server for a new one."""
        if self.is_loading:
            return
        self.loaded_suite = None
        await self._do_load()

    async def _do_load(self) -> None:
        if self.is_loading:
            return

        self._log.info("Loading tests")
        self.is_loading = True
        try:
            self.emit(LoadStarted())
            response = await self.finder.find_tests(str(self.project_folder))
            suite = self.get_root_suite(from_test_suites(response))
            if self.loaded_suite is not None:
                self.loaded_suite = copy_locations(suite, self.loaded_suite)
            else:
                self.loaded_suite = suite
            self.emit(LoadFinished(suite=suite))
            self._log.info("Loaded tests", count=sum(1 for _ in leaves(suite)))
        except Exception as e:
            self._log.info("Failed to load tests", error=str(e))
            self.emit(LoadFinished(error_message=str(e)))
        finally:
            self.is_loading = False

    # --- Running ---
    async def run(self, tests: Sequence[str]) -> None:
        """Runs the files containing ``tests`` and reports every affected test."""
        if self.runner is not None:
            self._log.debug("Already running tests")
            return
        if self.loaded_suite is None:
            self._log.info("Not loaded", tests=list(tests))
            return

        self._log.info("Running tests", tests=list(tests))
        runner = self.runner_factory(self.project_folder, self.workspace_folder, self.config)
        self.runner = runner

        files, test_ids = get_files_and_all_test_ids(tests, self.loaded_suite)
        self.emit(RunStarted(tests=test_ids))
        self._fire_running(test_ids)

        error_message = None
        try:
            outcome = await runner.run_some_tests(files)
            if isinstance(outcome, str):
                error_message = outcome
            elif outcome is not CANCELLED:
                children = (from_run_node(child) for child in outcome.children)
                suite = self.get_root_suite([c for c in children if c is not None])
                self.loaded_suite = merge_top_level_suites(suite, self.loaded_suite)
                self.emit(LoadFinished(suite=self.loaded_suite))
                events = runner.builder.events if runner.builder else {}
                await self._fire_run(outcome, events, get_line_fun(self.loaded_suite))
        except Exception as e:
            self._log.exception("Error running tests")
            error_message = str(e)
        finally:
            self.runner = None
            self.emit(RunFinished())
            if error_message:
                self._log.error("Error running tests", error=error_message)
                self.emit(LoadFinished(error_message=error_message))

    def _fire_running(self, test_ids: Sequence[str]) -> None:
        if self.loaded_suite is None:
            return
        selected = set(test_ids)
        for node in leaves(self.loaded_suite):
            if node.id in selected:
                self.emit(TestStateChanged(test=node.id, state="running"))

    async def _fire_run(
        self,
        run_suite: Suite,
        events: dict[str, TestCompleted],
        get_line: Callable[[str], int | None],
    ) -> None:
        for node in walk(run_suite):
            if not isinstance(node, Test) or (event := events.get(node.id)) is None:
                continue
            message = build_message(event)
            match event.status:
                case Pass():
                    self.emit(
                        TestStateChanged(
                            test=node.id,
                            state="passed",
                            message=message,
                            description=f"{event.duration}ms",
                        )
                    )
                case Todo():
                    self.emit(TestStateChanged(test=node.id, state="skipped", message=message))
                case Fail():
                    line = get_line(node.id)
                    if line is None:
                        line = await self._locate(node, event)
                    decorations = build_decorations(event.status, line) if line is not None else None
                    self.emit(
                        TestStateChanged(
                            test=node.id,
                            state="failed",
                            message=message,
                            decorations=tuple(decorations) if decorations is not None else None,
                        )
                    )

    async def _locate(self, node: Test, event: TestCompleted) -> int | None:
        """Falls back to searching the test file when no line is known."""
        # The outermost label is the module, which has no definition to find.
        names = event.labels[1:]
        if not names or not node.file:
            return None
        return await locate_test_line(self.project_folder / node.file, names)

    def cancel(self) -> None:
        if self.runner is not None:
            self.runner.cancel()

    # --- Saves ---
    def is_test_file(self, file: str) -> bool:
        tests_root = get_tests_root(str(self.project_folder), self.config.tests_folder)
        return Path(file).is_relative_to(tests_root)

    def is_source_file(self, file: str) -> bool:
        return Path(file).is_relative_to(self.project_folder)

    async def file_saved(self, file: str) -> None:
        """Retires the tests of a saved test file, or everything for other sources."""
        if self.is_test_file(file):
            if self.loaded_suite is not None:
                await self._do_load()
                ids = get_test_ids_for_file(file, self.loaded_suite)
                self._log.debug("Retiring tests of saved file", file=file, count=len(ids))
                self.emit(Retire(tests=ids))
        elif self.is_source_file(file):
            self._log.debug("Retiring all tests", file=file)
            self.emit(Retire())


# 🔼⚙️
