# src/elmtest_adapter/runtime/runner.py

"""
Runs elm-test for one Elm project and turns its report into a suite tree.
"""

import asyncio
import os
from collections.abc import Iterable, Iterator, Sequence
from enum import Enum
from pathlib import Path
from typing import TypeAlias

import attrs
import structlog

from elmtest_adapter.config import RunnerConfig
from elmtest_adapter.exceptions import (
    AlreadyRunningError,
    DuplicateTestIdError,
    ProcessStartError,
    ProtocolError,
)
from elmtest_adapter.results import (
    Message,
    Output,
    Result,
    TestCompleted,
    build_error_message,
    parse_error_output,
    parse_output,
)
from elmtest_adapter.runtime.command import (
    binaries_from_config,
    build_elm_test_args,
    build_elm_test_args_with_report,
    resolve_elm_binaries,
)
from elmtest_adapter.runtime.process import SubprocessRunner
from elmtest_adapter.runtime.state import RunState, RunStatus
from elmtest_adapter.suite import Suite, SuiteBuilder
from elmtest_adapter.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.runner")


class Cancelled(Enum):
    CANCELLED = "cancelled"


CANCELLED = Cancelled.CANCELLED

RunOutcome: TypeAlias = Suite | str | Cancelled


def parse_lines(lines: Iterable[str]) -> Iterator[Output]:
    """
    Parses stdout lines in order, skipping blank lines.

    A line elm-test reports in a shape this adapter does not know is logged
    and dropped; the rest of the run is still used.
    """
    for line in lines:
        if not line:
            continue
        try:
            yield parse_output(line)
        except ProtocolError as e:
            log.warning("Failed to parse line", line=line, error=str(e))


def fold_outputs(
    outputs: Iterable[Output],
    builder: SuiteBuilder,
    pending: tuple[str, ...] = (),
) -> tuple[str, ...]:
    """
    Feeds parsed outputs into ``builder``.

    Plain messages printed before a test finished belong to that test: they
    are accumulated and prepended to the next ``testCompleted`` event's
    messages. Returns the messages still pending after the last output.
    """
    for output in outputs:
        match output:
            case Message(line=line):
                if line:
                    pending = (*pending, line)
            case Result(event=TestCompleted() as event):
                builder.insert(attrs.evolve(event, messages=(*pending, *event.messages)))
                pending = ()
            case Result():
                pass
    return pending


class ElmTestRunner:
    """
    Owns at most one elm-test run at a time.

    ``run_some_tests`` resolves to the run's suite tree, to an error message,
    or to ``CANCELLED``.
    """

    def __init__(
        self,
        project_folder: Path,
        workspace_folder: Path,
        config: RunnerConfig | None = None,
        process_runner: SubprocessRunner | None = None,
    ):
        self.project_folder = project_folder
        self.workspace_folder = workspace_folder
        self.config = config or RunnerConfig()
        self.process_runner = process_runner or SubprocessRunner()
        self.state = RunState(project=self.relative_project_folder or workspace_folder.name)
        self.builder: SuiteBuilder | None = None
        self._future: asyncio.Future[RunOutcome] | None = None
        self._task: asyncio.Task[None] | None = None
        self._log = log.bind(project=self.state.project)

    @property
    def relative_project_folder(self) -> str:
        relative = os.path.relpath(self.project_folder, self.workspace_folder)
        return "" if relative == "." else relative

    @property
    def task_name(self) -> str:
        if self.relative_project_folder:
            return f"Run Elm Test ({self.relative_project_folder})"
        return "Run Elm Test"

    @property
    def is_running(self) -> bool:
        return self._future is not None

    async def run_some_tests(self, files: Sequence[str] | None = None) -> RunOutcome:
        """
        Runs elm-test, optionally narrowed to ``files``.

        Raises:
            AlreadyRunningError: A previous run has not finished yet.
        """
        if self._future is not None:
            raise AlreadyRunningError(self.state.project)

        args = self.elm_test_args(files)
        loop = asyncio.get_running_loop()
        future: asyncio.Future[RunOutcome] = loop.create_future()
        self._future = future
        self.builder = SuiteBuilder(file_root=self.config.tests_folder, extension=self.config.file_extension)
        self.state.update_status(RunStatus.RUNNING)
        self._task = asyncio.create_task(self._execute(args))
        try:
            return await future
        finally:
            if self._task is not None and not self._task.done():
                self._task.cancel()
            self._task = None
            self._future = None
            if self.state.is_running:
                # The awaiting caller itself was cancelled.
                self.state.update_status(RunStatus.CANCELLED)
            self.state.update_status(RunStatus.IDLE)

    def cancel(self) -> None:
        """Terminates the outstanding run; it resolves to ``CANCELLED``."""
        if self._future is None or self._future.done():
            return
        self._log.info("Running Elm Tests cancelled")
        self._finish(CANCELLED)
        self.process_runner.terminate()
        if self._task is not None:
            self._task.cancel()

    def elm_test_args(self, files: Sequence[str] | None = None) -> list[str]:
        binaries = resolve_elm_binaries(
            binaries_from_config(self.config),
            self.project_folder,
            self.workspace_folder,
        )
        return build_elm_test_args(binaries, files)

    async def _execute(self, args: list[str]) -> None:
        try:
            if self.config.show_output:
                await self._run_with_output(args)
            else:
                await self._run_with_report(args)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._log.exception("Running Elm Tests failed unexpectedly")
            if self._future is not None and not self._future.done():
                self.state.update_status(RunStatus.FAILED, str(e))
                self._future.set_exception(e)

    async def _run_with_output(self, args: list[str]) -> None:
        """First pass with visible output; the report is collected by a second run."""
        self._log.info("Running Elm Tests as task", args=args)
        try:
            result = await self.process_runner.run(args, self.project_folder, capture=False)
        except ProcessStartError as e:
            self._finish(self._start_failure_message(args), error=e)
            return

        if 0 <= result.exit_code <= self.config.max_accepted_exit_code:
            await self._run_with_report(args)
            return

        self._log.info("Running Elm Test task failed", exit_code=result.exit_code, args=args)
        message = "\n".join(
            [
                "elm-test failed.",
                "Check for Elm errors,",
                f'find details in the "{self.task_name}" terminal.',
            ]
        )
        self._finish(message)

    async def _run_with_report(self, args: list[str]) -> None:
        args_with_report = build_elm_test_args_with_report(args)
        self._log.info("Running Elm Tests", args=args_with_report)
        try:
            result = await self.process_runner.run(args_with_report, self.project_folder)
        except ProcessStartError as e:
            self._finish(self._start_failure_message(args), error=e)
            return

        if self._future is None or self._future.done():
            self._log.debug("Discarding output of a cancelled run")
            return

        builder = self.builder or SuiteBuilder()
        try:
            pending = fold_outputs(parse_lines(result.stdout.split("\n")), builder)
        except DuplicateTestIdError as e:
            self._log.error("Duplicate test in elm-test report", test_id=e.test_id)
            self._finish(str(e))
            return
        if pending:
            self._log.debug("Messages after the last test", count=len(pending))

        if result.stderr:
            self._finish(build_error_message(parse_error_output(result.stderr)))
        else:
            self._finish(builder.root)

    def _start_failure_message(self, args: list[str]) -> str:
        return f'Failed to run Elm Tests, is elm-test installed at "{args[0]}"?'

    def _finish(self, outcome: RunOutcome, error: Exception | None = None) -> None:
        future = self._future
        if future is None or future.done():
            return
        if outcome is CANCELLED:
            self.state.update_status(RunStatus.CANCELLED)
        elif isinstance(outcome, str):
            if error is not None:
                self._log.error(outcome, error=str(error))
            self.state.update_status(RunStatus.FAILED, outcome)
        else:
            self.state.update_status(RunStatus.COMPLETED)
        self._log.debug("Running Elm Tests finished", status=self.state.status.name)
        future.set_result(outcome)


# 🔼⚙️
