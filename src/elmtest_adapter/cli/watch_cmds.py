# src/elmtest_adapter/cli/watch_cmds.py

import asyncio
import sys
from collections import Counter
from pathlib import Path

import click
import structlog
from rich.console import Console
from rich.text import Text

from elmtest_adapter.cli.render import STATUS_STYLES, summary_line
from elmtest_adapter.cli.utils import config_path_option, load_config_or_exit, logging_options
from elmtest_adapter.config import RunnerConfig
from elmtest_adapter.protocols import (
    AdapterEvent,
    LoadFinished,
    Retire,
    RunFinished,
    RunStarted,
    TestStateChanged,
)
from elmtest_adapter.runtime import ElmTestAdapter, LocalTestFinder, SaveWatcher
from elmtest_adapter.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.watch")


class WatchSession:
    """
    Runs the tests of a project, then re-runs retired tests on every save
    until ``shutdown_event`` is set.
    """

    def __init__(
        self,
        project_folder: Path,
        workspace_folder: Path,
        config: RunnerConfig,
        shutdown_event: asyncio.Event,
        console: Console,
    ):
        self.shutdown_event = shutdown_event
        self.console = console
        self.adapter = ElmTestAdapter(
            project_folder,
            workspace_folder,
            finder=LocalTestFinder(project_folder, workspace_folder, config),
            listener=self,
            config=config,
        )
        self.counts: Counter[str] = Counter()
        self.retired: asyncio.Queue[tuple[str, ...] | None] = asyncio.Queue()

    def on_event(self, event: AdapterEvent) -> None:
        match event:
            case RunStarted():
                self.counts.clear()
            case TestStateChanged(state="running"):
                pass
            case TestStateChanged(test=test, state=state, message=message):
                self.counts[state] += 1
                if state == "failed":
                    emoji, style = STATUS_STYLES[state]
                    self.console.print(Text(f"{emoji} {test}", style=style))
                    if message:
                        self.console.print(Text(message, style="dim"))
            case RunFinished():
                self.console.print(summary_line(self.counts))
            case LoadFinished(error_message=str() as message):
                self.console.print(Text(message, style="bold red"))
            case Retire(tests=tests):
                self.retired.put_nowait(tests)

    async def run(self) -> None:
        loop = asyncio.get_running_loop()
        watcher = SaveWatcher(self.adapter, loop)
        await self.adapter.load()
        await self.adapter.run([self.adapter.root_id])

        watcher.start()
        rerun_task = asyncio.create_task(self._rerun_retired())
        try:
            await watcher.process(self.shutdown_event)
        finally:
            rerun_task.cancel()
            self.adapter.cancel()
            watcher.stop()

    async def _rerun_retired(self) -> None:
        while True:
            retired = [await self.retired.get()]
            while not self.retired.empty():
                retired.append(self.retired.get_nowait())

            if any(tests is None for tests in retired):
                ids = [self.adapter.root_id]
            else:
                ids = sorted({test for tests in retired if tests for test in tests})
            if not ids:
                continue
            log.debug("Re-running retired tests", count=len(ids))
            await self.adapter.run(ids)


def _run_watch_session(session: WatchSession) -> int:
    try:
        asyncio.run(session.run())
        return 0
    except KeyboardInterrupt:
        log.warning("Shutdown initiated by KeyboardInterrupt (CTRL-C).")
        return 130
    except Exception:
        log.critical("Watch session exited with an unhandled exception.", exc_info=True)
        return 1


@click.command(name="watch")
@click.option(
    "-p",
    "--project",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Folder of the Elm project (the one holding elm.json).",
)
@config_path_option
@logging_options
@click.pass_context
def watch_cli(ctx: click.Context, project: Path, config_path: Path, **kwargs):
    """Run the tests, then re-run them whenever an Elm file is saved."""
    config = load_config_or_exit(ctx, config_path, **kwargs)
    project = project.resolve()
    log.info("Initializing watch command...", project=str(project))

    session = WatchSession(
        project_folder=project,
        workspace_folder=project,
        config=config.runner,
        shutdown_event=asyncio.Event(),
        console=Console(),
    )
    exit_code = _run_watch_session(session)

    log.info("'watch' command finished.")
    if exit_code != 0:
        sys.exit(exit_code)


# 🔼⚙️
