#
# src/elmtest_adapter/runtime/process.py
#
"""
Runs elm-test in a subprocess using asyncio.subprocess.
"""
import asyncio
from collections.abc import Sequence
from pathlib import Path

import structlog
from attrs import define

from elmtest_adapter.exceptions import ProcessStartError
from elmtest_adapter.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.process")


@define(frozen=True, slots=True)
class ProcessResult:
    """
    Outcome of one elm-test invocation. Output is empty for interactive runs.
    """
    exit_code: int
    stdout: str
    stderr: str


class SubprocessRunner:
    """
    Executes one command at a time and can terminate it from outside.

    ``capture=True`` collects stdout/stderr for parsing; ``capture=False``
    lets the tool write straight to the terminal, like an editor task.
    """

    def __init__(self) -> None:
        self._process: asyncio.subprocess.Process | None = None

    @property
    def is_running(self) -> bool:
        return self._process is not None and self._process.returncode is None

    async def run(
        self,
        command: Sequence[str],
        working_dir: Path,
        capture: bool = True,
    ) -> ProcessResult:
        """
        Executes the given command and waits for it to exit.

        Raises:
            ProcessStartError: The executable does not exist or cannot be run.
        """
        runner_log = log.bind(
            command=" ".join(command),
            working_dir=str(working_dir),
            capture=capture,
        )
        runner_log.info("Executing elm-test")

        pipe = asyncio.subprocess.PIPE if capture else None
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=pipe,
                stderr=pipe,
                cwd=working_dir,
            )
        except OSError as e:
            runner_log.error("elm-test could not be started", command_executable=command[0], error=str(e))
            raise ProcessStartError(command[0], details=e) from e

        self._process = process
        try:
            stdout_bytes, stderr_bytes = await process.communicate()
        except asyncio.CancelledError:
            runner_log.warning("Run cancelled, terminating elm-test")
            self._kill(process)
            raise
        finally:
            self._process = None

        exit_code = process.returncode if process.returncode is not None else -1
        stdout = (stdout_bytes or b"").decode("utf-8", errors="replace")
        stderr = (stderr_bytes or b"").decode("utf-8", errors="replace")

        runner_log.info("elm-test finished", exit_code=exit_code)
        runner_log.debug(
            "elm-test output",
            stdout_len=len(stdout),
            stderr_len=len(stderr),
        )
        return ProcessResult(exit_code=exit_code, stdout=stdout, stderr=stderr)

    def terminate(self) -> None:
        """Kills the running process, if any. Its output is discarded by the caller."""
        if self._process is not None:
            self._kill(self._process)

    @staticmethod
    def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.kill()
        except ProcessLookupError:
            log.debug("Process already exited", pid=process.pid)

# 🔼⚙️
