#
# tests/unit/test_process.py
#
"""
Tests for running commands with asyncio subprocesses.
"""

import asyncio
import sys
from pathlib import Path

import pytest

from elmtest_adapter.exceptions import ProcessStartError
from elmtest_adapter.runtime import SubprocessRunner


@pytest.mark.asyncio
class TestSubprocessRunner:
    async def test_captures_output(self, tmp_path: Path) -> None:
        runner = SubprocessRunner()
        script = "import sys; print('out'); print('err', file=sys.stderr); sys.exit(2)"

        result = await runner.run([sys.executable, "-c", script], tmp_path)

        assert result.exit_code == 2
        assert result.stdout.strip() == "out"
        assert result.stderr.strip() == "err"
        assert not runner.is_running

    async def test_runs_in_working_dir(self, tmp_path: Path) -> None:
        result = await SubprocessRunner().run([sys.executable, "-c", "import os; print(os.getcwd())"], tmp_path)
        assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()

    async def test_missing_executable(self, tmp_path: Path) -> None:
        runner = SubprocessRunner()
        with pytest.raises(ProcessStartError, match="no-such-elm-test"):
            await runner.run([str(tmp_path / "no-such-elm-test")], tmp_path)

    async def test_terminate_stops_process(self, tmp_path: Path) -> None:
        runner = SubprocessRunner()
        task = asyncio.create_task(runner.run([sys.executable, "-c", "import time; time.sleep(30)"], tmp_path))
        for _ in range(100):
            if runner.is_running:
                break
            await asyncio.sleep(0.05)

        runner.terminate()
        result = await asyncio.wait_for(task, timeout=10)

        assert result.exit_code != 0
