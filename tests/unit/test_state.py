#
# tests/unit/test_state.py
#
"""
Tests for the run lifecycle state.
"""

import pytest

from elmtest_adapter.exceptions import RunnerError
from elmtest_adapter.runtime import RunState, RunStatus


class TestRunState:
    def test_initial_state(self) -> None:
        state = RunState(project="app")
        assert state.status is RunStatus.IDLE
        assert state.run_count == 0

    def test_full_cycle(self) -> None:
        state = RunState(project="app")

        state.update_status(RunStatus.RUNNING)
        assert state.is_running
        assert state.run_count == 1

        state.update_status(RunStatus.COMPLETED)
        state.update_status(RunStatus.IDLE)
        assert not state.is_running

    def test_failure_records_message(self) -> None:
        state = RunState(project="app")
        state.update_status(RunStatus.RUNNING)
        state.update_status(RunStatus.FAILED, "compile error")

        assert state.error_message == "compile error"

        state.update_status(RunStatus.IDLE)
        state.update_status(RunStatus.RUNNING)
        assert state.error_message is None
        assert state.run_count == 2

    @pytest.mark.parametrize(
        ("start", "target"),
        [
            (RunStatus.IDLE, RunStatus.COMPLETED),
            (RunStatus.IDLE, RunStatus.CANCELLED),
            (RunStatus.RUNNING, RunStatus.IDLE),
            (RunStatus.COMPLETED, RunStatus.FAILED),
        ],
    )
    def test_invalid_transitions(self, start: RunStatus, target: RunStatus) -> None:
        state = RunState(project="app", status=start)
        with pytest.raises(RunnerError, match="Invalid run transition"):
            state.update_status(target)
