# src/elmtest_adapter/runtime/state.py
#
"""
Lifecycle state of a test run.
"""

from enum import Enum, auto

import structlog
from attrs import field, mutable

from elmtest_adapter.exceptions import RunnerError

log: structlog.stdlib.BoundLogger = structlog.get_logger("runtime.state")


class RunStatus(Enum):
    """Where a runner is in its Idle -> Running -> outcome -> Idle cycle."""

    IDLE = auto()
    RUNNING = auto()
    COMPLETED = auto()
    FAILED = auto()
    CANCELLED = auto()


ALLOWED_TRANSITIONS: dict[RunStatus, frozenset[RunStatus]] = {
    RunStatus.IDLE: frozenset({RunStatus.RUNNING}),
    RunStatus.RUNNING: frozenset({RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELLED}),
    RunStatus.COMPLETED: frozenset({RunStatus.IDLE}),
    RunStatus.FAILED: frozenset({RunStatus.IDLE}),
    RunStatus.CANCELLED: frozenset({RunStatus.IDLE}),
}


@mutable(slots=True)
class RunState:
    """
    Holds the state of the single run a runner may have outstanding.
    """

    project: str = field()
    status: RunStatus = field(default=RunStatus.IDLE)
    error_message: str | None = field(default=None)
    run_count: int = field(default=0)

    @property
    def is_running(self) -> bool:
        return self.status is RunStatus.RUNNING

    def update_status(self, new_status: RunStatus, error_msg: str | None = None) -> None:
        """Moves to ``new_status``; an illegal transition is a programming error."""
        old_status = self.status
        if new_status not in ALLOWED_TRANSITIONS[old_status]:
            raise RunnerError(f"Invalid run transition {old_status.name} -> {new_status.name}")

        self.status = new_status
        log_func = log.debug
        if new_status is RunStatus.RUNNING:
            self.run_count += 1
            self.error_message = None
        elif new_status is RunStatus.FAILED:
            self.error_message = error_msg or "Unknown error"
            log_func = log.warning

        log_func(
            "Run status changed",
            project=self.project,
            old_status=old_status.name,
            new_status=new_status.name,
            **({"error": self.error_message} if new_status is RunStatus.FAILED else {}),
        )

# 🔼⚙️
