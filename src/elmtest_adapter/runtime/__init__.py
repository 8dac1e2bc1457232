#
# src/elmtest_adapter/runtime/__init__.py
#
"""
Running elm-test and reporting to a test explorer.
"""
from .adapter import ElmTestAdapter
from .command import ElmBinaries, build_elm_test_args, build_elm_test_args_with_report, resolve_elm_binaries
from .local_finder import LocalTestFinder
from .process import ProcessResult, SubprocessRunner
from .runner import CANCELLED, ElmTestRunner, RunOutcome, fold_outputs, parse_lines
from .state import RunState, RunStatus
from .watcher import SaveWatcher

__all__ = [
    "CANCELLED",
    "ElmBinaries",
    "ElmTestAdapter",
    "ElmTestRunner",
    "LocalTestFinder",
    "ProcessResult",
    "RunOutcome",
    "RunState",
    "RunStatus",
    "SaveWatcher",
    "SubprocessRunner",
    "build_elm_test_args",
    "build_elm_test_args_with_report",
    "fold_outputs",
    "parse_lines",
    "resolve_elm_binaries",
]

# 🔼⚙️
