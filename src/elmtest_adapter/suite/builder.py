# src/elmtest_adapter/suite/builder.py

"""
Builds the suite tree of one run from ``testCompleted`` events.
"""

import structlog

from elmtest_adapter.exceptions import DuplicateTestIdError
from elmtest_adapter.results.models import TestCompleted
from elmtest_adapter.suite.nodes import Suite, Test, child_id
from elmtest_adapter.suite.query import ELM_EXTENSION, get_file_path
from elmtest_adapter.telemetry import StructLogger

log: StructLogger = structlog.get_logger("suite.builder")


def insert_test_completed(
    suite: Suite,
    event: TestCompleted,
    file: str | None = None,
) -> str:
    """
    Inserts ``event`` below ``suite`` following its label path.

    Intermediate labels reuse an existing child suite of the same label or
    create one. The last label always becomes a new ``Test``; a sibling with
    the same label raises ``DuplicateTestIdError``. Newly created nodes are
    associated with ``file``. Returns the id of the new leaf.
    """
    node = suite
    *path, leaf_label = event.labels
    for label in path:
        existing = node.find_child(label)
        if isinstance(existing, Suite):
            node = existing
            continue
        if existing is not None:
            # A test and a suite share a label: the full path cannot be unique.
            raise DuplicateTestIdError(child_id(node.id, label))
        created = Suite(id=child_id(node.id, label), label=label, file=file)
        node.children.append(created)
        node = created

    test_id = child_id(node.id, leaf_label)
    if node.find_child(leaf_label) is not None:
        raise DuplicateTestIdError(test_id)
    node.children.append(Test(id=test_id, label=leaf_label, file=file))
    return test_id


class SuiteBuilder:
    """
    Accumulates one run's tree and the table from leaf id to its event.

    A builder is used for exactly one run; the orchestrator creates a new one
    each time so no events leak between runs.
    """

    def __init__(
        self,
        root_id: str = "",
        root_label: str = "root",
        file_root: str | None = None,
        extension: str = ELM_EXTENSION,
    ):
        self.root = Suite(id=root_id, label=root_label)
        self.events: dict[str, TestCompleted] = {}
        self._file_root = file_root
        self._extension = extension

    def insert(self, event: TestCompleted) -> str:
        test_id = insert_test_completed(self.root, event, file=self._file_for(event))
        self.events[test_id] = event
        log.debug("Inserted test result", test_id=test_id, status=event.status.tag)
        return test_id

    def event_for(self, test_id: str) -> TestCompleted | None:
        return self.events.get(test_id)

    def _file_for(self, event: TestCompleted) -> str:
        path = get_file_path(event, self._extension)
        if self._file_root:
            return f"{self._file_root}/{path}"
        return path


# 🔼⚙️
