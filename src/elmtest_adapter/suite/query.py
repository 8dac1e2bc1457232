# src/elmtest_adapter/suite/query.py

"""
Read-only lookups over a suite tree.
"""

from collections.abc import Callable, Iterable

from elmtest_adapter.results.models import TestCompleted
from elmtest_adapter.suite.nodes import Node, Suite, Test, walk

ELM_EXTENSION = ".elm"


def get_file_path(event: TestCompleted, extension: str = ELM_EXTENSION) -> str:
    """
    Derives the test file of an event from its outermost label.

    elm-test names the top level suite after the module, so ``Module.Sub``
    lives in ``Module/Sub.elm`` below the tests folder.
    """
    module = event.labels[0]
    return "/".join(module.split(".")) + extension


def get_tests_root(project_folder: str, tests_folder: str = "tests") -> str:
    return f"{project_folder}/{tests_folder}"


def get_test_infos_by_file(suite: Suite) -> dict[str, list[Test]]:
    tests_by_file: dict[str, list[Test]] = {}
    for node in walk(suite):
        if isinstance(node, Test) and node.file is not None:
            tests_by_file.setdefault(node.file, []).append(node)
    return tests_by_file


def get_files_and_all_test_ids(ids: Iterable[str], suite: Suite) -> tuple[list[str], list[str]]:
    """
    Resolves selected node ids to the files that contain them.

    elm-test can only narrow a run down to whole files, so the second element
    lists every id in those files: all of them are about to be re-run.
    """
    selected_ids = set(ids)
    nodes = list(walk(suite))
    files: list[str] = []
    for node in nodes:
        if node.id in selected_ids and node.file and node.file not in files:
            files.append(node.file)

    selected_files = set(files)
    all_ids = [node.id for node in nodes if node.file and node.file in selected_files]
    return files, all_ids


def get_test_ids_for_file(file_name: str, suite: Suite) -> list[str]:
    return [node.id for node in walk(suite) if node.file == file_name]


def get_line_fun(suite: Node) -> Callable[[str], int | None]:
    """Snapshot of known lines by id, for anchoring decorations."""
    by_id = {node.id: node.line for node in walk(suite) if node.line is not None}
    return by_id.get


# 🔼⚙️
