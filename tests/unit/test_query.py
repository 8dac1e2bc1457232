#
# tests/unit/test_query.py
#
"""
Tests for lookups over the suite tree and converting language server suites.
"""

import pytest

from elmtest_adapter.protocols import SourcePosition, TestSuiteDescription
from elmtest_adapter.results import TestCompleted
from elmtest_adapter.suite import (
    Suite,
    Test,
    get_file_path,
    get_files_and_all_test_ids,
    get_line_fun,
    get_test_ids_for_file,
    get_test_infos_by_file,
    get_tests_root,
)
from elmtest_adapter.suite.discovery import from_run_node, from_test_suite, from_test_suites


@pytest.fixture
def loaded_suite() -> Suite:
    return Suite(
        id="app",
        label="app",
        children=[
            Suite(
                id="app/A",
                label="A",
                file="/p/tests/A.elm",
                line=0,
                children=[
                    Test(id="app/A/one", label="one", file="/p/tests/A.elm", line=4),
                    Test(id="app/A/two", label="two", file="/p/tests/A.elm", line=8),
                ],
            ),
            Suite(
                id="app/B",
                label="B",
                file="/p/tests/B.elm",
                line=0,
                children=[Test(id="app/B/three", label="three", file="/p/tests/B.elm")],
            ),
        ],
    )


class TestQueries:
    def test_file_path_from_module(self) -> None:
        assert get_file_path(TestCompleted(labels=["Module.Sub", "test"])) == "Module/Sub.elm"
        assert get_file_path(TestCompleted(labels=["Module", "test"]), ".elm") == "Module.elm"

    def test_tests_root(self) -> None:
        assert get_tests_root("/p") == "/p/tests"
        assert get_tests_root("/p", "elm-tests") == "/p/elm-tests"

    def test_files_and_ids_for_selected_test(self, loaded_suite: Suite) -> None:
        files, ids = get_files_and_all_test_ids(["app/A/two"], loaded_suite)

        assert files == ["/p/tests/A.elm"]
        assert ids == ["app/A", "app/A/one", "app/A/two"]

    def test_files_for_root_selection(self, loaded_suite: Suite) -> None:
        files, ids = get_files_and_all_test_ids(["app"], loaded_suite)

        # The root has no file: elm-test runs everything.
        assert files == []
        assert ids == []

    def test_files_are_unique(self, loaded_suite: Suite) -> None:
        files, _ = get_files_and_all_test_ids(["app/A/one", "app/A/two", "app/B"], loaded_suite)
        assert files == ["/p/tests/A.elm", "/p/tests/B.elm"]

    def test_ids_for_file(self, loaded_suite: Suite) -> None:
        assert get_test_ids_for_file("/p/tests/B.elm", loaded_suite) == ["app/B", "app/B/three"]
        assert get_test_ids_for_file("/p/tests/C.elm", loaded_suite) == []

    def test_infos_by_file(self, loaded_suite: Suite) -> None:
        by_file = get_test_infos_by_file(loaded_suite)
        assert [t.id for t in by_file["/p/tests/A.elm"]] == ["app/A/one", "app/A/two"]
        assert [t.id for t in by_file["/p/tests/B.elm"]] == ["app/B/three"]

    def test_line_fun(self, loaded_suite: Suite) -> None:
        get_line = get_line_fun(loaded_suite)
        assert get_line("app/A/two") == 8
        assert get_line("app/B/three") is None
        assert get_line("unknown") is None


class TestDiscovery:
    def test_nested_descriptions(self) -> None:
        description = TestSuiteDescription(
            label="Module",
            file="/p/tests/Module.elm",
            position=SourcePosition(line=0),
            tests=(
                TestSuiteDescription(
                    label="group",
                    file="/p/tests/Module.elm",
                    position=SourcePosition(line=5, character=4),
                    tests=(TestSuiteDescription(label="leaf", file="/p/tests/Module.elm", position=SourcePosition(line=7)),),
                ),
            ),
        )

        node = from_test_suite(description, "app")

        assert isinstance(node, Suite)
        assert node.id == "app/Module"
        group = node.children[0]
        assert isinstance(group, Suite)
        assert (group.id, group.line) == ("app/Module/group", 5)
        leaf = group.children[0]
        assert isinstance(leaf, Test)
        assert (leaf.id, leaf.file, leaf.line) == ("app/Module/group/leaf", "/p/tests/Module.elm", 7)

    def test_description_without_tests_is_test(self) -> None:
        node = from_test_suite(TestSuiteDescription(label="single", file="f", tests=()))
        assert isinstance(node, Test)
        assert node.id == "/single"

    def test_unlabelled_descriptions_are_dropped(self) -> None:
        nodes = from_test_suites(
            [TestSuiteDescription(label="", file="f"), TestSuiteDescription(label="kept", file="f")]
        )
        assert [node.label for node in nodes] == ["kept"]

    def test_run_node_reid(self) -> None:
        run_tree = Suite(
            id="/Module",
            label="Module",
            file="tests/Module.elm",
            children=[Test(id="/Module/t", label="t", file="tests/Module.elm")],
        )

        node = from_run_node(run_tree, "app")

        assert isinstance(node, Suite)
        assert node.id == "app/Module"
        assert node.children[0].id == "app/Module/t"
        assert node.children[0].file == "tests/Module.elm"
        assert node.children[0].line is None

    def test_missing_position_leaves_line_unset(self) -> None:
        node = from_test_suite(TestSuiteDescription(label="computed", file="/p/tests/A.elm"), "app")

        assert isinstance(node, Test)
        assert node.file == "/p/tests/A.elm"
        assert node.line is None
