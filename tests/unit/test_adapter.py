#
# tests/unit/test_adapter.py
#
"""
Tests for the test explorer adapter: loading, running and retiring.
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from elmtest_adapter.config import RunnerConfig
from elmtest_adapter.protocols import (
    LoadFinished,
    LoadStarted,
    Retire,
    RunFinished,
    RunStarted,
    SourcePosition,
    TestStateChanged,
    TestSuiteDescription,
)
from elmtest_adapter.results import (
    ComparisonFailure,
    Fail,
    Pass,
    TestCompleted,
    TestDecoration,
    Todo,
)
from elmtest_adapter.runtime import CANCELLED, ElmTestAdapter, ElmTestRunner
from elmtest_adapter.suite import Suite, SuiteBuilder, leaves


class RecordingListener:
    def __init__(self) -> None:
        self.events: list = []

    def on_event(self, event) -> None:
        self.events.append(event)

    def of_type(self, cls: type) -> list:
        return [e for e in self.events if isinstance(e, cls)]


def description(elm_project: Path) -> TestSuiteDescription:
    file = str(elm_project / "tests" / "Example.elm")
    return TestSuiteDescription(
        label="Example",
        file=file,
        position=SourcePosition(line=0),
        tests=(
            TestSuiteDescription(
                label="math",
                file=file,
                position=SourcePosition(line=7),
                tests=(
                    TestSuiteDescription(label="adds", file=file, position=SourcePosition(line=8)),
                    TestSuiteDescription(label="fails", file=file, position=SourcePosition(line=10)),
                ),
            ),
        ),
    )


def fake_runner(outcome_events: list[TestCompleted] | None = None, outcome=None) -> MagicMock:
    """A runner that resolves to the tree built from ``outcome_events``."""
    builder = SuiteBuilder(file_root="tests")
    for event in outcome_events or []:
        builder.insert(event)
    runner = MagicMock(spec=ElmTestRunner)
    runner.builder = builder
    runner.run_some_tests = AsyncMock(return_value=builder.root if outcome is None else outcome)
    return runner


@pytest.fixture
def finder(elm_project: Path) -> AsyncMock:
    finder = AsyncMock()
    finder.find_tests.return_value = [description(elm_project)]
    return finder


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


def make_adapter(elm_project: Path, finder, listener, runner: MagicMock | None = None) -> ElmTestAdapter:
    return ElmTestAdapter(
        elm_project,
        elm_project.parent,
        finder,
        listener=listener,
        config=RunnerConfig(),
        runner_factory=lambda project, workspace, config: runner,
    )


RUN_EVENTS = [
    TestCompleted(labels=["Example", "math", "adds"], duration=3, status=Pass()),
    TestCompleted(
        labels=["Example", "math", "fails"],
        messages=["printed"],
        status=Fail(failures=[ComparisonFailure(comparison="Expect.equal", actual="2", expected="1")]),
    ),
]


@pytest.mark.asyncio
class TestLoading:
    async def test_load_emits_tree(
        self, elm_project: Path, finder: AsyncMock, listener: RecordingListener
    ) -> None:
        adapter = make_adapter(elm_project, finder, listener)

        await adapter.load()

        finder.find_tests.assert_awaited_once_with(str(elm_project))
        assert isinstance(listener.events[0], LoadStarted)
        [finished] = listener.of_type(LoadFinished)
        assert finished.error_message is None
        assert finished.suite is not None
        assert finished.suite.id == "app"
        assert [t.id for t in leaves(finished.suite)] == ["/Example/math/adds", "/Example/math/fails"]

    async def test_load_failure_is_reported(
        self, elm_project: Path, finder: AsyncMock, listener: RecordingListener
    ) -> None:
        finder.find_tests.side_effect = RuntimeError("language server gone")
        adapter = make_adapter(elm_project, finder, listener)

        await adapter.load()

        [finished] = listener.of_type(LoadFinished)
        assert finished.error_message == "language server gone"
        assert adapter.loaded_suite is None
        assert not adapter.is_loading

    async def test_root_id_without_subfolder(self, elm_project: Path, finder: AsyncMock) -> None:
        adapter = ElmTestAdapter(elm_project, elm_project, finder)
        assert adapter.root_id == "app"

    async def test_broken_listener_does_not_abort(self, elm_project: Path, finder: AsyncMock) -> None:
        listener = MagicMock()
        listener.on_event.side_effect = RuntimeError("broken")
        adapter = make_adapter(elm_project, finder, listener)

        await adapter.load()

        assert adapter.loaded_suite is not None


@pytest.mark.asyncio
class TestRunning:
    async def test_run_reports_each_test(
        self, elm_project: Path, finder: AsyncMock, listener: RecordingListener
    ) -> None:
        runner = fake_runner(RUN_EVENTS)
        adapter = make_adapter(elm_project, finder, listener, runner)
        await adapter.load()
        listener.events.clear()

        await adapter.run(["/Example/math/fails"])

        runner.run_some_tests.assert_awaited_once_with([str(elm_project / "tests" / "Example.elm")])
        [started] = listener.of_type(RunStarted)
        assert "/Example/math/adds" in started.tests

        states = {(e.test, e.state) for e in listener.of_type(TestStateChanged)}
        assert ("/Example/math/adds", "running") in states

        finals = {e.test: e for e in listener.of_type(TestStateChanged) if e.state != "running"}
        assert finals["/Example/math/adds"].state == "passed"
        assert finals["/Example/math/adds"].description == "3ms"
        failed = finals["/Example/math/fails"]
        assert failed.state == "failed"
        assert failed.message == "printed\n2\n| Expect.equal\n1"
        assert failed.decorations == (TestDecoration(line=10, message="Expect.equal 1 2"),)

        assert isinstance(listener.events[-1], RunFinished)
        assert adapter.runner is None

    async def test_run_merges_locations(
        self, elm_project: Path, finder: AsyncMock, listener: RecordingListener
    ) -> None:
        adapter = make_adapter(elm_project, finder, listener, fake_runner(RUN_EVENTS))
        await adapter.load()

        await adapter.run(["app"])

        loaded = adapter.loaded_suite
        assert loaded is not None
        lines = {t.id: t.line for t in leaves(loaded)}
        assert lines == {"/Example/math/adds": 8, "/Example/math/fails": 10}

    async def test_todo_is_skipped(
        self, elm_project: Path, finder: AsyncMock, listener: RecordingListener
    ) -> None:
        events = [TestCompleted(labels=["Example", "math", "adds"], status=Todo(comment="later"))]
        adapter = make_adapter(elm_project, finder, listener, fake_runner(events))
        await adapter.load()

        await adapter.run(["app"])

        [skipped] = [e for e in listener.of_type(TestStateChanged) if e.state == "skipped"]
        assert skipped.test == "/Example/math/adds"

    async def test_new_test_is_located_in_file(
        self, elm_project: Path, finder: AsyncMock, listener: RecordingListener
    ) -> None:
        finder.find_tests.return_value = []
        adapter = make_adapter(elm_project, finder, listener, fake_runner(RUN_EVENTS))
        await adapter.load()

        await adapter.run(["app"])

        [failed] = [e for e in listener.of_type(TestStateChanged) if e.state == "failed"]
        assert failed.decorations == (TestDecoration(line=10, message="Expect.equal 1 2"),)

    async def test_unlocated_test_gets_no_decoration(
        self, elm_project: Path, finder: AsyncMock, listener: RecordingListener
    ) -> None:
        file = str(elm_project / "tests" / "Example.elm")
        finder.find_tests.return_value = [
            TestSuiteDescription(
                label="Example",
                file=file,
                position=SourcePosition(line=0),
                tests=(TestSuiteDescription(label="case 1", file=file),),
            )
        ]
        events = [
            TestCompleted(
                labels=["Example", "case 1"],
                status=Fail(failures=[ComparisonFailure(comparison="Expect.equal", actual="2", expected="1")]),
            )
        ]
        adapter = make_adapter(elm_project, finder, listener, fake_runner(events))
        await adapter.load()

        await adapter.run(["app"])

        loaded = adapter.loaded_suite
        assert loaded is not None
        assert [(t.id, t.line) for t in leaves(loaded)] == [("/Example/case 1", None)]
        [failed] = [e for e in listener.of_type(TestStateChanged) if e.state == "failed"]
        assert failed.decorations is None

    async def test_error_outcome(
        self, elm_project: Path, finder: AsyncMock, listener: RecordingListener
    ) -> None:
        adapter = make_adapter(elm_project, finder, listener, fake_runner(outcome="compile error"))
        await adapter.load()
        listener.events.clear()

        await adapter.run(["app"])

        assert isinstance(listener.events[-2], RunFinished)
        assert listener.events[-1] == LoadFinished(error_message="compile error")

    async def test_cancelled_outcome_is_not_an_error(
        self, elm_project: Path, finder: AsyncMock, listener: RecordingListener
    ) -> None:
        adapter = make_adapter(elm_project, finder, listener, fake_runner(outcome=CANCELLED))
        await adapter.load()
        listener.events.clear()

        await adapter.run(["app"])

        assert isinstance(listener.events[-1], RunFinished)
        assert listener.of_type(LoadFinished) == []

    async def test_run_before_load_does_nothing(
        self, elm_project: Path, finder: AsyncMock, listener: RecordingListener
    ) -> None:
        runner = fake_runner(RUN_EVENTS)
        adapter = make_adapter(elm_project, finder, listener, runner)

        await adapter.run(["app"])

        runner.run_some_tests.assert_not_awaited()
        assert listener.events == []

    async def test_cancel_forwards_to_runner(self, elm_project: Path, finder: AsyncMock) -> None:
        adapter = make_adapter(elm_project, finder, None)
        adapter.runner = MagicMock(spec=ElmTestRunner)

        adapter.cancel()

        adapter.runner.cancel.assert_called_once()


@pytest.mark.asyncio
class TestFileSaved:
    async def test_saved_test_file_retires_its_tests(
        self, elm_project: Path, finder: AsyncMock, listener: RecordingListener
    ) -> None:
        adapter = make_adapter(elm_project, finder, listener)
        await adapter.load()
        listener.events.clear()
        saved = str(elm_project / "tests" / "Example.elm")

        await adapter.file_saved(saved)

        assert finder.find_tests.await_count == 2
        [retire] = listener.of_type(Retire)
        assert retire.tests == (
            "/Example",
            "/Example/math",
            "/Example/math/adds",
            "/Example/math/fails",
        )

    async def test_saved_source_file_retires_everything(
        self, elm_project: Path, finder: AsyncMock, listener: RecordingListener
    ) -> None:
        adapter = make_adapter(elm_project, finder, listener)
        await adapter.load()
        listener.events.clear()

        await adapter.file_saved(str(elm_project / "src" / "Main.elm"))

        assert listener.events == [Retire()]
        assert finder.find_tests.await_count == 1

    async def test_file_outside_project_is_ignored(
        self, elm_project: Path, finder: AsyncMock, listener: RecordingListener, tmp_path: Path
    ) -> None:
        adapter = make_adapter(elm_project, finder, listener)
        await adapter.load()
        listener.events.clear()

        await adapter.file_saved(str(tmp_path / "elsewhere" / "Other.elm"))

        assert listener.events == []

    async def test_folders_sharing_a_prefix_are_not_matched(
        self, elm_project: Path, finder: AsyncMock, listener: RecordingListener
    ) -> None:
        adapter = make_adapter(elm_project, finder, listener)
        await adapter.load()
        listener.events.clear()

        await adapter.file_saved(str(elm_project / "tests-old" / "Example.elm"))
        await adapter.file_saved(str(elm_project.parent / "app-other" / "src" / "Main.elm"))

        # tests-old is an ordinary source folder; app-other is another project.
        assert listener.events == [Retire()]
        assert finder.find_tests.await_count == 1

    async def test_loaded_tree_is_kept_for_retire(
        self, elm_project: Path, finder: AsyncMock, listener: RecordingListener
    ) -> None:
        adapter = make_adapter(elm_project, finder, listener)
        await adapter.load()
        first = adapter.loaded_suite
        assert isinstance(first, Suite)

        await adapter.file_saved(str(elm_project / "tests" / "Example.elm"))

        assert adapter.loaded_suite is not None
        assert [t.line for t in leaves(adapter.loaded_suite)] == [8, 10]
