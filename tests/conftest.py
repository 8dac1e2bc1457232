from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from elmtest_adapter.config import RunnerConfig
from elmtest_adapter.runtime.process import ProcessResult, SubprocessRunner


@pytest.fixture
def elm_project(tmp_path: Path) -> Path:
    """An Elm project folder with one test module."""
    project = tmp_path / "workspace" / "app"
    tests = project / "tests"
    tests.mkdir(parents=True)
    (project / "elm.json").write_text("{}")
    (tests / "Example.elm").write_text(
        "\n".join(
            [
                "module Example exposing (..)",
                "",
                "import Expect",
                "import Test exposing (..)",
                "",
                "suite : Test",
                "suite =",
                '    describe "math"',
                '        [ test "adds" <|',
                "            \\_ -> Expect.equal 2 (1 + 1)",
                '        , test "fails" <|',
                "            \\_ -> Expect.equal 1 2",
                "        ]",
                "",
            ]
        )
    )
    return project


@pytest.fixture
def runner_config() -> RunnerConfig:
    return RunnerConfig(elm_test_path="elm-test")


@pytest.fixture
def mock_process_runner() -> AsyncMock:
    """A SubprocessRunner whose runs finish immediately with empty output."""
    process_runner = AsyncMock(spec=SubprocessRunner)
    process_runner.run.return_value = ProcessResult(exit_code=0, stdout="", stderr="")
    return process_runner
