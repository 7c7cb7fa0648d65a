# tests/unit/test_results.py

"""Tests for result assembly and projections."""

from pathlib import Path

import attrs
import pytest

from mavenit.results import (
    ExecutionOutcome,
    MavenCacheResult,
    MavenExecutionResult,
    MavenLog,
    MavenProjectResult,
    ResultKind,
    assemble,
)


@pytest.fixture
def parts() -> dict:
    return {
        "log": MavenLog(stdout="[INFO] BUILD SUCCESS\n", stderr=""),
        "cache_result": MavenCacheResult(cache_dir=Path("/c/.m2/repository")),
        "project_result": MavenProjectResult(project_dir=Path("/c/project"), model={"artifactId": "demo"}),
    }


class TestAssemble:

    def test_zero_exit_is_successful(self, parts: dict) -> None:
        result = assemble(0, **parts)

        assert result.outcome is ExecutionOutcome.SUCCESSFUL
        assert result.is_successful and not result.is_failure

    @pytest.mark.parametrize("exit_code", [1, 2, 127, -9, 255])
    def test_non_zero_exit_is_failure(self, parts: dict, exit_code: int) -> None:
        result = assemble(exit_code, **parts)

        assert result.outcome is ExecutionOutcome.FAILURE
        assert result.exit_code == exit_code
        assert result.is_failure

    def test_result_is_immutable(self, parts: dict) -> None:
        result = assemble(0, **parts)

        with pytest.raises(attrs.exceptions.FrozenInstanceError):
            result.exit_code = 1


class TestResultKind:

    def test_each_kind_selects_its_projection(self, parts: dict) -> None:
        result = assemble(0, **parts)

        assert ResultKind.EXECUTION.select(result) is result
        assert ResultKind.LOG.select(result) is parts["log"]
        assert ResultKind.CACHE.select(result) is parts["cache_result"]
        assert ResultKind.PROJECT.select(result) is parts["project_result"]

    @pytest.mark.parametrize(
        ("result_type", "kind"),
        [
            (MavenExecutionResult, ResultKind.EXECUTION),
            (MavenLog, ResultKind.LOG),
            (MavenCacheResult, ResultKind.CACHE),
            (MavenProjectResult, ResultKind.PROJECT),
        ],
    )
    def test_for_type(self, result_type: type, kind: ResultKind) -> None:
        assert ResultKind.for_type(result_type) is kind
        assert kind.result_type is result_type

    def test_for_unknown_type(self) -> None:
        with pytest.raises(KeyError):
            ResultKind.for_type(str)


def test_log_lines_and_cache_paths() -> None:
    log = MavenLog(stdout="a\nb\n", stderr="warn\n")
    cache = MavenCacheResult(cache_dir=Path("/repo"))
    project = MavenProjectResult(project_dir=Path("/p"))

    assert log.stdout_lines == ["a", "b"]
    assert log.stderr_lines == ["warn"]
    assert cache.artifact_dir("org.example", "demo", "1.0") == Path("/repo/org/example/demo/1.0")
    assert cache.artifact_dir("org.example", "demo") == Path("/repo/org/example/demo")
    assert project.target_dir == Path("/p/target")
