# src/mavenit/results.py

"""
Immutable result values delivered to a test after its Maven run.
"""

from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from attrs import define, field


class ExecutionOutcome(Enum):
    """Whether Maven reported success."""

    SUCCESSFUL = "successful"
    FAILURE = "failure"


@define(frozen=True, slots=True)
class MavenLog:
    """Captured output of a Maven run, plus where it was persisted."""

    stdout: str
    stderr: str
    stdout_path: Path | None = field(default=None)
    stderr_path: Path | None = field(default=None)

    @property
    def stdout_lines(self) -> list[str]:
        return self.stdout.splitlines()

    @property
    def stderr_lines(self) -> list[str]:
        return self.stderr.splitlines()


@define(frozen=True, slots=True)
class MavenCacheResult:
    """Handle on the local artifact repository the run used."""

    cache_dir: Path

    def artifact_dir(self, group_id: str, artifact_id: str, version: str | None = None) -> Path:
        """Directory where Maven stores ``group_id:artifact_id[:version]`` in this cache."""
        directory = self.cache_dir.joinpath(*group_id.split("."), artifact_id)
        return directory / version if version else directory


@define(frozen=True, slots=True)
class MavenProjectResult:
    """The materialized fixture project as it looks after the run."""

    project_dir: Path
    model: Mapping[str, Any] = field(factory=dict)

    @property
    def target_dir(self) -> Path:
        return self.project_dir / "target"


@define(frozen=True, slots=True)
class MavenExecutionResult:
    """Everything a test may want to know about its Maven run."""

    outcome: ExecutionOutcome
    exit_code: int
    log: MavenLog
    project_result: MavenProjectResult
    cache_result: MavenCacheResult

    @property
    def is_successful(self) -> bool:
        return self.outcome is ExecutionOutcome.SUCCESSFUL

    @property
    def is_failure(self) -> bool:
        return self.outcome is ExecutionOutcome.FAILURE


class ResultKind(Enum):
    """The projections of a MavenExecutionResult a test can request."""

    EXECUTION = "execution"
    LOG = "log"
    CACHE = "cache"
    PROJECT = "project"

    @property
    def result_type(self) -> type:
        return _RESULT_TYPES[self]

    def select(self, result: MavenExecutionResult) -> Any:
        if self is ResultKind.EXECUTION:
            return result
        if self is ResultKind.LOG:
            return result.log
        if self is ResultKind.CACHE:
            return result.cache_result
        return result.project_result

    @classmethod
    def for_type(cls, result_type: type) -> "ResultKind":
        for kind in cls:
            if kind.result_type is result_type:
                return kind
        raise KeyError(f"No result projection of type {result_type.__name__}")


_RESULT_TYPES: dict[ResultKind, type] = {
    ResultKind.EXECUTION: MavenExecutionResult,
    ResultKind.LOG: MavenLog,
    ResultKind.CACHE: MavenCacheResult,
    ResultKind.PROJECT: MavenProjectResult,
}


def assemble(
    exit_code: int,
    log: MavenLog,
    cache_result: MavenCacheResult,
    project_result: MavenProjectResult,
) -> MavenExecutionResult:
    """Packages a finished run; ``exit_code == 0`` is the only success criterion."""
    outcome = ExecutionOutcome.SUCCESSFUL if exit_code == 0 else ExecutionOutcome.FAILURE
    return MavenExecutionResult(
        outcome=outcome,
        exit_code=exit_code,
        log=log,
        project_result=project_result,
        cache_result=cache_result,
    )

# 🔼⚙️
