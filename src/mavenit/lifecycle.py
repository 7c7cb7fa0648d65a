# src/mavenit/lifecycle.py

"""
Drives one test unit from an empty directory to an injectable result.

Each unit walks ``INITIAL -> PROVISIONED -> MATERIALIZED -> EXECUTED -> RESULTED``
on a single thread. Distinct units may run concurrently; only the context
registry is shared between them.
"""

import asyncio
import threading
from collections.abc import Callable, Mapping
from enum import Enum, auto
from pathlib import Path
from typing import Any

import structlog
from attrs import field, mutable

from mavenit.config import HarnessConfig
from mavenit.directories import provision as provision_directories
from mavenit.exceptions import LifecycleError, ResultNotAvailableError
from mavenit.execution import ProcessResult, ProcessRunner, SubprocessRunner, resolve_maven_executable
from mavenit.fixtures import CacheSeedLocator, FixtureLocator
from mavenit.fixtures import materialize as materialize_fixture
from mavenit.invocation import build_arguments, build_invocation_spec
from mavenit.models import DirectorySet, InvocationDirectives, TestUnitIdentity
from mavenit.project import read_project
from mavenit.results import (
    MavenCacheResult,
    MavenExecutionResult,
    MavenLog,
    MavenProjectResult,
    ResultKind,
    assemble,
)
from mavenit.telemetry import StructLogger

log: StructLogger = structlog.get_logger("lifecycle")

STDOUT_LOG = "mvn-stdout.log"
STDERR_LOG = "mvn-stderr.log"
ARGUMENTS_LOG = "mvn-arguments.log"

ProjectReader = Callable[[Path], Mapping[str, Any]]


class LifecycleState(Enum):
    """Phases a test unit passes through, in order."""

    INITIAL = auto()
    PROVISIONED = auto()  # directories exist
    MATERIALIZED = auto()  # fixture and cache seed copied
    EXECUTED = auto()  # Maven terminated, output drained
    RESULTED = auto()  # MavenExecutionResult available


_NEXT_STATE = {
    LifecycleState.INITIAL: LifecycleState.PROVISIONED,
    LifecycleState.PROVISIONED: LifecycleState.MATERIALIZED,
    LifecycleState.MATERIALIZED: LifecycleState.EXECUTED,
    LifecycleState.EXECUTED: LifecycleState.RESULTED,
}


@mutable(slots=True)
class TestUnitContext:
    """
    Per-unit state carried between lifecycle phases.

    Owned by exactly one test unit for the duration of that unit.
    """

    __test__ = False

    identity: TestUnitIdentity = field()
    directives: InvocationDirectives = field(factory=InvocationDirectives)
    state: LifecycleState = field(default=LifecycleState.INITIAL)
    directories: DirectorySet | None = field(default=None)
    fixture_dir: Path | None = field(default=None)
    arguments: list[str] = field(factory=list)
    process_result: ProcessResult | None = field(default=None, repr=False)
    result: MavenExecutionResult | None = field(default=None)
    error: str | None = field(default=None)

    def require(self, expected: LifecycleState) -> None:
        if self.state is not expected:
            raise LifecycleError(
                f"Test unit '{self.identity}' is {self.state.name}, expected {expected.name}"
            )

    def advance(self, new_state: LifecycleState) -> None:
        """Moves to the next phase; skipping or repeating a phase is an error."""
        if _NEXT_STATE.get(self.state) is not new_state:
            raise LifecycleError(
                f"Illegal transition {self.state.name} -> {new_state.name} for '{self.identity}'"
            )
        old_state = self.state
        self.state = new_state
        log.debug(
            "Test unit state changed",
            unit=str(self.identity),
            old_state=old_state.name,
            new_state=new_state.name,
        )

    def fail(self, error: BaseException) -> None:
        self.error = f"{type(error).__name__}: {error}"
        log.warning(
            "Test unit halted",
            unit=str(self.identity),
            state=self.state.name,
            error=self.error,
            emoji_key="fail",
        )


class MavenItLifecycle:
    """Provisions, materializes, runs and collects results for test units."""

    def __init__(
        self,
        config: HarnessConfig,
        runner: ProcessRunner | None = None,
        project_reader: ProjectReader = read_project,
        fixture_locator: FixtureLocator | None = None,
        cache_seed_locator: CacheSeedLocator | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.config = config
        self.runner = runner or SubprocessRunner()
        self.project_reader = project_reader
        self.fixture_locator = fixture_locator or FixtureLocator(config.fixtures_dir)
        self.cache_seed_locator = cache_seed_locator or CacheSeedLocator(config.cache_seed_dir)
        self.environ = environ
        self._contexts: dict[TestUnitIdentity, TestUnitContext] = {}
        self._lock = threading.Lock()
        log.debug("MavenItLifecycle initialized", root_dir=str(config.root_dir))

    # --- Context registry ---
    def begin(
        self, identity: TestUnitIdentity, directives: InvocationDirectives
    ) -> TestUnitContext:
        with self._lock:
            if identity in self._contexts:
                raise LifecycleError(f"Test unit '{identity}' is already active")
            context = TestUnitContext(identity=identity, directives=directives)
            self._contexts[identity] = context
        return context

    def context(self, identity: TestUnitIdentity) -> TestUnitContext | None:
        with self._lock:
            return self._contexts.get(identity)

    def release(self, identity: TestUnitIdentity) -> None:
        """Forgets a unit's context. Its directories stay on disk."""
        with self._lock:
            self._contexts.pop(identity, None)

    # --- Phases ---
    def provision(self, context: TestUnitContext) -> DirectorySet:
        context.require(LifecycleState.INITIAL)
        context.directories = provision_directories(
            context.identity, context.directives.cache_mode, self.config.root_dir
        )
        context.advance(LifecycleState.PROVISIONED)
        return context.directories

    def materialize(self, context: TestUnitContext) -> None:
        context.require(LifecycleState.PROVISIONED)
        directories = context.directories
        context.fixture_dir = self.fixture_locator.locate(context.identity)
        cache_seed = self.cache_seed_locator.locate(context.identity)
        materialize_fixture(
            context.fixture_dir, directories.project_dir, cache_seed, directories.cache_dir
        )
        context.advance(LifecycleState.MATERIALIZED)

    def execute(self, context: TestUnitContext) -> ProcessResult:
        context.require(LifecycleState.MATERIALIZED)
        directories = context.directories

        spec = build_invocation_spec(context.directives, directories.cache_dir)
        context.arguments = build_arguments(spec)
        executable = resolve_maven_executable(self.config.maven_home, self.environ)
        timeout = context.directives.case.timeout
        if timeout is None:
            timeout = self.config.timeout

        (directories.case_dir / ARGUMENTS_LOG).write_text(
            " ".join(context.arguments) + "\n", encoding="utf-8"
        )
        result = asyncio.run(
            self.runner.run(
                executable,
                context.arguments,
                directories.project_dir,
                timeout=timeout,
                env=self.environ,
            )
        )
        (directories.case_dir / STDOUT_LOG).write_text(result.stdout, encoding="utf-8")
        (directories.case_dir / STDERR_LOG).write_text(result.stderr, encoding="utf-8")

        context.process_result = result
        context.advance(LifecycleState.EXECUTED)
        return result

    def assemble(self, context: TestUnitContext) -> MavenExecutionResult:
        context.require(LifecycleState.EXECUTED)
        directories = context.directories
        process_result = context.process_result

        model = self.project_reader(directories.project_dir)
        context.result = assemble(
            exit_code=process_result.exit_code,
            log=MavenLog(
                stdout=process_result.stdout,
                stderr=process_result.stderr,
                stdout_path=directories.case_dir / STDOUT_LOG,
                stderr_path=directories.case_dir / STDERR_LOG,
            ),
            cache_result=MavenCacheResult(cache_dir=directories.cache_dir),
            project_result=MavenProjectResult(project_dir=directories.project_dir, model=model),
        )
        context.process_result = None
        context.advance(LifecycleState.RESULTED)
        log.info(
            "Maven execution result available",
            unit=str(context.identity),
            outcome=context.result.outcome.value,
            exit_code=context.result.exit_code,
            emoji_key="result",
        )
        return context.result

    def run(
        self, identity: TestUnitIdentity, directives: InvocationDirectives
    ) -> MavenExecutionResult:
        """Runs all phases for a new test unit and returns its result.

        A non-zero Maven exit code is a FAILURE outcome, not an exception.
        Any exception aborts this unit only and propagates to the caller.
        """
        context = self.begin(identity, directives)
        unit_log = log.bind(unit=str(identity))
        unit_log.info("Starting Maven integration test unit", cache_mode=directives.cache_mode.value)
        try:
            self.provision(context)
            self.materialize(context)
            self.execute(context)
            return self.assemble(context)
        except Exception as e:
            context.fail(e)
            raise

    # --- Result lookup ---
    def resolve(self, identity: TestUnitIdentity, kind: ResultKind) -> Any:
        context = self.context(identity)
        if context is None or context.state is not LifecycleState.RESULTED:
            state = context.state.name if context else "not started"
            raise ResultNotAvailableError(
                f"No {kind.result_type.__name__} for '{identity}' (state: {state}). "
                "Only tests marked with maven_test receive Maven results."
            )
        return kind.select(context.result)

# 🔼⚙️
