# src/mavenit/pytest_plugin.py

"""
pytest integration: every test marked ``maven_test`` runs Maven against its
fixture project before the test body, and may request the outcome through
the ``maven_result``, ``maven_log``, ``maven_cache`` and ``maven_project``
fixtures.
"""

from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

from mavenit.config import load_config
from mavenit.directives import CASE_MARKER, SUITE_MARKER, identity_for, read_directives
from mavenit.exceptions import ResultNotAvailableError
from mavenit.lifecycle import ARGUMENTS_LOG, STDERR_LOG, STDOUT_LOG, MavenItLifecycle
from mavenit.models import TestUnitIdentity
from mavenit.results import (
    MavenCacheResult,
    MavenExecutionResult,
    MavenLog,
    MavenProjectResult,
    ResultKind,
)
from mavenit.telemetry import StructLogger, setup_logging

log: StructLogger = structlog.get_logger("pytest_plugin")

LIFECYCLE_KEY = pytest.StashKey[MavenItLifecycle]()
IDENTITY_KEY = pytest.StashKey[TestUnitIdentity]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("mavenit", "Maven plugin integration tests")
    group.addoption(
        "--mavenit-config",
        dest="mavenit_config",
        default=None,
        help="pyproject.toml holding [tool.mavenit] (default: <rootdir>/pyproject.toml).",
    )
    group.addoption(
        "--maven-home",
        dest="mavenit_maven_home",
        default=None,
        help="Maven installation used when MAVEN_HOME is not set.",
    )
    group.addoption(
        "--mavenit-timeout",
        dest="mavenit_timeout",
        type=float,
        default=None,
        help="Seconds after which a Maven run is killed.",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        f"{SUITE_MARKER}(*goals, cache='per_case', options=(), profiles=()): "
        "declare default goals, cache mode, Maven options and profiles for a suite.",
    )
    config.addinivalue_line(
        "markers",
        f"{CASE_MARKER}(*goals, profiles=(), debug=False, options=(), timeout=None): "
        "run Maven against this test's fixture project before the test.",
    )


def _lifecycle(config: pytest.Config) -> MavenItLifecycle:
    lifecycle = config.stash.get(LIFECYCLE_KEY, None)
    if lifecycle is None:
        config_path = config.getoption("mavenit_config")
        harness_config = load_config(
            Path(config_path) if config_path else config.rootpath / "pyproject.toml",
            maven_home=config.getoption("mavenit_maven_home"),
            timeout=config.getoption("mavenit_timeout"),
        )
        setup_logging(level=harness_config.numeric_log_level, host_managed=True)
        lifecycle = MavenItLifecycle(harness_config)
        config.stash[LIFECYCLE_KEY] = lifecycle
    return lifecycle


@pytest.fixture(autouse=True)
def _maven_it_unit(request: pytest.FixtureRequest) -> Iterator[MavenExecutionResult | None]:
    """Runs the Maven lifecycle for test units; a no-op for other tests."""
    item = request.node
    directives = read_directives(item)
    if directives is None:
        yield None
        return

    lifecycle = _lifecycle(request.config)
    identity = identity_for(item)
    item.stash[IDENTITY_KEY] = identity
    try:
        yield lifecycle.run(identity, directives)
    finally:
        lifecycle.release(identity)


def _resolve(request: pytest.FixtureRequest, result_type: type):
    """Looks up the projection of this test's result that has ``result_type``."""
    kind = ResultKind.for_type(result_type)
    identity = request.node.stash.get(IDENTITY_KEY, None)
    if identity is None:
        raise ResultNotAvailableError(
            f"'{request.node.nodeid}' requested a {kind.result_type.__name__} "
            f"but is not marked with @pytest.mark.{CASE_MARKER}."
        )
    return _lifecycle(request.config).resolve(identity, kind)


@pytest.fixture
def maven_result(request: pytest.FixtureRequest, _maven_it_unit) -> MavenExecutionResult:
    """The full MavenExecutionResult of this test's Maven run."""
    return _resolve(request, MavenExecutionResult)


@pytest.fixture
def maven_log(request: pytest.FixtureRequest, _maven_it_unit) -> MavenLog:
    return _resolve(request, MavenLog)


@pytest.fixture
def maven_cache(request: pytest.FixtureRequest, _maven_it_unit) -> MavenCacheResult:
    return _resolve(request, MavenCacheResult)


@pytest.fixture
def maven_project(request: pytest.FixtureRequest, _maven_it_unit) -> MavenProjectResult:
    return _resolve(request, MavenProjectResult)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo):
    outcome = yield
    report = outcome.get_result()
    if report.when != "call" or not report.failed:
        return
    identity = item.stash.get(IDENTITY_KEY, None)
    lifecycle = item.config.stash.get(LIFECYCLE_KEY, None)
    context = lifecycle.context(identity) if identity and lifecycle else None
    if context is None or context.directories is None:
        return
    case_dir = context.directories.case_dir
    report.sections.append(
        (
            "mavenit",
            "\n".join(
                [
                    f"arguments: {' '.join(context.arguments)}",
                    f"exit code: {context.result.exit_code if context.result else 'n/a'}",
                    f"case dir:  {case_dir}",
                    f"logs:      {case_dir / STDOUT_LOG}, {case_dir / STDERR_LOG}, {case_dir / ARGUMENTS_LOG}",
                ]
            ),
        )
    )

# 🔼⚙️
