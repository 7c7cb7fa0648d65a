# tests/plugin/test_pytest_plugin.py

"""End-to-end tests of the pytest plugin against a fake Maven installation."""

from pathlib import Path

import pytest

from mavenit.models import TestUnitIdentity

from tests.conftest import posix_only, write_fixture

pytestmark = posix_only

TEST_MODULE = '''
import pytest

from mavenit import CacheMode, MavenCacheResult, MavenExecutionResult, MavenLog, MavenProjectResult


@pytest.mark.maven_it("clean", "verify", cache=CacheMode.SHARED, profiles=["its"])
class TestBasicIT:

    @pytest.mark.maven_test
    def test_first(
        self,
        maven_result: MavenExecutionResult,
        maven_log: MavenLog,
        maven_cache: MavenCacheResult,
        maven_project: MavenProjectResult,
    ):
        assert maven_result.is_successful
        assert maven_result.log is maven_log
        assert maven_result.project_result is maven_project
        assert maven_project.model["artifactId"] == "demo"
        arguments = (maven_project.target_dir / "arguments.txt").read_text().split()
        assert arguments[-2:] == ["clean", "verify"]
        assert "-Pits" in arguments
        assert maven_cache.cache_dir.parent.name == ".m2"
        assert "fake maven" in maven_log.stdout

    @pytest.mark.maven_test("package", profiles=["a", "b"], debug=True)
    def test_second(self, maven_project: MavenProjectResult, maven_cache: MavenCacheResult):
        arguments = (maven_project.target_dir / "arguments.txt").read_text().split()
        assert "-Pits,a,b" in arguments
        assert "-X" in arguments
        assert arguments[-1] == "package"
        assert maven_cache.cache_dir.parent.parent.name == "TestBasicIT"

    @pytest.mark.maven_test
    def test_failing_build_is_reported_not_raised(self, maven_result: MavenExecutionResult):
        assert maven_result.is_failure
        assert maven_result.exit_code == 3


def test_not_a_maven_test(maven_log):
    pass


def test_unrelated_test_is_untouched():
    assert True
'''


@pytest.fixture
def project(pytester: pytest.Pytester, fake_maven_home: Path, monkeypatch: pytest.MonkeyPatch) -> pytest.Pytester:
    monkeypatch.delenv("MAVEN_HOME", raising=False)
    monkeypatch.delenv("MAVENIT_TIMEOUT", raising=False)
    pytester.makefile(
        ".toml",
        pyproject=f'[tool.mavenit]\nmaven_home = "{fake_maven_home.as_posix()}"\ntimeout = 60\n',
    )
    pytester.makepyfile(test_basic_it=TEST_MODULE)
    fixtures_dir = pytester.path / "target" / "test-classes" / "maven-its"
    for case in ("test_first", "test_second"):
        write_fixture(fixtures_dir, TestUnitIdentity("test_basic_it.TestBasicIT", case))
    write_fixture(
        fixtures_dir, TestUnitIdentity("test_basic_it.TestBasicIT", "test_failing_build_is_reported_not_raised"), exit_code=3
    )
    return pytester


def _config_args(pytester: pytest.Pytester) -> list[str]:
    return [f"--mavenit-config={pytester.path / 'pyproject.toml'}"]


def test_plugin_runs_maven_units(project: pytest.Pytester) -> None:
    result = project.runpytest(*_config_args(project))

    result.assert_outcomes(passed=4, errors=1)
    result.stdout.fnmatch_lines(["*ResultNotAvailableError*test_not_a_maven_test*"])


def test_directory_layout(project: pytest.Pytester) -> None:
    project.runpytest(*_config_args(project), "-k", "test_first")

    base = project.path / "target" / "maven-it" / "test_basic_it" / "TestBasicIT"
    assert (base / ".m2" / "repository").is_dir()
    assert (base / "test_first" / "project" / "pom.xml").is_file()
    assert (base / "test_first" / "mvn-stdout.log").is_file()
    assert (base / "test_first" / "mvn-arguments.log").is_file()


def test_missing_fixture_errors_the_unit(project: pytest.Pytester) -> None:
    project.makepyfile(
        test_missing_it="""
        import pytest

        @pytest.mark.maven_test("verify")
        def test_without_fixture(maven_result):
            pass
        """
    )

    result = project.runpytest(*_config_args(project), "test_missing_it.py")

    result.assert_outcomes(errors=1)
    result.stdout.fnmatch_lines(["*FixtureNotFoundError*"])


def test_missing_maven_errors_the_unit(project: pytest.Pytester, tmp_path: Path) -> None:
    result = project.runpytest(
        *_config_args(project), f"--maven-home={tmp_path / 'no-maven'}", "-k", "test_first"
    )

    result.assert_outcomes(errors=1)
    result.stdout.fnmatch_lines(["*ExecutableNotFoundError*"])


def test_failure_report_contains_maven_section(project: pytest.Pytester) -> None:
    project.makepyfile(
        test_report_it="""
        import pytest

        @pytest.mark.maven_it("verify")
        class TestReportIT:

            @pytest.mark.maven_test
            def test_fails(self, maven_result):
                assert maven_result.exit_code == 99
        """
    )
    write_fixture(
        project.path / "target" / "test-classes" / "maven-its",
        TestUnitIdentity("test_report_it.TestReportIT", "test_fails"),
    )

    result = project.runpytest(*_config_args(project), "test_report_it.py")

    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines(["*mavenit*", "*arguments: -Dmaven.repo.local=*verify*"])
