# tests/unit/test_invocation.py

"""Unit tests for goal resolution and Maven argument building."""

from pathlib import Path

import pytest

from mavenit.exceptions import ConfigurationError, NoGoalsSpecifiedError
from mavenit.invocation import build_arguments, build_invocation_spec, resolve_goals
from mavenit.models import CaseDirectives, InvocationDirectives, InvocationSpec, SuiteDirectives

CACHE = Path("/work/.m2/repository")


class TestResolveGoals:

    @pytest.mark.parametrize("suite_goals", [(), ("clean", "verify"), ("install",)])
    def test_case_goals_override_suite_goals(self, suite_goals) -> None:
        assert resolve_goals(suite_goals, ("package", "site")) == ("package", "site")

    def test_suite_goals_used_without_case_goals(self) -> None:
        assert resolve_goals(("clean", "verify"), ()) == ("clean", "verify")

    def test_no_goals_anywhere_is_configuration_error(self) -> None:
        with pytest.raises(NoGoalsSpecifiedError):
            resolve_goals((), ())

    def test_no_goals_error_is_a_configuration_error(self) -> None:
        assert issubclass(NoGoalsSpecifiedError, ConfigurationError)


class TestBuildArguments:

    def test_minimal_invocation(self) -> None:
        spec = InvocationSpec(goals=("verify",), cache_dir=CACHE)

        assert build_arguments(spec) == [
            f"-Dmaven.repo.local={CACHE}",
            "--batch-mode",
            "-V",
            "verify",
        ]

    def test_profiles_debug_and_options(self) -> None:
        spec = InvocationSpec(
            goals=("clean", "install"),
            cache_dir=CACHE,
            profiles=("first", "second"),
            debug=True,
            options=("--no-transfer-progress",),
        )

        assert build_arguments(spec) == [
            f"-Dmaven.repo.local={CACHE}",
            "--batch-mode",
            "-V",
            "--no-transfer-progress",
            "-Pfirst,second",
            "-X",
            "clean",
            "install",
        ]

    def test_goals_always_come_last(self) -> None:
        spec = InvocationSpec(goals=("a", "b", "c"), cache_dir=CACHE, profiles=("p",), debug=True)

        assert build_arguments(spec)[-3:] == ["a", "b", "c"]

    def test_output_is_stable(self) -> None:
        spec = InvocationSpec(goals=("verify",), cache_dir=CACHE, profiles=("z", "a"))

        assert build_arguments(spec) == build_arguments(spec)
        assert "-Pz,a" in build_arguments(spec)

    def test_empty_goals_rejected(self) -> None:
        with pytest.raises(NoGoalsSpecifiedError):
            build_arguments(InvocationSpec(goals=(), cache_dir=CACHE))


class TestBuildInvocationSpec:

    def test_merges_suite_and_case_directives(self) -> None:
        directives = InvocationDirectives(
            suite=SuiteDirectives(goals=("clean", "verify"), options=("-e", "-ntp")),
            case=CaseDirectives(profiles=("it", "it"), debug=True, options=("-ntp", "-U")),
        )

        spec = build_invocation_spec(directives, CACHE)

        assert spec.goals == ("clean", "verify")
        assert spec.profiles == ("it",)
        assert spec.debug is True
        assert spec.options == ("-e", "-ntp", "-U")
        assert spec.cache_dir == CACHE

    def test_case_goals_win(self) -> None:
        directives = InvocationDirectives(
            suite=SuiteDirectives(goals=("clean", "verify")),
            case=CaseDirectives(goals=("package",)),
        )

        assert build_invocation_spec(directives, CACHE).goals == ("package",)

    def test_no_goals_raises_before_anything_else(self) -> None:
        with pytest.raises(NoGoalsSpecifiedError):
            build_invocation_spec(InvocationDirectives(), CACHE)


class TestProfileMerge:

    def test_suite_and_case_profiles_are_united_in_order(self) -> None:
        directives = InvocationDirectives(
            suite=SuiteDirectives(goals=("verify",), profiles=("suite", "shared")),
            case=CaseDirectives(profiles=("shared", "case", "suite")),
        )

        spec = build_invocation_spec(directives, CACHE)

        assert spec.profiles == ("suite", "shared", "case")
        assert "-Psuite,shared,case" in build_arguments(spec)

    def test_suite_profiles_alone_are_emitted(self) -> None:
        directives = InvocationDirectives(suite=SuiteDirectives(goals=("verify",), profiles="run-its"))

        assert build_arguments(build_invocation_spec(directives, CACHE)) == [
            f"-Dmaven.repo.local={CACHE}",
            "--batch-mode",
            "-V",
            "-Prun-its",
            "verify",
        ]

    def test_no_profiles_no_flag(self) -> None:
        directives = InvocationDirectives(suite=SuiteDirectives(goals=("verify",)))

        assert not any(a.startswith("-P") for a in build_arguments(build_invocation_spec(directives, CACHE)))


@pytest.mark.parametrize("timeout", [0, -1, "30", True])
def test_case_timeout_must_be_positive_seconds(timeout) -> None:
    with pytest.raises(ValueError, match="positive number of seconds"):
        CaseDirectives(goals=("verify",), timeout=timeout)
