# src/mavenit/invocation.py

"""
Builds the Maven command line for a test unit.
"""

from collections.abc import Iterable, Sequence
from pathlib import Path

from mavenit.exceptions import NoGoalsSpecifiedError
from mavenit.models import InvocationDirectives, InvocationSpec

CACHE_PROPERTY = "maven.repo.local"
BATCH_MODE_FLAG = "--batch-mode"
SHOW_VERSION_FLAG = "-V"
PROFILE_PREFIX = "-P"
DEBUG_FLAG = "-X"


def resolve_goals(suite_goals: Sequence[str], case_goals: Sequence[str]) -> tuple[str, ...]:
    """Case goals replace suite goals entirely; they are never merged."""
    if case_goals:
        return tuple(case_goals)
    if suite_goals:
        return tuple(suite_goals)
    raise NoGoalsSpecifiedError(
        "No goals given: declare them on the suite (maven_it) or the test case (maven_test)."
    )


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


def build_invocation_spec(directives: InvocationDirectives, cache_dir: Path) -> InvocationSpec:
    """Merges suite and case directives into an InvocationSpec."""
    return InvocationSpec(
        goals=resolve_goals(directives.suite.goals, directives.case.goals),
        cache_dir=cache_dir,
        profiles=_unique((*directives.suite.profiles, *directives.case.profiles)),
        debug=directives.case.debug,
        options=_unique((*directives.suite.options, *directives.case.options)),
    )


def build_arguments(spec: InvocationSpec) -> list[str]:
    """
    Returns the ordered argument list for one Maven run.

    Goals always come last; Maven consumes them positionally.
    """
    if not spec.goals:
        raise NoGoalsSpecifiedError("Cannot build a Maven command line without goals.")

    arguments = [
        f"-D{CACHE_PROPERTY}={spec.cache_dir}",
        BATCH_MODE_FLAG,
        SHOW_VERSION_FLAG,
    ]
    arguments.extend(spec.options)
    if spec.profiles:
        arguments.append(PROFILE_PREFIX + ",".join(spec.profiles))
    if spec.debug:
        arguments.append(DEBUG_FLAG)
    arguments.extend(spec.goals)
    return arguments

# 🔼⚙️
