# src/mavenit/directives.py

"""
Reads the ``maven_it`` / ``maven_test`` markers of a pytest item into
InvocationDirectives and derives the item's TestUnitIdentity.
"""

from typing import Any

import pytest

from mavenit.exceptions import ConfigurationError
from mavenit.models import (
    CaseDirectives,
    InvocationDirectives,
    SuiteDirectives,
    TestUnitIdentity,
)

SUITE_MARKER = "maven_it"
CASE_MARKER = "maven_test"

_SUITE_KWARGS = frozenset({"goals", "cache", "options", "profiles"})
_CASE_KWARGS = frozenset({"goals", "profiles", "debug", "options", "timeout"})


def _goals(mark: pytest.Mark) -> tuple[str, ...]:
    if mark.args and "goals" in mark.kwargs:
        raise ConfigurationError(f"@{mark.name}: give goals positionally or as goals=, not both")
    goals = mark.args or mark.kwargs.get("goals", ())
    if isinstance(goals, str):
        goals = (goals,)
    return tuple(goals)


def _check_kwargs(mark: pytest.Mark, allowed: frozenset[str]) -> dict[str, Any]:
    unknown = set(mark.kwargs) - allowed
    if unknown:
        raise ConfigurationError(
            f"@{mark.name} got unknown arguments {sorted(unknown)}; allowed: {sorted(allowed)}"
        )
    return mark.kwargs


def suite_directives(mark: pytest.Mark | None) -> SuiteDirectives:
    if mark is None:
        return SuiteDirectives()
    kwargs = _check_kwargs(mark, _SUITE_KWARGS)
    try:
        return SuiteDirectives(
            goals=_goals(mark),
            cache_mode=kwargs.get("cache", "per_case"),
            options=kwargs.get("options", ()),
            profiles=kwargs.get("profiles", ()),
        )
    except ValueError as e:
        raise ConfigurationError(f"@{mark.name}: {e}", details=e) from e


def case_directives(mark: pytest.Mark) -> CaseDirectives:
    kwargs = _check_kwargs(mark, _CASE_KWARGS)
    try:
        return CaseDirectives(
            goals=_goals(mark),
            profiles=kwargs.get("profiles", ()),
            debug=kwargs.get("debug", False),
            options=kwargs.get("options", ()),
            timeout=kwargs.get("timeout"),
        )
    except ValueError as e:
        raise ConfigurationError(f"@{mark.name}: {e}", details=e) from e


def read_directives(item: pytest.Item) -> InvocationDirectives | None:
    """Returns None for items that are not Maven test units."""
    case_mark = item.get_closest_marker(CASE_MARKER)
    if case_mark is None:
        return None
    return InvocationDirectives(
        suite=suite_directives(item.get_closest_marker(SUITE_MARKER)),
        case=case_directives(case_mark),
    )


def identity_for(item: pytest.Item) -> TestUnitIdentity:
    """``<module>.<Class>`` names the suite; the item name names the case."""
    module = getattr(item, "module", None)
    cls = getattr(item, "cls", None)
    suite = module.__name__ if module is not None else item.path.stem
    if cls is not None:
        suite = f"{suite}.{cls.__qualname__}"
    return TestUnitIdentity(suite=suite, case=item.name)

# 🔼⚙️
