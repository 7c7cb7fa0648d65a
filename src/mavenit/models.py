# src/mavenit/models.py

"""
Core value types describing a test unit and how Maven is invoked for it.
"""

import hashlib
import re
from enum import Enum
from pathlib import Path
from typing import Any

from attrs import define, field

_UNSAFE_PATH_CHARS = re.compile(r"[^A-Za-z0-9_.\-]")


class CacheMode(Enum):
    """Scope of the local artifact repository used by a test unit."""

    PER_CASE = "per_case"  # every test case gets its own .m2/repository
    SHARED = "shared"  # all cases of a suite share one .m2/repository

    @classmethod
    def parse(cls, value: "CacheMode | str") -> "CacheMode":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_")
        for member in cls:
            if normalized in (member.value, member.name.lower()):
                return member
        raise ValueError(f"Unknown cache mode '{value}'. Expected one of {[m.value for m in cls]}.")


def validate_timeout(inst: Any, attr: Any, value: float | None) -> None:
    """Validator ensures a timeout, when given, is a positive number of seconds."""
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
        raise ValueError(f"Field '{attr.name}' must be a positive number of seconds, got {value!r}")


def _to_tuple(value) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


@define(frozen=True, slots=True)
class TestUnitIdentity:
    """Static identity of one test unit: its suite and case name."""

    __test__ = False  # not a pytest test class

    suite: str
    case: str

    @property
    def suite_path(self) -> Path:
        """The suite's qualified name with package separators as path separators."""
        return Path(*self.suite.split("."))

    @property
    def fixture_name(self) -> str:
        """The case name without a parametrization suffix such as ``[jdk17]``."""
        return self.case.partition("[")[0]

    @property
    def case_dir_name(self) -> str:
        """The case name as a directory name.

        When characters had to be replaced, a digest of the raw name is
        appended so that ``t[a b]`` and ``t[a/b]`` never share a directory.
        """
        safe = _UNSAFE_PATH_CHARS.sub("_", self.case)
        if safe == self.case:
            return safe
        digest = hashlib.sha1(self.case.encode("utf-8")).hexdigest()[:8]
        return f"{safe}-{digest}"

    def __str__(self) -> str:
        return f"{self.suite}::{self.case}"


@define(frozen=True, slots=True)
class DirectorySet:
    """All directories owned by (or, for a shared cache, used by) one test unit."""

    base_dir: Path
    case_dir: Path
    cache_dir: Path
    project_dir: Path


@define(frozen=True, slots=True)
class SuiteDirectives:
    """Class-level declarations for a suite of Maven integration tests."""

    goals: tuple[str, ...] = field(default=(), converter=_to_tuple)
    cache_mode: CacheMode = field(default=CacheMode.PER_CASE, converter=CacheMode.parse)
    options: tuple[str, ...] = field(default=(), converter=_to_tuple)
    profiles: tuple[str, ...] = field(default=(), converter=_to_tuple)


@define(frozen=True, slots=True)
class CaseDirectives:
    """Method-level declarations for one test case."""

    goals: tuple[str, ...] = field(default=(), converter=_to_tuple)
    profiles: tuple[str, ...] = field(default=(), converter=_to_tuple)
    debug: bool = field(default=False, converter=bool)
    options: tuple[str, ...] = field(default=(), converter=_to_tuple)
    timeout: float | None = field(default=None, validator=validate_timeout)


@define(frozen=True, slots=True)
class InvocationDirectives:
    """The merged suite and case declarations handed to the lifecycle."""

    suite: SuiteDirectives = field(factory=SuiteDirectives)
    case: CaseDirectives = field(factory=CaseDirectives)

    @property
    def cache_mode(self) -> CacheMode:
        return self.suite.cache_mode


@define(frozen=True, slots=True)
class InvocationSpec:
    """Fully resolved command-line directives for one Maven run."""

    goals: tuple[str, ...] = field(converter=_to_tuple)
    cache_dir: Path = field()
    profiles: tuple[str, ...] = field(default=(), converter=_to_tuple)
    debug: bool = field(default=False)
    options: tuple[str, ...] = field(default=(), converter=_to_tuple)

# 🔼⚙️
