#
# src/mavenit/__init__.py
#
"""
mavenit: run Maven against fixture projects from pytest and inspect the result.
"""
from .config import HarnessConfig, load_config
from .exceptions import (
    ConfigurationError,
    ExecutableNotFoundError,
    ExecutionTimeoutError,
    FixtureNotFoundError,
    MavenItError,
    NoGoalsSpecifiedError,
    ResultNotAvailableError,
)
from .lifecycle import LifecycleState, MavenItLifecycle
from .models import CacheMode, TestUnitIdentity
from .results import (
    ExecutionOutcome,
    MavenCacheResult,
    MavenExecutionResult,
    MavenLog,
    MavenProjectResult,
    ResultKind,
)

__all__ = [
    "CacheMode",
    "ConfigurationError",
    "ExecutableNotFoundError",
    "ExecutionOutcome",
    "ExecutionTimeoutError",
    "FixtureNotFoundError",
    "HarnessConfig",
    "LifecycleState",
    "MavenCacheResult",
    "MavenExecutionResult",
    "MavenItError",
    "MavenItLifecycle",
    "MavenLog",
    "MavenProjectResult",
    "NoGoalsSpecifiedError",
    "ResultKind",
    "ResultNotAvailableError",
    "TestUnitIdentity",
    "load_config",
]

# 🔼⚙️
