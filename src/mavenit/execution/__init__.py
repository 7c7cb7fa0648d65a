#
# src/mavenit/execution/__init__.py
#
"""
Process execution sub-package for mavenit.
"""
from .maven import resolve_maven_executable
from .protocols import ProcessResult, ProcessRunner
from .subprocess_runner import ProcessHandle, SubprocessRunner

__all__ = [
    "ProcessHandle",
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
    "resolve_maven_executable",
]

# 🔼⚙️
