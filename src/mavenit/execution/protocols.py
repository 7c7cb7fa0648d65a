#
# src/mavenit/execution/protocols.py
#
"""
Defines protocols and data structures for running the Maven process.
"""
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from attrs import define


@define(frozen=True, slots=True)
class ProcessResult:
    """
    Final state of a terminated process with its fully drained output.
    """
    exit_code: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.exit_code == 0


@runtime_checkable
class ProcessRunner(Protocol):
    """
    Protocol for something that can run an executable to completion.
    """
    async def run(
        self,
        executable: Path,
        arguments: Sequence[str],
        working_dir: Path,
        timeout: float | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        """
        Runs ``executable`` with ``arguments`` inside ``working_dir``.

        Args:
            executable: Path of the program to launch.
            arguments: Arguments passed to the program, in order.
            working_dir: Current directory of the child process.
            timeout: Seconds to wait before killing the process, or None.
            env: Environment of the child; inherits the parent's when None.

        Returns:
            A ProcessResult once the process exited and both streams are drained.
        """
        ...

# 🔼⚙️
