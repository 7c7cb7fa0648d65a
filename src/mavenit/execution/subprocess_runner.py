#
# src/mavenit/execution/subprocess_runner.py
#
"""
Runs an external process with asyncio.subprocess, draining stdout and
stderr concurrently with the wait for exit.
"""
import asyncio
import os
import signal
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

import structlog

from mavenit.exceptions import ExecutionTimeoutError, ProcessLaunchError
from mavenit.execution.protocols import ProcessResult, ProcessRunner

log = structlog.get_logger("execution.runner")

_READ_CHUNK = 64 * 1024
_IS_POSIX = sys.platform != "win32"
# Seconds to read leftovers after a kill; a grandchild outside the group may keep a pipe open.
_DRAIN_GRACE = 5.0


class ProcessHandle:
    """
    Owns a live process and its capture buffers until it terminates.

    A handle can be waited on once; afterwards only ``result`` is useful.
    """

    def __init__(self, process: asyncio.subprocess.Process):
        self._process = process
        self._stdout = bytearray()
        self._stderr = bytearray()
        self._result: ProcessResult | None = None
        self._waited = False
        self._drained = False

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def result(self) -> ProcessResult | None:
        return self._result

    @property
    def drained(self) -> bool:
        """True once stdout and stderr were both read to EOF."""
        return self._drained

    @staticmethod
    async def _drain(stream: asyncio.StreamReader | None, buffer: bytearray) -> None:
        if stream is None:
            return
        while chunk := await stream.read(_READ_CHUNK):
            buffer.extend(chunk)

    def _kill(self) -> None:
        if self._process.returncode is not None:
            return
        try:
            if _IS_POSIX:
                # The child leads its own session; take its children down too.
                os.killpg(self._process.pid, signal.SIGKILL)
            else:
                self._process.kill()
        except ProcessLookupError:
            pass

    async def _finish_drains(self, drains: list[asyncio.Task]) -> None:
        # The killed group held the only write ends; reading to EOF lets the
        # transport close before the loop does.
        _, pending = await asyncio.wait(drains, timeout=_DRAIN_GRACE)
        for task in pending:
            task.cancel()
        await asyncio.gather(*drains, return_exceptions=True)
        self._drained = not pending

    async def wait(self, timeout: float | None = None) -> ProcessResult:
        """Blocks until exit and until both streams are fully drained."""
        if self._waited:
            raise RuntimeError("ProcessHandle has already been waited on")
        self._waited = True

        drains = [
            asyncio.create_task(self._drain(self._process.stdout, self._stdout)),
            asyncio.create_task(self._drain(self._process.stderr, self._stderr)),
        ]
        try:
            exit_code = await asyncio.wait_for(self._process.wait(), timeout)
        except asyncio.TimeoutError:
            self._kill()
            await self._process.wait()
            await self._finish_drains(drains)
            self._stdout.clear()
            self._stderr.clear()
            raise ExecutionTimeoutError(
                f"Process {self._process.pid} did not finish within {timeout} seconds and was killed",
                timeout=timeout,
            ) from None
        except BaseException:
            self._kill()
            for task in drains:
                task.cancel()
            raise

        await asyncio.gather(*drains)
        self._drained = True
        self._result = ProcessResult(
            exit_code=exit_code,
            stdout=self._stdout.decode("utf-8", errors="replace"),
            stderr=self._stderr.decode("utf-8", errors="replace"),
        )
        return self._result


class SubprocessRunner(ProcessRunner):
    """
    Implements the ProcessRunner protocol with asyncio.create_subprocess_exec.
    """
    async def start(
        self,
        executable: Path,
        arguments: Sequence[str],
        working_dir: Path,
        env: Mapping[str, str] | None = None,
    ) -> ProcessHandle:
        """Launches the process and returns a handle without waiting for it."""
        try:
            process = await asyncio.create_subprocess_exec(
                str(executable),
                *arguments,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=working_dir,
                env=dict(env) if env is not None else None,
                start_new_session=_IS_POSIX,
            )
        except OSError as e:
            log.error("Failed to launch process", executable=str(executable), error=str(e))
            raise ProcessLaunchError(f"Cannot launch '{executable}'", path=working_dir, details=e) from e
        return ProcessHandle(process)

    async def run(
        self,
        executable: Path,
        arguments: Sequence[str],
        working_dir: Path,
        timeout: float | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        runner_log = log.bind(
            executable=str(executable),
            working_dir=str(working_dir),
            timeout=timeout,
        )
        runner_log.info("Executing process", arguments=" ".join(arguments), emoji_key="execute")

        handle = await self.start(executable, arguments, working_dir, env)
        try:
            result = await handle.wait(timeout)
        except ExecutionTimeoutError:
            runner_log.error("Process timed out and was killed", pid=handle.pid, emoji_key="time")
            raise

        runner_log.info("Process finished", exit_code=result.exit_code, success=result.success)
        runner_log.debug(
            "Process output",
            stdout_len=len(result.stdout),
            stderr_len=len(result.stderr),
        )
        return result

# 🔼⚙️
