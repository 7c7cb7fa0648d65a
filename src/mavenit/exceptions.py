# src/mavenit/exceptions.py

"""
Exception hierarchy for the mavenit integration test harness.
"""

from pathlib import Path


class MavenItError(Exception):
    """Base class for all mavenit errors."""

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
        details: Exception | None = None,
    ):
        self.path = path
        self.details = details
        full_message = message
        if path:
            full_message += f" (Path: '{path}')"
        super().__init__(full_message)
        if details and hasattr(self, "add_note"):
            self.add_note(f"Original error: {type(details).__name__}: {details}")


# --- Configuration errors: a mistake in the test setup, never retried ---
class ConfigurationError(MavenItError):
    """Invalid harness configuration or test directives."""

    pass


class NoGoalsSpecifiedError(ConfigurationError):
    """Neither the suite nor the test case declares any Maven goal."""

    pass


class ResultNotAvailableError(ConfigurationError):
    """A result was requested for a test unit that has not produced one."""

    pass


class LifecycleError(MavenItError):
    """A test unit was driven through its phases out of order."""

    pass


# --- Resource provisioning errors ---
class ProvisioningError(MavenItError):
    """Creating or populating the per-test directories failed."""

    pass


class FixtureNotFoundError(ProvisioningError):
    """The fixture project for a test case does not exist."""

    pass


# --- Execution errors ---
class ExecutableNotFoundError(MavenItError):
    """The Maven executable could not be located."""

    pass


class ProcessLaunchError(MavenItError):
    """The operating system refused to start the Maven process."""

    pass


class ExecutionTimeoutError(MavenItError, TimeoutError):
    """The Maven process exceeded its time budget and was killed."""

    def __init__(self, message: str, timeout: float, path: Path | str | None = None):
        self.timeout = timeout
        super().__init__(message, path=path)


class ProjectParseError(MavenItError):
    """The project descriptor (pom.xml) is missing or unreadable."""

    pass


class ResourceFilteringError(MavenItError):
    """Copying or filtering fixture resources failed."""

    pass

# 🔼⚙️
