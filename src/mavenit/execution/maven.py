#
# src/mavenit/execution/maven.py
#
"""
Locates the Maven executable.
"""
import os
import sys
from collections.abc import Mapping
from pathlib import Path

import structlog

from mavenit.exceptions import ExecutableNotFoundError

log = structlog.get_logger("execution.maven")

MAVEN_HOME_ENV = "MAVEN_HOME"


def executable_name() -> str:
    return "mvn.cmd" if sys.platform == "win32" else "mvn"


def resolve_maven_executable(
    default_home: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """
    Returns ``<maven home>/bin/mvn``.

    ``MAVEN_HOME`` from the environment wins over ``default_home``. Fails
    fast when neither names a home containing the executable.
    """
    environ = os.environ if environ is None else environ
    env_home = environ.get(MAVEN_HOME_ENV)
    maven_home = Path(env_home) if env_home else default_home
    if maven_home is None:
        raise ExecutableNotFoundError(
            f"Maven home unknown: set {MAVEN_HOME_ENV} or configure maven_home in [tool.mavenit]."
        )

    executable = maven_home / "bin" / executable_name()
    if not executable.is_file():
        raise ExecutableNotFoundError("Maven executable not found", path=executable)

    log.debug(
        "Resolved Maven executable",
        executable=str(executable),
        source="environment" if env_home else "configuration",
    )
    return executable

# 🔼⚙️
