# src/mavenit/directories.py

"""
Computes and creates the per-suite and per-test-case directory tree.

Layout below the harness root::

    <root>/<suite-path>/                       base_dir
    <root>/<suite-path>/.m2/repository         cache_dir (CacheMode.SHARED)
    <root>/<suite-path>/<case>/                case_dir
    <root>/<suite-path>/<case>/.m2/repository  cache_dir (CacheMode.PER_CASE)
    <root>/<suite-path>/<case>/project         project_dir
"""

from pathlib import Path

import structlog

from mavenit.exceptions import ProvisioningError
from mavenit.models import CacheMode, DirectorySet, TestUnitIdentity

log = structlog.get_logger("directories")

CACHE_DIR_NAME = Path(".m2", "repository")
PROJECT_DIR_NAME = "project"


def suite_base_dir(identity: TestUnitIdentity, root_dir: Path) -> Path:
    return root_dir / identity.suite_path


def compute_directories(
    identity: TestUnitIdentity, cache_mode: CacheMode, root_dir: Path
) -> DirectorySet:
    """Pure path computation; touches nothing on disk."""
    base_dir = suite_base_dir(identity, root_dir)
    case_dir = base_dir / identity.case_dir_name
    cache_owner = base_dir if cache_mode is CacheMode.SHARED else case_dir
    return DirectorySet(
        base_dir=base_dir,
        case_dir=case_dir,
        cache_dir=cache_owner / CACHE_DIR_NAME,
        project_dir=case_dir / PROJECT_DIR_NAME,
    )


def provision(
    identity: TestUnitIdentity, cache_mode: CacheMode, root_dir: Path
) -> DirectorySet:
    """Computes the DirectorySet for a test unit and creates every directory in it.

    Idempotent: provisioning an already existing tree is not an error.
    """
    directories = compute_directories(identity, cache_mode, root_dir)
    for directory in (
        directories.base_dir,
        directories.case_dir,
        directories.cache_dir,
        directories.project_dir,
    ):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            log.error("Failed to create directory", directory=str(directory), error=str(e))
            raise ProvisioningError("Cannot create directory", path=directory, details=e) from e

    log.debug(
        "Provisioned directories",
        unit=str(identity),
        cache_mode=cache_mode.value,
        case_dir=str(directories.case_dir),
        cache_dir=str(directories.cache_dir),
        emoji_key="provision",
    )
    return directories

# 🔼⚙️
