# src/mavenit/fixtures.py

"""
Locates fixture projects and the artifact cache seed, and copies them into
a test unit's provisioned directories.
"""

import shutil
from pathlib import Path

import structlog

from mavenit.exceptions import FixtureNotFoundError, ProvisioningError
from mavenit.models import TestUnitIdentity

log = structlog.get_logger("fixtures")


class FixtureLocator:
    """Resolves ``<fixtures_dir>/<suite-path>/<case>`` for a test unit."""

    def __init__(self, fixtures_dir: Path):
        self.fixtures_dir = fixtures_dir

    def locate(self, identity: TestUnitIdentity) -> Path:
        fixture = self.fixtures_dir / identity.suite_path / identity.fixture_name
        if not fixture.is_dir():
            raise FixtureNotFoundError(
                f"No fixture project for test unit '{identity}'", path=fixture
            )
        return fixture


class CacheSeedLocator:
    """Resolves the pre-populated artifact repository used to seed caches."""

    def __init__(self, cache_seed_dir: Path | None):
        self.cache_seed_dir = cache_seed_dir

    def locate(self, identity: TestUnitIdentity) -> Path | None:
        if self.cache_seed_dir is None:
            return None
        if not self.cache_seed_dir.is_dir():
            log.warning(
                "Cache seed directory does not exist; cache starts empty",
                unit=str(identity),
                cache_seed_dir=str(self.cache_seed_dir),
            )
            return None
        return self.cache_seed_dir


def _clear_directory(directory: Path) -> None:
    for entry in directory.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()


def materialize(
    fixture_source_dir: Path,
    project_dir: Path,
    cache_seed_dir: Path | None,
    cache_dir: Path,
) -> None:
    """
    Copies the fixture tree into ``project_dir`` and merges the cache seed
    into ``cache_dir``.

    The project directory ends up an exact copy of the fixture: anything a
    previous run left behind is removed first. The cache copy is additive
    so a shared cache accumulates artifacts across test units.
    """
    if not fixture_source_dir.is_dir():
        raise FixtureNotFoundError("Fixture project does not exist", path=fixture_source_dir)

    try:
        project_dir.mkdir(parents=True, exist_ok=True)
        _clear_directory(project_dir)
        shutil.copytree(fixture_source_dir, project_dir, dirs_exist_ok=True)
    except OSError as e:
        log.error("Failed to copy fixture project", source=str(fixture_source_dir), error=str(e))
        raise ProvisioningError("Cannot copy fixture project", path=project_dir, details=e) from e

    if cache_seed_dir is not None:
        try:
            shutil.copytree(cache_seed_dir, cache_dir, dirs_exist_ok=True)
        except OSError as e:
            log.error("Failed to seed artifact cache", source=str(cache_seed_dir), error=str(e))
            raise ProvisioningError("Cannot seed artifact cache", path=cache_dir, details=e) from e

    log.debug(
        "Materialized fixture",
        source=str(fixture_source_dir),
        project_dir=str(project_dir),
        cache_seeded=cache_seed_dir is not None,
        emoji_key="materialize",
    )

# 🔼⚙️
