#
# config/models.py
#
"""
Attrs-based data models for the mavenit harness configuration.
"""

import logging
from pathlib import Path
from typing import Any

from attrs import Factory, define, field

from mavenit.models import validate_timeout


# --- Validators ---
def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging._nameToLevel.keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _to_path(value: Any) -> Path:
    return value if isinstance(value, Path) else Path(value)


def _to_optional_path(value: Any) -> Path | None:
    return None if value in (None, "") else _to_path(value)


@define(frozen=True, slots=True)
class HarnessConfig:
    """
    Locations and defaults shared by every test unit of a session.

    All directories default to locations below ``target_dir`` mirroring a
    Maven build's output layout.
    """
    target_dir: Path = field(default=Path("target"), converter=_to_path)
    root_dir: Path = field(
        default=Factory(lambda self: self.target_dir / "maven-it", takes_self=True),
        converter=_to_path,
    )
    fixtures_dir: Path = field(
        default=Factory(lambda self: self.target_dir / "test-classes" / "maven-its", takes_self=True),
        converter=_to_path,
    )
    cache_seed_dir: Path | None = field(
        default=Factory(lambda self: self.target_dir / "invoker-repo", takes_self=True),
        converter=_to_optional_path,
    )
    maven_home: Path | None = field(default=None, converter=_to_optional_path)
    timeout: float | None = field(default=None, validator=validate_timeout)
    log_level: str = field(default="INFO", validator=_validate_log_level)

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())

# 🔼⚙️
