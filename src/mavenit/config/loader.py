#
# config/loader.py
#
"""
Loads the harness configuration from the ``[tool.mavenit]`` table of a
pyproject.toml, applying environment variable overrides.
"""

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import attrs
import structlog

from mavenit.config.models import HarnessConfig
from mavenit.exceptions import ConfigurationError

log = structlog.get_logger("config.loader")

PATH_KEYS = ("target_dir", "root_dir", "fixtures_dir", "cache_seed_dir", "maven_home")
KNOWN_KEYS = frozenset(f.name for f in attrs.fields(HarnessConfig))

ENV_LOG_LEVEL = "MAVENIT_LOG_LEVEL"
ENV_TIMEOUT = "MAVENIT_TIMEOUT"


def _read_table(config_path: Path) -> dict[str, Any]:
    try:
        with config_path.open("rb") as fh:
            document = tomllib.load(fh)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError("Invalid TOML", path=config_path, details=e) from e
    except OSError as e:
        raise ConfigurationError("Cannot read configuration file", path=config_path, details=e) from e
    table = document.get("tool", {}).get("mavenit", {})
    if not isinstance(table, dict):
        raise ConfigurationError("[tool.mavenit] must be a table", path=config_path)
    return table


def _apply_env_overrides(values: dict[str, Any], environ: Mapping[str, str]) -> None:
    if level := environ.get(ENV_LOG_LEVEL):
        values["log_level"] = level
    if timeout := environ.get(ENV_TIMEOUT):
        try:
            values["timeout"] = float(timeout)
        except ValueError as e:
            raise ConfigurationError(f"{ENV_TIMEOUT} must be a number, got '{timeout}'") from e


def load_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> HarnessConfig:
    """
    Builds a HarnessConfig.

    Precedence: keyword overrides > environment > [tool.mavenit] > defaults.
    Relative paths in the file are resolved against the file's directory;
    without a file they are resolved against the current directory.
    """
    environ = os.environ if environ is None else environ
    values: dict[str, Any] = {}
    base_dir = Path.cwd()

    if config_path is not None and config_path.is_file():
        base_dir = config_path.resolve().parent
        values.update(_read_table(config_path))
        log.debug("Loaded [tool.mavenit] table", config_path=str(config_path), keys=sorted(values))

    unknown = set(values) - KNOWN_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown [tool.mavenit] keys: {sorted(unknown)}", path=config_path)

    _apply_env_overrides(values, environ)
    values.update({k: v for k, v in overrides.items() if v is not None})

    for key in PATH_KEYS:
        if values.get(key):
            path = Path(values[key]).expanduser()
            values[key] = path if path.is_absolute() else base_dir / path
    values.setdefault("target_dir", base_dir / "target")

    try:
        config = HarnessConfig(**values)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid mavenit configuration: {e}", path=config_path, details=e) from e

    log.debug(
        "Harness configuration ready",
        root_dir=str(config.root_dir),
        fixtures_dir=str(config.fixtures_dir),
        timeout=config.timeout,
    )
    return config

# 🔼⚙️
