# src/mavenit/project.py

"""
Reads a Maven project descriptor into a generic key-value model.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

import structlog
import xmltodict

from mavenit.exceptions import ProjectParseError

log = structlog.get_logger("project")

POM_FILE_NAME = "pom.xml"
_MISSING = object()


def _strip_namespace(key: str) -> str:
    return key.rsplit(":", 1)[-1] if not key.startswith("@") else key


def parse_project(text: str, source: Path | str | None = None) -> dict[str, Any]:
    """
    Parses pom.xml content and returns the ``<project>`` element as a dict.

    Attributes keep xmltodict's ``@`` prefix; namespaces are dropped.
    """
    try:
        document = xmltodict.parse(
            text,
            process_namespaces=False,
            postprocessor=lambda path, key, value: (_strip_namespace(key), value),
        )
    except ExpatError as e:
        raise ProjectParseError("Malformed project descriptor", path=source, details=e) from e

    project = document.get("project")
    if not isinstance(project, dict):
        raise ProjectParseError("Descriptor has no <project> root element", path=source)
    return project


def read_project(project_dir: Path) -> dict[str, Any]:
    """Reads ``<project_dir>/pom.xml``."""
    return read_project_file(project_dir / POM_FILE_NAME)


def read_project_file(pom: Path) -> dict[str, Any]:
    try:
        text = pom.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ProjectParseError("Project descriptor not found", path=pom, details=e) from e
    except OSError as e:
        raise ProjectParseError("Cannot read project descriptor", path=pom, details=e) from e

    model = parse_project(text, source=pom)
    log.debug(
        "Read project model",
        pom=str(pom),
        artifact_id=model.get("artifactId"),
        version=model_value(model, "version"),
    )
    return model


def model_value(model: Mapping[str, Any], dotted_key: str, default: Any = None) -> Any:
    """
    Looks up ``"build.finalName"`` style keys in a project model.

    ``groupId`` and ``version`` fall back to ``parent.groupId`` and
    ``parent.version`` when the project inherits them.
    """
    current: Any = model
    for part in dotted_key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            current = _MISSING
            break
        current = current[part]

    if current is _MISSING and dotted_key in ("groupId", "version"):
        return model_value(model, f"parent.{dotted_key}", default)
    return default if current is _MISSING or current is None else current


def project_properties(model: Mapping[str, Any]) -> dict[str, str]:
    """Returns the ``project.*`` and ``<properties>`` values usable for filtering."""
    properties: dict[str, str] = {}
    declared = model.get("properties")
    if isinstance(declared, Mapping):
        for key, value in declared.items():
            if isinstance(value, str):
                properties[key] = value
    for key in ("groupId", "artifactId", "version", "name", "packaging", "description"):
        value = model_value(model, key)
        if isinstance(value, str):
            properties[f"project.{key}"] = value
    return properties


def build_filters(model: Mapping[str, Any]) -> list[str]:
    """Returns the ``<build><filters><filter>`` entries in declaration order."""
    filters = model_value(model, "build.filters.filter", ())
    if isinstance(filters, str):
        filters = [filters]
    return [f.strip() for f in filters if isinstance(f, str) and f.strip()]

# 🔼⚙️
