# src/mavenit/resources.py

"""
Copies fixture resources into the fixtures output directory, filtering
``@property@`` expressions in text files on the way.
"""

import fnmatch
import re
import shutil
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

import structlog
from attrs import define, field

from mavenit.exceptions import ResourceFilteringError
from mavenit.project import build_filters, project_properties

log = structlog.get_logger("resources")

DEFAULT_SOURCE_DIR = Path("src", "test", "resources-its")
DEFAULT_DELIMITERS = ("@",)
DEFAULT_NON_FILTERED_EXTENSIONS = ("jpg", "jar", "war", "ear", "aar", "rar", "zip", "tar", "tar.gz")

# Patterns matched against every relative path component.
DEFAULT_EXCLUDES = (
    "*~", "#*#", ".#*", "%*%", "._*",
    "CVS", ".cvsignore", "RCS", "SCCS", "vssver.scc", "project.pj",
    ".svn", ".arch-ids", ".bzr", ".MySCMServerInfo", ".DS_Store", ".metadata",
    ".hg", ".git", ".gitignore", ".gitattributes",
    "BitKeeper", "ChangeSet", "_darcs", ".darcsrepo", "-darcs-backup*", ".darcs-temp-mail",
)

_WINDOWS_PATH = re.compile(r"^.*[A-Za-z]:\\")
_PROPERTIES_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


@define(frozen=True, slots=True)
class Delimiter:
    begin: str
    end: str

    @classmethod
    def parse(cls, spec: str) -> "Delimiter":
        """``"@"`` means ``@...@``; ``"${*}"`` means ``${...}``."""
        if not spec:
            raise ValueError("Empty delimiter")
        begin, star, end = spec.partition("*")
        return cls(begin, end if star else begin)


@define(frozen=True, slots=True)
class FilteringOptions:
    delimiters: tuple[Delimiter, ...] = field(
        factory=lambda: tuple(Delimiter.parse(d) for d in DEFAULT_DELIMITERS)
    )
    non_filtered_extensions: tuple[str, ...] = field(default=DEFAULT_NON_FILTERED_EXTENSIONS)
    escape_string: str | None = field(default=None)
    escape_windows_paths: bool = field(default=True)
    filename_filtering: bool = field(default=False)
    overwrite: bool = field(default=False)
    include_empty_dirs: bool = field(default=False)
    add_default_excludes: bool = field(default=False)
    encoding: str = field(default="utf-8")


@define(slots=True)
class FilteringReport:
    copied: int = 0
    filtered: int = 0
    skipped: int = 0


def _logical_lines(text: str) -> Iterable[str]:
    """Joins lines ending in an odd number of backslashes with their successor."""
    pending = ""
    for raw in text.splitlines():
        line = raw.lstrip() if pending else raw
        if not pending and (not line.strip() or line.lstrip()[0] in "#!"):
            continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2:
            pending += line[:-1]
            continue
        yield pending + line
        pending = ""
    if pending:
        yield pending


def _unescape(text: str) -> str:
    result: list[str] = []
    chars = iter(range(len(text)))
    for i in chars:
        char = text[i]
        if char != "\\" or i + 1 == len(text):
            result.append(char)
            continue
        escaped = text[i + 1]
        next(chars, None)
        if escaped == "u" and re.fullmatch(r"[0-9A-Fa-f]{4}", text[i + 2:i + 6]):
            result.append(chr(int(text[i + 2:i + 6], 16)))
            for _ in range(4):
                next(chars, None)
        else:
            result.append(_PROPERTIES_ESCAPES.get(escaped, escaped))
    return "".join(result)


def _split_entry(line: str) -> tuple[str, str]:
    line = line.lstrip()
    i = 0
    while i < len(line):
        if line[i] == "\\":
            i += 2
            continue
        if line[i] in "=: \t\f":
            break
        i += 1
    key, rest = line[:i], line[i:].lstrip(" \t\f")
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(" \t\f")
    return _unescape(key), _unescape(rest)


def parse_properties(text: str) -> dict[str, str]:
    """Parses Java ``.properties`` text, including continuations and escapes."""
    properties: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        if key:
            properties[key] = value
    return properties


def read_properties_file(path: Path, encoding: str = "utf-8") -> dict[str, str]:
    try:
        text = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceFilteringError("Cannot read filter file", path=path, details=e) from e
    return parse_properties(text)


def collect_properties(
    model: Mapping[str, Any] | None,
    project_dir: Path,
    filter_files: Sequence[Path] = (),
    defines: Mapping[str, str] | None = None,
    use_build_filters: bool = True,
    properties_encoding: str = "utf-8",
) -> dict[str, str]:
    """
    Merges every property source used for filtering; later sources win.

    Order: project model, ``<build><filters>`` of the pom (relative to
    ``project_dir``), ``filter_files``, then ``defines``.
    """
    properties: dict[str, str] = {}
    files: list[Path] = []
    if model is not None:
        properties.update(project_properties(model))
        if use_build_filters:
            files.extend(project_dir / f for f in build_filters(model))
    files.extend(filter_files)

    for filter_file in files:
        properties.update(read_properties_file(filter_file, properties_encoding))
    properties.update(defines or {})
    log.debug("Collected filter properties", count=len(properties), filter_files=[str(f) for f in files])
    return properties


def _escape_windows_path(value: str) -> str:
    if _WINDOWS_PATH.match(value):
        return value.replace("\\", "\\\\").replace(":", "\\:")
    return value


def _build_pattern(delimiter: Delimiter, escape_string: str | None) -> re.Pattern[str]:
    escape = f"(?P<escape>{re.escape(escape_string)})?" if escape_string else ""
    return re.compile(
        escape
        + re.escape(delimiter.begin)
        + r"(?P<key>[A-Za-z0-9_.\-]+)"
        + re.escape(delimiter.end)
    )


def interpolate(
    text: str,
    properties: Mapping[str, str],
    delimiters: Sequence[Delimiter],
    escape_string: str | None = None,
    escape_windows_paths: bool = False,
) -> str:
    """Replaces known expressions; unknown ones are left as they are.

    Expression keys never contain line breaks, so an end token is only
    ever found on the line of its begin token.
    """
    for delimiter in delimiters:
        pattern = _build_pattern(delimiter, escape_string)

        def _replace(match: re.Match[str]) -> str:
            expression = match.group(0)
            if escape_string and match.group("escape"):
                return expression[len(escape_string):]
            key = match.group("key")
            if key not in properties:
                return expression
            value = properties[key]
            return _escape_windows_path(value) if escape_windows_paths else value

        text = pattern.sub(_replace, text)
    return text


def _is_excluded(relative: Path, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatchcase(part, p) for part in relative.parts for p in patterns)


def _is_non_filtered(path: Path, extensions: Sequence[str]) -> bool:
    name = path.name.lower()
    return any(name.endswith("." + ext.lower()) for ext in extensions)


def _target_path(
    output_dir: Path, relative: Path, properties: Mapping[str, str], options: FilteringOptions
) -> Path:
    if not options.filename_filtering:
        return output_dir / relative
    parts = [interpolate(part, properties, options.delimiters, options.escape_string) for part in relative.parts]
    return output_dir.joinpath(*parts)


def filter_resources(
    source_dir: Path,
    output_dir: Path,
    properties: Mapping[str, str],
    options: FilteringOptions | None = None,
) -> FilteringReport:
    """Copies ``source_dir`` into ``output_dir`` and filters text resources."""
    options = options or FilteringOptions()
    if not source_dir.is_dir():
        raise ResourceFilteringError("Resource directory does not exist", path=source_dir)

    excludes = DEFAULT_EXCLUDES if options.add_default_excludes else ()
    report = FilteringReport()
    resources_log = log.bind(source_dir=str(source_dir), output_dir=str(output_dir))

    for source in sorted(source_dir.rglob("*")):
        relative = source.relative_to(source_dir)
        if _is_excluded(relative, excludes):
            continue
        target = _target_path(output_dir, relative, properties, options)

        try:
            if source.is_dir():
                if options.include_empty_dirs and not any(source.iterdir()):
                    target.mkdir(parents=True, exist_ok=True)
                continue

            if (
                not options.overwrite
                and target.exists()
                and target.stat().st_mtime > source.stat().st_mtime
            ):
                report.skipped += 1
                continue

            target.parent.mkdir(parents=True, exist_ok=True)
            if _is_non_filtered(source, options.non_filtered_extensions):
                shutil.copy2(source, target)
                report.copied += 1
                continue

            try:
                text = source.read_text(encoding=options.encoding)
            except UnicodeDecodeError:
                resources_log.debug("Copying undecodable file unfiltered", resource=str(relative))
                shutil.copy2(source, target)
                report.copied += 1
                continue
            target.write_text(
                interpolate(
                    text,
                    properties,
                    options.delimiters,
                    options.escape_string,
                    options.escape_windows_paths,
                ),
                encoding=options.encoding,
            )
            shutil.copymode(source, target)
            report.filtered += 1
        except OSError as e:
            resources_log.error("Failed to copy resource", resource=str(relative), error=str(e))
            raise ResourceFilteringError("Cannot copy resource", path=source, details=e) from e

    resources_log.info(
        "Resources processed",
        filtered=report.filtered,
        copied=report.copied,
        skipped=report.skipped,
    )
    return report

# 🔼⚙️
