# src/mavenit/cli/resources_cmds.py

from pathlib import Path

import click
import structlog

from mavenit.cli.utils import parse_key_value
from mavenit.exceptions import MavenItError
from mavenit.project import read_project_file
from mavenit.resources import (
    DEFAULT_DELIMITERS,
    DEFAULT_NON_FILTERED_EXTENSIONS,
    DEFAULT_SOURCE_DIR,
    Delimiter,
    FilteringOptions,
    collect_properties,
    filter_resources,
)
from mavenit.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.resources")


@click.command(name="resources")
@click.option(
    "-s",
    "--source",
    "source_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=DEFAULT_SOURCE_DIR,
    show_default=True,
    help="Directory holding the fixture projects.",
)
@click.option(
    "-o",
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("target", "test-classes", "maven-its"),
    show_default=True,
    help="Directory the filtered fixtures are written to.",
)
@click.option(
    "--pom",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("pom.xml"),
    show_default=True,
    help="Project descriptor supplying project.* properties (skipped if missing).",
)
@click.option(
    "--filter",
    "filter_files",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Additional .properties file; may be repeated.",
)
@click.option(
    "--build-filters/--no-build-filters",
    "use_build_filters",
    default=True,
    show_default=True,
    help="Read the <build><filters> files declared in the pom before --filter files.",
)
@click.option(
    "-D",
    "--define",
    "defines",
    multiple=True,
    callback=parse_key_value,
    help="Property KEY=VALUE; wins over all other sources.",
)
@click.option(
    "--delimiter",
    "delimiters",
    multiple=True,
    default=DEFAULT_DELIMITERS,
    show_default=True,
    help="Expression delimiter, e.g. '@' or '${*}'.",
)
@click.option("--escape-string", default=None, help="Prefix that suppresses filtering of an expression.")
@click.option(
    "--non-filtered-extension",
    "non_filtered_extensions",
    multiple=True,
    help="File extension copied without filtering; replaces the defaults.",
)
@click.option("--encoding", default="utf-8", show_default=True)
@click.option(
    "--properties-encoding",
    default=None,
    help="Encoding of filter .properties files (default: --encoding).",
)
@click.option(
    "--escape-windows-paths/--no-escape-windows-paths",
    default=True,
    show_default=True,
    help="Escape backslashes and colons in values that look like Windows paths.",
)
@click.option("--filename-filtering", is_flag=True, help="Also filter file and directory names.")
@click.option("--overwrite", is_flag=True, help="Overwrite destination files even when they are newer.")
@click.option("--include-empty-dirs", is_flag=True, help="Copy empty directories too.")
@click.option("--default-excludes", is_flag=True, help="Skip VCS and OS metadata files.")
def resources_cli(
    source_dir: Path,
    output_dir: Path,
    pom: Path,
    filter_files: tuple[Path, ...],
    use_build_filters: bool,
    defines: dict[str, str],
    delimiters: tuple[str, ...],
    escape_string: str | None,
    non_filtered_extensions: tuple[str, ...],
    encoding: str,
    properties_encoding: str | None,
    escape_windows_paths: bool,
    filename_filtering: bool,
    overwrite: bool,
    include_empty_dirs: bool,
    default_excludes: bool,
):
    """Copy and filter fixture projects into the test output directory."""
    try:
        properties = collect_properties(
            read_project_file(pom) if pom.is_file() else None,
            pom.parent,
            filter_files,
            defines,
            use_build_filters=use_build_filters,
            properties_encoding=properties_encoding or encoding,
        )

        options = FilteringOptions(
            delimiters=tuple(Delimiter.parse(d) for d in delimiters),
            non_filtered_extensions=non_filtered_extensions or DEFAULT_NON_FILTERED_EXTENSIONS,
            escape_string=escape_string,
            escape_windows_paths=escape_windows_paths,
            filename_filtering=filename_filtering,
            overwrite=overwrite,
            include_empty_dirs=include_empty_dirs,
            add_default_excludes=default_excludes,
            encoding=encoding,
        )
        report = filter_resources(source_dir, output_dir, properties, options)
    except (MavenItError, ValueError, LookupError) as e:
        log.error("Resource processing failed", error=str(e))
        raise click.ClickException(str(e)) from e

    click.echo(
        f"Processed {source_dir} -> {output_dir}: "
        f"{report.filtered} filtered, {report.copied} copied, {report.skipped} up to date."
    )

# 🔼⚙️
