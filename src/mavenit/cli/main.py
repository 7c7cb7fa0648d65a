# src/mavenit/cli/main.py

"""
Command line entry point for mavenit.

``mavenit resources`` prepares the fixture projects, ``mavenit run`` executes
one test unit without a pytest session.
"""

from importlib.metadata import PackageNotFoundError, version

import click
import structlog

from mavenit.cli.resources_cmds import resources_cli
from mavenit.cli.run_cmds import run_cli
from mavenit.cli.utils import logging_options, setup_logging_from_context
from mavenit.telemetry import StructLogger

try:
    __version__ = version("mavenit")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

log: StructLogger = structlog.get_logger("cli.main")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", package_name="mavenit")
@logging_options
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_file: str | None, json_logs: bool | None):
    """
    mavenit: integration tests for Maven plugins.

    Fixture projects live in src/test/resources-its and are run with a
    private local repository under target/maven-it.
    """
    ctx.ensure_object(dict)
    ctx.obj.update(LOG_LEVEL=log_level, LOG_FILE=log_file, JSON_LOGS=bool(json_logs))
    setup_logging_from_context(ctx)
    log.debug("mavenit CLI started", command=ctx.invoked_subcommand)


cli.add_command(resources_cli)
cli.add_command(run_cli)

if __name__ == "__main__":
    cli()

# 🖥️⚙️
