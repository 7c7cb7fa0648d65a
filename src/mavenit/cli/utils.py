# src/mavenit/cli/utils.py

import logging

import click
import structlog

from mavenit.telemetry import setup_logging

log = structlog.get_logger("cli.utils")

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def logging_options(f):
    """Adds ``--log-level``, ``--log-file`` and ``--json-logs`` to a command."""
    options = [
        click.option(
            "-l",
            "--log-level",
            type=click.Choice(LOG_LEVELS, case_sensitive=False),
            default=None,
            envvar="MAVENIT_LOG_LEVEL",
            help="Logging level for mavenit itself (Maven output is unaffected).",
        ),
        click.option(
            "--log-file",
            type=click.Path(dir_okay=False, writable=True, resolve_path=True),
            default=None,
            envvar="MAVENIT_LOG_FILE",
            help="Also write JSON logs to this file.",
        ),
        click.option(
            "--json-logs",
            is_flag=True,
            default=None,
            envvar="MAVENIT_JSON_LOGS",
            help="Render console logs as JSON.",
        ),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def setup_logging_from_context(ctx: click.Context, default_log_level: str = "WARNING") -> None:
    """Configures logging from the options stored on the group's context."""
    level_name = (ctx.obj.get("LOG_LEVEL") or default_log_level).upper()
    log_file = ctx.obj.get("LOG_FILE")
    json_logs = bool(ctx.obj.get("JSON_LOGS"))

    setup_logging(
        level=logging.getLevelNamesMapping().get(level_name, logging.WARNING),
        json_logs=json_logs,
        log_file=log_file,
        rich_console=not json_logs,
    )
    log.debug("CLI logging ready", level=level_name, log_file=log_file or "console", json=json_logs)


def parse_key_value(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> dict[str, str]:
    """Click callback turning repeated ``-D key=value`` options into a dict."""
    result: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got '{item}'", ctx=ctx, param=param)
        result[key] = value
    return result

# ⚙️🛠️
