# src/mavenit/telemetry/logger/base.py

import logging
import sys

import structlog
from structlog.typing import FilteringBoundLogger

from mavenit.telemetry.logger.processors import (
    add_emoji_processor,
    remove_extra_keys_processor,
)

BASE_LOGGER_NAME = "mavenit"


def _pipeline(host_managed: bool, log_file: str | None) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_emoji_processor,
        remove_extra_keys_processor,
    ]
    if host_managed and not log_file:
        # pytest's capture handlers use plain formatters: hand them a finished line.
        processors.append(structlog.processors.KeyValueRenderer(key_order=["event", "unit"]))
    else:
        processors.append(structlog.stdlib.ProcessorFormatter.wrap_for_formatter)
    return processors


def _console_renderer(json_logs: bool, rich_console: bool) -> structlog.types.Processor:
    if json_logs:
        return structlog.processors.JSONRenderer(sort_keys=True)
    if rich_console:
        from rich.console import Console

        # stderr keeps stdout free for command output.
        return structlog.dev.ConsoleRenderer(colors=True, console=Console(file=sys.stderr))
    return structlog.dev.ConsoleRenderer(colors=False)


def _add_file_handler(root_logger: logging.Logger, log_file: str, level: int) -> None:
    slog = structlog.get_logger(BASE_LOGGER_NAME)
    try:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as e:
        slog.error("Cannot open log file", log_file=log_file, error=str(e), emoji_key="fail")
        return
    file_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=structlog.processors.JSONRenderer(sort_keys=True))
    )
    file_handler.setLevel(level)
    root_logger.addHandler(file_handler)
    slog.debug("Writing JSON logs to file", log_file=log_file)


def setup_logging(
    level: int = logging.INFO,
    json_logs: bool = False,
    log_file: str | None = None,
    host_managed: bool = False,
    rich_console: bool = False,
) -> None:
    """Configures structlog on top of stdlib logging.

    The CLI owns the root logger and gets a console handler on stderr.
    Inside pytest (``host_managed``) the root handlers belong to pytest's
    log capture and are left in place; records still reach ``caplog`` and
    the "Captured log" report sections.
    """
    structlog.configure(
        processors=_pipeline(host_managed, log_file),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    if not host_managed:
        for handler in list(root_logger.handlers):
            handler.close()
            root_logger.removeHandler(handler)
        root_logger.setLevel(level)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(processor=_console_renderer(json_logs, rich_console))
        )
        root_logger.addHandler(console_handler)

    if log_file:
        _add_file_handler(root_logger, log_file, level)

    structlog.get_logger(BASE_LOGGER_NAME).debug(
        "Logging configured",
        log_level=logging.getLevelName(level),
        host_managed=host_managed,
        json_console=json_logs,
        log_file=log_file or "None",
    )


StructLogger = FilteringBoundLogger

# 🔼⚙️
