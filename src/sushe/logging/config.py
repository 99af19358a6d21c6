"""Root logger setup from LoggingConfig."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from sushe.logging.context import JobContextFilter
from sushe.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from sushe.config.models import LoggingConfig

# job_tag is "[job 1735689600] " inside a job and empty outside one
TEXT_FORMAT = "%(asctime)s - %(job_tag)s%(name)s - %(levelname)s - %(message)s"
TEXT_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _formatter_for(format_name: str) -> logging.Formatter:
    if format_name.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT)


def _open_log_file(config: LoggingConfig) -> logging.Handler | None:
    """Open the rotating log file, or return None if it cannot be opened.

    The warning goes straight to stderr since no handler exists yet.
    """
    if not config.file:
        return None
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {config.file}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to ``config``.

    Records go to the log file when one is configured and can be opened,
    and to stderr when ``include_stderr`` is set or there is no file.
    Every handler tags records with the current job.
    """
    level = _LEVELS.get(config.level.casefold(), logging.INFO)
    formatter = _formatter_for(config.format)
    job_filter = JobContextFilter()

    handlers: list[logging.Handler] = []
    file_handler = _open_log_file(config)
    if file_handler is not None:
        handlers.append(file_handler)
    if config.include_stderr or file_handler is None:
        handlers.append(logging.StreamHandler(sys.stderr))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(job_filter)
        root.addHandler(handler)
