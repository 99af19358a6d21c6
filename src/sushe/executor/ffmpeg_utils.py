"""Shared utilities for the tool-backed pipeline stages."""

import logging
from collections.abc import Iterable
from pathlib import Path

from sushe.domain.models import Progress, ProgressSink
from sushe.executor.exceptions import StageError
from sushe.executor.process import (
    ToolCancelledError,
    ToolResult,
    ToolRunError,
    ToolTimeoutError,
)

logger = logging.getLogger(__name__)


def emit_progress(sink: ProgressSink | None, progress: Progress) -> None:
    """Deliver a progress event, ignoring sink failures.

    A failing sink must never fail the job, so exceptions are logged at
    debug level and dropped.
    """
    if sink is None:
        return
    try:
        sink(progress)
    except Exception as e:
        logger.debug("Progress sink error: %s", e)


def stage_error_from(
    error_class: type[StageError], error: ToolRunError
) -> StageError:
    """Translate a tool runner failure into the stage's error type."""
    return error_class(
        str(error),
        error.tail,
        timed_out=isinstance(error, ToolTimeoutError),
        cancelled=isinstance(error, ToolCancelledError),
    )


def stage_error_for_exit(
    error_class: type[StageError], description: str, result: ToolResult
) -> StageError:
    """Build the stage error for a tool that exited non-zero."""
    tail = result.diagnostic_tail()
    message = f"{description} exited with code {result.returncode}"
    if tail:
        message = f"{message}: {tail[-1]}"
    return error_class(message, tail)


def validate_output(output_path: Path) -> tuple[bool, str | None]:
    """Validate an ffmpeg output file.

    Checks that the output file exists and is non-empty.

    Returns:
        Tuple of (is_valid, error_message).
        error_message is None if valid.
    """
    if not output_path.exists():
        return False, f"Output file does not exist: {output_path}"

    try:
        output_size = output_path.stat().st_size
    except OSError as e:
        return False, f"Could not stat output file: {e}"

    if output_size == 0:
        return False, f"Output file is empty: {output_path}"

    return True, None


def cleanup_temp_file(path: Path) -> None:
    """Remove a partially written file, logging any errors.

    Args:
        path: Path to file to remove.
    """
    if path.exists():
        try:
            path.unlink()
            logger.debug("Cleaned up temp file: %s", path)
        except OSError as e:
            logger.warning("Could not clean up temp file %s: %s", path, e)


def cleanup_temp_files(paths: Iterable[Path]) -> None:
    """Remove several partially written files."""
    for path in paths:
        cleanup_temp_file(path)
