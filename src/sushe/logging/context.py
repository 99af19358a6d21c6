"""Job context for structured logging.

Provides context propagation using contextvars, so every log record emitted
while a job runs carries that job's id and source URL.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_job_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_id", default=None
)
_job_url: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_url", default=None
)


def set_job_context(job_id: str, url: str | None = None) -> None:
    """Set the current job context.

    Args:
        job_id: Job identifier (the scratch directory name).
        url: Source URL being processed, or None.
    """
    _job_id.set(job_id)
    _job_url.set(url)


def clear_job_context() -> None:
    """Clear the current job context."""
    _job_id.set(None)
    _job_url.set(None)


def get_job_context() -> tuple[str | None, str | None]:
    """Get current job context as (job_id, url); either may be None."""
    return _job_id.get(), _job_url.get()


@contextmanager
def job_context(job_id: str, url: str | None = None) -> Generator[None, None, None]:
    """Context manager for job processing context.

    Sets job context on entry and restores the previous context on exit.

    Example:
        with job_context("1735689600000000000", "https://youtu.be/x"):
            logger.info("Downloading")  # Record carries job_id and url
    """
    old_job_id = _job_id.get()
    old_url = _job_url.get()
    try:
        set_job_context(job_id, url)
        yield
    finally:
        _job_id.set(old_job_id)
        _job_url.set(old_url)


class JobContextFilter(logging.Filter):
    """Logging filter that injects job context into log records.

    Adds job_id and job_url attributes for JSON output, plus a compact
    job_tag like "[job 1735689600] " for the text format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject job context into log record. Never filters records out."""
        job_id, url = get_job_context()

        record.job_id = job_id
        record.job_url = url
        record.job_tag = f"[job {job_id[:10]}] " if job_id else ""

        return True
