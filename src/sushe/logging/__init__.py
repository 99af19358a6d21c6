"""Structured logging module for sushe.

Provides configurable logging with JSON format support, file rotation, and
per-job context injection.
"""

from sushe.logging.config import configure_logging
from sushe.logging.context import (
    JobContextFilter,
    clear_job_context,
    get_job_context,
    job_context,
    set_job_context,
)
from sushe.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "JobContextFilter",
    "clear_job_context",
    "configure_logging",
    "get_job_context",
    "job_context",
    "set_job_context",
]
