"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (config, input)
    20-29: Target/file errors
    30-39: Tool/dependency errors
    40-49: Pipeline stage errors
    50-59: Inspection errors
"""

from enum import IntEnum

from sushe.executor.exceptions import (
    FetchError,
    ProbeError,
    SplitError,
    SusheError,
    TranscodeError,
    ValidationError,
)


class ExitCode(IntEnum):
    """Exit codes for sushe CLI commands.

    Organized by category with reserved ranges for future expansion.
    """

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2

    # Validation errors (10-19)
    CONFIG_ERROR = 10
    NO_URLS_FOUND = 11
    VALIDATION_ERROR = 12

    # Target/file errors (20-29)
    TARGET_NOT_FOUND = 20

    # Tool/dependency errors (30-39)
    TOOL_NOT_AVAILABLE = 30

    # Pipeline stage errors (40-49)
    DOWNLOAD_FAILED = 40
    TRANSCODE_FAILED = 41
    SPLIT_FAILED = 42
    UPLOAD_FAILED = 43

    # Inspection errors (50-59)
    PROBE_FAILED = 50


def exit_code_for(error: SusheError) -> ExitCode:
    """Map a pipeline error to the exit code reported for it."""
    from sushe.jobs.transfer import UploadError

    if isinstance(error, FetchError):
        return ExitCode.DOWNLOAD_FAILED
    if isinstance(error, TranscodeError):
        return ExitCode.TRANSCODE_FAILED
    if isinstance(error, SplitError):
        return ExitCode.SPLIT_FAILED
    if isinstance(error, UploadError):
        return ExitCode.UPLOAD_FAILED
    if isinstance(error, ProbeError):
        return ExitCode.PROBE_FAILED
    if isinstance(error, ValidationError):
        return ExitCode.VALIDATION_ERROR
    return ExitCode.GENERAL_ERROR
