"""Execution layer for sushe.

This package drives the external tools behind each pipeline stage:
- process: child process runner with concurrent stdout/stderr draining
- acquire: yt-dlp download stage
- transcode: ffmpeg H.264/AAC re-encode stage
- partition: ffmpeg segment split stage
- workspace: per-job scratch directories
- exceptions: stage error taxonomy

Stage classes are imported from their modules; only the error taxonomy and
the process runner are re-exported here.
"""

from sushe.executor.exceptions import (
    FetchError,
    ProbeError,
    SplitError,
    StageError,
    SusheError,
    TranscodeError,
    ValidationError,
)
from sushe.executor.process import (
    ToolCancelledError,
    ToolResult,
    ToolRunError,
    ToolStartError,
    ToolTimeoutError,
    run_tool,
)

__all__ = [
    # Exceptions
    "FetchError",
    "ProbeError",
    "SplitError",
    "StageError",
    "SusheError",
    "TranscodeError",
    "ValidationError",
    # Process runner
    "ToolCancelledError",
    "ToolResult",
    "ToolRunError",
    "ToolStartError",
    "ToolTimeoutError",
    "run_tool",
]
