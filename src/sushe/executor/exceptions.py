"""Exception taxonomy for pipeline stages.

Every failure a job can surface derives from SusheError, so the consumer
layer can catch all pipeline errors with a single except clause and still
branch on the concrete kind for its user-facing message.
"""

from collections.abc import Sequence


class SusheError(Exception):
    """Base exception for all pipeline errors."""


class ProbeError(SusheError):
    """Raised when ffprobe fails or produces unparseable output.

    Recoverable: callers may retry or treat media info as unavailable.
    """


class ValidationError(SusheError):
    """Raised when a checked precondition fails before any tool is started."""


class StageError(SusheError):
    """Base for terminal stage failures backed by an external tool.

    Attributes:
        tool_output: Tail of the tool's output, for diagnostics.
        timed_out: True if the stage was aborted by its timeout.
        cancelled: True if the stage was aborted by a cancellation signal.
    """

    stage = "processing"

    def __init__(
        self,
        message: str,
        tool_output: Sequence[str] = (),
        *,
        timed_out: bool = False,
        cancelled: bool = False,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description of the failure.
            tool_output: Last lines printed by the external tool.
            timed_out: Whether the stage hit its timeout.
            cancelled: Whether the stage was cancelled.
        """
        self.tool_output = list(tool_output)
        self.timed_out = timed_out
        self.cancelled = cancelled
        super().__init__(message)


class FetchError(StageError):
    """Raised when yt-dlp fails, the source is unsupported, or nothing was
    downloaded. The job's scratch directory is removed before raising."""

    stage = "download"


class TranscodeError(StageError):
    """Raised when ffmpeg fails to re-encode a file."""

    stage = "conversion"


class SplitError(StageError):
    """Raised when ffmpeg fails to split a file or produces no parts."""

    stage = "split"
