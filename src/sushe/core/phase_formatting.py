"""Status text formatting for progress events and job failures.

This module renders Progress values and pipeline errors into the short
human-readable strings shown to the end user as status messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sushe.domain import Phase, Progress

if TYPE_CHECKING:
    from sushe.executor.exceptions import SusheError


def format_status(progress: Progress) -> str:
    """Format a progress event as a status message.

    Args:
        progress: Progress event to render.

    Returns:
        One- or two-line status text.

    Example output:
        - "Downloading: 45%\\nSize: 50.00MiB | Speed: 2.50MiB/s | ETA: 00:30"
        - "Downloaded VP9 format, converting to H.264..."
        - "Splitting video: Part 2/3 (51%)"
    """
    phase = progress.phase
    if phase is Phase.ACQUIRING:
        if progress.speed and progress.eta:
            return (
                f"Downloading: {progress.percent:.0f}%\n"
                f"Size: {progress.total} | Speed: {progress.speed} "
                f"| ETA: {progress.eta}"
            )
        return f"Downloading: {progress.percent:.0f}%"
    if phase is Phase.MERGING:
        return "Merging video and audio..."
    if phase is Phase.TRANSCODING:
        if progress.codec and progress.percent == 0:
            return (
                f"Downloaded {progress.codec.upper()} format, converting to H.264..."
            )
        return f"Converting to H.264: {progress.percent:.0f}%"
    if phase is Phase.PARTITIONING:
        return (
            f"Splitting video: Part {progress.part_num}/{progress.total_parts} "
            f"({progress.percent:.0f}%)"
        )
    if phase is Phase.TRANSFERRING:
        if progress.total_parts > 1:
            return (
                f"Uploading Part {progress.part_num}/{progress.total_parts}: "
                f"{progress.percent:.0f}%"
            )
        return f"Uploading: {progress.percent:.0f}%"
    return "Processing..."


def format_failure(error: SusheError) -> str:
    """Format a terminal pipeline error as a single user-facing message.

    Args:
        error: The error that ended the job.

    Returns:
        Message naming the failed step and the underlying reason.
    """
    from sushe.executor.exceptions import (
        ProbeError,
        StageError,
        ValidationError,
    )

    if isinstance(error, StageError):
        if error.timed_out:
            return f"The {error.stage} took too long and was stopped."
        if error.cancelled:
            return f"The {error.stage} was cancelled."
        return f"The {error.stage} failed: {error}"
    if isinstance(error, ProbeError):
        return f"Could not read the video: {error}"
    if isinstance(error, ValidationError):
        return f"The video cannot be processed: {error}"
    return f"Processing failed: {error}"
