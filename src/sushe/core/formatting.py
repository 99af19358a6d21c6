"""Formatting utilities.

This module provides pure functions for formatting data for display.
"""

from pathlib import Path

_CONTENT_TYPES: dict[str, str] = {
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".mkv": "video/x-matroska",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
}

DEFAULT_CONTENT_TYPE = "video/mp4"


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable binary units.

    Args:
        size_bytes: File size in bytes.

    Returns:
        Formatted string (e.g., "1.9 GB", "128.0 MB", "512 B").
    """
    unit = 1024
    if size_bytes < unit:
        return f"{size_bytes} B"
    div, exp = unit, 0
    n = size_bytes // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size_bytes / div:.1f} {'KMGTPE'[exp]}B"


def content_type_for(path: Path | str) -> str:
    """Map a media file extension to its MIME type.

    Unknown extensions map to video/mp4, the container the pipeline
    normalizes downloads into.
    """
    return _CONTENT_TYPES.get(Path(path).suffix.lower(), DEFAULT_CONTENT_TYPE)


def title_from_path(path: Path | str) -> str:
    """Derive a display title from a file name by dropping its extension."""
    return Path(path).stem


def resolution_label(width: int, height: int) -> str:
    """Map video dimensions to a short label like "1080p".

    Returns "—" when either dimension is unknown (0).
    """
    if width <= 0 or height <= 0:
        return "—"
    if height >= 2160:
        return "4K"
    return f"{height}p"
