"""External tool discovery and output parsing."""

from sushe.tools.detection import (
    ToolInfo,
    ToolNotFoundError,
    detect_tools,
    find_tool,
    require_tool,
)
from sushe.tools.progress_lines import (
    DownloadComplete,
    DownloadProgress,
    EncodeTimeMarker,
    LineEvent,
    MergeStarted,
    Unrecognized,
    active_part,
    classify_line,
    percent_of,
)

__all__ = [
    # Detection
    "ToolInfo",
    "ToolNotFoundError",
    "detect_tools",
    "find_tool",
    "require_tool",
    # Progress lines
    "DownloadComplete",
    "DownloadProgress",
    "EncodeTimeMarker",
    "LineEvent",
    "MergeStarted",
    "Unrecognized",
    "active_part",
    "classify_line",
    "percent_of",
]
