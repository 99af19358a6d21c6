"""External tool discovery.

Resolves yt-dlp, ffmpeg and ffprobe from configured paths, falling back to
a PATH lookup, and reports their versions for diagnostics.
"""

from __future__ import annotations

import logging
import shutil
import subprocess  # nosec B404 - subprocess is required for version probing
from dataclasses import dataclass
from pathlib import Path

from sushe.config.models import ToolPathsConfig
from sushe.core.subprocess_utils import run_command

logger = logging.getLogger(__name__)

DETECTION_TIMEOUT = 10

# Executable name and version flag per tool
_TOOLS: dict[str, tuple[str, str]] = {
    "yt-dlp": ("yt-dlp", "--version"),
    "ffmpeg": ("ffmpeg", "-version"),
    "ffprobe": ("ffprobe", "-version"),
}


class ToolNotFoundError(RuntimeError):
    """Raised when a required external tool is not installed."""


@dataclass(frozen=True)
class ToolInfo:
    """Availability of one external tool."""

    name: str
    path: Path | None
    version: str | None = None

    def is_available(self) -> bool:
        return self.path is not None


def _configured_path(name: str, tools: ToolPathsConfig | None) -> Path | None:
    if tools is None:
        return None
    return {
        "yt-dlp": tools.yt_dlp,
        "ffmpeg": tools.ffmpeg,
        "ffprobe": tools.ffprobe,
    }.get(name)


def find_tool(name: str, configured_path: Path | None = None) -> Path | None:
    """Find a tool executable.

    Args:
        name: Tool name (e.g., "ffmpeg").
        configured_path: Optional configured path override.

    Returns:
        Path to tool executable, or None if not found.
    """
    if configured_path:
        if configured_path.is_file():
            return configured_path
        logger.warning(
            "Configured path for %s is not a file: %s", name, configured_path
        )

    which_result = shutil.which(_TOOLS.get(name, (name, ""))[0])
    if which_result:
        return Path(which_result)

    return None


def require_tool(name: str, tools: ToolPathsConfig | None = None) -> Path:
    """Get path to a required tool.

    Raises:
        ToolNotFoundError: If the tool is not available.
    """
    path = find_tool(name, _configured_path(name, tools))
    if path is None:
        raise ToolNotFoundError(
            f"Required tool not available: {name}. "
            f"Install it or set SUSHE_{name.upper().replace('-', '')}_PATH."
        )
    return path


def _read_version(name: str, path: Path) -> str | None:
    flag = _TOOLS[name][1]
    try:
        stdout, _, returncode = run_command([path, flag], timeout=DETECTION_TIMEOUT)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning("Could not read %s version: %s", name, e)
        return None
    if returncode != 0 or not stdout.strip():
        return None
    first_line = stdout.strip().splitlines()[0]
    # "ffmpeg version 6.1.1 Copyright ..." -> "6.1.1"; yt-dlp prints bare version
    parts = first_line.split()
    if len(parts) >= 3 and parts[1] == "version":
        return parts[2]
    return first_line


def detect_tools(tools: ToolPathsConfig | None = None) -> list[ToolInfo]:
    """Detect all external tools the pipeline uses.

    Returns:
        One ToolInfo per tool, in pipeline order.
    """
    results: list[ToolInfo] = []
    for name in _TOOLS:
        path = find_tool(name, _configured_path(name, tools))
        version = _read_version(name, path) if path else None
        results.append(ToolInfo(name=name, path=path, version=version))
    return results
