"""Progress line classification for yt-dlp and ffmpeg output.

External tools report progress as free text. This module turns one line of
that text into a tagged value so callers can dispatch on the shape of the
line without knowing any regular expressions. Classification never raises:
anything that does not match a known shape comes back as Unrecognized.

Recognized shapes:

    [download]  45.2% of 50.00MiB at 2.50MiB/s ETA 00:30    -> DownloadProgress
    [download] 100% of 50.00MiB in 00:20                    -> DownloadComplete
    [Merger] Merging formats into "video.mp4"               -> MergeStarted
    frame=  100 fps= 30 ... time=00:01:23.45 bitrate=...    -> EncodeTimeMarker
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass


@dataclass(frozen=True)
class DownloadProgress:
    """A yt-dlp progress line."""

    percent: float
    total: str
    speed: str
    eta: str


@dataclass(frozen=True)
class DownloadComplete:
    """A yt-dlp line reporting that a download reached 100%."""

    total: str


@dataclass(frozen=True)
class MergeStarted:
    """A yt-dlp line announcing that separate streams are being merged."""


@dataclass(frozen=True)
class EncodeTimeMarker:
    """An ffmpeg status line carrying the current output position."""

    seconds: float


@dataclass(frozen=True)
class Unrecognized:
    """Any other line; kept only for diagnostics."""

    line: str


LineEvent = (
    DownloadProgress | DownloadComplete | MergeStarted | EncodeTimeMarker | Unrecognized
)

_DOWNLOAD_RE = re.compile(
    r"\[download\]\s+(\d+(?:\.\d+)?)%\s+of\s+~?\s*(\S+)\s+at\s+(\S+)\s+ETA\s+(\S+)"
)
_COMPLETE_RE = re.compile(r"\[download\]\s+100(?:\.0+)?%\s+of\s+~?\s*(\S+)")
_MERGER_RE = re.compile(r"\[Merger\]")
_TIME_RE = re.compile(r"time=(\d+):(\d+):(\d+(?:\.\d+)?)")


def parse_timestamp(hours: str, minutes: str, seconds: str) -> float:
    """Convert HH, MM and SS(.ms) components to seconds."""
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def classify_line(line: str) -> LineEvent:
    """Classify one line of yt-dlp or ffmpeg output.

    Args:
        line: A single output line, with or without trailing newline.

    Returns:
        The tagged event for the line.
    """
    line = line.rstrip("\r\n")

    match = _DOWNLOAD_RE.search(line)
    if match:
        return DownloadProgress(
            percent=float(match.group(1)),
            total=match.group(2),
            speed=match.group(3),
            eta=match.group(4),
        )

    match = _COMPLETE_RE.search(line)
    if match:
        return DownloadComplete(total=match.group(1))

    if _MERGER_RE.search(line):
        return MergeStarted()

    match = _TIME_RE.search(line)
    if match:
        return EncodeTimeMarker(seconds=parse_timestamp(*match.groups()))

    return Unrecognized(line=line)


def percent_of(elapsed: float, duration: float) -> float:
    """Convert an elapsed position into percent complete.

    Durations reported by ffprobe are approximate, so the encoder may run
    slightly past them; the result is clamped to [0, 100].

    Returns:
        Percent complete, or 0.0 when the duration is unknown (<= 0).
    """
    if duration <= 0:
        return 0.0
    return max(0.0, min(100.0, elapsed / duration * 100))


def active_part(elapsed: float, segment_duration: float, total_parts: int) -> int:
    """Compute the 1-based ordinal of the segment being written.

    The result is clamped to [1, total_parts] so rounding at the end of the
    file never reports a part that does not exist.
    """
    if segment_duration <= 0 or total_parts < 1:
        return 1
    part = math.floor(max(0.0, elapsed) / segment_duration) + 1
    return max(1, min(total_parts, part))
