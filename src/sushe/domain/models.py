"""Domain models for the delivery pipeline.

These are plain immutable values: media measurements, progress events, and
split manifest entries. None of them carries identity or is persisted.
"""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .enums import Phase


@dataclass(frozen=True)
class MediaInfo:
    """Measurable properties of a media file at inspection time.

    Derived fresh on each inspection; zero means unknown (or, for the
    dimensions, that the file has no video stream).
    """

    duration: float = 0.0
    """Duration in seconds."""

    bit_rate: int = 0
    """Container bit rate in bits per second."""

    file_size: int = 0
    """Size in bytes as reported by the container."""

    width: int = 0
    height: int = 0


@dataclass(frozen=True)
class Progress:
    """Pipeline state at one instant.

    Percent is monotonic within a phase and may reset to 0 when the phase
    changes. The remaining fields are only meaningful for some phases.
    """

    phase: Phase
    percent: float = 0.0

    # Acquisition (raw strings as printed by yt-dlp)
    speed: str = ""
    eta: str = ""
    total: str = ""

    # Partitioning / transferring
    part_num: int = 0
    total_parts: int = 0

    # Transcoding: codec of the source being converted
    codec: str = ""


ProgressSink = Callable[[Progress], None]
"""Callback receiving progress events. Must return quickly."""


@dataclass(frozen=True)
class PartInfo:
    """One output segment of a split file."""

    path: Path
    part_num: int
    """1-based position; equals filename order and time order."""

    file_size: int
