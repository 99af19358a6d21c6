"""Pure parsing functions for ffprobe JSON output.

These functions transform ffprobe JSON data into sushe domain objects.
All functions are pure (no I/O, no side effects) for easy testing.
"""

import logging
from typing import Any

from sushe.domain.models import MediaInfo
from sushe.executor.exceptions import ProbeError

logger = logging.getLogger(__name__)


def _to_float(value: Any) -> float:
    """Parse a numeric ffprobe field, treating missing or junk as 0."""
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring non-numeric ffprobe value: %r", value)
        return 0.0


def _to_int(value: Any) -> int:
    return int(_to_float(value))


def parse_media_info(data: dict[str, Any]) -> MediaInfo:
    """Build MediaInfo from `ffprobe -show_format -show_streams` JSON.

    ffprobe reports format fields as strings ("12.345000"); unknown or
    malformed values become 0. Dimensions come from the first stream whose
    codec_type is "video"; audio-only files get 0x0.

    Args:
        data: Decoded ffprobe JSON.

    Returns:
        MediaInfo for the file.

    Raises:
        ProbeError: If the "format" section is missing or "streams" is
            malformed.
    """
    fmt = data.get("format")
    if not isinstance(fmt, dict):
        raise ProbeError(
            "Missing 'format' in ffprobe output. "
            "File may be corrupted or not a valid media file."
        )

    streams = data.get("streams") or []
    if not isinstance(streams, list):
        raise ProbeError("Malformed 'streams' in ffprobe output")

    width = height = 0
    for stream in streams:
        if not isinstance(stream, dict):
            raise ProbeError("Malformed stream entry in ffprobe output")
        if stream.get("codec_type") == "video":
            width = _to_int(stream.get("width"))
            height = _to_int(stream.get("height"))
            break

    return MediaInfo(
        duration=max(0.0, _to_float(fmt.get("duration"))),
        bit_rate=_to_int(fmt.get("bit_rate")),
        file_size=_to_int(fmt.get("size")),
        width=width,
        height=height,
    )


def parse_codec_output(output: str) -> str:
    """Parse `-show_entries stream=codec_name -of csv=p=0` output.

    Returns:
        Lowercase codec name of the first line, or "" when empty.
    """
    for line in output.splitlines():
        # csv output may carry a trailing separator for side data
        codec = line.strip().split(",")[0].strip()
        if codec:
            return codec.casefold()
    return ""
