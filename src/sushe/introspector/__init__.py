"""Media inspection via ffprobe."""

from sushe.introspector.ffprobe import FFprobeInspector
from sushe.introspector.interface import MediaInspector
from sushe.introspector.parsers import parse_codec_output, parse_media_info

__all__ = [
    "FFprobeInspector",
    "MediaInspector",
    "parse_codec_output",
    "parse_media_info",
]
