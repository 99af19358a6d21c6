"""Codec knowledge for the delivery pipeline.

This module is the single source of truth for which codecs the consuming
messaging platform plays inline, and for the fixed encoder settings used
whenever a file has to be re-encoded or segmented.
"""

from __future__ import annotations

from dataclasses import dataclass

# =============================================================================
# Codec Alias Groups
# =============================================================================
# Spellings ffprobe and yt-dlp use for the H.264/AVC family. Anything outside
# this set is treated as incompatible, including empty or unknown codecs.

H264_CODEC_ALIASES: frozenset[str] = frozenset({"h264", "avc", "avc1"})


def normalize_codec(codec: str | None) -> str:
    """Normalize codec name for comparison.

    Args:
        codec: Codec name to normalize.

    Returns:
        Lowercase, stripped codec name (empty string for None).
    """
    if not codec:
        return ""
    return codec.casefold().strip()


def is_h264_compatible(codec: str | None) -> bool:
    """Check whether a video codec plays inline without re-encoding.

    Args:
        codec: Codec identifier as reported by ffprobe (any case).

    Returns:
        True only for the H.264/AVC family. Empty and unknown codecs
        return False so that the caller re-encodes rather than delivering
        a file that would show up as audio-only.
    """
    return normalize_codec(codec) in H264_CODEC_ALIASES


# =============================================================================
# Encoder Settings
# =============================================================================


@dataclass(frozen=True)
class EncoderSettings:
    """Fixed ffmpeg settings for H.264/AAC output.

    Used by both the transcode and partition stages so that split parts and
    re-encoded files share the same codec pair and layout.
    """

    video_encoder: str = "libx264"
    preset: str = "fast"
    crf: int = 23
    audio_encoder: str = "aac"
    movflags: str = "+faststart"
    container_extension: str = ".mp4"

    def output_args(self) -> list[str]:
        """Build the encoder portion of an ffmpeg command line."""
        return [
            "-c:v",
            self.video_encoder,
            "-preset",
            self.preset,
            "-crf",
            str(self.crf),
            "-c:a",
            self.audio_encoder,
            "-movflags",
            self.movflags,
        ]


DEFAULT_ENCODER_SETTINGS = EncoderSettings()

# Container yt-dlp merges separate video/audio downloads into.
MERGE_OUTPUT_FORMAT = "mp4"
