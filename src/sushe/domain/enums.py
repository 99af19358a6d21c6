"""Domain enums for the delivery pipeline."""

from enum import Enum


class Phase(Enum):
    """Named stage of a job's lifecycle, used to tag progress events.

    Members are declared in pipeline order; ``rank`` exposes that order so
    progress consumers can tell a phase transition from a regression.
    """

    ACQUIRING = "acquiring"  # yt-dlp is downloading stream data
    MERGING = "merging"  # yt-dlp is muxing video and audio
    TRANSCODING = "transcoding"  # ffmpeg re-encodes to H.264
    PARTITIONING = "partitioning"  # ffmpeg splits into upload-sized parts
    TRANSFERRING = "transferring"  # uploader is reading the output file(s)

    @property
    def rank(self) -> int:
        """Zero-based position of this phase in pipeline order."""
        return list(Phase).index(self)
