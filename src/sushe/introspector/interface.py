"""MediaInspector interface for video metadata extraction."""

from pathlib import Path
from typing import Protocol

from sushe.domain.models import MediaInfo


class MediaInspector(Protocol):
    """Protocol for media inspection implementations.

    Stages depend on this protocol rather than on FFprobeInspector so tests
    can substitute canned metadata.
    """

    def get_media_info(self, path: Path) -> MediaInfo:
        """Extract container and video stream metadata.

        Raises:
            ProbeError: If the file cannot be inspected.
        """
        ...

    def get_video_codec(self, path: Path) -> str:
        """Return the first video stream's codec name, or "" if unknown."""
        ...
