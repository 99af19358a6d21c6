"""Base class for ffmpeg-backed pipeline stages.

Transcoding and partitioning both run one long ffmpeg invocation whose
stderr carries `time=HH:MM:SS.ms` status markers. This base class owns the
invocation, the marker parsing and the mapping of runner failures onto the
stage's own exception type.
"""

import logging
import threading
from collections.abc import Callable
from pathlib import Path

from sushe.core.codecs import DEFAULT_ENCODER_SETTINGS, EncoderSettings
from sushe.executor.exceptions import ProbeError, StageError
from sushe.executor.ffmpeg_utils import stage_error_for_exit, stage_error_from
from sushe.executor.process import STDERR, ToolResult, ToolRunError, run_tool
from sushe.introspector.ffprobe import FFprobeInspector
from sushe.introspector.interface import MediaInspector
from sushe.tools.progress_lines import EncodeTimeMarker, classify_line

logger = logging.getLogger(__name__)

DEFAULT_STAGE_TIMEOUT = 3600.0


class FFmpegStageBase:
    """Base class for stages that drive a single ffmpeg process.

    Subclasses set ``error_class`` to the StageError subtype they raise.
    """

    error_class: type[StageError] = StageError

    def __init__(
        self,
        ffmpeg_path: Path | str = "ffmpeg",
        inspector: MediaInspector | None = None,
        timeout: float | None = DEFAULT_STAGE_TIMEOUT,
        encoder: EncoderSettings = DEFAULT_ENCODER_SETTINGS,
    ) -> None:
        """Initialize the stage.

        Args:
            ffmpeg_path: ffmpeg executable (resolved path or bare name).
            inspector: Media inspector used to read durations.
            timeout: Maximum seconds for the ffmpeg run. None = no limit.
            encoder: Encoder settings for the output.
        """
        self.ffmpeg_path = str(ffmpeg_path)
        self.inspector = inspector if inspector is not None else FFprobeInspector()
        self.timeout = timeout
        self.encoder = encoder

    def _probe_duration(self, path: Path) -> float:
        """Read the duration for progress math; 0.0 when unavailable."""
        try:
            return self.inspector.get_media_info(path).duration
        except ProbeError as e:
            logger.warning("Could not read duration of %s: %s", path.name, e)
            return 0.0

    def _run_ffmpeg(
        self,
        cmd: list[str],
        description: str,
        on_elapsed: Callable[[float], None] | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ToolResult:
        """Run ffmpeg, reporting encoded position from stderr markers.

        Args:
            cmd: Full ffmpeg command line.
            description: Label for logs and error messages.
            on_elapsed: Called with the output position in seconds for each
                status marker.
            cancel_event: Kills ffmpeg when set.

        Returns:
            The successful ToolResult.

        Raises:
            StageError: (as ``error_class``) on start failure, timeout,
                cancellation or non-zero exit.
        """

        def on_line(stream: str, line: str) -> None:
            if stream != STDERR or on_elapsed is None:
                return
            event = classify_line(line)
            if isinstance(event, EncodeTimeMarker):
                on_elapsed(event.seconds)

        try:
            result = run_tool(
                cmd,
                description=description,
                on_line=on_line,
                timeout=self.timeout,
                cancel_event=cancel_event,
            )
        except ToolRunError as e:
            raise stage_error_from(self.error_class, e) from e

        if not result.success:
            logger.error(
                "%s failed with exit code %d", description, result.returncode
            )
            raise stage_error_for_exit(self.error_class, description, result)

        return result
