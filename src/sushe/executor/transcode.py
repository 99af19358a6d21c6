"""Transcode stage: convert a file to H.264/AAC.

The consuming platform only plays H.264 video inline. Files downloaded in
another codec (VP9, AV1) are re-encoded beside the original as
`<stem>_h264.mp4`; the original is left in place for the caller to remove.
"""

import logging
import threading
from pathlib import Path

from sushe.domain import Phase, Progress, ProgressSink
from sushe.executor.exceptions import TranscodeError
from sushe.executor.ffmpeg_base import FFmpegStageBase
from sushe.executor.ffmpeg_utils import (
    cleanup_temp_file,
    emit_progress,
    validate_output,
)
from sushe.tools.progress_lines import percent_of

logger = logging.getLogger(__name__)

TRANSCODE_SUFFIX = "_h264"


class Transcoder(FFmpegStageBase):
    """Re-encodes incompatible video to H.264/AAC with ffmpeg."""

    error_class = TranscodeError

    def output_path_for(self, path: Path) -> Path:
        """Return where the transcoded copy of ``path`` is written."""
        return path.with_name(
            f"{path.stem}{TRANSCODE_SUFFIX}{self.encoder.container_extension}"
        )

    def build_command(self, input_path: Path, output_path: Path) -> list[str]:
        return [
            self.ffmpeg_path,
            "-i",
            str(input_path),
            *self.encoder.output_args(),
            "-y",
            str(output_path),
        ]

    def transcode(
        self,
        path: Path,
        sink: ProgressSink | None = None,
        cancel_event: threading.Event | None = None,
        source_codec: str = "",
    ) -> Path:
        """Re-encode ``path`` to H.264/AAC.

        Emits a transcoding event at 0% naming the source codec before any
        work starts, then percent events derived from ffmpeg's position.
        An unknown duration still transcodes, reporting 0%.

        Args:
            path: Input file. Never deleted by this method.
            sink: Progress callback.
            cancel_event: Kills ffmpeg when set.
            source_codec: Codec label of the input, for status display.

        Returns:
            Path to the new `<stem>_h264.mp4` file.

        Raises:
            TranscodeError: If ffmpeg fails, times out, is cancelled or
                produces no output. Partial output is removed.
        """
        emit_progress(
            sink, Progress(phase=Phase.TRANSCODING, percent=0.0, codec=source_codec)
        )

        duration = self._probe_duration(path)
        output_path = self.output_path_for(path)

        logger.info(
            "Transcoding %s (%s) to H.264",
            path.name,
            source_codec or "unknown codec",
            extra={"duration": duration, "output": output_path.name},
        )

        def on_elapsed(seconds: float) -> None:
            emit_progress(
                sink,
                Progress(
                    phase=Phase.TRANSCODING,
                    percent=percent_of(seconds, duration),
                    codec=source_codec,
                ),
            )

        try:
            self._run_ffmpeg(
                self.build_command(path, output_path),
                "ffmpeg transcode",
                on_elapsed=on_elapsed,
                cancel_event=cancel_event,
            )
        except TranscodeError:
            cleanup_temp_file(output_path)
            raise

        is_valid, error_message = validate_output(output_path)
        if not is_valid:
            cleanup_temp_file(output_path)
            raise TranscodeError(error_message or "Transcode produced no output")

        logger.info(
            "Transcode complete: %s (%d bytes)",
            output_path.name,
            output_path.stat().st_size,
        )
        return output_path
