"""Partition stage: split an oversized file into upload-sized parts.

One ffmpeg invocation in segment mode writes `<stem>_part000.mp4`,
`<stem>_part001.mp4`, ... beside the input. Keyframes are forced at every
segment boundary so each part starts cleanly and parts have near-equal
duration.
"""

import glob
import logging
import math
import threading
from pathlib import Path

from sushe.core.codecs import DEFAULT_ENCODER_SETTINGS, EncoderSettings
from sushe.domain import PartInfo, Phase, Progress, ProgressSink
from sushe.executor.exceptions import SplitError, ValidationError
from sushe.executor.ffmpeg_base import DEFAULT_STAGE_TIMEOUT, FFmpegStageBase
from sushe.executor.ffmpeg_utils import cleanup_temp_files, emit_progress
from sushe.introspector.interface import MediaInspector
from sushe.tools.progress_lines import active_part, percent_of

logger = logging.getLogger(__name__)

PART_SUFFIX = "_part"


def needs_split(file_size: int, max_upload_size: int) -> bool:
    """True iff a file is strictly larger than the upload limit."""
    return file_size > max_upload_size


def calculate_num_parts(file_size: int, part_size: int) -> int:
    """Number of parts needed so each is at most ``part_size`` on average.

    Raises:
        ValueError: If part_size is not positive.
    """
    if part_size <= 0:
        raise ValueError("part_size must be positive")
    if file_size <= 0:
        return 1
    return math.ceil(file_size / part_size)


def segment_time_arg(segment_duration: float) -> str:
    """Format a segment duration for ffmpeg, rounded up to milliseconds.

    Rounding down could leave a sliver of the file for an extra part.
    """
    return f"{math.ceil(segment_duration * 1000) / 1000:.3f}"


class Partitioner(FFmpegStageBase):
    """Splits a video into N near-equal-duration parts with ffmpeg."""

    error_class = SplitError

    def __init__(
        self,
        part_size: int,
        ffmpeg_path: Path | str = "ffmpeg",
        inspector: MediaInspector | None = None,
        timeout: float | None = DEFAULT_STAGE_TIMEOUT,
        encoder: EncoderSettings = DEFAULT_ENCODER_SETTINGS,
    ) -> None:
        """Initialize the partitioner.

        Args:
            part_size: Target bytes per part.
            ffmpeg_path: ffmpeg executable (resolved path or bare name).
            inspector: Media inspector for duration and size.
            timeout: Maximum seconds for the ffmpeg run. None = no limit.
            encoder: Encoder settings for the parts.
        """
        super().__init__(ffmpeg_path, inspector, timeout, encoder)
        if part_size <= 0:
            raise ValueError("part_size must be positive")
        self.part_size = part_size

    def _part_glob(self, path: Path) -> list[Path]:
        pattern = f"{glob.escape(path.stem)}{PART_SUFFIX}*.mp4"
        return sorted(path.parent.glob(pattern))

    def build_command(
        self, input_path: Path, segment_duration: float
    ) -> list[str]:
        seg = segment_time_arg(segment_duration)
        # ffmpeg expands printf-style sequences in the whole output name
        stem = input_path.stem.replace("%", "%%")
        pattern = input_path.with_name(f"{stem}{PART_SUFFIX}%03d.mp4")
        return [
            self.ffmpeg_path,
            "-i",
            str(input_path),
            *self.encoder.output_args(),
            "-force_key_frames",
            f"expr:gte(t,n_forced*{seg})",
            "-f",
            "segment",
            "-segment_time",
            seg,
            "-reset_timestamps",
            "1",
            "-y",
            str(pattern),
        ]

    def split(
        self,
        path: Path,
        sink: ProgressSink | None = None,
        cancel_event: threading.Event | None = None,
    ) -> tuple[PartInfo, ...]:
        """Split ``path`` into parts of roughly ``part_size`` bytes.

        Returns:
            Parts in filename order, which is also time order.

        Raises:
            ProbeError: If the input cannot be inspected.
            ValidationError: If the duration is unknown or zero.
            SplitError: If ffmpeg fails or writes no parts. Any parts
                already written are removed.
        """
        info = self.inspector.get_media_info(path)
        if info.duration <= 0:
            raise ValidationError(
                f"Cannot split {path.name}: duration is unknown"
            )

        file_size = info.file_size or path.stat().st_size
        total_parts = calculate_num_parts(file_size, self.part_size)
        segment_duration = info.duration / total_parts

        logger.info(
            "Splitting %s into %d parts of %.1fs",
            path.name,
            total_parts,
            segment_duration,
            extra={"file_size": file_size, "part_size": self.part_size},
        )

        emit_progress(
            sink,
            Progress(
                phase=Phase.PARTITIONING,
                percent=0.0,
                part_num=1,
                total_parts=total_parts,
            ),
        )

        def on_elapsed(seconds: float) -> None:
            emit_progress(
                sink,
                Progress(
                    phase=Phase.PARTITIONING,
                    percent=percent_of(seconds, info.duration),
                    part_num=active_part(seconds, segment_duration, total_parts),
                    total_parts=total_parts,
                ),
            )

        try:
            self._run_ffmpeg(
                self.build_command(path, segment_duration),
                "ffmpeg split",
                on_elapsed=on_elapsed,
                cancel_event=cancel_event,
            )
        except SplitError:
            cleanup_temp_files(self._part_glob(path))
            raise

        part_paths = self._part_glob(path)
        if not part_paths:
            raise SplitError(f"Splitting {path.name} produced no parts")

        parts = tuple(
            PartInfo(path=p, part_num=i, file_size=p.stat().st_size)
            for i, p in enumerate(part_paths, start=1)
        )
        if len(parts) != total_parts:
            logger.warning(
                "Expected %d parts, ffmpeg wrote %d", total_parts, len(parts)
            )
        logger.info("Split complete: %d parts", len(parts))
        return parts
