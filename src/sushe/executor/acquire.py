"""Acquisition stage: fetch a video with yt-dlp.

The stage downloads exactly one file into a fresh job workspace, then checks
its codec. A file the messaging platform cannot play inline is re-encoded
and the original removed, so callers only ever see H.264 output.
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from sushe.core.codecs import MERGE_OUTPUT_FORMAT, is_h264_compatible
from sushe.core.formatting import title_from_path
from sushe.domain import Phase, Progress, ProgressSink
from sushe.executor.exceptions import FetchError
from sushe.executor.ffmpeg_base import DEFAULT_STAGE_TIMEOUT
from sushe.executor.ffmpeg_utils import (
    emit_progress,
    stage_error_for_exit,
    stage_error_from,
)
from sushe.executor.process import ToolRunError, run_tool
from sushe.executor.transcode import Transcoder
from sushe.executor.workspace import JobWorkspace
from sushe.introspector.ffprobe import FFprobeInspector
from sushe.introspector.interface import MediaInspector
from sushe.tools.progress_lines import (
    DownloadComplete,
    DownloadProgress,
    LineEvent,
    MergeStarted,
    classify_line,
)

logger = logging.getLogger(__name__)

# yt-dlp output template, relative to the workspace
OUTPUT_TEMPLATE = "%(title).100s.%(ext)s"

# Leftovers of an interrupted or in-flight yt-dlp download
_PARTIAL_SUFFIXES = frozenset({".part", ".ytdl", ".temp"})


def build_format_selector(max_height: int) -> str:
    """Build yt-dlp's format preference chain.

    Preference: H.264 video with AAC audio, then any AVC video with any
    audio, then any video with audio, then the best single file, all capped
    at ``max_height``. The final uncapped "best" accepts whatever exists.
    """
    h = max_height
    return "/".join(
        [
            f"bestvideo[vcodec^=avc1][height<={h}]+bestaudio[acodec^=mp4a]",
            f"bestvideo[vcodec^=avc][height<={h}]+bestaudio",
            f"bestvideo[height<={h}]+bestaudio",
            f"best[height<={h}]",
            "best",
        ]
    )


def progress_for_event(event: LineEvent) -> Progress | None:
    """Map a classified yt-dlp line to a progress event, if it is one."""
    if isinstance(event, DownloadProgress):
        return Progress(
            phase=Phase.ACQUIRING,
            percent=event.percent,
            total=event.total,
            speed=event.speed,
            eta=event.eta,
        )
    if isinstance(event, DownloadComplete):
        return Progress(phase=Phase.ACQUIRING, percent=100.0, total=event.total)
    if isinstance(event, MergeStarted):
        return Progress(phase=Phase.MERGING, percent=100.0)
    return None


def find_downloaded_file(workdir: Path) -> Path | None:
    """Return the downloaded media file in ``workdir``, if any."""
    candidates = sorted(
        p
        for p in workdir.iterdir()
        if p.is_file() and p.suffix not in _PARTIAL_SUFFIXES
    )
    return candidates[0] if candidates else None


@dataclass(frozen=True)
class AcquiredMedia:
    """A downloaded, H.264-compatible file inside its job workspace."""

    workspace: JobWorkspace
    path: Path
    title: str
    source_codec: str
    transcoded: bool = False


class Acquirer:
    """Downloads one video per call with yt-dlp."""

    def __init__(
        self,
        download_dir: Path,
        yt_dlp_path: Path | str = "yt-dlp",
        inspector: MediaInspector | None = None,
        transcoder: Transcoder | None = None,
        max_height: int = 1080,
        timeout: float | None = DEFAULT_STAGE_TIMEOUT,
    ) -> None:
        """Initialize the acquirer.

        Args:
            download_dir: Root under which job workspaces are created.
            yt_dlp_path: yt-dlp executable (resolved path or bare name).
            inspector: Media inspector used for the codec check.
            transcoder: Stage used when the codec is incompatible.
            max_height: Resolution cap for format selection.
            timeout: Maximum seconds for the download. None = no limit.
        """
        self.download_dir = download_dir
        self.yt_dlp_path = str(yt_dlp_path)
        self.inspector = inspector if inspector is not None else FFprobeInspector()
        self.transcoder = (
            transcoder
            if transcoder is not None
            else Transcoder(inspector=self.inspector, timeout=timeout)
        )
        self.max_height = max_height
        self.timeout = timeout

    def build_command(self, workdir: Path, url: str) -> list[str]:
        return [
            self.yt_dlp_path,
            "-f",
            build_format_selector(self.max_height),
            "--merge-output-format",
            MERGE_OUTPUT_FORMAT,
            "--no-playlist",
            "-o",
            str(workdir / OUTPUT_TEMPLATE),
            "--no-warnings",
            "--progress",
            "--newline",
            url,
        ]

    def acquire(
        self,
        url: str,
        sink: ProgressSink | None = None,
        cancel_event: threading.Event | None = None,
        workspace: JobWorkspace | None = None,
    ) -> AcquiredMedia:
        """Download ``url`` into a fresh workspace.

        Args:
            url: Page or media URL handed to yt-dlp.
            sink: Progress callback.
            cancel_event: Kills the running tool when set.
            workspace: Empty workspace to download into. A new one is
                created under ``download_dir`` when omitted.

        Returns:
            The acquired media. The caller owns the workspace.

        Raises:
            FetchError: If yt-dlp fails, times out, is cancelled or
                downloads nothing.
            TranscodeError: If the downloaded file needed re-encoding and
                that failed.

        On any failure the workspace is removed before the error surfaces.
        """
        if workspace is None:
            workspace = JobWorkspace.create(self.download_dir)
        try:
            return self._acquire_into(workspace, url, sink, cancel_event)
        except BaseException:
            workspace.cleanup()
            raise

    def _acquire_into(
        self,
        workspace: JobWorkspace,
        url: str,
        sink: ProgressSink | None,
        cancel_event: threading.Event | None,
    ) -> AcquiredMedia:
        logger.info("Downloading %s", url, extra={"workdir": str(workspace.path)})

        def on_line(stream: str, line: str) -> None:
            progress = progress_for_event(classify_line(line))
            if progress is not None:
                emit_progress(sink, progress)

        try:
            result = run_tool(
                self.build_command(workspace.path, url),
                description="yt-dlp download",
                on_line=on_line,
                timeout=self.timeout,
                cancel_event=cancel_event,
                cwd=workspace.path,
            )
        except ToolRunError as e:
            raise stage_error_from(FetchError, e) from e

        if not result.success:
            raise stage_error_for_exit(FetchError, "yt-dlp", result)

        path = find_downloaded_file(workspace.path)
        if path is None:
            raise FetchError(
                "yt-dlp finished but no file was downloaded", result.diagnostic_tail()
            )

        title = title_from_path(path)
        codec = self.inspector.get_video_codec(path)
        logger.info(
            "Downloaded %s (%d bytes, codec %s)",
            path.name,
            path.stat().st_size,
            codec or "unknown",
        )

        if is_h264_compatible(codec):
            return AcquiredMedia(
                workspace=workspace, path=path, title=title, source_codec=codec
            )

        label = codec or "unknown"
        logger.info("Codec %s is not H.264, re-encoding", label)
        new_path = self.transcoder.transcode(
            path, sink=sink, cancel_event=cancel_event, source_codec=label
        )
        path.unlink()
        return AcquiredMedia(
            workspace=workspace,
            path=new_path,
            title=title,
            source_codec=label,
            transcoded=True,
        )
