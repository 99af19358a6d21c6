"""End-to-end job orchestration.

A Pipeline turns one URL into one or more deliverable files:

    acquire (yt-dlp) -> codec check -> [transcode] -> size check -> [split]

Every stage reports through a single progress sink, wrapped in a
RateLimitedSink so the consumer sees a throttled, ordered stream.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from sushe.config.models import PipelineConfig, SusheConfig
from sushe.core.formatting import content_type_for
from sushe.domain import MediaInfo, PartInfo, ProgressSink
from sushe.executor.acquire import Acquirer
from sushe.executor.exceptions import FetchError, ProbeError
from sushe.executor.partition import Partitioner, needs_split
from sushe.executor.transcode import Transcoder
from sushe.executor.workspace import JobWorkspace
from sushe.introspector.ffprobe import FFprobeInspector
from sushe.introspector.interface import MediaInspector
from sushe.jobs.progress import RateLimitedSink
from sushe.logging.context import job_context

logger = logging.getLogger(__name__)


@dataclass
class JobResult:
    """Deliverable output of one job.

    The files live in the job's workspace until ``cleanup()`` is called.
    """

    path: Path
    file_name: str
    title: str
    file_size: int
    content_type: str
    duration: float = 0.0
    width: int = 0
    height: int = 0
    parts: tuple[PartInfo, ...] = ()
    workspace: JobWorkspace | None = field(default=None, repr=False)

    @property
    def is_split(self) -> bool:
        return bool(self.parts)

    @property
    def job_id(self) -> str:
        return self.workspace.job_id if self.workspace else ""

    def cleanup(self) -> None:
        """Delete the job's workspace. Safe to call more than once."""
        if self.workspace is not None:
            self.workspace.cleanup()


class Pipeline:
    """Runs the fetch/transcode/split pipeline for one job per call.

    Stages are built from configuration unless passed in explicitly.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        *,
        inspector: MediaInspector | None = None,
        acquirer: Acquirer | None = None,
        partitioner: Partitioner | None = None,
        yt_dlp_path: Path | str = "yt-dlp",
        ffmpeg_path: Path | str = "ffmpeg",
        ffprobe_path: Path | str = "ffprobe",
    ) -> None:
        self.config = config if config is not None else PipelineConfig()
        cfg = self.config
        self.inspector = (
            inspector
            if inspector is not None
            else FFprobeInspector(ffprobe_path, timeout=cfg.probe_timeout)
        )
        self.acquirer = (
            acquirer
            if acquirer is not None
            else Acquirer(
                cfg.download_dir,
                yt_dlp_path=yt_dlp_path,
                inspector=self.inspector,
                transcoder=Transcoder(
                    ffmpeg_path, inspector=self.inspector, timeout=cfg.job_timeout
                ),
                max_height=cfg.max_height,
                timeout=cfg.job_timeout,
            )
        )
        self.partitioner = (
            partitioner
            if partitioner is not None
            else Partitioner(
                cfg.part_size,
                ffmpeg_path,
                inspector=self.inspector,
                timeout=cfg.job_timeout,
            )
        )

    @classmethod
    def from_config(
        cls, config: SusheConfig, *, resolve_tools: bool = True
    ) -> Pipeline:
        """Build a pipeline with tool paths resolved from configuration.

        Raises:
            ToolNotFoundError: If resolve_tools is set and a tool is missing.
        """
        if not resolve_tools:
            return cls(config.pipeline)

        from sushe.tools.detection import require_tool

        return cls(
            config.pipeline,
            yt_dlp_path=require_tool("yt-dlp", config.tools),
            ffmpeg_path=require_tool("ffmpeg", config.tools),
            ffprobe_path=require_tool("ffprobe", config.tools),
        )

    def wrap_sink(self, sink: ProgressSink | None) -> ProgressSink | None:
        """Apply the configured rate limit to a consumer sink."""
        if sink is None:
            return None
        return RateLimitedSink(
            sink,
            min_interval=self.config.progress_interval,
            min_delta=self.config.progress_min_delta,
        )

    def _media_info(self, path: Path) -> MediaInfo:
        try:
            return self.inspector.get_media_info(path)
        except ProbeError as e:
            logger.warning("Could not read metadata of %s: %s", path.name, e)
            return MediaInfo(file_size=path.stat().st_size)

    def process(
        self,
        url: str,
        sink: ProgressSink | None = None,
        cancel_event: threading.Event | None = None,
    ) -> JobResult:
        """Run one job.

        Args:
            url: Source page or media URL.
            sink: Consumer progress callback; rate limited here.
            cancel_event: Aborts the running stage when set.

        Returns:
            JobResult whose ``parts`` is empty unless the file was split.
            The caller must call ``cleanup()`` once delivery is done.

        Raises:
            SusheError: Any stage failure. The workspace is already
                removed when this is raised.
        """
        limited = self.wrap_sink(sink)
        try:
            workspace = JobWorkspace.create(self.config.download_dir)
        except OSError as e:
            raise FetchError(f"Could not create a job directory: {e}") from e

        with job_context(workspace.job_id, url):
            logger.info("Job started for %s", url)
            media = self.acquirer.acquire(
                url, sink=limited, cancel_event=cancel_event, workspace=workspace
            )
            try:
                return self._finish(
                    media.path, media.title, workspace, limited, cancel_event
                )
            except BaseException:
                logger.info("Job failed, removing workspace")
                workspace.cleanup()
                raise

    def _finish(
        self,
        path: Path,
        title: str,
        workspace: JobWorkspace,
        sink: ProgressSink | None,
        cancel_event: threading.Event | None,
    ) -> JobResult:
        file_size = path.stat().st_size
        info = self._media_info(path)

        parts: tuple[PartInfo, ...] = ()
        if needs_split(file_size, self.config.max_upload_size):
            logger.info(
                "File is %d bytes, over the %d byte limit; splitting",
                file_size,
                self.config.max_upload_size,
            )
            parts = self.partitioner.split(path, sink=sink, cancel_event=cancel_event)

        result = JobResult(
            path=path,
            file_name=path.name,
            title=title,
            file_size=file_size,
            content_type=content_type_for(path),
            duration=info.duration,
            width=info.width,
            height=info.height,
            parts=parts,
            workspace=workspace,
        )
        logger.info(
            "Job ready: %s",
            result.file_name,
            extra={"file_size": file_size, "parts": len(parts)},
        )
        return result
