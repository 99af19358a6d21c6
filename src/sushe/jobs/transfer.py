"""Delivery of job output to an upload collaborator.

The messaging client itself is out of scope; it is represented by the
Uploader protocol. This module prepares what every uploader needs: file
names, captions, and a file reader that reports transfer progress as the
uploader consumes it.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Protocol

from sushe.core.formatting import content_type_for, format_file_size
from sushe.domain import Phase, Progress, ProgressSink
from sushe.executor.exceptions import SusheError
from sushe.executor.ffmpeg_utils import emit_progress
from sushe.jobs.pipeline import JobResult

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024


class UploadError(SusheError):
    """Raised by an uploader when a file could not be delivered."""


def part_caption(title: str, part_num: int, total_parts: int) -> str:
    """Caption for one part of a split video."""
    return f"{title}\n\nPart {part_num}/{total_parts}"


def part_file_name(file_name: str, part_num: int) -> str:
    """Delivered file name for one part: `<stem>_part<i>.mp4`."""
    stem = file_name[: -len(".mp4")] if file_name.endswith(".mp4") else file_name
    return f"{stem}_part{part_num}.mp4"


class ProgressReader:
    """Read-only file wrapper that reports how much has been read.

    Each read emits a transferring event. Percent is computed against the
    size given at construction.
    """

    def __init__(
        self,
        fileobj: BinaryIO,
        total_size: int,
        sink: ProgressSink | None = None,
        part_num: int = 0,
        total_parts: int = 0,
    ) -> None:
        self._file = fileobj
        self.total_size = total_size
        self.bytes_read = 0
        self._sink = sink
        self._part_num = part_num
        self._total_parts = total_parts

    @property
    def percent(self) -> float:
        if self.total_size <= 0:
            return 100.0
        return min(100.0, self.bytes_read / self.total_size * 100)

    def read(self, size: int = -1) -> bytes:
        data = self._file.read(size)
        if data:
            self.bytes_read += len(data)
            emit_progress(
                self._sink,
                Progress(
                    phase=Phase.TRANSFERRING,
                    percent=self.percent,
                    total=format_file_size(self.total_size),
                    part_num=self._part_num,
                    total_parts=self._total_parts,
                ),
            )
        return data

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> ProgressReader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass(frozen=True)
class UploadItem:
    """One file to hand to an uploader."""

    path: Path
    file_name: str
    caption: str
    content_type: str
    file_size: int
    width: int = 0
    height: int = 0
    duration: float = 0.0
    part_num: int = 0
    total_parts: int = 0


class Uploader(Protocol):
    """Protocol for the collaborator that delivers files to the user."""

    def upload(
        self, item: UploadItem, reader: ProgressReader, as_video: bool = True
    ) -> str:
        """Upload one file, reading its bytes from ``reader``.

        Args:
            item: What is being uploaded.
            reader: Source of the file's bytes; reading it reports progress.
            as_video: Send as an inline video rather than a plain document.

        Returns:
            Identifier of the delivered file (message id, path, ...).

        Raises:
            UploadError: If delivery failed.
        """
        ...


class DirectoryUploader:
    """Uploader that copies files into a local directory."""

    def __init__(self, target_dir: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.target_dir = target_dir
        self.chunk_size = chunk_size

    def upload(
        self, item: UploadItem, reader: ProgressReader, as_video: bool = True
    ) -> str:
        try:
            self.target_dir.mkdir(parents=True, exist_ok=True)
            destination = self.target_dir / item.file_name
            with destination.open("wb") as out:
                shutil.copyfileobj(reader, out, self.chunk_size)
        except OSError as e:
            raise UploadError(f"Could not write {item.file_name}: {e}") from e
        logger.info("Delivered %s to %s", item.file_name, destination)
        return str(destination)


def upload_items(result: JobResult) -> Iterator[UploadItem]:
    """Yield the files to deliver for a job, in order.

    A split job yields one item per part with a part caption and part file
    name; otherwise the single file is delivered with the title as caption.
    """
    if not result.is_split:
        yield UploadItem(
            path=result.path,
            file_name=result.file_name,
            caption=result.title,
            content_type=result.content_type,
            file_size=result.file_size,
            width=result.width,
            height=result.height,
            duration=result.duration,
        )
        return

    total = len(result.parts)
    for part in result.parts:
        yield UploadItem(
            path=part.path,
            file_name=part_file_name(result.file_name, part.part_num),
            caption=part_caption(result.title, part.part_num, total),
            content_type=content_type_for(part.path),
            file_size=part.file_size,
            width=result.width,
            height=result.height,
            part_num=part.part_num,
            total_parts=total,
        )


def _upload_once(
    uploader: Uploader, item: UploadItem, sink: ProgressSink | None, as_video: bool
) -> str:
    with item.path.open("rb") as f:
        reader = ProgressReader(
            f,
            item.file_size,
            sink,
            part_num=item.part_num,
            total_parts=item.total_parts,
        )
        return uploader.upload(item, reader, as_video=as_video)


def deliver(
    result: JobResult, uploader: Uploader, sink: ProgressSink | None = None
) -> list[str]:
    """Upload every file of a job.

    Each file is first sent as a video; if that fails it is retried once as
    a plain document from a fresh reader.

    Returns:
        Identifiers returned by the uploader, in delivery order.

    Raises:
        UploadError: If a file failed both as video and as document.
    """
    delivered: list[str] = []
    for item in upload_items(result):
        try:
            delivered.append(_upload_once(uploader, item, sink, as_video=True))
        except UploadError as e:
            logger.warning(
                "Failed to send %s as video, retrying as document: %s",
                item.file_name,
                e,
            )
            delivered.append(_upload_once(uploader, item, sink, as_video=False))
    return delivered
