"""Job orchestration for sushe.

This package runs whole jobs on top of the executor stages:
- pipeline: Pipeline and JobResult
- progress: rate-limited progress forwarding
- transfer: delivery of results through an Uploader
"""

from sushe.jobs.pipeline import JobResult, Pipeline
from sushe.jobs.progress import RateLimitedSink
from sushe.jobs.transfer import (
    DirectoryUploader,
    ProgressReader,
    UploadError,
    Uploader,
    UploadItem,
    deliver,
    part_caption,
    part_file_name,
    upload_items,
)

__all__ = [
    "DirectoryUploader",
    "JobResult",
    "Pipeline",
    "ProgressReader",
    "RateLimitedSink",
    "UploadError",
    "UploadItem",
    "Uploader",
    "deliver",
    "part_caption",
    "part_file_name",
    "upload_items",
]
