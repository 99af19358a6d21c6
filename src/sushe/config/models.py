"""Configuration data models.

This module defines dataclasses for sushe configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path

MIB = 1024 * 1024

# Local Bot API servers accept uploads up to 2000 MiB; stay below that.
DEFAULT_MAX_UPLOAD_SIZE = 1900 * MIB


@dataclass
class ToolPathsConfig:
    """Configuration for external tool paths.

    All paths are optional. If not specified, tools are looked up in PATH.
    """

    yt_dlp: Path | None = None
    ffmpeg: Path | None = None
    ffprobe: Path | None = None


@dataclass
class PipelineConfig:
    """Tunables for the fetch/transcode/split pipeline."""

    # Root for per-job scratch directories
    download_dir: Path = Path("/tmp/sushe")

    # Files strictly larger than this are split
    max_upload_size: int = DEFAULT_MAX_UPLOAD_SIZE

    # Size each split part aims for (None = max_upload_size)
    target_part_size: int | None = None

    # Height cap passed to yt-dlp's format selection
    max_height: int = 1080

    # Absolute timeout for each tool-backed phase of a job, in seconds
    job_timeout: float = 3600.0

    # Timeout for a single ffprobe call, in seconds
    probe_timeout: float = 60.0

    # Minimum seconds between forwarded progress updates
    progress_interval: float = 2.0

    # Minimum percent advance that forwards an update early
    progress_min_delta: float = 5.0

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.max_upload_size <= 0:
            raise ValueError("max_upload_size must be positive")
        if self.target_part_size is None:
            self.target_part_size = self.max_upload_size
        if not 0 < self.target_part_size <= self.max_upload_size:
            raise ValueError(
                "target_part_size must be positive and not exceed max_upload_size"
            )
        if self.max_height <= 0:
            raise ValueError("max_height must be positive")
        if self.job_timeout <= 0:
            raise ValueError("job_timeout must be positive")
        if self.probe_timeout <= 0:
            raise ValueError("probe_timeout must be positive")
        if self.progress_interval < 0:
            raise ValueError("progress_interval must not be negative")
        if self.progress_min_delta < 0:
            raise ValueError("progress_min_delta must not be negative")

    @property
    def part_size(self) -> int:
        """Resolved target part size in bytes."""
        return self.target_part_size or self.max_upload_size


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class SusheConfig:
    """Main configuration container."""

    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
