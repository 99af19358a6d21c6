"""Configuration builder with explicit layering.

This module provides ConfigBuilder for building SusheConfig by composing
multiple configuration sources with explicit precedence handling.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from sushe.config.env import EnvReader
from sushe.config.models import (
    LoggingConfig,
    PipelineConfig,
    SusheConfig,
    ToolPathsConfig,
)


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None values indicate "not specified in this source" and will not
    override values from lower-precedence sources.
    """

    # Tool paths
    yt_dlp_path: Path | None = None
    ffmpeg_path: Path | None = None
    ffprobe_path: Path | None = None

    # Pipeline config
    download_dir: Path | None = None
    max_upload_size: int | None = None
    target_part_size: int | None = None
    max_height: int | None = None
    job_timeout: float | None = None
    probe_timeout: float | None = None
    progress_interval: float | None = None
    progress_min_delta: float | None = None

    # Logging config
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds SusheConfig by layering ConfigSources with precedence.

    Later sources override earlier ones (for non-None values).

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        """Initialize the builder with no values set."""
        self._values: dict[str, Any] = {}
        self._sources: dict[str, str] = {}

    def apply(self, source: ConfigSource, source_name: str = "") -> None:
        """Apply configuration source, overriding existing values.

        Args:
            source: Configuration source to apply.
            source_name: Label recorded for each value this source sets
                (e.g. "file", "env", "cli").
        """
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value
                self._sources[field_obj.name] = source_name

    def source_of(self, key: str) -> str:
        """Return which source set a key, or "default" if none did."""
        return self._sources.get(key) or "default"

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> SusheConfig:
        """Build the final SusheConfig with defaults for unset values.

        Raises:
            ValueError: If a merged value fails model validation.
        """
        tools = ToolPathsConfig(
            yt_dlp=self._get("yt_dlp_path", None),
            ffmpeg=self._get("ffmpeg_path", None),
            ffprobe=self._get("ffprobe_path", None),
        )

        defaults = PipelineConfig()
        pipeline = PipelineConfig(
            download_dir=self._get("download_dir", defaults.download_dir),
            max_upload_size=self._get("max_upload_size", defaults.max_upload_size),
            target_part_size=self._get("target_part_size", None),
            max_height=self._get("max_height", defaults.max_height),
            job_timeout=self._get("job_timeout", defaults.job_timeout),
            probe_timeout=self._get("probe_timeout", defaults.probe_timeout),
            progress_interval=self._get(
                "progress_interval", defaults.progress_interval
            ),
            progress_min_delta=self._get(
                "progress_min_delta", defaults.progress_min_delta
            ),
        )

        logging_config = LoggingConfig(
            level=self._get("logging_level", "info"),
            file=self._get("logging_file", None),
            format=self._get("logging_format", "text"),
            include_stderr=self._get("logging_include_stderr", False),
            max_bytes=self._get("logging_max_bytes", 10_485_760),
            backup_count=self._get("logging_backup_count", 5),
        )

        return SusheConfig(tools=tools, pipeline=pipeline, logging=logging_config)


def _optional_path(value: str | None) -> Path | None:
    return Path(value).expanduser() if value else None


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create ConfigSource from parsed TOML config file.

    Expected layout::

        [tools]
        yt_dlp = "/usr/local/bin/yt-dlp"

        [pipeline]
        max_upload_size = 1992294400
        max_height = 720

        [logging]
        level = "debug"
    """
    tools = file_config.get("tools", {})
    pipeline = file_config.get("pipeline", {})
    logging_conf = file_config.get("logging", {})

    return ConfigSource(
        yt_dlp_path=_optional_path(tools.get("yt_dlp")),
        ffmpeg_path=_optional_path(tools.get("ffmpeg")),
        ffprobe_path=_optional_path(tools.get("ffprobe")),
        download_dir=_optional_path(pipeline.get("download_dir")),
        max_upload_size=pipeline.get("max_upload_size"),
        target_part_size=pipeline.get("target_part_size"),
        max_height=pipeline.get("max_height"),
        job_timeout=pipeline.get("job_timeout"),
        probe_timeout=pipeline.get("probe_timeout"),
        progress_interval=pipeline.get("progress_interval"),
        progress_min_delta=pipeline.get("progress_min_delta"),
        logging_level=logging_conf.get("level"),
        logging_file=_optional_path(logging_conf.get("file")),
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create ConfigSource from SUSHE_* environment variables."""
    return ConfigSource(
        yt_dlp_path=reader.get_path("SUSHE_YTDLP_PATH"),
        ffmpeg_path=reader.get_path("SUSHE_FFMPEG_PATH"),
        ffprobe_path=reader.get_path("SUSHE_FFPROBE_PATH"),
        download_dir=reader.get_path("SUSHE_DOWNLOAD_DIR", must_exist=False),
        max_upload_size=reader.get_int("SUSHE_MAX_UPLOAD_SIZE"),
        target_part_size=reader.get_int("SUSHE_TARGET_PART_SIZE"),
        max_height=reader.get_int("SUSHE_MAX_HEIGHT"),
        job_timeout=reader.get_float("SUSHE_JOB_TIMEOUT"),
        probe_timeout=reader.get_float("SUSHE_PROBE_TIMEOUT"),
        progress_interval=reader.get_float("SUSHE_PROGRESS_INTERVAL"),
        progress_min_delta=reader.get_float("SUSHE_PROGRESS_MIN_DELTA"),
        logging_level=reader.get_str("SUSHE_LOG_LEVEL"),
        logging_file=reader.get_path("SUSHE_LOG_FILE", must_exist=False),
        logging_format=reader.get_str("SUSHE_LOG_FORMAT"),
        logging_include_stderr=reader.get_bool("SUSHE_LOG_INCLUDE_STDERR"),
    )
