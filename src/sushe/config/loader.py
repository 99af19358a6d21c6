"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (SUSHE_*)
3. Config file (~/.sushe/config.toml)
4. Default values

Environment variables:
- SUSHE_CONFIG_PATH: Path to config file (overrides default location)
- SUSHE_YTDLP_PATH / SUSHE_FFMPEG_PATH / SUSHE_FFPROBE_PATH: Tool paths
- SUSHE_DOWNLOAD_DIR: Root for per-job scratch directories
- SUSHE_MAX_UPLOAD_SIZE: Split threshold in bytes
- SUSHE_TARGET_PART_SIZE: Target size of split parts in bytes
- SUSHE_MAX_HEIGHT: Maximum video height requested from yt-dlp
- SUSHE_JOB_TIMEOUT: Timeout in seconds for each tool-backed phase
- SUSHE_PROBE_TIMEOUT: Timeout in seconds for a single ffprobe call
- SUSHE_PROGRESS_INTERVAL / SUSHE_PROGRESS_MIN_DELTA: Status update throttle
- SUSHE_LOG_LEVEL / SUSHE_LOG_FILE / SUSHE_LOG_FORMAT: Logging overrides
- SUSHE_LOG_INCLUDE_STDERR: Also log to stderr when a log file is set
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sushe.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from sushe.config.env import EnvReader
from sushe.config.models import SusheConfig
from sushe.config.toml_parser import load_toml_file

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".sushe"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


def get_default_config_path() -> Path:
    """Get the default config file path.

    Can be overridden by SUSHE_CONFIG_PATH environment variable.
    """
    env_path = os.environ.get("SUSHE_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    cli_source: ConfigSource | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> SusheConfig:
    """Get sushe configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides SUSHE_CONFIG_PATH).
        cli_source: Values given on the command line.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise TomlParseError on config file parse failures.

    Returns:
        SusheConfig with merged configuration.

    Raises:
        TomlParseError: When strict=True and the config file cannot be parsed.
        ValueError: When a merged value is invalid.
    """
    reader = env_reader or EnvReader()
    path = config_path if config_path is not None else get_default_config_path()
    file_config = load_toml_file(path, strict=strict)

    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config), source_name="file")
    builder.apply(source_from_env(reader), source_name="env")
    if cli_source is not None:
        builder.apply(cli_source, source_name="cli")

    config = builder.build()
    logger.debug(
        "Configuration loaded: download_dir=%s (%s), max_upload_size=%d (%s)",
        config.pipeline.download_dir,
        builder.source_of("download_dir"),
        config.pipeline.max_upload_size,
        builder.source_of("max_upload_size"),
    )
    return config
