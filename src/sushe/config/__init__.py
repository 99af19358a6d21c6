"""Configuration management for sushe.

Precedence (highest first): CLI flags, SUSHE_* environment variables,
config file (~/.sushe/config.toml), defaults.
"""

from sushe.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from sushe.config.env import EnvReader
from sushe.config.loader import get_config, get_default_config_path
from sushe.config.models import (
    LoggingConfig,
    PipelineConfig,
    SusheConfig,
    ToolPathsConfig,
)
from sushe.config.toml_parser import TomlParseError, load_toml_file

__all__ = [
    # Models
    "LoggingConfig",
    "PipelineConfig",
    "SusheConfig",
    "ToolPathsConfig",
    # Loader
    "get_config",
    "get_default_config_path",
    "load_toml_file",
    "TomlParseError",
    # Builder
    "ConfigBuilder",
    "ConfigSource",
    "EnvReader",
    "source_from_env",
    "source_from_file",
]
