"""TOML config file loading."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class TomlParseError(Exception):
    """Raised when a config file exists but is not valid TOML."""


def load_toml_file(path: Path, *, strict: bool = False) -> dict[str, Any]:
    """Load and parse a TOML file.

    Args:
        path: Path to the TOML file.
        strict: If True, raise TomlParseError on read or parse failures.
            If False (default), log a warning and return an empty dict.

    Returns:
        Parsed dictionary. Empty dict if the file doesn't exist.

    Raises:
        TomlParseError: When strict=True and the file cannot be parsed.
    """
    if not path.exists():
        logger.debug("TOML file not found: %s", path)
        return {}

    try:
        with path.open("rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise TomlParseError(f"Failed to parse {path}: {e}") from e
        logger.warning("Failed to load TOML file %s: %s", path, e)
        return {}

    logger.debug("Loaded TOML config from %s", path)
    return config
