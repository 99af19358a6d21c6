"""Typed access to SUSHE_* environment variables.

EnvReader wraps a mapping (os.environ by default) so the config loader can be
exercised in tests with a plain dict.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})


class EnvReader:
    """Read SUSHE_* overrides with type conversion.

    Unset variables yield the caller's default. Values that fail to convert
    are logged and also yield the default, so a typo in the environment
    never stops the tool from starting.

    Example:
        reader = EnvReader(env={"SUSHE_MAX_HEIGHT": "720"})
        reader.get_int("SUSHE_MAX_HEIGHT", 1080)  # 720
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def _convert(
        self, var: str, default: T | None, kind: str, parse: Callable[[str], T]
    ) -> T | None:
        raw = self._env.get(var)
        if raw is None:
            return default
        try:
            return parse(raw)
        except ValueError:
            logger.warning("Invalid %s value for %s: %s", kind, var, raw)
            return default

    def get_str(self, var: str, default: str | None = None) -> str | None:
        # An empty value is still a value
        return self._env.get(var, default)

    def get_int(self, var: str, default: int | None = None) -> int | None:
        return self._convert(var, default, "integer", int)

    def get_float(self, var: str, default: float | None = None) -> float | None:
        return self._convert(var, default, "float", float)

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Interpret 1/true/yes/on (any case) as True, anything else as False."""
        return self._convert(
            var, default, "boolean", lambda raw: raw.strip().lower() in _TRUE_WORDS
        )

    def get_path(
        self, var: str, must_exist: bool = True, default: Path | None = None
    ) -> Path | None:
        """Read a path, expanding ``~``.

        Tool paths must already exist; the download root may not (it is
        created on first use), which callers express with must_exist=False.
        """
        raw = self._env.get(var)
        if raw is None:
            return default
        path = Path(raw).expanduser()
        if must_exist and not path.exists():
            logger.warning("%s points to a path that does not exist: %s", var, raw)
            return default
        return path
