"""Subprocess utilities for short external tool invocations.

This module provides the standard wrapper used for quick, non-streaming
calls such as ffprobe. Long-running tools with progress output go through
sushe.executor.process instead.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def run_command(
    args: list[str | Path],
    timeout: float = 60,
    errors: str = "replace",
    **kwargs: Any,
) -> tuple[str, str, int]:
    """Run external command with standard error handling.

    Args:
        args: Command and arguments. Path objects are converted to strings.
        timeout: Timeout in seconds (default 60).
        errors: Error handling mode for text decoding (default "replace").
        **kwargs: Additional subprocess.run arguments.

    Returns:
        Tuple of (stdout, stderr, returncode).

    Raises:
        subprocess.TimeoutExpired: If command times out. subprocess.run()
            kills the child before raising.
        OSError: If the executable cannot be started.
    """
    str_args = [str(arg) for arg in args]
    command_name = Path(str_args[0]).name if str_args else "unknown"

    logger.debug(
        "Executing command: %s",
        " ".join(str_args),
        extra={"command": command_name, "arg_count": len(str_args)},
    )

    start_time = time.monotonic()

    try:
        result = subprocess.run(  # nosec B603 - caller validates args
            str_args,
            capture_output=True,
            text=True,
            errors=errors,
            timeout=timeout,
            **kwargs,
        )
    except subprocess.TimeoutExpired:
        logger.warning(
            "Command timed out after %ss: %s",
            timeout,
            " ".join(str_args[:3]) + ("..." if len(str_args) > 3 else ""),
            extra={"command": command_name, "timeout_seconds": timeout},
        )
        raise

    logger.debug(
        "Command completed",
        extra={
            "command": command_name,
            "elapsed_seconds": round(time.monotonic() - start_time, 3),
            "returncode": result.returncode,
        },
    )
    return result.stdout or "", result.stderr or "", result.returncode
