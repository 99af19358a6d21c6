"""FFprobe-based implementation of MediaInspector protocol."""

import json
import logging
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path

from sushe.core.subprocess_utils import run_command
from sushe.domain.models import MediaInfo
from sushe.executor.exceptions import ProbeError
from sushe.introspector.parsers import parse_codec_output, parse_media_info

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 60.0


class FFprobeInspector:
    """ffprobe-based implementation of MediaInspector protocol.

    Every call runs ffprobe afresh; results are never cached because the
    pipeline inspects files that it has just rewritten.
    """

    def __init__(
        self,
        ffprobe_path: Path | str = "ffprobe",
        timeout: float = DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        """Initialize the inspector.

        Args:
            ffprobe_path: ffprobe executable (resolved path or bare name).
            timeout: Maximum seconds per ffprobe call.
        """
        self.ffprobe_path = str(ffprobe_path)
        self.timeout = timeout

    def get_media_info(self, path: Path) -> MediaInfo:
        """Extract duration, bitrate, size and dimensions from a file.

        Raises:
            ProbeError: If ffprobe cannot start, times out, exits non-zero
                or emits unparseable output.
        """
        args = [
            self.ffprobe_path,
            "-v",
            "quiet",
            "-print_format",
            "json",
            "-show_format",
            "-show_streams",
            str(path),
        ]
        try:
            stdout, stderr, returncode = run_command(args, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise ProbeError(
                f"ffprobe timed out for {path} after {e.timeout}s"
            ) from e
        except OSError as e:
            raise ProbeError(f"Could not run ffprobe: {e}") from e

        if returncode != 0:
            raise ProbeError(
                f"ffprobe failed for {path} (exit {returncode})"
                + (f": {stderr.strip()}" if stderr.strip() else "")
            )

        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise ProbeError(f"Invalid ffprobe output for {path}: {e}") from e
        if not isinstance(data, dict):
            raise ProbeError(f"Invalid ffprobe output for {path}")

        info = parse_media_info(data)
        logger.debug(
            "Probed %s: duration=%.2fs size=%d %dx%d",
            path.name,
            info.duration,
            info.file_size,
            info.width,
            info.height,
        )
        return info

    def get_video_codec(self, path: Path) -> str:
        """Return the codec name of the first video stream.

        Failures are not errors here: an unknown codec is reported as ""
        and treated as incompatible by callers.
        """
        args = [
            self.ffprobe_path,
            "-v",
            "quiet",
            "-select_streams",
            "v:0",
            "-show_entries",
            "stream=codec_name",
            "-of",
            "csv=p=0",
            str(path),
        ]
        try:
            stdout, _, returncode = run_command(args, timeout=self.timeout)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("Could not detect codec of %s: %s", path.name, e)
            return ""
        if returncode != 0:
            logger.warning(
                "Could not detect codec of %s: ffprobe exit %d", path.name, returncode
            )
            return ""
        return parse_codec_output(stdout)
