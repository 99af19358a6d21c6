"""Integration test fixtures that drive real ffmpeg/ffprobe binaries.

This module provides pytest fixtures for:
- Tool availability detection (ffmpeg, ffprobe)
- Test media generation using ffmpeg's lavfi sources
- A fake yt-dlp script that "downloads" a local file
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

CLIP_SECONDS = 10


def _tool_available(name: str) -> bool:
    """Check if an external tool is available in PATH."""
    return shutil.which(name) is not None


@pytest.fixture(scope="session")
def ffmpeg_path() -> Path:
    """Resolved ffmpeg executable; skips the test when it is missing."""
    if not _tool_available("ffmpeg") or not _tool_available("ffprobe"):
        pytest.skip("ffmpeg and ffprobe are required")
    return Path(shutil.which("ffmpeg"))


@pytest.fixture(scope="session")
def ffprobe_path(ffmpeg_path: Path) -> Path:
    return Path(shutil.which("ffprobe"))


def _generate(ffmpeg: Path, output: Path, video_args: list[str]) -> Path:
    cmd = [
        str(ffmpeg),
        "-v",
        "error",
        "-f",
        "lavfi",
        "-i",
        f"testsrc=duration={CLIP_SECONDS}:size=320x240:rate=25",
        "-f",
        "lavfi",
        "-i",
        f"sine=frequency=440:duration={CLIP_SECONDS}",
        *video_args,
        "-c:a",
        "aac",
        "-shortest",
        "-y",
        str(output),
    ]
    result = subprocess.run(cmd, capture_output=True, text=True, timeout=120)
    if result.returncode != 0:
        pytest.skip(f"Could not generate test media: {result.stderr.strip()}")
    return output


@pytest.fixture(scope="session")
def h264_clip(ffmpeg_path: Path, tmp_path_factory: pytest.TempPathFactory) -> Path:
    """A 10 second H.264/AAC MP4 clip."""
    output = tmp_path_factory.mktemp("media") / "h264.mp4"
    return _generate(
        ffmpeg_path, output, ["-c:v", "libx264", "-pix_fmt", "yuv420p"]
    )


@pytest.fixture(scope="session")
def mpeg4_clip(ffmpeg_path: Path, tmp_path_factory: pytest.TempPathFactory) -> Path:
    """A 10 second clip in a codec that needs re-encoding (MPEG-4 Part 2)."""
    output = tmp_path_factory.mktemp("media") / "mpeg4.mp4"
    return _generate(ffmpeg_path, output, ["-c:v", "mpeg4", "-q:v", "5"])


_FAKE_YTDLP = """#!/bin/sh
out=""
while [ $# -gt 0 ]; do
  case "$1" in
    -o) out="$2"; shift ;;
  esac
  shift
done
dir=$(dirname "$out")
echo "[youtube] fake: Downloading webpage"
echo "[download]   0.0% of 1.00MiB at 1.00MiB/s ETA 00:01"
echo "[download]  50.0% of 1.00MiB at 1.00MiB/s ETA 00:01"
cp "{source}" "$dir/{name}"
echo "[download] 100% of 1.00MiB in 00:01"
"""


@pytest.fixture
def fake_ytdlp(temp_dir: Path) -> Callable[[Path, str], Path]:
    """Build a yt-dlp stand-in that copies ``source`` into the workspace."""
    if not _tool_available("sh"):
        pytest.skip("a POSIX shell is required for the fake yt-dlp")

    def build(source: Path, name: str = "Test Clip.mp4") -> Path:
        script = temp_dir / "yt-dlp"
        script.write_text(_FAKE_YTDLP.format(source=source, name=name))
        script.chmod(0o755)
        return script

    return build
