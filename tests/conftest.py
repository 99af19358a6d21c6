"""Shared test fixtures for sushe."""

import shutil
import sys
import tempfile
from pathlib import Path

import pytest

from sushe.domain import MediaInfo, Progress


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


class FakeInspector:
    """MediaInspector returning canned values.

    Records every path it was asked about.
    """

    def __init__(self, info: MediaInfo | None = None, codec: str = "h264") -> None:
        self.info = info if info is not None else MediaInfo()
        self.codec = codec
        self.calls: list[Path] = []

    def get_media_info(self, path: Path) -> MediaInfo:
        self.calls.append(path)
        return self.info

    def get_video_codec(self, path: Path) -> str:
        self.calls.append(path)
        return self.codec


@pytest.fixture
def make_inspector():
    """Factory for FakeInspector instances."""
    return FakeInspector


@pytest.fixture
def fake_inspector() -> FakeInspector:
    """Inspector reporting a 100 second H.264 file."""
    return FakeInspector(MediaInfo(duration=100.0, file_size=1000))


class RecordingSink:
    """Progress sink that keeps every event it receives."""

    def __init__(self) -> None:
        self.events: list[Progress] = []

    def __call__(self, progress: Progress) -> None:
        self.events.append(progress)

    @property
    def phases(self) -> list:
        return [e.phase for e in self.events]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def python_tool():
    """Build a command line that runs a Python snippet as a child process."""

    def build(code: str) -> list[str]:
        return [sys.executable, "-c", code]

    return build
