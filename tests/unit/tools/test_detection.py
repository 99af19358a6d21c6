"""Tests for external tool detection."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from sushe.config.models import ToolPathsConfig
from sushe.tools.detection import (
    ToolNotFoundError,
    detect_tools,
    find_tool,
    require_tool,
)


class TestFindTool:
    """Tests for find_tool."""

    def test_configured_file_wins(self, temp_dir: Path) -> None:
        tool = temp_dir / "ffmpeg"
        tool.write_text("#!/bin/sh\n")
        with patch("sushe.tools.detection.shutil.which") as mock_which:
            assert find_tool("ffmpeg", tool) == tool
            mock_which.assert_not_called()

    def test_falls_back_to_path(self, temp_dir: Path, caplog) -> None:
        """A configured path that is not a file logs a warning and uses PATH."""
        missing = temp_dir / "nope"
        with (
            patch(
                "sushe.tools.detection.shutil.which", return_value="/usr/bin/ffmpeg"
            ),
            caplog.at_level(logging.WARNING, logger="sushe.tools.detection"),
        ):
            assert find_tool("ffmpeg", missing) == Path("/usr/bin/ffmpeg")
        assert "not a file" in caplog.text

    def test_not_found(self) -> None:
        with patch("sushe.tools.detection.shutil.which", return_value=None):
            assert find_tool("yt-dlp") is None


class TestRequireTool:
    """Tests for require_tool."""

    def test_uses_configured_path(self, temp_dir: Path) -> None:
        tool = temp_dir / "yt-dlp"
        tool.write_text("#!/bin/sh\n")
        tools = ToolPathsConfig(yt_dlp=tool)
        assert require_tool("yt-dlp", tools) == tool

    def test_raises_when_missing(self) -> None:
        with patch("sushe.tools.detection.shutil.which", return_value=None):
            with pytest.raises(ToolNotFoundError, match="SUSHE_YTDLP_PATH"):
                require_tool("yt-dlp")


class TestDetectTools:
    """Tests for detect_tools."""

    def test_reports_versions(self) -> None:
        outputs = {
            "/bin/yt-dlp": ("2024.08.06\n", "", 0),
            "/bin/ffmpeg": ("ffmpeg version 6.1.1 Copyright (c)\n", "", 0),
            "/bin/ffprobe": ("ffprobe version 6.1.1-3 Copyright (c)\n", "", 0),
        }

        def fake_run(args, timeout):
            return outputs[str(args[0])]

        with (
            patch(
                "sushe.tools.detection.shutil.which",
                side_effect=lambda name: f"/bin/{name}",
            ),
            patch("sushe.tools.detection.run_command", side_effect=fake_run),
        ):
            tools = detect_tools()

        assert [t.name for t in tools] == ["yt-dlp", "ffmpeg", "ffprobe"]
        assert [t.version for t in tools] == ["2024.08.06", "6.1.1", "6.1.1-3"]
        assert all(t.is_available() for t in tools)

    def test_missing_tool_has_no_version(self) -> None:
        with (
            patch("sushe.tools.detection.shutil.which", return_value=None),
            patch("sushe.tools.detection.run_command") as mock_run,
        ):
            tools = detect_tools()

        assert not any(t.is_available() for t in tools)
        assert all(t.version is None for t in tools)
        mock_run.assert_not_called()

    def test_version_probe_failure(self) -> None:
        with (
            patch("sushe.tools.detection.shutil.which", return_value="/bin/x"),
            patch("sushe.tools.detection.run_command", side_effect=OSError("boom")),
        ):
            tools = detect_tools()

        assert all(t.is_available() for t in tools)
        assert all(t.version is None for t in tools)
