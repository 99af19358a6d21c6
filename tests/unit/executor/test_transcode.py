"""Tests for the transcode stage."""

from pathlib import Path
from unittest.mock import patch

import pytest

from sushe.domain import MediaInfo, Phase
from sushe.executor.exceptions import ProbeError, TranscodeError
from sushe.executor.process import ToolResult, ToolTimeoutError
from sushe.executor.transcode import Transcoder


def _fake_ffmpeg(lines: list[str], returncode: int = 0, write_output: bool = True):
    """Build a run_tool replacement that writes the output file."""

    def run(cmd, *, description, on_line, timeout, cancel_event):
        for line in lines:
            on_line("stderr", line)
        if write_output:
            Path(cmd[-1]).write_bytes(b"h264 data")
        return ToolResult(returncode=returncode, stderr_tail=lines[-3:])

    return run


@pytest.fixture
def source(temp_dir: Path) -> Path:
    path = temp_dir / "My Video.webm"
    path.write_bytes(b"vp9 data")
    return path


class TestTranscoder:
    """Tests for Transcoder.transcode."""

    def test_output_path(self, source: Path, fake_inspector) -> None:
        transcoder = Transcoder(inspector=fake_inspector)
        assert transcoder.output_path_for(source) == source.with_name(
            "My Video_h264.mp4"
        )

    def test_command(self, source: Path, fake_inspector) -> None:
        transcoder = Transcoder("/opt/ffmpeg", inspector=fake_inspector)
        cmd = transcoder.build_command(source, Path("/out.mp4"))
        assert cmd == [
            "/opt/ffmpeg",
            "-i",
            str(source),
            "-c:v",
            "libx264",
            "-preset",
            "fast",
            "-crf",
            "23",
            "-c:a",
            "aac",
            "-movflags",
            "+faststart",
            "-y",
            "/out.mp4",
        ]

    def test_success_reports_progress(self, source: Path, fake_inspector, sink) -> None:
        transcoder = Transcoder(inspector=fake_inspector)
        lines = [
            "Input #0, matroska,webm, from 'My Video.webm':",
            "frame=  10 fps=0.0 q=28.0 size=0kB time=00:00:25.00 bitrate=0.0kbits/s",
            "frame=  20 fps=0.0 q=28.0 size=0kB time=00:00:50.00 bitrate=0.0kbits/s",
            "frame=  40 fps=0.0 q=28.0 size=0kB time=00:01:40.50 bitrate=0.0kbits/s",
        ]
        with patch("sushe.executor.ffmpeg_base.run_tool", side_effect=_fake_ffmpeg(lines)):
            output = transcoder.transcode(source, sink=sink, source_codec="vp9")

        assert output == source.with_name("My Video_h264.mp4")
        assert output.read_bytes() == b"h264 data"
        assert source.exists()
        assert all(e.phase is Phase.TRANSCODING for e in sink.events)
        assert all(e.codec == "vp9" for e in sink.events)
        assert [e.percent for e in sink.events] == [0.0, 25.0, 50.0, 100.0]

    def test_unknown_duration_reports_zero(self, source: Path, make_inspector, sink) -> None:
        class FailingInspector(make_inspector):
            def get_media_info(self, path):
                raise ProbeError("no duration")

        transcoder = Transcoder(inspector=FailingInspector())
        lines = ["size=0kB time=00:00:25.00 bitrate=0.0kbits/s"]
        with patch("sushe.executor.ffmpeg_base.run_tool", side_effect=_fake_ffmpeg(lines)):
            transcoder.transcode(source, sink=sink)

        assert [e.percent for e in sink.events] == [0.0, 0.0]

    def test_failure_removes_partial_output(self, source: Path, fake_inspector) -> None:
        transcoder = Transcoder(inspector=fake_inspector)
        lines = ["Conversion failed!"]
        with patch(
            "sushe.executor.ffmpeg_base.run_tool",
            side_effect=_fake_ffmpeg(lines, returncode=1),
        ):
            with pytest.raises(TranscodeError) as exc_info:
                transcoder.transcode(source)

        assert not transcoder.output_path_for(source).exists()
        assert source.exists()
        assert exc_info.value.tool_output == ["Conversion failed!"]

    def test_timeout(self, source: Path, fake_inspector) -> None:
        transcoder = Transcoder(inspector=fake_inspector, timeout=1)
        with patch(
            "sushe.executor.ffmpeg_base.run_tool",
            side_effect=ToolTimeoutError("ffmpeg transcode timed out after 1 seconds"),
        ):
            with pytest.raises(TranscodeError) as exc_info:
                transcoder.transcode(source)

        assert exc_info.value.timed_out is True

    def test_empty_output_is_failure(self, source: Path, fake_inspector) -> None:
        transcoder = Transcoder(inspector=fake_inspector)

        def run(cmd, **kwargs):
            Path(cmd[-1]).touch()
            return ToolResult(returncode=0)

        with patch("sushe.executor.ffmpeg_base.run_tool", side_effect=run):
            with pytest.raises(TranscodeError, match="empty"):
                transcoder.transcode(source)

        assert not transcoder.output_path_for(source).exists()

    def test_sink_failure_does_not_fail_job(self, source: Path, fake_inspector) -> None:
        def broken(progress):
            raise RuntimeError("network down")

        transcoder = Transcoder(inspector=fake_inspector)
        lines = ["size=0kB time=00:00:25.00 bitrate=0.0kbits/s"]
        with patch("sushe.executor.ffmpeg_base.run_tool", side_effect=_fake_ffmpeg(lines)):
            output = transcoder.transcode(source, sink=broken)

        assert output.exists()


def test_inspector_duration_used(source: Path, make_inspector, sink) -> None:
    """Percent is computed against the probed duration."""
    inspector = make_inspector(MediaInfo(duration=200.0))
    transcoder = Transcoder(inspector=inspector)
    lines = ["time=00:00:50.00"]
    with patch("sushe.executor.ffmpeg_base.run_tool", side_effect=_fake_ffmpeg(lines)):
        transcoder.transcode(source, sink=sink)

    assert sink.events[-1].percent == 25.0
    assert inspector.calls == [source]
