"""Tests for status and failure message formatting."""

from sushe.core.phase_formatting import format_failure, format_status
from sushe.domain import Phase, Progress
from sushe.executor.exceptions import (
    FetchError,
    ProbeError,
    SplitError,
    SusheError,
    TranscodeError,
    ValidationError,
)


class TestFormatStatus:
    """Tests for format_status."""

    def test_downloading_with_details(self) -> None:
        progress = Progress(
            phase=Phase.ACQUIRING,
            percent=45.2,
            total="50.00MiB",
            speed="2.50MiB/s",
            eta="00:30",
        )
        assert format_status(progress) == (
            "Downloading: 45%\nSize: 50.00MiB | Speed: 2.50MiB/s | ETA: 00:30"
        )

    def test_downloading_complete_without_speed(self) -> None:
        progress = Progress(phase=Phase.ACQUIRING, percent=100.0, total="50.00MiB")
        assert format_status(progress) == "Downloading: 100%"

    def test_merging(self) -> None:
        progress = Progress(phase=Phase.MERGING, percent=100.0)
        assert format_status(progress) == "Merging video and audio..."

    def test_transcoding_start_names_codec(self) -> None:
        progress = Progress(phase=Phase.TRANSCODING, percent=0.0, codec="vp9")
        assert format_status(progress) == (
            "Downloaded VP9 format, converting to H.264..."
        )

    def test_transcoding_percent(self) -> None:
        progress = Progress(phase=Phase.TRANSCODING, percent=37.6, codec="vp9")
        assert format_status(progress) == "Converting to H.264: 38%"

    def test_partitioning(self) -> None:
        progress = Progress(
            phase=Phase.PARTITIONING, percent=51.0, part_num=2, total_parts=3
        )
        assert format_status(progress) == "Splitting video: Part 2/3 (51%)"

    def test_transferring_single(self) -> None:
        progress = Progress(phase=Phase.TRANSFERRING, percent=10.0)
        assert format_status(progress) == "Uploading: 10%"

    def test_transferring_part(self) -> None:
        progress = Progress(
            phase=Phase.TRANSFERRING, percent=80.0, part_num=1, total_parts=2
        )
        assert format_status(progress) == "Uploading Part 1/2: 80%"


class TestFormatFailure:
    """Tests for format_failure."""

    def test_stage_failure_names_stage(self) -> None:
        message = format_failure(FetchError("yt-dlp exited with code 1"))
        assert message == "The download failed: yt-dlp exited with code 1"

    def test_timeout(self) -> None:
        message = format_failure(TranscodeError("slow", timed_out=True))
        assert message == "The conversion took too long and was stopped."

    def test_cancelled(self) -> None:
        message = format_failure(SplitError("stop", cancelled=True))
        assert message == "The split was cancelled."

    def test_probe_error(self) -> None:
        assert format_failure(ProbeError("bad json")).startswith(
            "Could not read the video"
        )

    def test_validation_error(self) -> None:
        assert format_failure(ValidationError("no duration")) == (
            "The video cannot be processed: no duration"
        )

    def test_generic_error(self) -> None:
        assert format_failure(SusheError("boom")) == "Processing failed: boom"
