"""Tests for pure ffprobe output parsing."""

import pytest

from sushe.domain import MediaInfo
from sushe.executor.exceptions import ProbeError
from sushe.introspector.parsers import parse_codec_output, parse_media_info


def _probe_output(**format_fields) -> dict:
    return {
        "format": {
            "duration": "12.345000",
            "size": "1048576",
            "bit_rate": "679558",
            **format_fields,
        },
        "streams": [
            {"index": 0, "codec_type": "audio", "codec_name": "aac"},
            {
                "index": 1,
                "codec_type": "video",
                "codec_name": "h264",
                "width": 1920,
                "height": 1080,
            },
            {
                "index": 2,
                "codec_type": "video",
                "codec_name": "mjpeg",
                "width": 320,
                "height": 180,
            },
        ],
    }


class TestParseMediaInfo:
    """Tests for parse_media_info."""

    def test_parses_format_and_first_video_stream(self) -> None:
        info = parse_media_info(_probe_output())
        assert info == MediaInfo(
            duration=12.345,
            bit_rate=679558,
            file_size=1048576,
            width=1920,
            height=1080,
        )

    def test_audio_only_has_zero_dimensions(self) -> None:
        data = _probe_output()
        data["streams"] = [{"codec_type": "audio"}]
        info = parse_media_info(data)
        assert (info.width, info.height) == (0, 0)

    def test_missing_streams_is_tolerated(self) -> None:
        data = _probe_output()
        del data["streams"]
        assert parse_media_info(data).duration == pytest.approx(12.345)

    def test_malformed_numbers_become_zero(self) -> None:
        info = parse_media_info(_probe_output(duration="N/A", bit_rate=None))
        assert info.duration == 0.0
        assert info.bit_rate == 0
        assert info.file_size == 1048576

    def test_missing_format_raises(self) -> None:
        with pytest.raises(ProbeError, match="format"):
            parse_media_info({"streams": []})

    @pytest.mark.parametrize(
        "streams",
        [
            {"codec_type": "video"},
            ["video"],
            [None],
        ],
    )
    def test_malformed_streams_raise(self, streams) -> None:
        data = _probe_output()
        data["streams"] = streams
        with pytest.raises(ProbeError, match="ffprobe output"):
            parse_media_info(data)


class TestParseCodecOutput:
    """Tests for parse_codec_output."""

    def test_plain_codec(self) -> None:
        assert parse_codec_output("vp9\n") == "vp9"

    def test_lowercases(self) -> None:
        assert parse_codec_output("H264\n") == "h264"

    def test_trailing_separator(self) -> None:
        assert parse_codec_output("h264,\n") == "h264"

    def test_empty_output(self) -> None:
        assert parse_codec_output("") == ""
        assert parse_codec_output("\n\n") == ""
