"""Tests for cli/exit_codes.py module."""

import pytest

from sushe.cli.exit_codes import ExitCode, exit_code_for
from sushe.executor.exceptions import (
    FetchError,
    ProbeError,
    SplitError,
    SusheError,
    TranscodeError,
    ValidationError,
)
from sushe.jobs.transfer import UploadError


class TestExitCode:
    """Tests for ExitCode enum."""

    def test_success_is_zero(self) -> None:
        assert ExitCode.SUCCESS == 0

    def test_exit_codes_are_unique(self) -> None:
        values = [int(code) for code in ExitCode]
        assert len(values) == len(set(values))

    def test_exit_code_ranges(self) -> None:
        """Exit codes should be within their category ranges."""
        assert 1 <= ExitCode.INTERRUPTED <= 9
        assert 10 <= ExitCode.NO_URLS_FOUND <= 19
        assert 20 <= ExitCode.TARGET_NOT_FOUND <= 29
        assert 30 <= ExitCode.TOOL_NOT_AVAILABLE <= 39
        assert 40 <= ExitCode.SPLIT_FAILED <= 49
        assert 50 <= ExitCode.PROBE_FAILED <= 59


class TestExitCodeFor:
    """Tests for mapping pipeline errors to exit codes."""

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (FetchError("x"), ExitCode.DOWNLOAD_FAILED),
            (TranscodeError("x"), ExitCode.TRANSCODE_FAILED),
            (SplitError("x"), ExitCode.SPLIT_FAILED),
            (UploadError("x"), ExitCode.UPLOAD_FAILED),
            (ProbeError("x"), ExitCode.PROBE_FAILED),
            (ValidationError("x"), ExitCode.VALIDATION_ERROR),
            (SusheError("x"), ExitCode.GENERAL_ERROR),
        ],
    )
    def test_mapping(self, error: SusheError, expected: ExitCode) -> None:
        assert exit_code_for(error) == expected
