"""Tests for the streaming child process runner."""

import subprocess
import threading
import time
from unittest.mock import patch

import pytest

from sushe.executor.process import (
    STDERR,
    STDOUT,
    TAIL_LINES,
    ToolCancelledError,
    ToolResult,
    ToolStartError,
    ToolTimeoutError,
    run_tool,
)


class TestRunTool:
    """Tests for run_tool."""

    def test_collects_both_streams(self, python_tool) -> None:
        """Lines from stdout and stderr reach the callback with their stream."""
        seen: list[tuple[str, str]] = []
        result = run_tool(
            python_tool(
                "import sys\n"
                "print('out-1'); sys.stdout.flush()\n"
                "sys.stderr.write('err-1\\n'); sys.stderr.flush()\n"
                "print('out-2')\n"
            ),
            description="test tool",
            on_line=lambda stream, line: seen.append((stream, line)),
        )

        assert result.success
        assert [line for stream, line in seen if stream == STDOUT] == [
            "out-1",
            "out-2",
        ]
        assert [line for stream, line in seen if stream == STDERR] == ["err-1"]
        assert result.stdout_tail == ["out-1", "out-2"]
        assert result.stderr_tail == ["err-1"]

    def test_heavy_stderr_does_not_block_stdout(self, python_tool) -> None:
        """A child flooding stderr while writing stdout must run to completion."""
        counts = {STDOUT: 0, STDERR: 0}

        def on_line(stream: str, line: str) -> None:
            counts[stream] += 1

        result = run_tool(
            python_tool(
                "import sys\n"
                "for i in range(20000):\n"
                "    sys.stderr.write('e' * 100 + '\\n')\n"
                "    if i % 100 == 0:\n"
                "        sys.stdout.write('progress %d\\n' % i)\n"
            ),
            description="noisy tool",
            on_line=on_line,
            timeout=60,
        )

        assert result.success
        assert counts[STDERR] == 20000
        assert counts[STDOUT] == 200

    def test_tails_are_bounded(self, python_tool) -> None:
        result = run_tool(
            python_tool("for i in range(500):\n    print(i)\n"),
            description="counter",
        )

        assert len(result.stdout_tail) == TAIL_LINES
        assert result.stdout_tail[-1] == "499"

    def test_carriage_return_splits_lines(self, python_tool) -> None:
        """ffmpeg rewrites its status line with carriage returns."""
        seen: list[str] = []
        run_tool(
            python_tool(
                "import sys\n"
                "sys.stderr.write('time=00:00:01.00\\rtime=00:00:02.00\\r')\n"
            ),
            description="status",
            on_line=lambda stream, line: seen.append(line),
        )

        assert seen == ["time=00:00:01.00", "time=00:00:02.00"]

    def test_nonzero_exit_is_returned(self, python_tool) -> None:
        result = run_tool(
            python_tool("import sys; sys.stderr.write('bad\\n'); sys.exit(2)"),
            description="failing tool",
        )

        assert result.returncode == 2
        assert not result.success
        assert result.diagnostic_tail() == ["bad"]

    def test_callback_errors_are_ignored(self, python_tool) -> None:
        def on_line(stream: str, line: str) -> None:
            raise RuntimeError("sink exploded")

        result = run_tool(
            python_tool("print('a'); print('b')"),
            description="tool",
            on_line=on_line,
        )

        assert result.success
        assert result.stdout_tail == ["a", "b"]

    def test_timeout_kills_child(self, python_tool) -> None:
        start = time.monotonic()
        with pytest.raises(ToolTimeoutError) as exc_info:
            run_tool(
                python_tool(
                    "import sys, time\n"
                    "print('started'); sys.stdout.flush()\n"
                    "time.sleep(30)\n"
                ),
                description="sleeper",
                timeout=1.0,
            )

        assert time.monotonic() - start < 15
        assert "timed out" in str(exc_info.value)

    def test_cancel_event_kills_child(self, python_tool) -> None:
        cancel = threading.Event()
        timer = threading.Timer(0.5, cancel.set)
        timer.start()
        try:
            with pytest.raises(ToolCancelledError):
                run_tool(
                    python_tool("import time; time.sleep(30)"),
                    description="sleeper",
                    cancel_event=cancel,
                )
        finally:
            timer.cancel()

    def test_timeout_applies_after_output_closes(self, python_tool) -> None:
        """A child that closes both pipes and keeps running is still killed."""
        start = time.monotonic()
        with pytest.raises(ToolTimeoutError):
            run_tool(
                python_tool(
                    "import os, time\nos.close(1)\nos.close(2)\ntime.sleep(30)\n"
                ),
                description="silent sleeper",
                timeout=1.0,
            )

        assert time.monotonic() - start < 15

    def test_cancel_applies_after_output_closes(self, python_tool) -> None:
        cancel = threading.Event()
        timer = threading.Timer(0.5, cancel.set)
        timer.start()
        try:
            with pytest.raises(ToolCancelledError):
                run_tool(
                    python_tool(
                        "import os, time\nos.close(1)\nos.close(2)\ntime.sleep(30)\n"
                    ),
                    description="silent sleeper",
                    cancel_event=cancel,
                )
        finally:
            timer.cancel()

    def test_pipes_are_closed(self, python_tool) -> None:
        """Both child pipes are closed once run_tool returns."""
        created: list[subprocess.Popen] = []
        real_popen = subprocess.Popen

        def recording_popen(*args, **kwargs):
            process = real_popen(*args, **kwargs)
            created.append(process)
            return process

        with patch(
            "sushe.executor.process.subprocess.Popen", side_effect=recording_popen
        ):
            run_tool(python_tool("print('x')"), description="tool")

        (process,) = created
        assert process.stdout.closed
        assert process.stderr.closed

    def test_missing_executable(self) -> None:
        with pytest.raises(ToolStartError, match="Could not start"):
            run_tool(["/nonexistent/tool-12345"], description="missing tool")


class TestToolResult:
    """Tests for ToolResult."""

    def test_diagnostic_tail_prefers_stderr(self) -> None:
        result = ToolResult(returncode=1, stdout_tail=["o"], stderr_tail=["e1", "e2"])
        assert result.diagnostic_tail(limit=1) == ["e2"]

    def test_diagnostic_tail_falls_back_to_stdout(self) -> None:
        result = ToolResult(returncode=1, stdout_tail=["o1", "o2"])
        assert result.diagnostic_tail() == ["o1", "o2"]
