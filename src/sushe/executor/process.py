"""Child process runner with concurrent stdout/stderr draining.

Every external tool (yt-dlp, ffmpeg) is started through run_tool(). Both
output streams are read by their own daemon thread and funneled into one
bounded queue consumed on the calling thread, so a chatty stderr can never
stall stdout (or the reverse) and line callbacks run one at a time.
"""

from __future__ import annotations

import logging
import os
import queue
import subprocess  # nosec B404 - subprocess is required for tool execution
import threading
import time
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO

logger = logging.getLogger(__name__)

STDOUT = "stdout"
STDERR = "stderr"

# Capacity of the shared line channel between reader threads and consumer
CHANNEL_CAPACITY = 256

# Number of trailing lines kept per stream for diagnostics
TAIL_LINES = 40

# Interval at which the consumer re-checks timeout and cancellation
POLL_INTERVAL = 0.2

READER_JOIN_TIMEOUT = 2.0

LineCallback = Callable[[str, str], None]


class ToolRunError(Exception):
    """Base for failures to run an external tool to completion."""

    def __init__(self, message: str, tail: Sequence[str] = ()) -> None:
        self.tail = list(tail)
        super().__init__(message)


class ToolStartError(ToolRunError):
    """Raised when the executable could not be started."""


class ToolTimeoutError(ToolRunError):
    """Raised when the tool was killed after exceeding its timeout."""


class ToolCancelledError(ToolRunError):
    """Raised when the tool was killed because cancellation was requested."""


@dataclass
class ToolResult:
    """Outcome of a tool that ran to completion (successfully or not)."""

    returncode: int
    stdout_tail: list[str] = field(default_factory=list)
    stderr_tail: list[str] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def diagnostic_tail(self, limit: int = 10) -> list[str]:
        """Last lines of output, stderr preferred, for error messages."""
        lines = self.stderr_tail or self.stdout_tail
        return lines[-limit:]


def _reader(
    stream: IO[str],
    name: str,
    channel: queue.Queue[tuple[str, str | None]],
    stop_event: threading.Event,
) -> None:
    """Push lines from one stream into the channel until EOF or stop."""

    def put(item: tuple[str, str | None]) -> bool:
        while not stop_event.is_set():
            try:
                channel.put(item, timeout=POLL_INTERVAL)
                return True
            except queue.Full:
                continue
        return False

    try:
        for line in stream:
            if not put((name, line)):
                return
    except (ValueError, OSError) as e:
        # Pipe closed after kill
        logger.debug("%s reader stopped: %s", name, e)
    finally:
        put((name, None))


def _check_abort(
    start_time: float,
    timeout: float | None,
    cancel_event: threading.Event | None,
) -> str | None:
    if timeout is not None and time.monotonic() - start_time >= timeout:
        return "timeout"
    if cancel_event is not None and cancel_event.is_set():
        return "cancel"
    return None


def run_tool(
    args: Sequence[str | os.PathLike[str]],
    *,
    description: str,
    on_line: LineCallback | None = None,
    timeout: float | None = None,
    cancel_event: threading.Event | None = None,
    cwd: Path | None = None,
) -> ToolResult:
    """Run an external tool, streaming its output lines to a callback.

    Args:
        args: Command and arguments.
        description: Short label for log messages (e.g., "yt-dlp download").
        on_line: Called as on_line(stream, line) for every output line,
            where stream is STDOUT or STDERR. Exceptions raised by the
            callback are logged and ignored.
        timeout: Maximum wall time in seconds. None means no limit.
        cancel_event: When set, the tool is killed.
        cwd: Working directory for the child.

    Returns:
        ToolResult with the exit code and output tails.

    Raises:
        ToolStartError: If the executable could not be started.
        ToolTimeoutError: If the timeout elapsed.
        ToolCancelledError: If cancel_event was set.
    """
    cmd = [str(a) for a in args]
    logger.debug("Starting %s: %s", description, " ".join(cmd))

    try:
        process = subprocess.Popen(  # nosec B603
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
            cwd=cwd,
        )
    except OSError as e:
        raise ToolStartError(f"Could not start {description}: {e}") from e

    tails: dict[str, deque[str]] = {
        STDOUT: deque(maxlen=TAIL_LINES),
        STDERR: deque(maxlen=TAIL_LINES),
    }
    channel: queue.Queue[tuple[str, str | None]] = queue.Queue(
        maxsize=CHANNEL_CAPACITY
    )
    stop_event = threading.Event()

    readers = []
    for name, stream in ((STDOUT, process.stdout), (STDERR, process.stderr)):
        assert stream is not None
        thread = threading.Thread(
            target=_reader,
            args=(stream, name, channel, stop_event),
            name=f"sushe-{name}-reader",
            daemon=True,
        )
        thread.start()
        readers.append(thread)

    start_time = time.monotonic()
    open_streams = {STDOUT, STDERR}
    abort: str | None = None

    try:
        try:
            while open_streams:
                abort = _check_abort(start_time, timeout, cancel_event)
                if abort is not None:
                    break

                try:
                    name, line = channel.get(timeout=POLL_INTERVAL)
                except queue.Empty:
                    continue

                if line is None:
                    open_streams.discard(name)
                    continue

                line = line.rstrip("\r\n")
                tails[name].append(line)
                if on_line is not None:
                    try:
                        on_line(name, line)
                    except Exception as e:
                        logger.debug("Line callback error in %s: %s", description, e)

            # Both pipes may close long before the child exits
            while abort is None:
                try:
                    process.wait(timeout=POLL_INTERVAL)
                    break
                except subprocess.TimeoutExpired:
                    abort = _check_abort(start_time, timeout, cancel_event)
        except BaseException:
            # KeyboardInterrupt and the like must not leave the child running
            stop_event.set()
            process.kill()
            process.wait()
            raise

        if abort is not None:
            stop_event.set()
            process.kill()
            process.wait()
            elapsed = time.monotonic() - start_time
            tail = list(tails[STDERR]) or list(tails[STDOUT])
            if abort == "timeout":
                logger.warning("%s timed out after %s seconds", description, timeout)
                raise ToolTimeoutError(
                    f"{description} timed out after {timeout:g} seconds", tail
                )
            logger.info("%s cancelled after %.1f seconds", description, elapsed)
            raise ToolCancelledError(f"{description} was cancelled", tail)
    finally:
        # Readers see EOF once the child is gone; a grandchild still holding
        # the pipe leaves them blocked. They are daemon threads and keep their
        # pipe, since closing it under a blocked read would hang.
        for thread, stream in zip(readers, (process.stdout, process.stderr)):
            thread.join(timeout=READER_JOIN_TIMEOUT)
            if thread.is_alive():
                logger.warning("%s: %s did not terminate", description, thread.name)
            elif stream is not None:
                stream.close()

    elapsed = time.monotonic() - start_time
    logger.debug(
        "%s exited with code %d in %.1fs", description, process.returncode, elapsed
    )
    return ToolResult(
        returncode=process.returncode,
        stdout_tail=list(tails[STDOUT]),
        stderr_tail=list(tails[STDERR]),
        elapsed=elapsed,
    )
