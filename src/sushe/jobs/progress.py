"""Progress aggregation for pipeline status updates.

Stages emit progress far more often than a messaging API tolerates edits.
RateLimitedSink sits between the pipeline and the real sink and forwards
only the events worth showing, while keeping the forwarded stream ordered.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from sushe.domain import Phase, Progress, ProgressSink

logger = logging.getLogger(__name__)

DEFAULT_MIN_INTERVAL = 2.0
DEFAULT_MIN_DELTA = 5.0


def _stream_key(progress: Progress) -> tuple[int, int]:
    """Ordering key for forwarded events.

    Transfer percent restarts for every part, so each part is its own
    stream; all other phases report one percent per phase.
    """
    part = progress.part_num if progress.phase is Phase.TRANSFERRING else 0
    return (progress.phase.rank, part)


class RateLimitedSink:
    """Throttling wrapper around a progress sink.

    An event is forwarded when any of these holds:

    - it is the first event, or the first of a new phase (or transfer part)
    - its percent is >= 100
    - at least ``min_interval`` seconds passed since the last forwarded event
    - percent advanced by at least ``min_delta`` since the last forwarded event

    Events that move backwards (an earlier phase, or a lower percent within
    the same phase) are dropped. Dropped events are never queued. Passing
    None for ``min_interval`` or ``min_delta`` disables that gate.

    Exceptions raised by the wrapped sink are logged and ignored; the
    limiter state only advances when delivery succeeds.
    """

    def __init__(
        self,
        sink: ProgressSink,
        min_interval: float | None = DEFAULT_MIN_INTERVAL,
        min_delta: float | None = DEFAULT_MIN_DELTA,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sink = sink
        self.min_interval = min_interval
        self.min_delta = min_delta
        self._clock = clock
        self._lock = threading.Lock()
        self._last: Progress | None = None
        self._last_time = 0.0

    def _should_forward(self, progress: Progress, now: float) -> bool:
        last = self._last
        if last is None:
            return True

        key, last_key = _stream_key(progress), _stream_key(last)
        if key < last_key:
            return False
        if key > last_key:
            return True

        if progress.percent < last.percent:
            return False
        if progress.percent >= 100:
            return True
        if self.min_interval is not None and now - self._last_time >= self.min_interval:
            return True
        if (
            self.min_delta is not None
            and progress.percent - last.percent >= self.min_delta
        ):
            return True
        return False

    def __call__(self, progress: Progress) -> None:
        with self._lock:
            now = self._clock()
            if not self._should_forward(progress, now):
                return
            try:
                self._sink(progress)
            except Exception as e:
                logger.debug("Progress sink error: %s", e)
                return
            self._last = progress
            self._last_time = now

    @property
    def last_forwarded(self) -> Progress | None:
        """The most recent event delivered downstream."""
        with self._lock:
            return self._last
