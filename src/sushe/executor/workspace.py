"""Per-job scratch directories."""

import logging
import shutil
import time
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger(__name__)


class JobWorkspace:
    """A uniquely named scratch directory owned by one job.

    Directories are named from a nanosecond timestamp and created with an
    exclusive mkdir, so concurrent jobs sharing a download root never end up
    in the same directory.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    @classmethod
    def create(
        cls, root: Path, clock: Callable[[], int] = time.time_ns
    ) -> "JobWorkspace":
        """Create a fresh workspace under ``root``.

        Raises:
            OSError: If the directory cannot be created.
        """
        root.mkdir(parents=True, exist_ok=True)
        base = str(clock())
        name = base
        attempt = 0
        while True:
            try:
                (root / name).mkdir()
            except FileExistsError:
                attempt += 1
                name = f"{base}-{attempt}"
                continue
            break
        logger.debug("Created job workspace %s", root / name)
        return cls(root / name)

    @property
    def job_id(self) -> str:
        return self.path.name

    def cleanup(self) -> None:
        """Remove the workspace and everything in it. Safe to call twice."""
        if not self.path.exists():
            return
        shutil.rmtree(self.path, ignore_errors=True)
        logger.debug("Removed job workspace %s", self.path)

    def __repr__(self) -> str:
        return f"JobWorkspace({str(self.path)!r})"
