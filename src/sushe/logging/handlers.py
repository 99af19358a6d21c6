"""JSON log output."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries, plus the ones JobContextFilter injects.
# Anything else on a record came from ``extra=`` and is reported as context.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName", "job_id", "job_url", "job_tag"}


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Keys: ``timestamp`` (UTC ISO-8601), ``level``, ``message``, and when
    present ``logger``, ``job_id``, ``context`` (the record's ``extra``
    fields) and ``exception``. Values json cannot encode are stringified.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name not in ("", "root"):
            entry["logger"] = record.name

        job_id = getattr(record, "job_id", None)
        if job_id:
            entry["job_id"] = job_id

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            entry["context"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
