"""Structured JSON logging to standard error."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime

_LEVEL_NAMES = {"warning": "warn", "critical": "fatal"}


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname.lower()
        payload = {
            "level": _LEVEL_NAMES.get(level, level),
            "time": datetime.fromtimestamp(record.created)
            .astimezone()
            .isoformat(timespec="milliseconds"),
            "message": record.getMessage(),
        }
        payload.update(getattr(record, "fields", {}))
        return json.dumps(payload, default=str)


class _StderrHandler(logging.Handler):
    """Write to whatever sys.stderr is at the time of the call."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            sys.stderr.write(self.format(record) + "\n")
            sys.stderr.flush()
        except Exception:
            self.handleError(record)


_log = logging.getLogger("auctionhouse")
if not _log.handlers:
    _handler = _StderrHandler()
    _handler.setFormatter(JsonFormatter())
    _log.addHandler(_handler)
_log.setLevel(logging.INFO)
_log.propagate = False


def info(message: str, **kwargs) -> None:
    """Log an informational message with extra fields."""
    _log.info(message, extra={"fields": kwargs})


def error(message: str, err: BaseException | None, **kwargs) -> None:
    """Log an error message, recording the error under the key "error"."""
    fields = dict(kwargs)
    if err is not None:
        fields["error"] = str(err)
    _log.error(message, extra={"fields": fields})