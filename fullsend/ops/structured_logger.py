from __future__ import annotations

import json
import logging
import sys
import time
from typing import Any, Dict, Optional, TextIO

# Keys that must never reach a log line, whatever a caller puts in `extra`.
REDACTED_KEYS = frozenset({"auth_token", "api_key_secret", "authorization", "password", "body"})


class JsonFormatter(logging.Formatter):
    """One JSON object per record; fields from extra={"extra": {...}} are merged in."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time_unix": round(time.time(), 3),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        fields = getattr(record, "extra", None)
        if isinstance(fields, dict):
            for key, value in fields.items():
                payload[key] = "[redacted]" if key.lower() in REDACTED_KEYS else value
        if record.exc_info:
            payload["exc_type"] = record.exc_info[0].__name__ if record.exc_info[0] else None
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "WARNING", stream: Optional[TextIO] = None) -> None:
    """
    Send JSON lines to `stream` (stderr by default, so CLI output on stdout
    stays parseable). `level` is case-insensitive; unknown names raise ValueError.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter())

    # httpx logs the full request URL at INFO, which includes the account SID
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
    root.handlers[:] = [handler]
