"""Structured Logging — JSON formatter, setup, and email masking for waitlist logs.

Invariants:
    - Every record carries timestamp, level, logger, and message
    - Member context (member_id, queue_number, status) plus error_code and path
      are copied from `extra` when present
    - Applicant emails never reach the logs in clear text: mask_email first
    - setup_logging is idempotent (the lifespan may run more than once per process
      under test runners and reloaders)

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - Masking keeps the first character and the domain, enough to tell
      "gmail signups bounce" apart from "one address bounces"
"""

import logging
import json
from datetime import datetime, timezone

LOG_CONTEXT_FIELDS = (
    "member_id", "queue_number", "status", "error_code", "path",
)

_HANDLER_NAME = "foundingcircle"


def mask_email(email: str) -> str:
    """ada@example.com -> a***@example.com"""
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in LOG_CONTEXT_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the root handler, replacing one installed by an earlier call."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
