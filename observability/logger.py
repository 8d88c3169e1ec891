"""Structured interview events: human lines on stdout, JSON lines in a rotating file."""
from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
import time
import uuid
from typing import Any, Dict

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
ENABLE_FILE_LOGS = os.getenv("ENABLE_FILE_LOGS", "1") in ("1", "true", "True")
LOG_FILE = os.getenv("LOG_FILE", "logs/interview.jsonl")
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", "5242880"))
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "5"))

# Keys surfaced on the human line, in this order
HUMAN_KEYS = ("phase", "role", "level", "turns", "score", "intent", "overall", "ms", "outcome", "error")

_logger = logging.getLogger("interview")
_logger.setLevel(LOG_LEVEL)
_logger.propagate = False


class HumanEventFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__("[%(asctime)s] %(levelname)s %(name)s :: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        event = getattr(record, "event", None)
        if event is not None:
            extras = [f"{key}={event[key]}" for key in HUMAN_KEYS if key in event]
            record.msg = " ".join([f"session={event['session_id']} kind={event['kind']}", *extras])
            record.args = ()
        return super().format(record)


class JsonEventFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        event = getattr(record, "event", None) or {"message": record.getMessage()}
        return json.dumps({"level": record.levelname, **event}, ensure_ascii=False, default=str)


def configure_event_logging() -> logging.Logger:
    """Attach handlers once; later calls are no-ops."""

    if _logger.handlers:
        return _logger

    console = logging.StreamHandler(stream=sys.stdout)
    console.setLevel(LOG_LEVEL)
    console.setFormatter(HumanEventFormatter())
    _logger.addHandler(console)

    if ENABLE_FILE_LOGS:
        log_dir = os.path.dirname(LOG_FILE)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        json_file = logging.handlers.RotatingFileHandler(
            LOG_FILE,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        json_file.setLevel(LOG_LEVEL)
        json_file.setFormatter(JsonEventFormatter())
        _logger.addHandler(json_file)
    return _logger


def log_event(kind: str, session_id: str, *, log_level: int = logging.INFO, **fields: Any) -> None:
    """Record one interview event; ``fields`` land in both the human and JSON renderings."""

    logger = configure_event_logging()
    event: Dict[str, Any] = {
        "ts": time.time(),
        "event_id": uuid.uuid4().hex,
        "kind": kind,
        "session_id": session_id,
    }
    event.update(fields)
    logger.log(log_level, kind, extra={"event": event})


__all__ = ["log_event", "configure_event_logging", "HumanEventFormatter", "JsonEventFormatter"]
