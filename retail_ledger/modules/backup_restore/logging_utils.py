"""
modules/backup_restore/logging_utils.py

Append-only JSON-lines log for backup / restore runs. One line per phase:

    {"ts": "...Z", "level": "INFO", "op": "restore", "phase": "swap",
     "msg": "backup restored", "extra": {"bills": 12}}
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional

from ...config import LOG_DIR

__all__ = ["JsonLineFormatter", "get_logger", "log_event"]

_LOGGER_NAME = "retail_ledger.backup_restore"
_LOG_FILE_NAME = "backup_restore.log"


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        line: dict[str, Any] = {
            "ts": ts.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
        }
        event = getattr(record, "event", None) or {}
        line["op"] = event.get("op")
        line["phase"] = event.get("phase")
        line["msg"] = record.getMessage()
        if event.get("extra"):
            line["extra"] = event["extra"]
        return json.dumps(line, ensure_ascii=False, default=str)


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(JsonLineFormatter())
    logger.addHandler(handler)


def get_logger(file_path: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """
    The backup/restore event logger: LOG_DIR/backup_restore.log plus WARNING+
    on stderr. Configured once; later calls return the same logger. Without a
    writable log folder everything goes to stderr.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger
    logger.setLevel(level)
    logger.propagate = False

    target = Path(file_path) if file_path else Path(LOG_DIR) / _LOG_FILE_NAME
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        _attach(logger, logging.FileHandler(target, encoding="utf-8", delay=True), level)
    except OSError:
        _attach(logger, logging.StreamHandler(), level)
        return logger
    _attach(logger, logging.StreamHandler(), logging.WARNING)
    return logger


def log_event(
    logger: logging.Logger,
    op: str,
    phase: str,
    message: str,
    extra: Mapping[str, Any] | None = None,
    level: int = logging.INFO,
) -> None:
    """
    op is "backup" or "restore"; phase one of preflight / validate / write /
    swap / done. `extra` carries paths, counts or the error text.
    """
    payload = {k: v for k, v in (extra or {}).items() if k not in ("op", "phase")}
    logger.log(level, message, extra={"event": {"op": op, "phase": phase, "extra": payload}})
