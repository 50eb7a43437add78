"""Logging set-up: console output plus a JSON log file."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime

SERVICE_NAME = "payment-service"

_LEVELS = {"debug": logging.DEBUG, "info": logging.INFO, "warn": logging.WARNING, "error": logging.ERROR}
_SHORT = {logging.DEBUG: "DBG", logging.INFO: "INF", logging.WARNING: "WRN",
          logging.ERROR: "ERR", logging.CRITICAL: "FTL"}


class _ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{stamp} {_SHORT.get(record.levelno, 'LOG')} {record.getMessage()} service={SERVICE_NAME}"
        return line + (f" error={record.exc_info[1]}" if record.exc_info else "")


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "level": record.levelname.lower(),
            "service": SERVICE_NAME,
            "time": datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="seconds"),
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["error"] = str(record.exc_info[1])
        return json.dumps(entry, ensure_ascii=False)


def init_logger(log_level: str | None = None, log_file: str = "app.log") -> logging.Logger:
    """Configure and return the package logger; unknown levels mean info."""
    logger = logging.getLogger("paybot")
    logger.setLevel(_LEVELS.get((log_level or "").lower(), logging.INFO))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_ConsoleFormatter())
    logger.addHandler(console)
    try:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(_JsonFormatter())
        logger.addHandler(file_handler)
    except OSError:
        pass
    logger.propagate = False
    return logger