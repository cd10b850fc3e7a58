from __future__ import annotations

import contextvars
import json
import logging
import os
import queue
from datetime import datetime, timezone
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from typing import Any

LOGGER_NAME = "gemini-tts-proxy"
LOG_FILE_NAME = "gateway.log"
DEFAULT_LOG_DIR = Path.home() / ".gemini-tts-proxy" / "logs"

_request_context: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar("gemini_tts_proxy_log_ctx", default={})
# Anything a bare LogRecord carries is plumbing, not an event field.
_RECORD_FIELDS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {"message", "asctime"}
_records: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
_listener: QueueListener | None = None


class ContextFilter(logging.Filter):
    """Copy the current request context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _request_context.get().items():
            setattr(record, key, value)
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, event name and extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        line: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        line.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_FIELDS and key not in line and value is not None
        )
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=str)


def _log_dir(explicit: str | Path | None) -> Path:
    raw = explicit or os.getenv("GEMINI_TTS_PROXY_LOG_DIR")
    return Path(raw).expanduser() if raw else DEFAULT_LOG_DIR


def _file_handler(log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(log_dir / LOG_FILE_NAME, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")


def configure_logging(level: int = logging.INFO, log_dir: str | Path | None = None) -> logging.Logger:
    """Route every logger through a queue to stderr and a rotating JSON log file.

    A log directory that cannot be created disables the file sink; it never fails startup.
    """
    global _listener
    sinks: list[logging.Handler] = [logging.StreamHandler()]
    target = _log_dir(log_dir)
    file_error: OSError | None = None
    try:
        sinks.append(_file_handler(target))
    except OSError as exc:
        file_error = exc
    formatter = StructuredFormatter()
    for sink in sinks:
        sink.setFormatter(formatter)

    # Context is read on the emitting thread, before the record crosses the queue.
    front = QueueHandler(_records)
    front.addFilter(ContextFilter())
    root = logging.getLogger()
    root.handlers = [front]
    root.setLevel(level)

    shutdown_logging()
    _listener = QueueListener(_records, *sinks, respect_handler_level=True)
    _listener.start()

    logger = logging.getLogger(LOGGER_NAME)
    if file_error is not None:
        logger.warning("logging.file_disabled", extra={"log_dir": str(target), "error": str(file_error)})
    return logger


def push_log_context(**fields: Any) -> contextvars.Token:
    merged = {**_request_context.get(), **{k: v for k, v in fields.items() if v is not None}}
    return _request_context.set(merged)


def pop_log_context(token: contextvars.Token) -> None:
    _request_context.reset(token)


def shutdown_logging() -> None:
    global _listener
    if _listener is not None:
        _listener.stop()
        _listener = None
