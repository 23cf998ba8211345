"""
Logging for the docrelay backend.

Console output is human-readable and tagged with the session id when a
record belongs to one connection. File output (optional, rotating) is one
JSON object per line, with session-scoped fields lifted to the top level
so a single session's traffic can be filtered with one key.
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

# Fields promoted to top-level JSON keys when present on a record
SESSION_FIELDS = ("session_id", "request_id", "source", "failure")

# Keys that carry the completion endpoint credential in this service
REDACTED_KEYS = frozenset({"authorization", "api_key", "llm_api_key", "hf_api_key"})

_LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
_RESET = "\033[0m"


def _fields(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "extra_fields", None) or {}


class ConsoleFormatter(logging.Formatter):
    """`time | LEVEL | logger | [session] message`, level coloured on a TTY."""

    def __init__(self, use_color: bool = True):
        super().__init__(datefmt="%Y-%m-%d %H:%M:%S")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:8s}"
        if self.use_color:
            level = f"{_LEVEL_COLORS.get(record.levelno, '')}{level}{_RESET}"
        session_id = _fields(record).get("session_id")
        tag = f"[{session_id}] " if session_id else ""
        line = f"{self.formatTime(record, self.datefmt)} | {level} | {record.name} | {tag}{record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JSONFormatter(logging.Formatter):
    """One JSON object per record; session fields first-class, the rest under `data`."""

    def format(self, record: logging.LogRecord) -> str:
        fields = dict(_fields(record))
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in SESSION_FIELDS:
            if key in fields:
                entry[key] = fields.pop(key)
        if fields:
            entry["data"] = redact(fields)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(config: Any) -> None:
    """
    Configure the root logger from settings.

    Args:
        config: Settings object with the log_* fields
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    if config.log_console_enabled:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(ConsoleFormatter(use_color=sys.stdout.isatty()))
        root_logger.addHandler(console_handler)

    if config.log_file_enabled:
        Path(config.log_file_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            config.log_file_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(
            JSONFormatter() if config.log_json_format else ConsoleFormatter(use_color=False)
        )
        root_logger.addHandler(file_handler)

    # httpx logs every completion request at INFO; the provider already does
    for name in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info(f"Logging initialized: level={config.log_level.upper()}")


class SessionLoggerAdapter(logging.LoggerAdapter):
    """
    Binds a session id to every record, merged with any per-call extra_fields.

    Usage:
        log = SessionLoggerAdapter(logging.getLogger(__name__), {"session_id": sid})
        log.info("Document stored", extra={"extra_fields": {"pages": 3}})
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = kwargs.setdefault("extra", {})
        extra["extra_fields"] = {**self.extra, **extra.get("extra_fields", {})}
        return msg, kwargs


def redact(data: Any) -> Any:
    """Mask credential-bearing keys anywhere in a nested dict/list."""
    if isinstance(data, dict):
        return {
            key: "***" if str(key).lower() in REDACTED_KEYS else redact(value)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [redact(item) for item in data]
    return data


def truncate_large_data(data: str, max_length: int = 2000) -> str:
    """Cut a string for logging, noting the original length."""
    if len(data) <= max_length:
        return data
    return data[:max_length] + f"... (truncated, total length: {len(data)})"
