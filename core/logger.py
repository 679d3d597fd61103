import logging
import sys
import re
import json
import hashlib
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

import pytz
import requests

from core import constants
from core.config import settings


def _log_timezone():
    try:
        return pytz.timezone(settings.LOG_TIMEZONE)
    except pytz.UnknownTimeZoneError:
        return pytz.utc


LOG_TZ = _log_timezone()


class SensitiveDataFilter(logging.Filter):
    """Filter to mask webhook credentials in logs"""

    PATTERNS = [
        (
            r"(https://(?:ptb\.|canary\.)?discord(?:app)?\.com/api/webhooks/)[0-9]+/[A-Za-z0-9_-]+",
            r"\1***MASKED***",
        ),
        (r"(https://hooks\.slack\.com/services/)[A-Za-z0-9/]+", r"\1***MASKED***"),
        (r"(ERROR_WEBHOOK_URL=)\S+", r"\1***MASKED***"),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self._mask_sensitive(record.msg)

        if record.args:
            new_args = []
            for arg in record.args:
                if isinstance(arg, str):
                    new_args.append(self._mask_sensitive(arg))
                else:
                    new_args.append(arg)
            record.args = tuple(new_args)
        return True

    def _mask_sensitive(self, text: str) -> str:
        for pattern, replacement in self.PATTERNS:
            text = re.sub(pattern, replacement, text)
        return text


class TimezoneFormatter(logging.Formatter):
    """Renders timestamps in LOG_TIMEZONE and appends context and timing"""

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, LOG_TZ)
        return dt.strftime(datefmt) if datefmt else dt.isoformat(timespec="milliseconds")

    def format(self, record):
        parts = [super().format(record)]
        parts.extend(f"{k}={v}" for k, v in (getattr(record, "context", None) or {}).items())
        if hasattr(record, "duration_ms"):
            parts.append(f"took {record.duration_ms:.2f}ms")
        return " | ".join(parts)


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """Accepts context= and duration_ms= keywords on every log call"""

    EXTRA_KEYS = ("context", "duration_ms")

    def process(self, msg, kwargs):
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("context", {})
        for key in self.EXTRA_KEYS:
            if key in kwargs:
                extra[key] = kwargs.pop(key)
        kwargs["extra"] = extra
        return msg, kwargs


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for the log file"""

    def format(self, record):
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, LOG_TZ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.lineno}",
        }
        optional = {
            "context": getattr(record, "context", None),
            "duration_ms": getattr(record, "duration_ms", None),
            "exception": self.formatException(record.exc_info) if record.exc_info else None,
        }
        entry.update({k: v for k, v in optional.items() if v not in (None, {})})
        return json.dumps(entry, ensure_ascii=False, default=str)


class WebhookLogHandler(logging.Handler):
    """
    Forwards WARNING and ERROR records to a Discord-compatible webhook.

    Posting happens on a single worker thread so the event loop never waits
    on it. A record repeating the same call site and template within
    LOG_THROTTLE_SECONDS is dropped.
    """

    ERROR_COLOR = 0xFF0000
    WARNING_COLOR = 0xFFA500
    TRACEBACK_LIMIT = 1000

    def __init__(self, webhook_url: str):
        super().__init__()
        self.webhook_url = webhook_url
        self.executor = ThreadPoolExecutor(max_workers=1)
        self.last_sent = {}  # {template key: epoch seconds}

    def build_payload(self, record: logging.LogRecord) -> dict:
        embed = {
            "title": f"[{record.levelname}] {record.name}",
            "description": record.getMessage()[: constants.DISCORD_MAX_FIELD_LENGTH * 2],
            "color": self.ERROR_COLOR if record.levelno >= logging.ERROR else self.WARNING_COLOR,
            "timestamp": datetime.fromtimestamp(record.created, pytz.utc).isoformat(),
            "footer": {"text": f"{record.module}:{record.lineno}"},
        }
        if record.exc_info:
            trace = logging.Formatter().formatException(record.exc_info)
            if len(trace) > self.TRACEBACK_LIMIT:
                trace = trace[: self.TRACEBACK_LIMIT] + "..."
            embed["fields"] = [{"name": "Traceback", "value": f"```python\n{trace}\n```"}]
        return {"username": constants.NOTIFIER_USERNAME, "embeds": [embed]}

    def _send(self, record: logging.LogRecord):
        try:
            requests.post(self.webhook_url, json=self.build_payload(record), timeout=2.0)
        except Exception as e:
            # Logging here would recurse into this handler
            sys.stderr.write(f"Failed to send log to webhook: {e}\n")

    def should_send(self, record: logging.LogRecord) -> bool:
        key = hashlib.md5(f"{record.pathname}:{record.lineno}:{record.msg}".encode()).hexdigest()
        now = time.time()

        last = self.last_sent.get(key)
        if last is not None and now - last < constants.LOG_THROTTLE_SECONDS:
            return False

        self.last_sent[key] = now
        return True

    def emit(self, record: logging.LogRecord):
        try:
            if self.should_send(record):
                self.executor.submit(self._send, record)
        except Exception:
            self.handleError(record)

    def close(self):
        self.executor.shutdown(wait=False)
        super().close()


CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(TimezoneFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    handlers: List[logging.Handler] = [console]

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            path,
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        rotating.setLevel(logging.DEBUG)
        if settings.LOG_FORMAT.lower() == "json":
            rotating.setFormatter(JSONFormatter())
        else:
            rotating.setFormatter(TimezoneFormatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        handlers.append(rotating)

    if settings.ERROR_WEBHOOK_URL:
        webhook = WebhookLogHandler(settings.ERROR_WEBHOOK_URL)
        webhook.setLevel(logging.WARNING)
        handlers.append(webhook)

    for handler in handlers:
        handler.addFilter(SensitiveDataFilter())
    return handlers


def get_logger(
    name: str,
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> StructuredLoggerAdapter:
    """
    Returns a structured adapter for the named logger.
    Handlers are attached on first use only.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        level = (log_level or settings.LOG_LEVEL).upper()
        logger.setLevel(getattr(logging, level, logging.INFO))
        for handler in _build_handlers(settings.LOG_FILE if log_file is None else log_file):
            logger.addHandler(handler)
        logger.propagate = False

    return StructuredLoggerAdapter(logger, {})


def setup_logging(log_level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Resets the root logger and attaches the monitor's handlers to it."""
    logging.getLogger().handlers.clear()
    get_logger("root", log_level, log_file)
