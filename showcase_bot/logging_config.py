"""JSON logging for the showcase bot.

Every line is one JSON object. Fields bound with `log_context` (for example
the update being handled) are merged into the `context` of each record
logged inside the block, including records from nested services.
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Iterator

SERVICE_NAME = "showcase-bot"

_bound_context: ContextVar[dict] = ContextVar("showcase_log_context", default={})


@contextmanager
def log_context(**fields) -> Iterator[None]:
    """Attach fields to every record logged in this block."""
    token = _bound_context.set({**_bound_context.get(), **fields})
    try:
        yield
    finally:
        _bound_context.reset(token)


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = {**_bound_context.get(), **(getattr(record, "context", None) or {})}
        if context:
            log_data["context"] = context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Firestore timestamps and enums are not JSON types
        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Send JSON lines to stdout and quiet chatty client libraries."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    root_logger.addHandler(handler)

    for noisy in ("httpx", "httpcore", "uvicorn.access", "google", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"showcase.{name}")
