"""
Logging setup.

One stdout handler for the whole process:
2026-01-14 09:49:59 | INFO | wing.services.router.service | message | key=value
"""

import logging
import sys
from typing import Union


class ExtraFormatter(logging.Formatter):
    """Append `extra=` fields to the formatted line."""

    _standard_keys = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "taskName",
        "asctime",
    }

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {
            k: v for k, v in record.__dict__.items() if k not in self._standard_keys
        }
        if not extras:
            return base
        extra_str = " ".join(f"{k}={v}" for k, v in sorted(extras.items()))
        return f"{base} | {extra_str}"


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """Install the stdout handler once. Later calls only adjust the level."""
    root = logging.getLogger()

    if root.handlers:
        root.setLevel(level)
        return

    root.setLevel(level)

    formatter = ExtraFormatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root.addHandler(handler)

    # Noisy libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
