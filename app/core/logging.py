"""Structured logging configuration.

Log calls across the services name an event in the message and carry its
details in ``extra={...}``.  ``EventFormatter`` renders those extra fields as
``key=value`` pairs after the message so they reach the output.  The log
level is controlled by ``settings.LOG_LEVEL``.
"""

import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(threadName)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}

_NOISY_LOGGERS = (
    "botocore",
    "boto3",
    "urllib3",
    "httpx",
    "httpcore",
    "apscheduler",
    "uvicorn.access",
)


def _render_value(value: object) -> str:
    if isinstance(value, str) and (not value or " " in value):
        return repr(value)
    return str(value)


class EventFormatter(logging.Formatter):
    """Formatter that appends a record's ``extra`` fields to the message."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
        }
        if not fields:
            return line

        rendered = " ".join(f"{key}={_render_value(value)}" for key, value in fields.items())
        # Tracebacks go last so the fields stay on the event line
        head, sep, tail = line.partition("\n")
        return f"{head} {rendered}{sep}{tail}"


def setup_logging() -> None:
    """Install the stdout handler with ``EventFormatter`` on the root logger.

    Safe to call more than once; the handler list is replaced each time.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(EventFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
