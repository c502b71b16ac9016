"""Logging configuration for short links."""

import json
import logging
import sys
from typing import Optional

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("apscheduler", "asyncio")


class JsonFormatter(logging.Formatter):
    """One JSON object per record; message text is escaped properly."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """Configure the ``shortlinks`` logger tree.

    Calling it again replaces (and closes) the previous handlers, so the CLI
    and tests can reconfigure freely.

    Args:
        level: Logging level name, case-insensitive
        log_file: Optional file receiving the same records as stdout
        json_format: Emit JSON lines instead of plain text

    Returns:
        The ``shortlinks`` logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("shortlinks")
    logger.setLevel(numeric_level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if json_format:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    return logger


def get_logger(name: str = "shortlinks") -> logging.Logger:
    """Get a logger under the ``shortlinks`` tree, e.g. ``shortlinks.web``."""
    return logging.getLogger(name)
