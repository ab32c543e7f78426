"""Logging setup for the ``common_ground`` logger tree.

Every module logs through a child of ``common_ground`` and passes structured
context as ``extra={"event": ..., ...}``. The file handler renders that
context after the message so the rotating log can be grepped by event name.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Iterable

from .paths import ensure_app_structure, log_path

LOGGER_NAME = "common_ground"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
DEFAULT_LOG_LEVEL = logging.INFO
MAX_LOG_BYTES = 5_000_000
LOG_BACKUPS = 5

_CONSOLE_HANDLER_NAME = "common_ground.console"
# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_configured = False


class EventFormatter(logging.Formatter):
    """Append ``extra`` context as ``key=value`` pairs, ``event`` first."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        context = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS}
        if not context:
            return text
        event = context.pop("event", None)
        pairs = [f"event={event}"] if event is not None else []
        pairs.extend(f"{key}={value!r}" for key, value in sorted(context.items()))
        head, newline, tail = text.partition("\n")
        return f"{head} | {' '.join(pairs)}{newline}{tail}"


def console_handler(level: int | str = logging.DEBUG) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.set_name(_CONSOLE_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _file_handler() -> logging.Handler:
    handler = RotatingFileHandler(
        log_path(), maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8", delay=True
    )
    handler.setFormatter(EventFormatter(LOG_FORMAT))
    return handler


def _has_console(logger: logging.Logger) -> bool:
    return any(handler.get_name() == _CONSOLE_HANDLER_NAME for handler in logger.handlers)


def configure_logging(
    level: int | str = DEFAULT_LOG_LEVEL,
    *,
    console: bool = False,
    extra_handlers: Iterable[logging.Handler] | None = None,
) -> logging.Logger:
    """Attach the rotating log file (and optionally stderr) to the app logger.

    Repeated calls only adjust the level and add the console handler if it
    was not requested the first time.
    """
    global _configured
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if _configured:
        if console and not _has_console(logger):
            logger.addHandler(console_handler())
        return logger

    ensure_app_structure()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = False

    logger.addHandler(_file_handler())
    if console:
        logger.addHandler(console_handler())
    for handler in extra_handlers or ():
        logger.addHandler(handler)

    logging.captureWarnings(True)
    _configured = True
    logger.debug("Logging initialized", extra={"event": "logging_configured", "level": level, "path": str(log_path())})
    return logger


def reset_logging(level: int | str = DEFAULT_LOG_LEVEL, *, reconfigure: bool = True) -> logging.Logger:
    """Close every handler on the app logger, then rebuild unless told not to."""
    global _configured
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        try:
            handler.close()
        finally:
            logger.removeHandler(handler)
    _configured = False
    if reconfigure:
        return configure_logging(level)
    return logger
