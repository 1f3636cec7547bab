"""
Bridge to the standard logging module: render stdlib LogRecords in the
bytlog line format.
"""

import logging
import sys
from typing import IO, Any, Dict, Optional

from bytlog.formatter import render
from bytlog.levels import Level, get_log_level

# bytlog level -> stdlib level
STDLIB_LEVELS: Dict[Level, int] = {
    Level.DEBUG: logging.DEBUG,
    Level.INFO: logging.INFO,
    Level.WARN: logging.WARNING,
    Level.ERROR: logging.ERROR,
}


def level_from_record(levelno: int) -> Level:
    if levelno >= logging.ERROR:
        return Level.ERROR
    if levelno >= logging.WARNING:
        return Level.WARN
    if levelno >= logging.INFO:
        return Level.INFO
    return Level.DEBUG


class ColorFormatter(logging.Formatter):
    """
    Formats records with bytlog.formatter.render().

    The record name becomes the module tag. Context comes from
    logger.info(..., extra={'context': {...}}); a 'user_id' key in it is
    shown as the user tag. exc_info is surfaced as data['error'].
    """

    def format(self, record: logging.LogRecord) -> str:
        context: Dict[str, Any] = {}
        if hasattr(record, 'context') and isinstance(record.context, dict):
            context.update(record.context)
        context['module'] = record.name

        data: Optional[Dict[str, Any]] = None
        if record.exc_info and record.exc_info[1] is not None:
            data = {'error': record.exc_info[1]}

        return render(level_from_record(record.levelno), context, record.getMessage(), data)


def get_logger(
    name: str,
    level: Optional[int] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Get a stdlib logger that prints bytlog-formatted lines.

    Args:
        name: Logger name (typically __name__)
        level: stdlib level; defaults to the one configured by LOG_LEVEL
        stream: Output stream (default: stderr)

    Returns:
        Configured logger instance

    Example:
        log = get_logger(__name__)
        log.info("User action", extra={'context': {'user_id': 'u-1'}})
    """
    if level is None:
        level = STDLIB_LEVELS[get_log_level()]

    log = logging.getLogger(name)
    log.setLevel(level)

    # Check if we already have our handler to avoid duplicates
    has_handler = any(isinstance(h.formatter, ColorFormatter) for h in log.handlers)
    if not has_handler:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(ColorFormatter())
        log.addHandler(handler)

    return log
