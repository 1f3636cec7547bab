"""
bytlog: Structured, colorful console logging

Leveled log lines with per-module colors, optional user context and
pretty-printed payloads, filtered by the LOG_LEVEL environment variable.
"""

from bytlog.bridge import ColorFormatter, get_logger
from bytlog.core import Logger, get_root_logger, logger
from bytlog.formatter import render
from bytlog.levels import Level, LevelFilter, get_log_level, should_log
from bytlog.sinks import ConsoleSink, MemorySink, StreamSink

__all__ = [
    'ColorFormatter',
    'ConsoleSink',
    'Level',
    'LevelFilter',
    'Logger',
    'MemorySink',
    'StreamSink',
    'get_log_level',
    'get_logger',
    'get_root_logger',
    'logger',
    'render',
    'should_log',
]
__version__ = '1.0.1'
