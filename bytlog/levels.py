"""
Log levels and the environment-driven level filter.
"""

import os
from enum import IntEnum
from typing import Optional, Union

LOG_LEVEL_ENV = 'LOG_LEVEL'


class Level(IntEnum):
    """Ordered severities: DEBUG < INFO < WARN < ERROR"""
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3

    @property
    def label(self) -> str:
        return self.name

    @classmethod
    def parse(cls, name: Optional[str]) -> Optional['Level']:
        """Case-insensitive lookup; returns None for anything unrecognised"""
        if not isinstance(name, str):
            return None
        return cls.__members__.get(name.upper())


DEFAULT_LEVEL = Level.INFO

LevelLike = Union[Level, str]


def coerce_level(level: LevelLike) -> Level:
    """Turn a Level or level name into a Level, raising on garbage"""
    if isinstance(level, Level):
        return level
    parsed = Level.parse(level)
    if parsed is None:
        raise ValueError(f"Unknown log level: {level!r}")
    return parsed


def get_log_level(env_var: str = LOG_LEVEL_ENV) -> Level:
    """
    Resolve the configured minimum level from the environment.

    Read on every call so tests (and long-running processes) can change the
    variable without restarting. Unknown or missing values fall back to INFO.
    """
    return Level.parse(os.getenv(env_var)) or DEFAULT_LEVEL


def should_log(level: LevelLike, env_var: str = LOG_LEVEL_ENV) -> bool:
    return coerce_level(level) >= get_log_level(env_var)


class LevelFilter:
    """
    Answers whether a level is enabled.

    By default the threshold comes from LOG_LEVEL at decision time. Passing
    `level` pins the threshold instead, which is handy when embedding.
    """

    def __init__(self, env_var: str = LOG_LEVEL_ENV, level: Optional[LevelLike] = None):
        self.env_var = env_var
        self._pinned = coerce_level(level) if level is not None else None

    @property
    def minimum(self) -> Level:
        if self._pinned is not None:
            return self._pinned
        return get_log_level(self.env_var)

    def is_enabled(self, level: LevelLike) -> bool:
        return coerce_level(level) >= self.minimum
