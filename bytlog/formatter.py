"""
Formatter: renders one log event into a single ANSI-colored line.

Output format:
    [MM/DD HH:MM:SS.mmm] LEVEL [module] [user_id] message
    {
      "payload": "pretty-printed below the message"
    }

render() is pure and never raises; whatever the caller passes as data, the
worst case is a bracketed diagnostic in place of the payload.
"""

import json
import math
import traceback
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Set

from bytlog.levels import Level, LevelLike, coerce_level

RESET = '\x1b[0m'
DIM = '\x1b[2m'
USER_COLOR = '\x1b[35m'  # magenta

LEVEL_COLORS: Dict[Level, str] = {
    Level.DEBUG: '\x1b[90m',  # gray
    Level.INFO: '\x1b[34m',   # blue
    Level.WARN: '\x1b[33m',   # yellow
    Level.ERROR: '\x1b[31m',  # red
}

LEVEL_WIDTH = 5
DEFAULT_MODULE = 'app'
CIRCULAR = '[Circular]'
INDENT = 2


def _int32(value: int) -> int:
    return ((value + 2 ** 31) % 2 ** 32) - 2 ** 31


def module_hue(module: str) -> int:
    """Deterministic hue (0-359) for a module name, djb2-style with 32-bit wraparound"""
    h = 0
    for ch in module:
        h = ord(ch) + (_int32(_int32(h) << 5) - h)
    return abs(h) % 360


def _channel(hue: int, phase: int) -> int:
    # half-up rounding, keeps colors stable across interpreters
    return int(math.floor(127 + 127 * math.sin((hue + phase) * math.pi / 180) + 0.5))


def module_color(module: str) -> str:
    """24-bit foreground escape for a module name"""
    hue = module_hue(module)
    r, g, b = (_channel(hue, phase) for phase in (0, 120, 240))
    return f'\x1b[38;2;{r};{g};{b}m'


def format_time(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    stamp = now.strftime('%m/%d %H:%M:%S') + f'.{now.microsecond // 1000:03d}'
    return f'{DIM}[{stamp}]{RESET}'


def format_level(level: Level) -> str:
    return f'{LEVEL_COLORS[level]}{level.label.ljust(LEVEL_WIDTH)[:LEVEL_WIDTH]}{RESET} '


def format_exception(exc: BaseException) -> str:
    text = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip('\n')
    return text or str(exc)


def decycle(value: Any, seen: Optional[Set[int]] = None) -> Any:
    """
    Copy containers, replacing any already-visited container with CIRCULAR.

    `seen` lives for one serialization only, so a value referenced twice in
    the same payload shows up once and then as the placeholder.
    """
    if seen is None:
        seen = set()
    if isinstance(value, (dict, list, tuple, set, frozenset)):
        if id(value) in seen:
            return CIRCULAR
        seen.add(id(value))
        if isinstance(value, dict):
            return {k: decycle(v, seen) for k, v in value.items()}
        return [decycle(v, seen) for v in value]
    return value


def format_data(obj: Any) -> str:
    """Serialize a payload block, prefixed with a newline; empty input yields ''"""
    if obj is None:
        return ''
    try:
        if isinstance(obj, BaseException):
            return '\n' + format_exception(obj)
        if isinstance(obj, Mapping):
            if not obj:
                return ''
            if isinstance(obj.get('error'), BaseException):
                return '\n' + format_exception(obj['error'])
            obj = dict(obj)
        elif not obj:
            return ''
        return '\n' + json.dumps(decycle(obj), indent=INDENT, default=str)
    except Exception as e:
        return f'\n[Unable to stringify object: {e}]'


def _without_module(context: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in context.items() if k != 'module'}


def format_payload(level: Level, context: Mapping[str, Any], data: Any = None) -> str:
    """
    Level-dependent payload.

    DEBUG shows the context (minus module) and the data as separate blocks.
    ERROR always shows data merged with the context, so errors carry enough
    to diagnose. INFO/WARN show data only when given.
    """
    if level is Level.DEBUG:
        return format_data(_without_module(context)) + format_data(data)

    if level is Level.ERROR:
        if isinstance(data, BaseException):
            merged: Dict[str, Any] = {'error': data}
        elif isinstance(data, Mapping):
            merged = dict(data)
        elif data is None:
            merged = {}
        else:
            merged = {'data': data}
        merged['context'] = _without_module(context)
        return format_data(merged)

    return format_data(data)


def render(
    level: LevelLike,
    context: Mapping[str, Any],
    message: str,
    data: Any = None,
    now: Optional[datetime] = None,
) -> str:
    """Render a log line (no trailing newline)"""
    level = coerce_level(level)
    module = context.get('module') or DEFAULT_MODULE
    user_id = context.get('user_id')
    user_part = f' {USER_COLOR}[{user_id}]{RESET}' if user_id else ''

    return (
        f'{format_time(now)} {format_level(level)}'
        f'{module_color(module)}[{module}]{RESET}{user_part} {message}'
        f'{format_payload(level, context, data)}'
    )
