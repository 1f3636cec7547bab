"""
Logger: context-carrying, leveled logging with child loggers.

Example:
    from bytlog import logger

    auth = logger.child('auth')
    auth.set_user_id('user-123').info('User logged in', {'method': 'password'})
"""

from typing import Any, Dict, Mapping, Optional

from bytlog.formatter import DEFAULT_MODULE, render
from bytlog.levels import Level, LevelFilter
from bytlog.sinks import ConsoleSink, Sink


def merge_context(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Overlay wins key conflicts. An explicit user_id=None clears the id;
    a missing, empty or non-string module falls back to the default.
    """
    merged = dict(base)
    merged.update(overlay)
    if merged.get('user_id') is None:
        merged.pop('user_id', None)
    module = merged.get('module')
    if not isinstance(module, str) or not module:
        merged['module'] = DEFAULT_MODULE
    return merged


class ContextLogger:
    """
    Shared surface of the console Logger and the relay client: a context
    mapping, four leveled methods, set_user_id() and child().

    Subclasses implement _log() and _spawn().
    """

    def __init__(self, module: Optional[str] = None, context: Optional[Mapping[str, Any]] = None):
        base = dict(context or {})
        if module:
            base['module'] = module
        self._context = merge_context({}, base)

    @property
    def context(self) -> Dict[str, Any]:
        return dict(self._context)

    @property
    def module(self) -> str:
        return self._context['module']

    @property
    def user_id(self) -> Optional[str]:
        return self._context.get('user_id')

    def _log(self, level: Level, message: str, data: Any = None) -> None:
        raise NotImplementedError

    def _spawn(self, context: Dict[str, Any]) -> 'ContextLogger':
        raise NotImplementedError

    def debug(self, message: str, data: Any = None):
        self._log(Level.DEBUG, message, data)
        return self

    def info(self, message: str, data: Any = None):
        self._log(Level.INFO, message, data)
        return self

    def warn(self, message: str, data: Any = None):
        self._log(Level.WARN, message, data)
        return self

    warning = warn

    def error(self, message: str, data: Any = None):
        self._log(Level.ERROR, message, data)
        return self

    def set_user_id(self, user_id: Optional[str]):
        """Set or (with None) clear the user id on this logger; returns self"""
        self._context = merge_context(self._context, {'user_id': user_id or None})
        return self

    def child(self, module: str, **extra: Any):
        """New independent logger: a snapshot of this context overlaid with module and extra"""
        if not isinstance(module, str) or not module:
            raise ValueError('child() requires a module name')
        return self._spawn(merge_context(self._context, dict(extra, module=module)))

    def __repr__(self) -> str:
        return f'{type(self).__name__}(module={self.module!r})'


class Logger(ContextLogger):
    """Console logger: filters, renders, writes to a sink"""

    def __init__(
        self,
        module: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
        sink: Optional[Sink] = None,
        level_filter: Optional[LevelFilter] = None,
    ):
        super().__init__(module, context)
        self.sink = sink or ConsoleSink()
        self.level_filter = level_filter or LevelFilter()

    def is_enabled(self, level: Level) -> bool:
        return self.level_filter.is_enabled(level)

    def _log(self, level: Level, message: str, data: Any = None) -> None:
        if not self.level_filter.is_enabled(level):
            return
        self.sink.write(level, render(level, self._context, message, data))

    def _spawn(self, context: Dict[str, Any]) -> 'Logger':
        return Logger(context=context, sink=self.sink, level_filter=self.level_filter)


logger = Logger()


def get_root_logger() -> Logger:
    """Process-wide root logger; use as an injectable dependency"""
    return logger
