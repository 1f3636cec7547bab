"""
Output sinks. A sink takes a rendered line and writes it somewhere; it never
raises back into the logging call.
"""

import sys
import traceback
from typing import IO, List, Optional, Tuple

from bytlog.levels import Level


class Sink:
    """Base sink: write(level, line)"""

    def write(self, level: Level, line: str) -> None:
        raise NotImplementedError

    def handle_error(self) -> None:
        """Report a failed write on the real stderr, like logging.Handler.handleError"""
        stream = sys.__stderr__
        if stream is None:
            return
        try:
            stream.write('--- bytlog: error writing log line ---\n')
            traceback.print_exc(file=stream)
        except Exception:
            pass


class StreamSink(Sink):
    """Every level goes to one stream"""

    def __init__(self, stream: IO[str]):
        self.stream = stream

    def write(self, level: Level, line: str) -> None:
        try:
            self.stream.write(line + '\n')
            self.stream.flush()
        except Exception:
            self.handle_error()


class ConsoleSink(Sink):
    """
    Routes WARN/ERROR to stderr and DEBUG/INFO to stdout.

    Streams are looked up at write time so redirected or captured
    sys.stdout/sys.stderr are honored.
    """

    def stream_for(self, level: Level) -> Optional[IO[str]]:
        if level >= Level.WARN:
            return sys.stderr
        return sys.stdout

    def write(self, level: Level, line: str) -> None:
        stream = self.stream_for(level)
        if stream is None:
            return
        try:
            stream.write(line + '\n')
            stream.flush()
        except Exception:
            self.handle_error()


class MemorySink(Sink):
    """Keeps (level, line) pairs in memory"""

    def __init__(self):
        self.records: List[Tuple[Level, str]] = []

    def write(self, level: Level, line: str) -> None:
        self.records.append((level, line))

    def lines(self, level: Optional[Level] = None) -> List[str]:
        return [line for lvl, line in self.records if level is None or lvl == level]

    def clear(self) -> None:
        self.records.clear()
