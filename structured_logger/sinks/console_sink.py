"""Console sink with optional ANSI colors"""

import sys
import threading
from typing import Optional, TextIO

from structured_logger.core.log_entry import LogEntry
from structured_logger.formatters.base_formatter import BaseFormatter
from structured_logger.sinks.base_sink import BaseSink


class ConsoleSink(BaseSink):
    """Write formatted entries to a console stream, one flushed line each."""

    def __init__(
        self,
        formatter: BaseFormatter,
        stream: Optional[TextIO] = None,
        colored: bool = False,
    ):
        """
        Initialize console sink.

        Args:
            formatter: Log formatter
            stream: Output stream (default: sys.stdout, looked up per write)
            colored: Wrap each record in the level's ANSI color
        """
        super().__init__(formatter)
        self._stream = stream
        self.colored = colored
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def write(self, entry: LogEntry) -> None:
        """Write log entry to console."""
        if entry is None:
            raise TypeError("entry must not be None")
        msg = self.formatter.format(entry)
        if self.colored:
            msg = f"{entry.level.color_code}{msg}{entry.level.reset_code}"
        self.emit(msg)

    def emit(self, text: str) -> None:
        with self._lock:
            stream = self.stream
            stream.write(text + "\n")
            stream.flush()

    def flush(self) -> None:
        """Flush stream."""
        with self._lock:
            self.stream.flush()

    def close(self) -> None:
        """Flush; the stream itself belongs to the caller."""
        self.flush()

    def __repr__(self) -> str:
        return f"ConsoleSink(formatter={self.formatter!r}, colored={self.colored})"
