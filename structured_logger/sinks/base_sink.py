"""
Base sink interface
"""

from abc import ABC, abstractmethod

from structured_logger.core.log_entry import LogEntry
from structured_logger.formatters.base_formatter import BaseFormatter


class BaseSink(ABC):
    """
    Abstract base class for log sinks.

    A sink owns one formatter. write() formats the entry with it and hands
    the text to emit(), which performs the actual output.
    """

    def __init__(self, formatter: BaseFormatter):
        """
        Initialize sink.

        Args:
            formatter: Formatter used for every entry this sink writes

        Raises:
            TypeError: If formatter is None
        """
        if formatter is None:
            raise TypeError("formatter must not be None")
        self.formatter = formatter

    def write(self, entry: LogEntry) -> None:
        """
        Format and output a log entry.

        Raises:
            TypeError: If entry is None
        """
        if entry is None:
            raise TypeError("entry must not be None")
        self.emit(self.formatter.format(entry))

    @abstractmethod
    def emit(self, text: str) -> None:
        """Output one formatted record."""

    def flush(self) -> None:
        """Flush buffered output."""

    def close(self) -> None:
        """Release resources. Must be safe to call more than once."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
