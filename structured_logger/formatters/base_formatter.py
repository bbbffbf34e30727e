"""
Base formatter interface
"""

from abc import ABC, abstractmethod

from structured_logger.core.log_entry import LogEntry


class BaseFormatter(ABC):
    """
    Abstract base class for log formatters.

    Formatters convert LogEntry objects into strings. They are pure:
    no I/O and no shared mutable state, so one instance can serve any
    number of sinks and threads.
    """

    def format(self, entry: LogEntry) -> str:
        """
        Format a log entry into a string.

        Args:
            entry: The log entry to format

        Returns:
            Formatted string representation of the log entry

        Raises:
            TypeError: If entry is None
        """
        if entry is None:
            raise TypeError("entry must not be None")
        return self._format(entry)

    @abstractmethod
    def _format(self, entry: LogEntry) -> str:
        """Render a non-None entry."""

    def __call__(self, entry: LogEntry) -> str:
        """Allow formatters to be callable."""
        return self.format(entry)
