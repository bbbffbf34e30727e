"""Logger provider - creates category loggers over one shared pipeline"""

from __future__ import annotations
from typing import Any, Dict, Iterable, Tuple
import sys
import threading

from structured_logger.core.logger import Logger
from structured_logger.filters.level_filter import LogLevelFilter


class LoggerProvider:
    """
    Owns the sinks, enrichers and level filter shared by its loggers.

    Closing the provider closes every sink exactly once.
    """

    def __init__(
        self,
        sinks: Iterable[Any],
        enrichers: Iterable[Any],
        level_filter: LogLevelFilter,
    ):
        if sinks is None:
            raise TypeError("sinks must not be None")
        if enrichers is None:
            raise TypeError("enrichers must not be None")
        if level_filter is None:
            raise TypeError("level_filter must not be None")

        self._sinks: Tuple[Any, ...] = tuple(sinks)
        self._enrichers: Tuple[Any, ...] = tuple(enrichers)
        self._filter = level_filter
        self._loggers: Dict[str, Logger] = {}
        self._lock = threading.Lock()
        self._closed = False

    @property
    def sinks(self) -> Tuple[Any, ...]:
        return self._sinks

    @property
    def enrichers(self) -> Tuple[Any, ...]:
        return self._enrichers

    @property
    def level_filter(self) -> LogLevelFilter:
        return self._filter

    @property
    def closed(self) -> bool:
        return self._closed

    def create_logger(self, category: str) -> Logger:
        """
        Get the logger for a category, creating it on first use.

        Raises:
            TypeError: If category is None
        """
        if category is None:
            raise TypeError("category must not be None")
        with self._lock:
            logger = self._loggers.get(category)
            if logger is None:
                logger = Logger(category, self._sinks, self._enrichers, self._filter)
                self._loggers[category] = logger
            return logger

    get_logger = create_logger

    def flush(self) -> None:
        """Flush every sink."""
        for sink in self._sinks:
            try:
                sink.flush()
            except Exception as e:
                print(f"Sink flush error ({type(sink).__name__}): {e}", file=sys.stderr)

    def close(self) -> None:
        """Close every sink. Further calls do nothing."""
        with self._lock:
            if self._closed:
                return
            self._closed = True

        for sink in self._sinks:
            try:
                sink.close()
            except Exception as e:
                print(f"Sink close error ({type(sink).__name__}): {e}", file=sys.stderr)

    shutdown = close

    def __enter__(self) -> "LoggerProvider":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
