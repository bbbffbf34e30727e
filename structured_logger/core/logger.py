"""
Logger - per-category facade over the logging pipeline

is_enabled -> build entry -> enrich -> freeze -> write to every sink.
"""

from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Iterable, Optional, Tuple
import sys
import threading

from structured_logger.context.correlation import get_correlation_id
from structured_logger.context.scope import ScopeHandle, create_scope
from structured_logger.core.log_entry import LogEntry
from structured_logger.core.log_level import LogLevel
from structured_logger.filters.level_filter import LogLevelFilter


class Logger:
    """
    Logger bound to one category.

    Sinks and enrichers are fixed at construction. A failing enricher or
    sink is reported on stderr and counted; the remaining enrichers and
    sinks still run and the caller never sees the error.

    Example:
        logger = provider.create_logger("App.Services.Orders")
        logger.info("Order %s placed", order_id, customer=customer_id)
    """

    def __init__(
        self,
        category: str,
        sinks: Iterable[Any],
        enrichers: Iterable[Any],
        level_filter: LogLevelFilter,
    ):
        """
        Initialize logger.

        Args:
            category: Category name used for level resolution
            sinks: Sinks in write order
            enrichers: Enrichers in run order
            level_filter: Shared level filter

        Raises:
            TypeError: If any argument is None
        """
        if category is None:
            raise TypeError("category must not be None")
        if sinks is None:
            raise TypeError("sinks must not be None")
        if enrichers is None:
            raise TypeError("enrichers must not be None")
        if level_filter is None:
            raise TypeError("level_filter must not be None")

        self._category = category
        self._sinks: Tuple[Any, ...] = tuple(sinks)
        self._enrichers: Tuple[Any, ...] = tuple(enrichers)
        self._filter = level_filter
        self._metrics = {"logged": 0, "filtered": 0, "sink_errors": 0, "enricher_errors": 0}
        self._metrics_lock = threading.Lock()

    @property
    def category(self) -> str:
        return self._category

    @property
    def sinks(self) -> Tuple[Any, ...]:
        return self._sinks

    @property
    def enrichers(self) -> Tuple[Any, ...]:
        return self._enrichers

    def is_enabled(self, level: LogLevel) -> bool:
        """Check whether a call at this level would reach any sink."""
        if not self._sinks:
            return False
        return self._filter.is_enabled(self._category, level)

    def log(
        self,
        level: LogLevel,
        message: Optional[str],
        *args: Any,
        exception: Optional[BaseException] = None,
        event_id: int = 0,
        **properties: Any,
    ) -> None:
        """
        Log a message.

        The message is only rendered when the level is enabled.

        Args:
            level: Log level
            message: Message template, rendered with ``message % args``
            *args: Template arguments
            exception: Exception to attach
            event_id: Numeric event identifier
            **properties: Properties attached to this entry only
        """
        if not self.is_enabled(level):
            self._count("filtered")
            return

        entry = LogEntry(
            level=level,
            message=_render(message, args),
            category=self._category,
            event_id=event_id,
            exception=exception,
            correlation_id=get_correlation_id(),
            properties=dict(properties),
        )

        self._enrich(entry)
        entry.freeze()
        self._dispatch(entry)
        self._count("logged")

    def _enrich(self, entry: LogEntry) -> None:
        for enricher in self._enrichers:
            try:
                enricher.enrich(entry.properties)
            except Exception as e:
                self._count("enricher_errors")
                print(f"Enricher error ({type(enricher).__name__}): {e}", file=sys.stderr)

    def _dispatch(self, entry: LogEntry) -> None:
        for sink in self._sinks:
            try:
                sink.write(entry)
            except Exception as e:
                self._count("sink_errors")
                print(f"Sink error ({type(sink).__name__}): {e}", file=sys.stderr)

    def _count(self, key: str) -> None:
        with self._metrics_lock:
            self._metrics[key] += 1

    def trace(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log trace message."""
        self.log(LogLevel.TRACE, message, *args, **kwargs)

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log debug message."""
        self.log(LogLevel.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log info message."""
        self.log(LogLevel.INFO, message, *args, **kwargs)

    def warn(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log warning message."""
        self.log(LogLevel.WARN, message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log error message."""
        self.log(LogLevel.ERROR, message, *args, **kwargs)

    def critical(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log critical message."""
        self.log(LogLevel.CRITICAL, message, *args, **kwargs)

    def exception(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log an error with the exception currently being handled."""
        kwargs.setdefault("exception", sys.exc_info()[1])
        self.log(LogLevel.ERROR, message, *args, **kwargs)

    def begin_scope(self, **properties: Any) -> ScopeHandle:
        """
        Open a scope whose properties reach every entry logged inside it.

        Requires a ScopeContextEnricher in the pipeline to show up in output.
        """
        return create_scope(**properties)

    def get_metrics(self) -> dict:
        """Get logging metrics."""
        with self._metrics_lock:
            return self._metrics.copy()

    def __repr__(self) -> str:
        return f"Logger(category='{self._category}', sinks={len(self._sinks)})"


def _render(message: Optional[str], args: Tuple[Any, ...]) -> str:
    if message is None:
        return ""
    if not isinstance(message, str):
        message = str(message)
    if not args:
        return message
    if len(args) == 1 and isinstance(args[0], Mapping) and args[0]:
        args = args[0]
    try:
        return message % args
    except Exception:
        return f"{message} {args!r}"
