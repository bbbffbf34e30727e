"""
JSON formatter for structured logging

Formats log entries as single JSON objects with a fixed key set.
"""

import json
import math
from collections.abc import Mapping
from typing import Any, Optional

from structured_logger.core.log_entry import LogEntry
from structured_logger.formatters.base_formatter import BaseFormatter


MAX_VALUE_DEPTH = 32


class JSONFormatter(BaseFormatter):
    """
    Format log entries as JSON objects.

    Every object carries the keys timestamp, level, eventId, message,
    correlationId, exception and properties. Property values that JSON
    cannot represent natively are rendered with str().
    """

    def __init__(self, indent: Optional[int] = None, ensure_ascii: bool = False):
        """
        Initialize JSON formatter.

        Args:
            indent: JSON indentation (None for compact, 2 for readable)
            ensure_ascii: Escape non-ASCII characters

        Example:
            # Compact JSON (one line per entry)
            formatter = JSONFormatter()

            # Pretty-printed JSON
            formatter = JSONFormatter(indent=2)
        """
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def _format(self, entry: LogEntry) -> str:
        log_dict = {
            "timestamp": entry.timestamp.isoformat(),
            "level": entry.level.name,
            "eventId": entry.event_id,
            "message": entry.message or "",
            "correlationId": entry.correlation_id,
            "exception": entry.exception.to_dict() if entry.exception else None,
            "properties": {
                _safe_str(key): _jsonable(value, 0)
                for key, value in entry.properties.items()
            },
        }

        return json.dumps(
            log_dict,
            indent=self.indent,
            ensure_ascii=self.ensure_ascii,
            allow_nan=False,
        )

    def __repr__(self) -> str:
        """String representation."""
        return f"JSONFormatter(indent={self.indent})"


def _jsonable(value: Any, depth: int) -> Any:
    """Convert a property value into something json.dumps always accepts."""
    if value is None or isinstance(value, (str, bool)):
        return value
    if isinstance(value, int):
        try:
            int.__repr__(value)
        except ValueError:
            # Past sys.get_int_max_str_digits
            return _safe_str(value)
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else str(value)
    if depth >= MAX_VALUE_DEPTH:
        return _safe_str(value)
    if isinstance(value, Mapping):
        return {_safe_str(k): _jsonable(v, depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(v, depth + 1) for v in value]
    return _safe_str(value)


def _safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"
