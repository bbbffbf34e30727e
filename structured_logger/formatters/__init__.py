"""
Log formatters module

Provides the formatter implementations used by sinks.
"""

from structured_logger.formatters.base_formatter import BaseFormatter
from structured_logger.formatters.text_formatter import PlainTextFormatter
from structured_logger.formatters.json_formatter import JSONFormatter

__all__ = [
    "BaseFormatter",
    "PlainTextFormatter",
    "JSONFormatter",
]
