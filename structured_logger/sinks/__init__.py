"""Sinks module - Log output destinations"""

from structured_logger.sinks.base_sink import BaseSink
from structured_logger.sinks.console_sink import ConsoleSink
from structured_logger.sinks.file_sink import FileSink, FileSinkStats, RollingInterval

__all__ = ["BaseSink", "ConsoleSink", "FileSink", "FileSinkStats", "RollingInterval"]
