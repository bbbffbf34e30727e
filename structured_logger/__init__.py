"""
BSD 3-Clause License

Copyright (c) 2021, 🍀☀🌕🌥 🌊
All rights reserved.

Python Structured Logger - enriched, formatted records with request-scoped
correlation IDs and scope properties, written to console and rolling files
"""

__version__ = "1.0.0"
__author__ = "kcenon"
__email__ = "kcenon@naver.com"

from structured_logger.core.log_level import LogLevel
from structured_logger.core.log_entry import ExceptionInfo, LogEntry
from structured_logger.core.logger import Logger
from structured_logger.core.logger_provider import LoggerProvider
from structured_logger.core.logger_builder import LoggerBuilder
from structured_logger.core.logger_config import LoggerConfig
from structured_logger.context import (
    bind_context,
    correlation_scope,
    create_scope,
    get_correlation_id,
    set_correlation_id,
)
from structured_logger.filters import LogLevelFilter
from structured_logger.sinks import ConsoleSink, FileSink, RollingInterval
from structured_logger.formatters import JSONFormatter, PlainTextFormatter

# Import submodules (not all classes by default)
from structured_logger import context
from structured_logger import enrichers
from structured_logger import filters
from structured_logger import formatters
from structured_logger import sinks

__all__ = [
    "LogLevel",
    "ExceptionInfo",
    "LogEntry",
    "Logger",
    "LoggerProvider",
    "LoggerBuilder",
    "LoggerConfig",
    "LogLevelFilter",
    "ConsoleSink",
    "FileSink",
    "RollingInterval",
    "JSONFormatter",
    "PlainTextFormatter",
    "bind_context",
    "correlation_scope",
    "create_scope",
    "get_correlation_id",
    "set_correlation_id",
    "context",
    "enrichers",
    "filters",
    "formatters",
    "sinks",
]
