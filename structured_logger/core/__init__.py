"""
Core module for the structured logger

This module contains the fundamental classes:
- LogLevel: Log level enumeration
- LogEntry / ExceptionInfo: Entry data structures
- Logger: Per-category pipeline facade
- LoggerProvider: Creates loggers over shared sinks, enrichers and filter
- LoggerBuilder: Builder pattern for provider construction
- LoggerConfig: Configuration management
"""

from structured_logger.core.log_level import LogLevel
from structured_logger.core.log_entry import ExceptionInfo, LogEntry
from structured_logger.core.logger import Logger
from structured_logger.core.logger_provider import LoggerProvider
from structured_logger.core.logger_config import LoggerConfig
from structured_logger.core.logger_builder import LoggerBuilder

__all__ = [
    "LogLevel",
    "ExceptionInfo",
    "LogEntry",
    "Logger",
    "LoggerProvider",
    "LoggerConfig",
    "LoggerBuilder",
]
