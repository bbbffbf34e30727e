"""
Log filters module

Category-aware minimum level resolution.
"""

from structured_logger.filters.level_filter import LogLevelFilter

__all__ = ["LogLevelFilter"]
