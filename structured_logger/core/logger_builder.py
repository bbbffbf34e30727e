"""Logger builder pattern"""

from pathlib import Path
from typing import List, Optional, TextIO, Union

from structured_logger.core.log_level import LogLevel
from structured_logger.core.logger_config import LoggerConfig
from structured_logger.core.logger_provider import LoggerProvider
from structured_logger.enrichers.base_enricher import BaseEnricher
from structured_logger.enrichers.standard_enrichers import (
    EnvironmentEnricher,
    MachineNameEnricher,
    ScopeContextEnricher,
    VersionEnricher,
)
from structured_logger.filters.level_filter import LogLevelFilter
from structured_logger.formatters.base_formatter import BaseFormatter
from structured_logger.formatters.json_formatter import JSONFormatter
from structured_logger.formatters.text_formatter import PlainTextFormatter
from structured_logger.sinks.base_sink import BaseSink
from structured_logger.sinks.console_sink import ConsoleSink
from structured_logger.sinks.file_sink import (
    DEFAULT_MAX_BACKUP_FILES,
    DEFAULT_MAX_FILE_SIZE,
    FileSink,
    RollingInterval,
)


class LoggerBuilder:
    """
    Builder pattern for logger provider construction.

    Example:
        provider = (LoggerBuilder()
            .set_minimum_level(LogLevel.INFO)
            .set_namespace_level("App.Data", LogLevel.WARN)
            .add_console_sink()
            .add_file_sink("logs", prefix="app")
            .add_standard_enrichers()
            .build())

        logger = provider.create_logger("App.Services.Orders")
    """

    def __init__(self):
        self._sinks: List[BaseSink] = []
        self._enrichers: List[BaseEnricher] = []
        self._filter = LogLevelFilter()

    def add_sink(self, sink: BaseSink) -> "LoggerBuilder":
        """
        Add a custom sink.

        Raises:
            TypeError: If sink is None
        """
        if sink is None:
            raise TypeError("sink must not be None")
        self._sinks.append(sink)
        return self

    def add_console_sink(
        self,
        formatter: Optional[BaseFormatter] = None,
        colored: bool = False,
        stream: Optional[TextIO] = None,
    ) -> "LoggerBuilder":
        """Add console output (plain text unless a formatter is given)."""
        return self.add_sink(
            ConsoleSink(formatter or PlainTextFormatter(), stream=stream, colored=colored)
        )

    def add_file_sink(
        self,
        directory: Union[str, Path],
        prefix: str = "log",
        max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE,
        rolling_interval: RollingInterval = RollingInterval.DAY,
        max_backup_files: int = DEFAULT_MAX_BACKUP_FILES,
        formatter: Optional[BaseFormatter] = None,
    ) -> "LoggerBuilder":
        """
        Add rotating file output (JSON unless a formatter is given).

        Raises:
            TypeError: If directory is None
        """
        if directory is None:
            raise TypeError("directory must not be None")
        return self.add_sink(
            FileSink(
                formatter or JSONFormatter(),
                directory,
                file_name_prefix=prefix,
                max_file_size_bytes=max_file_size_bytes,
                rolling_interval=rolling_interval,
                max_backup_files=max_backup_files,
            )
        )

    def add_enricher(self, enricher: BaseEnricher) -> "LoggerBuilder":
        """
        Add an enricher; enrichers run in the order they are added.

        Raises:
            TypeError: If enricher is None
        """
        if enricher is None:
            raise TypeError("enricher must not be None")
        self._enrichers.append(enricher)
        return self

    def add_standard_enrichers(
        self,
        include_version: bool = False,
        distribution: Optional[str] = None,
    ) -> "LoggerBuilder":
        """
        Add machine name, environment and scope enrichers.

        Args:
            include_version: Also add a VersionEnricher
            distribution: Distribution whose version is reported
        """
        self.add_enricher(MachineNameEnricher())
        self.add_enricher(EnvironmentEnricher())
        self.add_enricher(ScopeContextEnricher())

        if include_version and distribution:
            self.add_enricher(VersionEnricher(distribution))

        return self

    def set_minimum_level(self, level: LogLevel) -> "LoggerBuilder":
        """Set the default minimum log level."""
        self._filter.default_level = level
        return self

    def set_category_level(self, category: str, level: LogLevel) -> "LoggerBuilder":
        """Set the minimum level of one exact category."""
        self._filter.set_category_level(category, level)
        return self

    def set_namespace_level(self, namespace: str, level: LogLevel) -> "LoggerBuilder":
        """Set the minimum level of every category under a namespace."""
        self._filter.set_namespace_level(namespace, level)
        return self

    def with_config(self, config: LoggerConfig) -> "LoggerBuilder":
        """
        Apply a LoggerConfig: levels, console/file sinks and enrichers.

        Raises:
            TypeError: If config is None
        """
        if config is None:
            raise TypeError("config must not be None")

        self.set_minimum_level(config.min_level)
        for category, level in config.category_levels.items():
            self.set_category_level(category, level)
        for namespace, level in config.namespace_levels.items():
            self.set_namespace_level(namespace, level)

        if config.console_output:
            self.add_console_sink(
                formatter=_formatter_for(config.console_format),
                colored=config.colored_output,
            )
        if config.log_directory is not None:
            self.add_file_sink(
                config.log_directory,
                prefix=config.file_prefix,
                max_file_size_bytes=config.max_file_size,
                rolling_interval=config.rolling_interval,
                max_backup_files=config.max_backup_files,
                formatter=_formatter_for(config.file_format),
            )
        if config.standard_enrichers:
            self.add_standard_enrichers()
        return self

    @property
    def level_filter(self) -> LogLevelFilter:
        return self._filter

    def build(self) -> LoggerProvider:
        """Build the provider; falls back to a plain-text console sink."""
        sinks = list(self._sinks) or [ConsoleSink(PlainTextFormatter())]
        return LoggerProvider(sinks, list(self._enrichers), self._filter)


def _formatter_for(name: str) -> BaseFormatter:
    if name == "json":
        return JSONFormatter()
    return PlainTextFormatter()
