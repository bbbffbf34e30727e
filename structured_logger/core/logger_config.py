"""
Logger configuration management
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional, Union
from pathlib import Path

from structured_logger.core.log_level import LogLevel
from structured_logger.sinks.file_sink import (
    DEFAULT_MAX_BACKUP_FILES,
    DEFAULT_MAX_FILE_SIZE,
    RollingInterval,
)


FORMATS = ("text", "json")


@dataclass
class LoggerConfig:
    """
    Logger configuration.

    Level values may be given as LogLevel members or level names;
    rolling_interval may be a RollingInterval or its name.
    """

    # Basic settings
    name: str = "logger"
    min_level: LogLevel = LogLevel.INFO

    # Level overrides
    category_levels: Dict[str, LogLevel] = field(default_factory=dict)
    namespace_levels: Dict[str, LogLevel] = field(default_factory=dict)

    # Console settings
    console_output: bool = True
    colored_output: bool = False
    console_format: str = "text"

    # File settings
    log_directory: Optional[Path] = None
    file_prefix: str = "log"
    file_format: str = "json"
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    rolling_interval: RollingInterval = RollingInterval.DAY
    max_backup_files: int = DEFAULT_MAX_BACKUP_FILES

    # Enrichment
    standard_enrichers: bool = True

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.min_level = _to_level(self.min_level)
        self.category_levels = {
            name: _to_level(level) for name, level in self.category_levels.items()
        }
        self.namespace_levels = {
            name: _to_level(level) for name, level in self.namespace_levels.items()
        }
        if isinstance(self.rolling_interval, str):
            self.rolling_interval = RollingInterval.from_string(self.rolling_interval)

        if self.console_format not in FORMATS:
            raise ValueError(f"console_format must be one of {FORMATS}")
        if self.file_format not in FORMATS:
            raise ValueError(f"file_format must be one of {FORMATS}")
        if self.max_file_size <= 0:
            raise ValueError("max_file_size must be positive")
        if self.max_backup_files < 1:
            raise ValueError("max_backup_files must be at least 1")
        if not self.file_prefix:
            raise ValueError("file_prefix must not be empty")

        # Convert log_directory to Path if it's a string
        if isinstance(self.log_directory, str):
            self.log_directory = Path(self.log_directory)

    @classmethod
    def default(cls) -> "LoggerConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def debug_config(cls) -> "LoggerConfig":
        """Create configuration for debugging."""
        return cls(
            min_level=LogLevel.DEBUG,
            console_output=True,
            colored_output=True,
        )

    @classmethod
    def production_config(cls, log_directory: Union[str, Path, None] = None) -> "LoggerConfig":
        """Create configuration for production."""
        return cls(
            min_level=LogLevel.WARN,
            console_output=False,
            log_directory=log_directory or "logs",
            file_format="json",
            rolling_interval=RollingInterval.DAY,
            max_backup_files=30,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LoggerConfig":
        """
        Create configuration from plain data.

        Args:
            data: Mapping of field names to values (e.g. parsed JSON)

        Returns:
            Validated configuration

        Raises:
            ValueError: If data contains unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**dict(data))


def _to_level(value: Union[LogLevel, str]) -> LogLevel:
    if isinstance(value, LogLevel):
        return value
    if isinstance(value, str):
        return LogLevel.from_string(value)
    raise ValueError(f"Invalid log level: {value!r}")
