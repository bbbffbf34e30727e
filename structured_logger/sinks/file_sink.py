"""
Rolling file sink

Writes each record to a timestamped file in a log directory. A new file
is started when the size limit would be exceeded or when the configured
calendar boundary (UTC) passes; old files beyond the retention count are
deleted after every rotation.

File names: {prefix}-{yyyyMMdd-HHmmss}.log, with a _{n} suffix when a
name from the same second is already taken.
"""

from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union
import glob
import re
import threading

from structured_logger.core.log_entry import LogEntry
from structured_logger.formatters.base_formatter import BaseFormatter
from structured_logger.sinks.base_sink import BaseSink


DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MiB
DEFAULT_MAX_BACKUP_FILES = 10

_STAMP_FORMAT = "%Y%m%d-%H%M%S"
_NAME_SUFFIX = re.compile(r"^(?P<stamp>\d{8}-\d{6})(?:_(?P<seq>\d+))?\.log$")


class RollingInterval(Enum):
    """Calendar boundary at which a file sink starts a new file."""

    NONE = "none"
    DAY = "day"
    HOUR = "hour"
    MONTH = "month"

    @classmethod
    def from_string(cls, value: str) -> "RollingInterval":
        """
        Convert a name such as "day" or "Hour" to a RollingInterval.

        Raises:
            ValueError: If value is not a known interval
        """
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Invalid rolling interval: {value}") from None

    def boundary(self, moment: datetime) -> Optional[datetime]:
        """
        Start of the period containing moment.

        Returns:
            Truncated datetime, or None for NONE
        """
        if self is RollingInterval.DAY:
            return moment.replace(hour=0, minute=0, second=0, microsecond=0)
        if self is RollingInterval.HOUR:
            return moment.replace(minute=0, second=0, microsecond=0)
        if self is RollingInterval.MONTH:
            return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        return None


@dataclass
class FileSinkStats:
    """Counters for one file sink."""

    records_written: int = 0
    bytes_written: int = 0
    rotations: int = 0
    files_pruned: int = 0
    prune_failures: int = 0

    def to_dict(self) -> dict:
        """Convert stats to dictionary for serialization."""
        return asdict(self)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FileSink(BaseSink):
    """
    Write formatted entries to size- and time-rotated files.

    States:
        no file open -> file open -> (rotate) -> file open ... -> closed

    Retention:
        Pruning runs every time a file is opened, including the first open
        after construction. Files from earlier runs that match
        {prefix}-{stamp}[_{n}].log count towards max_backup_files, so
        starting a sink can delete the oldest of them.

    Thread Safety:
        Formatting happens outside the lock. Checking the rotation
        triggers, rotating and appending one record form a single critical
        section, so the byte counter always equals the bytes appended to
        the open file.

    Example:
        sink = FileSink(
            JSONFormatter(),
            "logs",
            file_name_prefix="api",
            max_file_size_bytes=5 * 1024 * 1024,
            rolling_interval=RollingInterval.DAY,
            max_backup_files=7,
        )
    """

    def __init__(
        self,
        formatter: BaseFormatter,
        directory: Union[str, Path],
        file_name_prefix: str = "log",
        max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE,
        rolling_interval: RollingInterval = RollingInterval.NONE,
        max_backup_files: int = DEFAULT_MAX_BACKUP_FILES,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize file sink and create its directory.

        Args:
            formatter: Log formatter
            directory: Directory for log files (created if absent)
            file_name_prefix: Prefix of every file name
            max_file_size_bytes: Size limit of one file
            rolling_interval: Calendar boundary forcing a new file
            max_backup_files: Files kept by pruning (at least 1)
            clock: Source of the current UTC time

        Raises:
            TypeError: If directory or file_name_prefix is None
            ValueError: If max_file_size_bytes is not positive
        """
        super().__init__(formatter)
        if directory is None:
            raise TypeError("directory must not be None")
        if file_name_prefix is None:
            raise TypeError("file_name_prefix must not be None")
        if max_file_size_bytes <= 0:
            raise ValueError("max_file_size_bytes must be positive")
        if isinstance(rolling_interval, str):
            rolling_interval = RollingInterval.from_string(rolling_interval)

        self.directory = Path(directory)
        self.file_name_prefix = file_name_prefix
        self.max_file_size_bytes = max_file_size_bytes
        self.rolling_interval = rolling_interval
        self.max_backup_files = max(1, max_backup_files)
        self._clock = clock or _utc_now

        self._lock = threading.Lock()
        self._file = None
        self._current_path: Optional[Path] = None
        self._current_size = 0
        self._period: Optional[datetime] = None
        self._last_stamp = ""
        self._last_seq = -1
        self._closed = False
        self._stats = FileSinkStats()

        self.directory.mkdir(parents=True, exist_ok=True)

    @property
    def current_file(self) -> Optional[Path]:
        """Path of the open file, or None."""
        return self._current_path

    @property
    def current_file_size(self) -> int:
        """Bytes written to the open file."""
        return self._current_size

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def stats(self) -> FileSinkStats:
        """Snapshot of the sink's counters."""
        with self._lock:
            return replace(self._stats)

    def write(self, entry: LogEntry) -> None:
        """
        Format and append one entry, rotating first if needed.

        Raises:
            TypeError: If entry is None
            ValueError: If the sink is closed
            OSError: If the file cannot be opened or written
        """
        if entry is None:
            raise TypeError("entry must not be None")
        self.emit(self.formatter.format(entry))

    def emit(self, text: str) -> None:
        data = (text + "\n").encode("utf-8", errors="backslashreplace")
        with self._lock:
            if self._closed:
                raise ValueError("write to closed FileSink")
            now = self._clock()
            if self._file is None:
                self._open(now)
            elif self._should_rotate(len(data), now):
                self._rotate(now)
            self._append(data)

    def flush(self) -> None:
        """Flush the open file."""
        with self._lock:
            if self._file is not None:
                self._file.flush()

    def close(self) -> None:
        """Close the open file. Further calls do nothing."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._close_file()

    # Everything below runs with self._lock held.

    def _should_rotate(self, pending: int, now: datetime) -> bool:
        if self._current_size > 0 and self._current_size + pending > self.max_file_size_bytes:
            return True
        if self._period is not None:
            period = self.rolling_interval.boundary(now)
            if period > self._period:
                return True
        return False

    def _rotate(self, now: datetime) -> None:
        self._close_file()
        self._open(now)
        self._stats.rotations += 1

    def _open(self, now: datetime) -> None:
        path = self.directory / self._next_file_name(now)
        self._file = open(path, "ab")
        self._current_path = path
        self._current_size = self._file.tell()
        self._period = self.rolling_interval.boundary(now)
        self._prune()

    def _append(self, data: bytes) -> None:
        try:
            self._file.write(data)
            self._file.flush()
        except OSError:
            # Start over in a fresh file on the next write.
            self._close_file(quiet=True)
            raise
        self._current_size += len(data)
        self._stats.records_written += 1
        self._stats.bytes_written += len(data)

    def _close_file(self, quiet: bool = False) -> None:
        handle, self._file = self._file, None
        self._current_path = None
        self._current_size = 0
        self._period = None
        if handle is None:
            return
        try:
            handle.close()
        except OSError:
            if not quiet:
                raise

    def _next_file_name(self, now: datetime) -> str:
        stamp = now.strftime(_STAMP_FORMAT)
        seq = self._last_seq + 1 if stamp == self._last_stamp else 0
        while True:
            name = self._file_name(stamp, seq)
            if not (self.directory / name).exists():
                break
            seq += 1
        self._last_stamp = stamp
        self._last_seq = seq
        return name

    def _file_name(self, stamp: str, seq: int) -> str:
        if seq == 0:
            return f"{self.file_name_prefix}-{stamp}.log"
        return f"{self.file_name_prefix}-{stamp}_{seq}.log"

    def _prune(self) -> None:
        """Delete the oldest files beyond max_backup_files. Never raises."""
        try:
            files = self._list_log_files()
        except OSError:
            self._stats.prune_failures += 1
            return

        # Newest first by the creation stamp encoded in the name.
        files.sort(key=lambda item: item[0], reverse=True)
        for _, path in files[self.max_backup_files:]:
            if path == self._current_path:
                continue
            try:
                path.unlink()
                self._stats.files_pruned += 1
            except OSError:
                self._stats.prune_failures += 1

    def _list_log_files(self) -> List[Tuple[Tuple[int, str, int], Path]]:
        prefix_len = len(self.file_name_prefix) + 1
        pattern = f"{glob.escape(self.file_name_prefix)}-*.log"
        files = []
        for path in self.directory.glob(pattern):
            match = _NAME_SUFFIX.match(path.name[prefix_len:])
            if match is None:
                continue
            is_current = 1 if path == self._current_path else 0
            key = (is_current, match.group("stamp"), int(match.group("seq") or 0))
            files.append((key, path))
        return files

    def __repr__(self) -> str:
        return (
            f"FileSink(directory='{self.directory}', prefix='{self.file_name_prefix}', "
            f"max_bytes={self.max_file_size_bytes}, interval={self.rolling_interval.value}, "
            f"backups={self.max_backup_files})"
        )
