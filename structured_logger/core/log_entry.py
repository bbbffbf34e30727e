"""
Log entry data structure

One LogEntry is built per enabled log call, enriched, frozen and handed to
every sink. Exceptions are captured as an ExceptionInfo chain so formatters
never touch live exception objects.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Iterator, Optional, Union
import traceback

from structured_logger.core.log_level import LogLevel


MAX_EXCEPTION_DEPTH = 64


@dataclass(frozen=True)
class ExceptionInfo:
    """
    Snapshot of an exception and its chain of inner exceptions.

    The chain is acyclic and at most MAX_EXCEPTION_DEPTH links long.
    """

    type_name: str
    message: str = ""
    stack_trace: str = ""
    inner: Optional["ExceptionInfo"] = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ExceptionInfo":
        """
        Capture an exception chain.

        The inner exception is ``__cause__`` when set, otherwise
        ``__context__`` unless the context was suppressed.

        Args:
            exc: Exception to capture

        Returns:
            Head of the captured chain

        Raises:
            TypeError: If exc is not an exception
        """
        if not isinstance(exc, BaseException):
            raise TypeError("exc must be an exception instance")

        links = []
        seen = set()
        current: Optional[BaseException] = exc
        while current is not None and id(current) not in seen:
            if len(links) >= MAX_EXCEPTION_DEPTH:
                break
            seen.add(id(current))
            links.append(current)
            if current.__cause__ is not None:
                current = current.__cause__
            elif not current.__suppress_context__:
                current = current.__context__
            else:
                current = None

        # Build from the innermost link outwards.
        info: Optional[ExceptionInfo] = None
        for item in reversed(links):
            info = cls(
                type_name=_qualified_name(type(item)),
                message=_safe_str(item),
                stack_trace=_stack_text(item),
                inner=info,
            )
        return info

    def chain(self) -> Iterator["ExceptionInfo"]:
        """Iterate from this exception to the innermost one."""
        node: Optional[ExceptionInfo] = self
        while node is not None:
            yield node
            node = node.inner

    def depth(self) -> int:
        """Number of links in the chain."""
        return sum(1 for _ in self.chain())

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the chain to nested dictionaries.

        Returns:
            {type, message, stackTrace, innerException} nested per link
        """
        result: Optional[Dict[str, Any]] = None
        for node in reversed(list(self.chain())):
            result = {
                "type": node.type_name,
                "message": node.message,
                "stackTrace": node.stack_trace or None,
                "innerException": result,
            }
        return result


def _qualified_name(exc_type: type) -> str:
    module = getattr(exc_type, "__module__", "")
    name = getattr(exc_type, "__qualname__", exc_type.__name__)
    if not module or module == "builtins":
        return name
    return f"{module}.{name}"


def _safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"


def _stack_text(exc: BaseException) -> str:
    if exc.__traceback__ is None:
        return ""
    return "".join(traceback.format_tb(exc.__traceback__)).rstrip("\n")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class LogEntry:
    """
    Log entry data structure.

    Contains everything a formatter needs about a single log event.
    ``properties`` is writable while enrichers run; ``freeze`` makes it
    read-only before the entry is handed to formatters.
    """

    level: LogLevel
    message: Optional[str] = ""
    category: str = ""
    timestamp: datetime = field(default_factory=_utc_now)
    event_id: int = 0
    exception: Optional[Union[ExceptionInfo, BaseException]] = None
    correlation_id: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate and normalise the entry after initialization."""
        if not isinstance(self.level, LogLevel):
            raise TypeError("level must be LogLevel enum")
        if self.message is None:
            self.message = ""
        elif not isinstance(self.message, str):
            self.message = _safe_str(self.message)
        if self.category is None:
            self.category = ""
        if self.timestamp.tzinfo is None:
            self.timestamp = self.timestamp.replace(tzinfo=timezone.utc)
        if isinstance(self.exception, BaseException):
            self.exception = ExceptionInfo.from_exception(self.exception)
        elif self.exception is not None and not isinstance(self.exception, ExceptionInfo):
            raise TypeError("exception must be an exception or ExceptionInfo")
        if self.properties is None:
            self.properties = {}

    @property
    def frozen(self) -> bool:
        """Whether properties have been made read-only."""
        return isinstance(self.properties, MappingProxyType)

    def freeze(self) -> "LogEntry":
        """
        Make properties read-only.

        Returns:
            Self, for chaining
        """
        if not self.frozen:
            self.properties = MappingProxyType(dict(self.properties))
        return self

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert log entry to dictionary.

        Returns:
            Dictionary representation
        """
        return {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.name,
            "category": self.category,
            "eventId": self.event_id,
            "message": self.message,
            "correlationId": self.correlation_id,
            "exception": self.exception.to_dict() if self.exception else None,
            "properties": dict(self.properties),
        }

    def __str__(self) -> str:
        """String representation."""
        return (
            f"[{self.timestamp.strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]}] "
            f"[{self.level.name:8}] "
            f"{self.message}"
        )
