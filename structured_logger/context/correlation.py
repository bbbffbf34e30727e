"""
Ambient correlation ID

The current correlation ID lives in a ContextVar, so every asyncio task
and every thread started through the helpers in
structured_logger.context.propagation sees its own copy.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional
import uuid


_CORRELATION_ID: ContextVar[Optional[str]] = ContextVar(
    "structured_logger_correlation_id",
    default=None,
)


class CorrelationHandle:
    """
    Restores the previous correlation ID when disposed.

    Disposal is idempotent. Also usable as a context manager.
    """

    __slots__ = ("_previous", "_disposed")

    def __init__(self, previous: Optional[str]):
        self._previous = previous
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Restore the value that was current before the matching set."""
        if self._disposed:
            return
        self._disposed = True
        _CORRELATION_ID.set(self._previous)

    close = dispose

    def __enter__(self) -> "CorrelationHandle":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()


def get_correlation_id() -> Optional[str]:
    """Return the correlation ID of the current flow, or None."""
    return _CORRELATION_ID.get()


def set_correlation_id(correlation_id: Optional[str]) -> CorrelationHandle:
    """
    Set the correlation ID for the current flow.

    The value is visible to the caller and to any task or thread spawned
    from it afterwards. Sibling flows are unaffected.

    Args:
        correlation_id: New value, or None to clear

    Returns:
        Handle that restores the previous value when disposed

    Example:
        handle = set_correlation_id("req-1")
        try:
            logger.info("handling request")
        finally:
            handle.dispose()
    """
    previous = _CORRELATION_ID.get()
    _CORRELATION_ID.set(correlation_id)
    return CorrelationHandle(previous)


@contextmanager
def correlation_scope(correlation_id: Optional[str]) -> Iterator[Optional[str]]:
    """
    Context manager form of set_correlation_id.

    Example:
        with correlation_scope(new_correlation_id()):
            logger.info("inside request")
    """
    handle = set_correlation_id(correlation_id)
    try:
        yield correlation_id
    finally:
        handle.dispose()


def new_correlation_id() -> str:
    """Generate a random correlation ID."""
    return uuid.uuid4().hex
