"""
Ambient scope properties

Each logical flow owns a stack of property frames. The stack is an
immutable tuple held in a ContextVar and every change replaces it, so a
child flow that adds properties never touches the frames its parent or
its siblings see.
"""

from contextvars import ContextVar
from types import MappingProxyType
from typing import Any, Dict, Mapping, NamedTuple, Optional, Tuple


class _Frame(NamedTuple):
    owner: "ScopeHandle"
    properties: Mapping[str, Any]


_SCOPE_STACK: ContextVar[Tuple[_Frame, ...]] = ContextVar(
    "structured_logger_scope_stack",
    default=(),
)


class ScopeHandle:
    """
    Handle for one open scope level.

    Disposing pops one level (the innermost open scope of the current flow)
    and is idempotent. Also usable as a context manager.
    """

    __slots__ = ("_disposed",)

    def __init__(self):
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def add_property(self, key: str, value: Any) -> None:
        """
        Set a property on this scope's own frame.

        No-op if this scope is no longer open in the current flow.
        """
        if key is None:
            raise TypeError("key must not be None")
        stack = _SCOPE_STACK.get()
        for index in range(len(stack) - 1, -1, -1):
            if stack[index].owner is self:
                _SCOPE_STACK.set(_replace_frame(stack, index, key, value))
                return

    def get_properties(self) -> Dict[str, Any]:
        """Effective properties of the current flow."""
        return get_effective_properties()

    def dispose(self) -> None:
        """Pop the innermost open scope of the current flow."""
        if self._disposed:
            return
        self._disposed = True
        stack = _SCOPE_STACK.get()
        if stack:
            _SCOPE_STACK.set(stack[:-1])

    close = dispose

    def __enter__(self) -> "ScopeHandle":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()


def _replace_frame(
    stack: Tuple[_Frame, ...], index: int, key: str, value: Any
) -> Tuple[_Frame, ...]:
    frame = stack[index]
    updated = dict(frame.properties)
    updated[key] = value
    new_frame = _Frame(frame.owner, MappingProxyType(updated))
    return stack[:index] + (new_frame,) + stack[index + 1:]


def create_scope(**properties: Any) -> ScopeHandle:
    """
    Open a new scope in the current flow.

    Args:
        **properties: Initial properties of the new scope

    Returns:
        Handle that closes the scope when disposed

    Example:
        with create_scope(request_path="/orders"):
            add_property("user_id", 42)
            logger.info("placing order")
    """
    handle = ScopeHandle()
    frame = _Frame(handle, MappingProxyType(dict(properties)))
    _SCOPE_STACK.set(_SCOPE_STACK.get() + (frame,))
    return handle


def add_property(key: str, value: Any) -> None:
    """
    Set a property on the innermost open scope of the current flow.

    Does nothing when no scope is open.

    Raises:
        TypeError: If key is None
    """
    if key is None:
        raise TypeError("key must not be None")
    stack = _SCOPE_STACK.get()
    if stack:
        _SCOPE_STACK.set(_replace_frame(stack, len(stack) - 1, key, value))


def get_effective_properties() -> Dict[str, Any]:
    """
    Merge all open scopes of the current flow.

    Inner scopes win on key collisions.

    Returns:
        New dictionary; empty when no scope is open
    """
    merged: Dict[str, Any] = {}
    for frame in _SCOPE_STACK.get():
        merged.update(frame.properties)
    return merged


def scope_depth() -> int:
    """Number of open scopes in the current flow."""
    return len(_SCOPE_STACK.get())


def get_property(key: str, default: Optional[Any] = None) -> Any:
    """Look up one effective property, innermost scope first."""
    for frame in reversed(_SCOPE_STACK.get()):
        if key in frame.properties:
            return frame.properties[key]
    return default
