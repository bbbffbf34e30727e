"""
Base enricher interface
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, MutableMapping


class BaseEnricher(ABC):
    """
    Abstract base class for log enrichers.

    Enrichers add properties to an entry before it is formatted. They run
    in registration order and only add keys that are still absent, so the
    first enricher (or the caller) to set a key wins.
    """

    def enrich(self, properties: MutableMapping[str, Any]) -> None:
        """
        Add properties to an entry's property map.

        Args:
            properties: The entry's mutable property map

        Raises:
            TypeError: If properties is None
        """
        if properties is None:
            raise TypeError("properties must not be None")
        for key, value in self.get_properties().items():
            if key not in properties:
                properties[key] = value

    @abstractmethod
    def get_properties(self) -> Dict[str, Any]:
        """Properties this enricher contributes for the current call."""

    def __call__(self, properties: MutableMapping[str, Any]) -> None:
        """Allow enrichers to be callable."""
        self.enrich(properties)


class CallbackEnricher(BaseEnricher):
    """
    Enrich entries from a plain callable.

    Example:
        enricher = CallbackEnricher(lambda: {"tenant": current_tenant()})
    """

    def __init__(self, callback: Callable[[], Dict[str, Any]]):
        """
        Initialize callback enricher.

        Args:
            callback: Function returning the properties to add

        Raises:
            TypeError: If callback is not callable
        """
        if not callable(callback):
            raise TypeError("callback must be callable")

        self.callback = callback

    def get_properties(self) -> Dict[str, Any]:
        return dict(self.callback() or {})

    def __repr__(self) -> str:
        """String representation."""
        callback_name = getattr(self.callback, "__name__", repr(self.callback))
        return f"CallbackEnricher(callback={callback_name})"
