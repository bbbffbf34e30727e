"""
Hierarchical level filter

Resolves the minimum level of a logger category from exact category
rules, namespace prefix rules and a default.
"""

import threading
from typing import Dict

from structured_logger.core.log_level import LogLevel


class LogLevelFilter:
    """
    Decide whether a level is enabled for a category.

    Resolution order:
        1. exact category rule
        2. longest namespace rule that prefixes the category
        3. default level

    Names compare case-insensitively. Resolved levels are cached per
    category; any rule change clears the cache.

    Thread Safety:
        Rule updates are serialized by an internal lock. is_enabled takes
        no lock.

    Example:
        level_filter = LogLevelFilter(default_level=LogLevel.WARN)
        level_filter.set_namespace_level("App.Services", LogLevel.INFO)
        level_filter.is_enabled("App.Services.User", LogLevel.INFO)  # True
    """

    def __init__(self, default_level: LogLevel = LogLevel.INFO):
        """
        Initialize level filter.

        Args:
            default_level: Minimum level when no rule matches
        """
        self._default_level = _check_level(default_level)
        self._category_rules: Dict[str, LogLevel] = {}
        self._namespace_rules: Dict[str, LogLevel] = {}
        self._namespace_order = ()
        self._cache: Dict[str, LogLevel] = {}
        self._lock = threading.Lock()

    @property
    def default_level(self) -> LogLevel:
        return self._default_level

    @default_level.setter
    def default_level(self, level: LogLevel) -> None:
        with self._lock:
            self._default_level = _check_level(level)
            self._cache = {}

    def set_category_level(self, category: str, level: LogLevel) -> None:
        """
        Set the minimum level for one exact category.

        Args:
            category: Category name (e.g. "App.Services.UserService")
            level: Minimum level for this category

        Raises:
            TypeError: If category is None
        """
        if category is None:
            raise TypeError("category must not be None")
        with self._lock:
            self._category_rules[category.casefold()] = _check_level(level)
            self._cache = {}

    def set_namespace_level(self, namespace: str, level: LogLevel) -> None:
        """
        Set the minimum level for every category under a namespace prefix.

        Args:
            namespace: Prefix (e.g. "App.Services")
            level: Minimum level for the namespace

        Raises:
            TypeError: If namespace is None
        """
        if namespace is None:
            raise TypeError("namespace must not be None")
        with self._lock:
            self._namespace_rules[namespace.casefold()] = _check_level(level)
            self._namespace_order = tuple(
                sorted(self._namespace_rules, key=len, reverse=True)
            )
            self._cache = {}

    def get_level(self, category: str) -> LogLevel:
        """
        Resolve the effective minimum level for a category.

        Raises:
            TypeError: If category is None
        """
        if category is None:
            raise TypeError("category must not be None")
        cache = self._cache
        level = cache.get(category)
        if level is None:
            level = self._resolve(category)
            cache[category] = level
        return level

    def is_enabled(self, category: str, level: LogLevel) -> bool:
        """
        Check a level against the category's effective minimum.

        Args:
            category: Logger category
            level: Level of the pending log call

        Returns:
            True if level >= resolved minimum
        """
        return level >= self.get_level(category)

    def _resolve(self, category: str) -> LogLevel:
        key = category.casefold()
        exact = self._category_rules.get(key)
        if exact is not None:
            return exact
        for prefix in self._namespace_order:
            if key.startswith(prefix):
                return self._namespace_rules[prefix]
        return self._default_level

    def rules(self) -> dict:
        """Snapshot of the configured rules."""
        with self._lock:
            return {
                "default": self._default_level,
                "categories": dict(self._category_rules),
                "namespaces": dict(self._namespace_rules),
            }

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"LogLevelFilter(default={self._default_level}, "
            f"categories={len(self._category_rules)}, "
            f"namespaces={len(self._namespace_rules)})"
        )


def _check_level(level: LogLevel) -> LogLevel:
    if isinstance(level, str):
        return LogLevel.from_string(level)
    if not isinstance(level, LogLevel):
        raise TypeError("level must be LogLevel enum")
    return level
