"""
Log enrichers module

Enrichers add properties to every entry before formatting.
"""

from structured_logger.enrichers.base_enricher import BaseEnricher, CallbackEnricher
from structured_logger.enrichers.standard_enrichers import (
    EnvironmentEnricher,
    MachineNameEnricher,
    ScopeContextEnricher,
    ThreadInfoEnricher,
    VersionEnricher,
)
from structured_logger.enrichers.secret_sanitization import SecretSanitizationEnricher

__all__ = [
    "BaseEnricher",
    "CallbackEnricher",
    "EnvironmentEnricher",
    "MachineNameEnricher",
    "ScopeContextEnricher",
    "ThreadInfoEnricher",
    "VersionEnricher",
    "SecretSanitizationEnricher",
]
