"""
Standard enrichers

Machine, environment, version, thread and scope properties.
"""

import os
import socket
import threading
from typing import Any, Dict, Optional

from structured_logger.context.scope import get_effective_properties
from structured_logger.enrichers.base_enricher import BaseEnricher


class MachineNameEnricher(BaseEnricher):
    """Adds MachineName (the host name, resolved once)."""

    def __init__(self, machine_name: Optional[str] = None):
        self.machine_name = machine_name or socket.gethostname()

    def get_properties(self) -> Dict[str, Any]:
        return {"MachineName": self.machine_name}

    def __repr__(self) -> str:
        return f"MachineNameEnricher({self.machine_name!r})"


class EnvironmentEnricher(BaseEnricher):
    """Adds Environment, read once from an environment variable."""

    DEFAULT_VARIABLE = "APP_ENVIRONMENT"

    def __init__(self, variable: str = DEFAULT_VARIABLE, default: str = "Production"):
        """
        Initialize environment enricher.

        Args:
            variable: Environment variable holding the deployment name
            default: Value used when the variable is unset or empty
        """
        self.variable = variable
        self.environment = os.environ.get(variable) or default

    def get_properties(self) -> Dict[str, Any]:
        return {"Environment": self.environment}

    def __repr__(self) -> str:
        return f"EnvironmentEnricher({self.variable!r}={self.environment!r})"


class VersionEnricher(BaseEnricher):
    """
    Adds Version and InformationalVersion of an installed distribution.

    Falls back to "0.0.0" when the distribution is not installed.
    """

    UNKNOWN_VERSION = "0.0.0"

    def __init__(self, distribution: str, informational_version: Optional[str] = None):
        """
        Initialize version enricher.

        Args:
            distribution: Distribution name as installed (e.g. "my-service")
            informational_version: Free-form version text (e.g. a git describe)
        """
        if distribution is None:
            raise TypeError("distribution must not be None")
        self.distribution = distribution
        self.version = _distribution_version(distribution)
        self.informational_version = informational_version or self.version

    def get_properties(self) -> Dict[str, Any]:
        return {
            "Version": self.version,
            "InformationalVersion": self.informational_version,
        }

    def __repr__(self) -> str:
        return f"VersionEnricher({self.distribution!r}, version={self.version!r})"


class ThreadInfoEnricher(BaseEnricher):
    """Adds ThreadId and ThreadName of the logging thread."""

    def get_properties(self) -> Dict[str, Any]:
        return {
            "ThreadId": threading.get_ident(),
            "ThreadName": threading.current_thread().name,
        }


class ScopeContextEnricher(BaseEnricher):
    """Adds the effective properties of the scopes open in the current flow."""

    def get_properties(self) -> Dict[str, Any]:
        return get_effective_properties()


def _distribution_version(distribution: str) -> str:
    from importlib import metadata

    try:
        return metadata.version(distribution)
    except metadata.PackageNotFoundError:
        return VersionEnricher.UNKNOWN_VERSION
