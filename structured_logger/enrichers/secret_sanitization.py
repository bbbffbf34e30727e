"""
Secret sanitization

Masks credentials that end up in property values before they reach a sink.
Register it after the enrichers whose output should be scrubbed.
"""

import re
from typing import Any, Dict, MutableMapping, Pattern, Tuple

from structured_logger.enrichers.base_enricher import BaseEnricher


REDACTED = "[REDACTED]"

SENSITIVE_PATTERNS: Tuple[Pattern, ...] = (
    # key=value style secrets
    re.compile(
        r"(api[_-]?key|apikey|api[_-]?secret|token|auth|password|passwd|pwd)"
        r"[\s:=]+([^\s,;{}\"']+)",
        re.IGNORECASE,
    ),
    # card numbers
    re.compile(r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4}\b"),
    # credentials embedded in URLs
    re.compile(r"://[^:/\s]+:[^@/\s]+@"),
    # AWS access keys
    re.compile(r"\b(?:AKIA|ASIA)[0-9A-Z]{16}\b"),
    # JWTs
    re.compile(r"eyJ[A-Za-z0-9_-]+\.eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+"),
)


class SecretSanitizationEnricher(BaseEnricher):
    """
    Redact secrets in string property values.

    Unlike other enrichers this one rewrites existing values; the only key
    it adds is ``_sanitized``.
    """

    MARKER = "_sanitized"

    def enrich(self, properties: MutableMapping[str, Any]) -> None:
        if properties is None:
            raise TypeError("properties must not be None")
        for key, value in list(properties.items()):
            if isinstance(value, str):
                cleaned = self.sanitize(value)
                if cleaned != value:
                    properties[key] = cleaned
        if self.MARKER not in properties:
            properties[self.MARKER] = True

    def get_properties(self) -> Dict[str, Any]:
        return {self.MARKER: True}

    @staticmethod
    def sanitize(value: str) -> str:
        """
        Mask sensitive substrings.

        Matches longer than 8 characters keep their first 4 characters.

        Args:
            value: Text to scrub (None is treated as empty)

        Returns:
            Scrubbed text
        """
        if not value:
            return value or ""

        def _mask(match) -> str:
            text = match.group(0)
            if len(text) > 8:
                return text[:4] + REDACTED
            return REDACTED

        result = value
        for pattern in SENSITIVE_PATTERNS:
            result = pattern.sub(_mask, result)
        return result
