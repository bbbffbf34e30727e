"""
Plain text formatter

Produces one human-readable line per entry, followed by the exception
chain when the entry carries one.
"""

from typing import Any, List

from structured_logger.core.log_entry import ExceptionInfo, LogEntry
from structured_logger.formatters.base_formatter import BaseFormatter


class PlainTextFormatter(BaseFormatter):
    """
    Format log entries as plain text lines.

    Output:
        2024-02-23 14:30:45.123 [ERROR] {CorrelationId: req-1} message [Properties: key=value]

    The correlation tag and the properties block only appear when they
    have content. Exceptions follow on the next lines, each inner exception
    indented two spaces deeper than its parent.
    """

    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"
    INDENT = "  "

    def _format(self, entry: LogEntry) -> str:
        parts: List[str] = [
            entry.timestamp.strftime(self.TIMESTAMP_FORMAT)[:-3],
            " [",
            entry.level.name.upper(),
            "]",
        ]

        if entry.correlation_id:
            parts.append(" {CorrelationId: ")
            parts.append(str(entry.correlation_id))
            parts.append("}")

        if entry.message:
            parts.append(" ")
            parts.append(entry.message)

        if entry.properties:
            parts.append(" [Properties:")
            for key, value in entry.properties.items():
                parts.append(f" {key}={_render_value(value)}")
            parts.append("]")

        if entry.exception is not None:
            parts.append("\n")
            parts.append(self.format_exception(entry.exception))

        return "".join(parts)

    def format_exception(self, exception: ExceptionInfo) -> str:
        """
        Render an exception chain.

        Args:
            exception: Head of the chain

        Returns:
            Multi-line text, no trailing newline
        """
        lines: List[str] = []
        for depth, node in enumerate(exception.chain()):
            indent = self.INDENT * depth
            lines.append(f"{indent}{node.type_name}: {node.message}")
            if node.stack_trace:
                lines.append(f"{indent}StackTrace:")
                for stack_line in node.stack_trace.splitlines():
                    lines.append(f"{indent}{stack_line}")
            if node.inner is not None:
                lines.append(f"{indent}---> Inner Exception:")
        return "\n".join(lines)

    def __repr__(self) -> str:
        """String representation."""
        return "PlainTextFormatter()"


def _render_value(value: Any) -> str:
    if value is None:
        return "null"
    try:
        return str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"
