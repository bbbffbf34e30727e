"""
Ambient logging context

- Correlation ID: one string per logical flow, restorable
- Scope stack: nested property maps per logical flow
- Fork helpers: carry a snapshot of the context into threads and executors
"""

from structured_logger.context.correlation import (
    CorrelationHandle,
    correlation_scope,
    get_correlation_id,
    new_correlation_id,
    set_correlation_id,
)
from structured_logger.context.scope import (
    ScopeHandle,
    add_property,
    create_scope,
    get_effective_properties,
    get_property,
    scope_depth,
)
from structured_logger.context.propagation import (
    ContextThread,
    bind_context,
    submit_with_context,
)

__all__ = [
    "CorrelationHandle",
    "correlation_scope",
    "get_correlation_id",
    "new_correlation_id",
    "set_correlation_id",
    "ScopeHandle",
    "add_property",
    "create_scope",
    "get_effective_properties",
    "get_property",
    "scope_depth",
    "ContextThread",
    "bind_context",
    "submit_with_context",
]
