"""Shared utilities for DOM helper operations.

This module provides the configuration objects, exception types, result types,
logging and locking utilities used across the api and tree layers.
"""

from .config import (
    INDENT_SPACES,
    ConfigError,
    ConfigValidationError,
    OutputOptions,
    ParseOptions,
)
from .errors import (
    AmbiguousResultError,
    DomCommonsError,
    InvalidInputError,
    NamespaceMixError,
    SerializationError,
    XPathQueryError,
)
from .locks import NodeLockRegistry, node_lock
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DiagnosticSeverity,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "INDENT_SPACES",
    "ConfigError",
    "ConfigValidationError",
    "OutputOptions",
    "ParseOptions",
    "AmbiguousResultError",
    "DomCommonsError",
    "InvalidInputError",
    "NamespaceMixError",
    "SerializationError",
    "XPathQueryError",
    "NodeLockRegistry",
    "node_lock",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticSeverity",
    "ValidationIssue",
    "ValidationResult",
]
