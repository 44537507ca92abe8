"""Shared utilities for the scriptable XML tree parser.

This module provides the configuration object, diagnostic records and
correlation-aware logging used across the tokenizer, builder and API layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
    TokenizerBackend,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "TokenizerBackend",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
]
