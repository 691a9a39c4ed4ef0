"""Shared utilities for LRG report processing.

This module provides configuration objects, result types, exceptions and
logging helpers used across the tokenizer, tree and writer layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ContentMode,
    ParserConfig,
    TokenizationConfig,
    TreeConfig,
    WriterConfig,
)
from .errors import (
    MalformedMarkupError,
    ReportError,
    ReportFileError,
    WriterError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseMetrics,
    ParseResult,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ContentMode",
    "ParserConfig",
    "TokenizationConfig",
    "TreeConfig",
    "WriterConfig",
    "MalformedMarkupError",
    "ReportError",
    "ReportFileError",
    "WriterError",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ParseMetrics",
    "ParseResult",
]
