"""Shared utilities for datafile processing.

This module provides the configuration objects, error types, diagnostic and
metrics types, and logging helpers used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    DatafileConfig,
    FormatConfig,
    GlobalConfig,
    ReaderConfig,
    WriterConfig,
)
from .errors import (
    DatafileError,
    SinkUnwritableError,
    SourceUnreadableError,
)
from .logging import (
    ContextLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "DatafileConfig",
    "FormatConfig",
    "GlobalConfig",
    "ReaderConfig",
    "WriterConfig",
    "DatafileError",
    "SinkUnwritableError",
    "SourceUnreadableError",
    "ContextLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
]
