"""Diagnostic and metrics types for datafile processing.

Irregularities in a document never raise. The parser absorbs them and records
a :class:`DiagnosticEntry` so callers that care can still see what was
skipped or repaired.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational, e.g. an ignored empty assignment
    WARNING = auto()    # Content was dropped or structure was guessed
    ERROR = auto()      # Error conditions that were recovered
    CRITICAL = auto()   # Processing could not complete


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with source location."""

    severity: DiagnosticSeverity
    message: str
    component: str
    line_number: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")
        if self.line_number is not None and self.line_number < 1:
            raise ValueError("Line number must be >= 1")

    def to_dict(self) -> Dict[str, Any]:
        """Convert entry to a JSON-friendly dictionary."""
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.line_number is not None:
            result["line"] = self.line_number
        if self.details:
            result["details"] = dict(self.details)
        return result


@dataclass
class PerformanceMetrics:
    """Performance and volume metrics for a parse."""

    processing_time_ms: float = 0.0
    lines_processed: int = 0
    nodes_created: int = 0
    values_written: int = 0
    comments_created: int = 0
    max_depth: int = 0

    @property
    def lines_per_second(self) -> float:
        """Calculate lines processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.lines_processed * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processing_time_ms": self.processing_time_ms,
            "lines_processed": self.lines_processed,
            "nodes_created": self.nodes_created,
            "values_written": self.values_written,
            "comments_created": self.comments_created,
            "max_depth": self.max_depth,
        }
