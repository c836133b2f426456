"""Recursive-descent tree building for datafiles.

This module turns an ordered sequence of text lines into a :class:`Node`
tree. Parsing never fails once the lines are available: every irregularity
(an empty assignment, a stray ``}``, a block left open at the end of input)
is absorbed and recorded as a diagnostic on the returned
:class:`ParseResult`.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from robust_datafile.shared import (
    DatafileConfig,
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    get_logger,
)
from robust_datafile.tokenization import LineType, classify_line, split_values

from .node import Node

_COMPONENT = "tree_builder"


@dataclass
class ParseResult:
    """Result of building a tree from lines.

    The root is always usable, even when diagnostics were recorded.
    """

    root: Node = field(default_factory=Node)
    success: bool = True

    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)

    source: Optional[str] = None
    correlation_id: Optional[str] = None

    @property
    def processing_time_ms(self) -> float:
        return self.performance.processing_time_ms

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        line_number: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                line_number=line_number,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self, severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_warnings(self) -> bool:
        """Check for WARNING or worse diagnostics."""
        return any(
            diag.severity
            in (DiagnosticSeverity.WARNING, DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def has_errors(self) -> bool:
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Summary statistics for the parse."""
        by_severity: Dict[str, int] = {}
        for diag in self.diagnostics:
            by_severity[diag.severity.name] = by_severity.get(diag.severity.name, 0) + 1
        return {
            "success": self.success,
            "source": self.source,
            "correlation_id": self.correlation_id,
            "top_level_children": self.root.child_count(),
            "diagnostic_count": len(self.diagnostics),
            "diagnostics_by_severity": by_severity,
            "performance": self.performance.to_dict(),
        }


class DatafileTreeBuilder:
    """Builds a datafile Node tree from lines by recursive descent.

    Each nested block is parsed by one call of :meth:`_parse_scope`, which
    returns the index of the first line it did not consume. Nesting deeper
    than the interpreter's recursion limit raises ``RecursionError``.
    """

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        config: Optional[DatafileConfig] = None,
    ) -> None:
        """Initialize tree builder.

        Args:
            correlation_id: Optional correlation ID for request tracking
            config: Configuration; only the global settings are used here,
                each scope splits values with its own node's separator
        """
        self.correlation_id = correlation_id
        self.config = config or DatafileConfig()
        self.logger = get_logger(__name__, correlation_id, _COMPONENT)

        self._eof_reported = False
        self._metrics = PerformanceMetrics()

    def build(
        self,
        lines: Iterable[str],
        root: Optional[Node] = None,
        source: Optional[str] = None,
    ) -> ParseResult:
        """Populate ``root`` from ``lines``.

        Existing content of ``root`` is not cleared; assignments overwrite
        the values they name and headers descend into existing children.

        Args:
            lines: Raw lines without terminators
            root: Node to populate; a new root using the configured format
                is created when omitted
            source: Description of where the lines came from

        Returns:
            ParseResult with the populated root and diagnostics
        """
        start_time = time.perf_counter()
        line_list = list(lines)
        if root is None:
            root = self.config.create_root()

        self._eof_reported = False
        self._metrics = PerformanceMetrics()

        result = ParseResult(root=root, source=source, correlation_id=self.correlation_id)

        self.logger.info(
            "Starting tree building",
            extra={"line_count": len(line_list), "source": source},
        )

        if not line_list:
            self._diagnose(
                result,
                DiagnosticSeverity.INFO,
                "No lines provided - nothing to build",
                details={"input_type": "empty"},
            )

        self._parse_scope(line_list, 0, root, 0, result)

        if self.config.global_.enable_metrics:
            self._metrics.processing_time_ms = (time.perf_counter() - start_time) * 1000
            result.performance = self._metrics

        self.logger.info(
            "Tree building completed",
            extra={
                "lines_processed": self._metrics.lines_processed,
                "nodes_created": self._metrics.nodes_created,
                "diagnostic_count": len(result.diagnostics),
            },
        )
        return result

    def _parse_scope(
        self,
        lines: List[str],
        cursor: int,
        node: Node,
        depth: int,
        result: ParseResult,
    ) -> int:
        """Parse lines into ``node`` until its closing brace.

        Returns:
            Index of the first line after this scope
        """
        self._metrics.max_depth = max(self._metrics.max_depth, depth)

        while cursor < len(lines):
            line = classify_line(lines[cursor], cursor + 1)
            cursor += 1
            self._metrics.lines_processed += 1

            if line.type in (LineType.BLANK, LineType.OPEN_BRACE):
                continue

            if line.type is LineType.COMMENT:
                node.append_comment(line.text)
                self._metrics.comments_created += 1
                continue

            if line.type is LineType.CLOSE_BRACE:
                if depth > 0:
                    return cursor
                ignored = len(lines) - cursor
                self._diagnose(
                    result,
                    DiagnosticSeverity.WARNING,
                    "Closing brace at top level ends the document",
                    line_number=line.line_number,
                    details={"lines_ignored": ignored},
                )
                return len(lines)

            if line.type is LineType.HEADER:
                child = self._child(node, line.text)
                cursor = self._parse_scope(lines, cursor, child, depth + 1, result)
                continue

            key, raw_value = line.split_assignment()
            values = split_values(raw_value, node.list_separator)
            if not values:
                self._diagnose(
                    result,
                    DiagnosticSeverity.INFO,
                    f"Assignment to {key!r} has no value and was ignored",
                    line_number=line.line_number,
                )
                continue

            child = self._child(node, key)
            for index, value in enumerate(values):
                child.set_value(index, value)
            self._metrics.values_written += len(values)

        if depth > 0 and not self._eof_reported:
            self._eof_reported = True
            self._diagnose(
                result,
                DiagnosticSeverity.WARNING,
                "End of input inside an open block",
                details={"open_blocks": depth},
            )
        return cursor

    def _child(self, node: Node, name: str) -> Node:
        if not node.has_child(name):
            self._metrics.nodes_created += 1
        return node.get_or_create_child(name)

    def _diagnose(
        self,
        result: ParseResult,
        severity: DiagnosticSeverity,
        message: str,
        line_number: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.logger.debug(message, extra={"line_number": line_number})
        if self.config.global_.enable_diagnostics:
            result.add_diagnostic(severity, message, _COMPONENT, line_number, details)
