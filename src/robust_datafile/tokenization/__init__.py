"""Tokenization of datafile lines.

Key Components:
    classify_line: Trims a raw line and assigns it a LineType
    SourceLine: A classified line with its 1-based position
    LineType: Structural role of a line (blank, brace, comment, header, assignment)
    split_values: Quote-aware splitting of an assignment's values
"""

from .lines import (
    ASSIGNMENT_MARKER,
    CLOSE_BRACE,
    COMMENT_MARKER,
    OPEN_BRACE,
    LineType,
    SourceLine,
    classify_line,
    line_type_of,
)
from .values import QUOTE, needs_quoting, quote_value, split_values

__all__ = [
    "ASSIGNMENT_MARKER",
    "CLOSE_BRACE",
    "COMMENT_MARKER",
    "OPEN_BRACE",
    "QUOTE",
    "LineType",
    "SourceLine",
    "classify_line",
    "line_type_of",
    "needs_quoting",
    "quote_value",
    "split_values",
]
