"""Line classification for the datafile grammar.

The grammar is line oriented: every line is trimmed of surrounding whitespace
and then falls into exactly one category. The checks run in a fixed order,
so a line such as ``# a = b`` is a comment and never an assignment.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

OPEN_BRACE = "{"
CLOSE_BRACE = "}"
COMMENT_MARKER = "#"
ASSIGNMENT_MARKER = "="


class LineType(Enum):
    """Structural role of a trimmed line."""

    BLANK = auto()          # Empty after trimming
    OPEN_BRACE = auto()     # Exactly "{"
    COMMENT = auto()        # Starts with "#"
    CLOSE_BRACE = auto()    # Exactly "}"
    HEADER = auto()         # No "=", opens a block
    ASSIGNMENT = auto()     # key = values


@dataclass(frozen=True)
class SourceLine:
    """A classified input line."""

    line_number: int
    raw: str
    text: str
    type: LineType

    def __post_init__(self) -> None:
        """Validate line position."""
        if self.line_number < 1:
            raise ValueError("Line number must be >= 1")

    @property
    def is_structural(self) -> bool:
        """True for lines that carry no content (blank lines and braces)."""
        return self.type in (LineType.BLANK, LineType.OPEN_BRACE, LineType.CLOSE_BRACE)

    def split_assignment(self) -> Tuple[str, str]:
        """Split at the first ``=`` into a trimmed key and the raw remainder.

        The remainder is returned untrimmed. Because the line itself is
        trimmed first, both ``key=`` and ``key =  `` yield an empty string.
        """
        if self.type is not LineType.ASSIGNMENT:
            raise ValueError(f"Line {self.line_number} is not an assignment")
        key, _, raw_value = self.text.partition(ASSIGNMENT_MARKER)
        return key.strip(), raw_value

    @property
    def key(self) -> Optional[str]:
        if self.type is not LineType.ASSIGNMENT:
            return None
        return self.split_assignment()[0]


def line_type_of(text: str) -> LineType:
    """Classify already-trimmed line text."""
    if not text:
        return LineType.BLANK
    if text == OPEN_BRACE:
        return LineType.OPEN_BRACE
    if text.startswith(COMMENT_MARKER):
        return LineType.COMMENT
    if text == CLOSE_BRACE:
        return LineType.CLOSE_BRACE
    if ASSIGNMENT_MARKER not in text:
        return LineType.HEADER
    return LineType.ASSIGNMENT


def classify_line(raw: str, line_number: int = 1) -> SourceLine:
    """Trim ``raw`` and classify it.

    Args:
        raw: Line as read, without its line terminator
        line_number: 1-based position in the source, for diagnostics

    Returns:
        SourceLine carrying the trimmed text and its LineType
    """
    text = raw.strip()
    return SourceLine(
        line_number=line_number,
        raw=raw,
        text=text,
        type=line_type_of(text),
    )
